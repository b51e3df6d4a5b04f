"""Swagger 2.0 adapter.

Picks the schema relevant to one path/method/direction of a Swagger 2.0
document and hands it to the example generator.
"""

from .base import Direction, ExampleResult
from .errors import ApiDocError
from .example import ExampleGenerator
from .operation import failed, find_operation, find_response, parameters_in, params_schema

# fields copied from a non-body parameter into its schema node
PARAM_SCHEMA_KEYS = ("type", "format", "description", "default", "example", "enum", "items")


def param_to_schema(param: dict) -> dict:
    """Convert a Swagger 2.0 parameter into a schema node."""
    if "schema" in param:
        return param["schema"]
    return {key: param[key] for key in PARAM_SCHEMA_KEYS if key in param}


def generate_swagger_example(
    generator: ExampleGenerator,
    path: str,
    method: str,
    direction: Direction = "response",
    status_code: str = "200",
) -> ExampleResult:
    """Generate the request or response example for one Swagger 2.0 operation."""
    try:
        operation = find_operation(generator.document, path, method)
        if direction == "request":
            return _request_example(generator, operation)
        return _response_example(generator, operation, status_code)
    except ApiDocError as e:
        return failed(e, path, method, direction)


def _request_example(generator: ExampleGenerator, operation: dict) -> ExampleResult:
    resolver = generator.resolver

    for location in ("header", "query"):
        params = parameters_in(resolver, operation, location)
        if params:
            schema = params_schema(params, param_to_schema)
            return ExampleResult(data=generator.generate(schema), req_type=location)

    body = next(iter(parameters_in(resolver, operation, "body")), None)
    if body and isinstance(body.get("schema"), dict):
        return ExampleResult(data=generator.generate(body["schema"]), req_type="body")

    form_params = parameters_in(resolver, operation, "formData")
    if form_params:
        schema = params_schema(form_params, param_to_schema)
        return ExampleResult(data=generator.generate(schema), req_type="form")

    return ExampleResult(data={})


def _response_example(generator: ExampleGenerator, operation: dict, status_code: str) -> ExampleResult:
    response = find_response(generator.resolver, operation, status_code)
    schema = response.get("schema")
    if isinstance(schema, dict):
        return ExampleResult(data=generator.generate(schema))
    return ExampleResult(data={})

"""OpenAPI 3.0 adapter.

Same contract as the Swagger 2.0 adapter, but request bodies and
responses carry their schemas under `content` keyed by media type.
The first declared media type is used.
"""

from .base import Direction, ExampleResult
from .errors import ApiDocError
from .example import ExampleGenerator
from .operation import (
    deref,
    failed,
    find_operation,
    find_response,
    first_media_schema,
    parameters_in,
    params_schema,
)


def param_to_schema(param: dict) -> dict | None:
    if "schema" in param:
        return param["schema"]
    return first_media_schema(param.get("content"))


def generate_openapi_example(
    generator: ExampleGenerator,
    path: str,
    method: str,
    direction: Direction = "response",
    status_code: str = "200",
) -> ExampleResult:
    """Generate the request or response example for one OpenAPI 3.0 operation."""
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

    request_body = operation.get("requestBody")
    if isinstance(request_body, dict):
        request_body = deref(resolver, request_body)
        schema = first_media_schema(request_body.get("content"))
        if isinstance(schema, dict):
            return ExampleResult(data=generator.generate(schema), req_type="body")

    return ExampleResult(data={})


def _response_example(generator: ExampleGenerator, operation: dict, status_code: str) -> ExampleResult:
    response = find_response(generator.resolver, operation, status_code)
    schema = first_media_schema(response.get("content"))
    if isinstance(schema, dict):
        return ExampleResult(data=generator.generate(schema))
    return ExampleResult(data={})

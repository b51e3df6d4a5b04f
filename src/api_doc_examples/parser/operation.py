"""Lookups shared by the Swagger 2.0 and OpenAPI 3.0 adapters."""

import logging
from typing import Callable

from .base import Diagnostic, Direction, ExampleResult
from .errors import ApiDocError, MethodNotFoundError, PathNotFoundError, StatusCodeNotFoundError
from .resolver import RefResolver

logger = logging.getLogger(__name__)


def find_operation(document: dict, path: str, method: str) -> dict:
    """Return the operation object for `path` + `method`."""
    path_item = (document.get("paths") or {}).get(path)
    if not isinstance(path_item, dict):
        raise PathNotFoundError(path)

    operation = path_item.get(method.lower())
    if not isinstance(operation, dict):
        raise MethodNotFoundError(method, path)
    return operation


def find_response(resolver: RefResolver, operation: dict, status_code: str) -> dict:
    responses = operation.get("responses") or {}
    # YAML loads bare status codes (200:) as integers
    response = responses.get(status_code, responses.get(_as_int(status_code)))
    if not isinstance(response, dict):
        raise StatusCodeNotFoundError(status_code)
    return deref(resolver, response)


def deref(resolver: RefResolver, node: dict) -> dict:
    """Resolve a parameter/body/response object that is itself a `$ref`."""
    if isinstance(node, dict) and "$ref" in node:
        return resolver.resolve(node["$ref"])
    return node


def parameters_in(resolver: RefResolver, operation: dict, location: str) -> list[dict]:
    """Parameters of the operation declared in `location` (header, query, ...)."""
    params = []
    for param in operation.get("parameters") or []:
        if not isinstance(param, dict):
            continue
        param = deref(resolver, param)
        if param.get("in") == location:
            params.append(param)
    return params


def params_schema(params: list[dict], to_schema: Callable[[dict], dict | None]) -> dict:
    """Combine a parameter group into one synthetic object schema."""
    schema = {"type": "object", "properties": {}, "required": []}
    for param in params:
        name = param.get("name")
        if not name:
            continue
        prop = to_schema(param)
        if prop is not None:
            schema["properties"][name] = prop
        if param.get("required"):
            schema["required"].append(name)
    return schema


def first_media_schema(content: dict | None) -> dict | None:
    """Schema of the first declared media type, if any."""
    if not isinstance(content, dict):
        return None
    media = next(iter(content.values()), None)
    if isinstance(media, dict):
        return media.get("schema")
    return None


def failed(error: ApiDocError, path: str, method: str, direction: Direction) -> ExampleResult:
    logger.warning("Error generating %s example for %s %s: %s", direction, method.upper(), path, error)
    return ExampleResult(
        data={},
        error=Diagnostic(
            path=path,
            method=method,
            direction=direction,
            kind=type(error).__name__,
            message=str(error),
        ),
    )


def _as_int(status_code: str) -> int | None:
    try:
        return int(status_code)
    except (TypeError, ValueError):
        return None

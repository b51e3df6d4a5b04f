"""Parse a Swagger 2.0 / OpenAPI 3.0 document into a flat list of endpoints.

The document dialect is detected first, then every path x method pair is
run through the matching adapter for both the request and the response
direction. Problems with single endpoints are logged and collected as
diagnostics; they never abort the rest of the document.
"""

import copy
import logging

import httpx

from api_doc_examples.parser.base import ApiRecord, Diagnostic, ParseResult, ParserOptions, Swagger2Document
from api_doc_examples.parser.bundle import bundle_document
from api_doc_examples.parser.detect import to_document
from api_doc_examples.parser.errors import ApiDocError
from api_doc_examples.parser.example import ExampleGenerator
from api_doc_examples.parser.openapi import generate_openapi_example
from api_doc_examples.parser.swagger import generate_swagger_example

logger = logging.getLogger(__name__)

# path-item key holding parameters shared by all operations of a path
PATH_PARAMETERS_KEY = "parameters"


async def parse_api_doc(
    doc: dict,
    options: ParserOptions | dict | None = None,
    base_uri: str | None = None,
    client: httpx.AsyncClient | None = None,
) -> ParseResult:
    """Parse an API document and synthesize examples for every endpoint.

    Never raises: an unsupported document yields an empty result carrying a
    diagnostic, and failing endpoints are reported in `diagnostics`.
    """
    result = ParseResult()

    try:
        document = to_document(doc)
    except ApiDocError as e:
        logger.error("Error parsing API documentation: %s", e)
        result.diagnostics.append(Diagnostic(kind=type(e).__name__, message=str(e)))
        return result

    bundled = await _bundle(doc, base_uri, client, result)
    generator = ExampleGenerator(bundled, options)
    if isinstance(document, Swagger2Document):
        adapter = generate_swagger_example
    else:
        adapter = generate_openapi_example

    for path, path_item in document.paths.items():
        if not isinstance(path_item, dict):
            logger.warning("Skipping path %s: path item is not a mapping", path)
            continue
        for method, operation in path_item.items():
            if method == PATH_PARAMETERS_KEY:
                continue
            if not isinstance(operation, dict):
                logger.debug("Skipping non-operation key %r under %s", method, path)
                continue
            try:
                record = _build_record(adapter, generator, path, method, operation, result)
            except Exception as e:
                # one broken endpoint must not take the whole document down
                logger.warning("Error parsing %s %s: %s", method.upper(), path, e)
                result.diagnostics.append(
                    Diagnostic(path=path, method=method, kind=type(e).__name__, message=str(e))
                )
                continue
            result.api_list.append(record)

    result.api_info = document.info
    return result


def _build_record(adapter, generator: ExampleGenerator, path: str, method: str, operation: dict, result: ParseResult) -> ApiRecord:
    request = adapter(generator, path, method, "request")
    response = adapter(generator, path, method, "response")
    for outcome in (request, response):
        if outcome.error is not None:
            result.diagnostics.append(outcome.error)

    fields = {}
    if request.req_type is not None:
        fields = {"req_type": request.req_type, "req_example": request.data}
    return ApiRecord(
        path=path,
        method=method,
        summary=operation.get("summary") or operation.get("description"),
        res_example=response.data,
        **fields,
    )


async def _bundle(doc: dict, base_uri: str | None, client: httpx.AsyncClient | None, result: ParseResult) -> dict:
    try:
        return await bundle_document(doc, base_uri=base_uri, client=client)
    except ApiDocError as e:
        # internal refs still resolve; external ones fail per endpoint
        logger.warning("Bundling failed, continuing with the unbundled document: %s", e)
        result.diagnostics.append(Diagnostic(kind=type(e).__name__, message=str(e)))
        return copy.deepcopy(doc)


async def get_api_info_by_path(doc: dict, path: str, base_uri: str | None = None) -> dict:
    """Return the bundled path item for `path`, or {} when it is absent."""
    bundled = await bundle_document(doc, base_uri=base_uri)
    path_item = (bundled.get("paths") or {}).get(path)
    return path_item if isinstance(path_item, dict) else {}

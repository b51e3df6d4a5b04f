"""Download API documents over HTTP."""

import json
import logging

import httpx
import yaml

from api_doc_examples.parser.errors import DocumentFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

HEADERS = {
    "Accept": "application/json",
    "User-Agent": "api-doc-examples/0.1",
}


async def fetch_document(url: str, timeout: float = DEFAULT_TIMEOUT, client: httpx.AsyncClient | None = None) -> dict:
    """Fetch a raw Swagger/OpenAPI document.

    Raises DocumentFetchError on network failure, a non-2xx status or a
    body that is not a JSON/YAML mapping.
    """
    if client is None:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned_client:
            return await _fetch(owned_client, url, timeout)
    return await _fetch(client, url, timeout)


async def _fetch(client: httpx.AsyncClient, url: str, timeout: float) -> dict:
    logger.info("Fetching API document from %s", url)
    try:
        response = await client.get(url, headers=HEADERS, timeout=timeout)
        response.raise_for_status()
    except httpx.TimeoutException as e:
        raise DocumentFetchError(url, f"timed out after {timeout}s") from e
    except httpx.HTTPError as e:
        raise DocumentFetchError(url, str(e)) from e

    try:
        data = response.json()
    except json.JSONDecodeError:
        # some servers only publish YAML
        try:
            data = yaml.safe_load(response.text)
        except yaml.YAMLError as e:
            raise DocumentFetchError(url, "response is neither JSON nor YAML") from e

    if not isinstance(data, dict):
        raise DocumentFetchError(url, "response is not a JSON object")
    return data

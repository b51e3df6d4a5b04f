"""Bundling: make a document self-contained before internal resolution.

Every external reference (`other.yaml#/Pet`, `https://host/spec.json#/X`)
is loaded, its target copied into the document's schema registry under a
unique name, and the reference rewritten to the internal pointer. Targets
are registered before their own contents are processed, so references
that loop back across files terminate.
"""

import asyncio
import copy
import logging
import re
from pathlib import Path
from urllib.parse import unquote, urljoin, urlparse

import httpx
import yaml

from .detect import to_document
from .errors import BundleError, UnresolvedReferenceError
from .resolver import REF_PREFIX, decode_segment, walk_pointer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0

# literal payloads; a `$ref` inside them is data, not a reference
DATA_KEYS = frozenset({"example", "examples", "default", "enum"})

# mappings from user-chosen names to nodes, e.g. a property called "example"
NAME_MAP_KEYS = frozenset({
    "properties",
    "patternProperties",
    "definitions",
    "schemas",
    "paths",
    "responses",
    "parameters",
})


async def bundle_document(doc: dict, base_uri: str | None = None, client: httpx.AsyncClient | None = None) -> dict:
    """Return a deep copy of `doc` with all external references internalized.

    `base_uri` is the document's own location (file path or URL) and is
    needed for relative references. Raises BundleError when a reference
    cannot be loaded.
    """
    registry_path = to_document(doc).registry_path
    bundled = copy.deepcopy(doc)

    if client is not None:
        await _Bundler(bundled, base_uri, registry_path, client).run()
        return bundled

    async with httpx.AsyncClient(timeout=DEFAULT_TIMEOUT, follow_redirects=True) as owned_client:
        await _Bundler(bundled, base_uri, registry_path, owned_client).run()
    return bundled


class _Bundler:
    def __init__(self, root: dict, base_uri: str | None, registry_path: tuple[str, ...], client: httpx.AsyncClient):
        self.root = root
        self.base_uri = _normalize_base(base_uri)
        self.client = client
        self.registry = self._ensure_registry(registry_path)
        self.registry_pointer = REF_PREFIX + "/".join(registry_path)
        self._documents: dict[str, dict] = {}
        self._hoisted: dict[str, str] = {}

    async def run(self) -> None:
        await self._rewrite(self.root, self.base_uri, external=False)
        if self._hoisted:
            logger.info("Bundled %d external reference(s)", len(self._hoisted))

    def _ensure_registry(self, registry_path: tuple[str, ...]) -> dict:
        node = self.root
        for key in registry_path:
            if not isinstance(node.get(key), dict):
                node[key] = {}
            node = node[key]
        return node

    async def _rewrite(self, node, base: str | None, external: bool, names: bool = False) -> None:
        """Walk `node`; `names` marks a mapping whose keys are user-chosen names."""
        if isinstance(node, list):
            for item in node:
                await self._rewrite(item, base, external)
            return
        if not isinstance(node, dict):
            return

        ref = node.get("$ref")
        if not names and isinstance(ref, str) and (external or not ref.startswith("#")):
            node["$ref"] = await self._hoist(ref, base)

        # snapshot: hoisting may add entries to a dict being walked
        for key, value in list(node.items()):
            if names:
                await self._rewrite(value, base, external)
            elif key != "$ref" and key not in DATA_KEYS:
                await self._rewrite(value, base, external, names=key in NAME_MAP_KEYS)

    async def _hoist(self, ref: str, base: str | None) -> str:
        location, _, fragment = ref.partition("#")
        if location:
            try:
                if base is None and not urlparse(location).scheme:
                    raise BundleError(ref, "relative reference without a base location")
                uri = urljoin(base, location) if base else location
            except ValueError as e:
                raise BundleError(ref, f"malformed location: {e}") from e
        elif base is None:
            raise BundleError(ref, "no document to resolve against")
        else:
            uri = base

        key = f"{uri}#{fragment}"
        if key in self._hoisted:
            return self._hoisted[key]

        document = await self._load(uri)
        target = document
        if fragment.strip("/"):
            try:
                target = walk_pointer(document, "#/" + fragment.lstrip("/"))
            except UnresolvedReferenceError as e:
                raise BundleError(ref, str(e)) from e

        name = self._unique_name(uri, fragment)
        pointer = f"{self.registry_pointer}/{name}"
        self._hoisted[key] = pointer

        content = copy.deepcopy(target)
        await self._rewrite(content, uri, external=True)
        self.registry[name] = content
        return pointer

    def _unique_name(self, uri: str, fragment: str) -> str:
        segments = [s for s in fragment.split("/") if s]
        raw = decode_segment(segments[-1]) if segments else Path(urlparse(uri).path).stem
        base_name = re.sub(r"[^A-Za-z0-9_.-]", "_", raw) or "External"
        name, suffix = base_name, 2
        while name in self.registry:
            name = f"{base_name}_{suffix}"
            suffix += 1
        # reserve the slot so nested hoists pick a different name
        self.registry[name] = {}
        return name

    async def _load(self, uri: str) -> dict:
        if uri in self._documents:
            return self._documents[uri]

        try:
            parsed = urlparse(uri)
        except ValueError as e:
            raise BundleError(uri, f"malformed location: {e}") from e
        if parsed.scheme in ("http", "https"):
            try:
                response = await self.client.get(uri, headers={"Accept": "application/json, application/yaml"})
                response.raise_for_status()
                text = response.text
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                raise BundleError(uri, str(e)) from e
        elif parsed.scheme == "file":
            path = Path(unquote(parsed.path))
            try:
                text = await asyncio.to_thread(path.read_text, encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                raise BundleError(uri, str(e)) from e
        else:
            raise BundleError(uri, f"unsupported scheme {parsed.scheme!r}")

        try:
            document = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise BundleError(uri, f"not JSON or YAML: {e}") from e
        if not isinstance(document, dict):
            raise BundleError(uri, "does not contain a mapping")

        self._documents[uri] = document
        return document


def _normalize_base(base_uri: str | None) -> str | None:
    if base_uri is None:
        return None
    try:
        scheme = urlparse(base_uri).scheme
    except ValueError as e:
        raise BundleError(base_uri, f"malformed base location: {e}") from e
    if scheme in ("http", "https", "file"):
        return base_uri
    return Path(base_uri).absolute().as_uri()

"""Internal $ref resolution against an in-memory (bundled) document."""

import logging
from typing import Any
from urllib.parse import unquote

from .errors import UnresolvedReferenceError, UnsupportedReferenceFormatError

logger = logging.getLogger(__name__)

REF_PREFIX = "#/"


def decode_segment(segment: str) -> str:
    """Percent-decode a pointer segment, then apply JSON Pointer unescaping."""
    return unquote(segment).replace("~1", "/").replace("~0", "~")


class RefResolver:
    """Dereferences `#/...` pointers, breaking cycles per resolution chain.

    A chain is the set of refs already followed on one descent path. When a
    ref shows up again on the same chain the resolver returns an empty
    schema instead of recursing. Sibling branches get their own copy of the
    chain so that two properties pointing at the same definition are not
    mistaken for a cycle.
    """

    def __init__(self, document: dict):
        self.document = document

    def resolve(self, ref: str, visited: set[str] | None = None, expand: bool = True) -> dict:
        """Resolve `ref` on the chain `visited` (which gains `ref`).

        With `expand`, refs directly under `properties` and `items` of the
        target are resolved one level too; anything deeper is left for the
        caller to resolve lazily.
        """
        if not isinstance(ref, str) or not ref.startswith(REF_PREFIX):
            raise UnsupportedReferenceFormatError(str(ref))

        if visited is None:
            visited = set()
        if ref in visited:
            logger.debug("Circular reference detected: %s", unquote(ref))
            return {}
        visited.add(ref)

        target = walk_pointer(self.document, ref)
        if not isinstance(target, dict):
            raise UnresolvedReferenceError(ref.rsplit("/", 1)[-1], ref)

        # an alias (`Foo: {$ref: Bar}`) is followed on the same chain
        if "$ref" in target:
            return self.resolve(target["$ref"], visited, expand)

        resolved = dict(target)
        if not expand:
            return resolved

        properties = resolved.get("properties")
        if isinstance(properties, dict):
            resolved_properties = {}
            for name, prop in properties.items():
                if isinstance(prop, dict) and "$ref" in prop:
                    resolved_properties[name] = self.resolve(prop["$ref"], set(visited), expand=False)
                elif isinstance(prop, dict):
                    cloned = dict(prop)
                    items = cloned.get("items")
                    if isinstance(items, dict) and "$ref" in items:
                        cloned["items"] = self.resolve(items["$ref"], set(visited), expand=False)
                    resolved_properties[name] = cloned
                else:
                    resolved_properties[name] = prop
            resolved["properties"] = resolved_properties

        items = resolved.get("items")
        if isinstance(items, dict) and "$ref" in items:
            resolved["items"] = self.resolve(items["$ref"], set(visited), expand=False)

        return resolved


def walk_pointer(document: Any, ref: str) -> Any:
    """Return the node `ref` points at inside `document`."""
    node: Any = document
    for raw in ref[len(REF_PREFIX):].split("/"):
        segment = decode_segment(raw)
        if isinstance(node, dict):
            if segment not in node:
                # the document may hold the key in its encoded form
                segment = next((key for key in node if decode_segment(key) == segment), segment)
            if segment not in node:
                raise UnresolvedReferenceError(segment, ref)
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            raise UnresolvedReferenceError(segment, ref)
    return node

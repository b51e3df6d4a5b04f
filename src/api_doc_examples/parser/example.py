"""Example synthesis from JSON-Schema-like nodes.

The generator walks a schema and produces a representative value for it:
literal `example`/`default`/`enum` hints win, otherwise the value is
derived from the (declared or inferred) type. `$ref` nodes are resolved
through `RefResolver`, carrying the chain of refs already followed so
cyclic definitions come out as `{}`. Object and array depth is capped,
which bounds the output even for schemas whose nesting is inline.
"""

import copy
from datetime import datetime, timezone
from typing import Any

from .base import ParserOptions
from .resolver import RefResolver

MAX_OBJECT_DEPTH = 3
MAX_ARRAY_NESTING = 2
MAX_ARRAY_ITEMS = 100

STRING_FORMATS = {
    "email": "user@example.com",
    "uri": "http://example.com",
    "url": "http://example.com",
    "password": "********",
    "binary": "(binary)",
    "byte": "U3dhZ2dlciByb2Nrcw==",
    "uuid": "123e4567-e89b-12d3-a456-426614174000",
}

# keys merged structurally by merge_schemas; everything else is overwritten
_STRUCTURAL_KEYS = ("properties", "items", "enum", "required")


class ExampleGenerator:
    """Generates example values for schemas of one document."""

    def __init__(self, document: dict | None = None, options: ParserOptions | dict | None = None):
        self.document = document if document is not None else {}
        self.options = _coerce_options(options)
        self.resolver = RefResolver(self.document)

    def generate(self, schema: dict | None) -> Any:
        return self._generate(schema, depth=0, array_nesting=0, chain=set())

    def _generate(self, schema: Any, depth: int, array_nesting: int, chain: set[str]) -> Any:
        if schema is None:
            return None
        if not isinstance(schema, dict):
            return ""

        if "$ref" in schema:
            chain = set(chain)
            resolved = self.resolver.resolve(schema["$ref"], chain)
            return self._generate(resolved, depth, array_nesting, chain)

        if "example" in schema:
            return copy.deepcopy(schema["example"])
        if "default" in schema:
            return copy.deepcopy(schema["default"])
        if schema.get("enum"):
            return copy.deepcopy(schema["enum"][0])

        if isinstance(schema.get("allOf"), list) and schema["allOf"]:
            return self._generate(self._merge_all_of(schema, chain), depth, array_nesting, chain)
        for keyword in ("oneOf", "anyOf"):
            alternatives = schema.get(keyword)
            if isinstance(alternatives, list) and alternatives:
                return self._generate(alternatives[0], depth, array_nesting, chain)

        schema_type = infer_type(schema)
        if schema_type == "object":
            return self._object_example(schema, depth, array_nesting, chain)
        if schema_type == "array":
            return self._array_example(schema, depth, array_nesting, chain)
        return basic_type_example(schema_type, schema)

    def _object_example(self, schema: dict, depth: int, array_nesting: int, chain: set[str]) -> dict:
        if depth > MAX_OBJECT_DEPTH:
            return {}

        properties = schema.get("properties") or {}
        required = schema.get("required") or []
        result = {}
        for name, prop in properties.items():
            if not isinstance(prop, dict):
                continue
            if self.options.required_only and name not in required:
                continue
            if not self.options.include_read_only and prop.get("readOnly"):
                continue
            if not self.options.include_write_only and prop.get("writeOnly"):
                continue
            result[name] = self._generate(prop, depth + 1, array_nesting, set(chain))
        return result

    def _array_example(self, schema: dict, depth: int, array_nesting: int, chain: set[str]) -> list:
        if depth > MAX_OBJECT_DEPTH or array_nesting >= MAX_ARRAY_NESTING:
            return []

        count = min(max(schema.get("minItems") or 0, self.options.default_min_items), MAX_ARRAY_ITEMS)
        max_items = schema.get("maxItems")
        if isinstance(max_items, int) and max_items < count:
            count = max_items
        if count <= 0:
            return []

        items = schema.get("items")
        if not isinstance(items, dict):
            items = {}
        item = self._generate(items, depth + 1, array_nesting + 1, set(chain))
        return [item] + [copy.deepcopy(item) for _ in range(count - 1)]

    def _merge_all_of(self, schema: dict, chain: set[str]) -> dict:
        merged = {key: value for key, value in schema.items() if key != "allOf"}
        for part in schema["allOf"]:
            if isinstance(part, dict) and "$ref" in part:
                part = self.resolver.resolve(part["$ref"], set(chain))
            merged = merge_schemas(merged, part)
        return merged


def infer_type(schema: dict) -> str:
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style ["string", "null"]
        schema_type = next((t for t in schema_type if t != "null"), None)
    if schema_type:
        return schema_type
    if "properties" in schema:
        return "object"
    if "items" in schema:
        return "array"
    return "object"


def basic_type_example(schema_type: str, schema: dict) -> Any:
    """Example for a primitive type; unknown types yield an empty string."""
    if schema_type == "string":
        return _string_example(schema)
    if schema_type in ("number", "integer"):
        if "minimum" in schema:
            return schema["minimum"]
        if "maximum" in schema:
            return schema["maximum"]
        return 0
    if schema_type == "boolean":
        return schema.get("default", True)
    return ""


def _string_example(schema: dict) -> str:
    fmt = schema.get("format")
    if fmt in STRING_FORMATS:
        return STRING_FORMATS[fmt]
    if fmt == "date":
        return datetime.now(timezone.utc).date().isoformat()
    if fmt == "date-time":
        return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return schema.get("pattern") or "string"


def merge_schemas(target: dict, source: Any) -> dict:
    """Merge `source` onto `target` without mutating either.

    Fields present in `source` overwrite `target`, including falsy values
    such as 0, False and "". `enum` and `required` are unioned, `properties`
    merge key by key and `items` merge recursively.
    """
    result = copy.deepcopy(target) if isinstance(target, dict) else {}
    if not isinstance(source, dict):
        return result

    for key, value in source.items():
        if key not in _STRUCTURAL_KEYS:
            result[key] = copy.deepcopy(value)

    if isinstance(source.get("enum"), list):
        result["enum"] = _union(result.get("enum") or [], source["enum"])
    if isinstance(source.get("required"), list):
        result["required"] = _union(result.get("required") or [], source["required"])

    if isinstance(source.get("properties"), dict):
        properties = result.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        for name, prop in source["properties"].items():
            if name in properties:
                properties[name] = merge_schemas(properties[name], prop)
            else:
                properties[name] = copy.deepcopy(prop)
        result["properties"] = properties

    if isinstance(source.get("items"), dict):
        result["items"] = merge_schemas(result.get("items") or {}, source["items"])

    return result


def _union(first: list, second: list) -> list:
    # equality-based so unhashable enum members (objects, lists) work
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(copy.deepcopy(item))
    return merged


def _coerce_options(options: ParserOptions | dict | None) -> ParserOptions:
    if options is None:
        return ParserOptions()
    if isinstance(options, ParserOptions):
        return options
    return ParserOptions.model_validate(options)


def generate_example(schema: dict | None, options: ParserOptions | dict | None = None, document: dict | None = None) -> Any:
    """Generate an example for a single schema.

    `document` is only needed when the schema contains `$ref` pointers.
    """
    return ExampleGenerator(document, options).generate(schema)

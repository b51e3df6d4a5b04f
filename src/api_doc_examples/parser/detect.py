"""Detect the dialect of an API document and load documents from disk."""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import ValidationError

from .base import ApiDocument, OpenAPI3Document, Swagger2Document
from .errors import UnsupportedDocumentFormatError

Dialect = Literal["swagger2", "openapi3"]


def detect_dialect(doc: object) -> Dialect:
    """Return 'swagger2' or 'openapi3'.

    Raises UnsupportedDocumentFormatError when neither marker matches.
    """
    if isinstance(doc, dict):
        if doc.get("swagger") == "2.0":
            return "swagger2"
        openapi = doc.get("openapi")
        if isinstance(openapi, str) and openapi.startswith("3"):
            return "openapi3"
    raise UnsupportedDocumentFormatError()


def to_document(doc: object) -> ApiDocument:
    """Validate a raw mapping into one of the two document models."""
    dialect = detect_dialect(doc)
    model = Swagger2Document if dialect == "swagger2" else OpenAPI3Document
    try:
        return model.model_validate(doc)
    except ValidationError as e:
        raise UnsupportedDocumentFormatError(f"Malformed {dialect} document: {e.error_count()} validation error(s)") from e


def load_document(file_path: Path) -> dict:
    """Read a JSON or YAML API document from disk."""
    text = file_path.read_text(encoding="utf-8")
    # YAML is a superset of JSON, one loader covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise UnsupportedDocumentFormatError(f"{file_path} is neither JSON nor YAML: {e}") from e

    if not isinstance(data, dict):
        raise UnsupportedDocumentFormatError(f"{file_path} does not contain a mapping")
    return data

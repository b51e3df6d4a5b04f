from pathlib import Path

import pytest

from api_doc_examples.parser.base import ParserOptions
from api_doc_examples.parser.detect import load_document
from api_doc_examples.parser.example import ExampleGenerator
from api_doc_examples.parser.openapi import generate_openapi_example
from api_doc_examples.parser.swagger import generate_swagger_example, param_to_schema

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def swagger_doc():
    return load_document(FIXTURES / "petstore_swagger2.yaml")


@pytest.fixture
def openapi_doc():
    return load_document(FIXTURES / "petstore_openapi3.yaml")


class TestSwaggerRequest:
    def test_query_parameters(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets", "get", "request")
        assert result.req_type == "query"
        assert result.data == {"limit": 0, "status": "available"}

    def test_query_parameters_required_only(self, swagger_doc):
        generator = ExampleGenerator(swagger_doc, ParserOptions(required_only=True))
        result = generate_swagger_example(generator, "/pets", "get", "request")
        assert result.data == {"status": "available"}

    def test_body_parameter(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets", "POST", "request")
        assert result.req_type == "body"
        assert result.data["name"] == "doggie"
        assert result.data["owner"] == {"email": "user@example.com", "pets": [{}]}

    def test_body_without_read_only(self, swagger_doc):
        generator = ExampleGenerator(swagger_doc, {"includeReadOnly": False})
        result = generate_swagger_example(generator, "/pets", "post", "request")
        assert "id" not in result.data

    def test_form_parameters(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets/{petId}/photo", "post", "request")
        assert result.req_type == "form"
        assert result.data == {"file": "", "caption": "string"}

    def test_header_parameters_win(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/health", "get", "request")
        assert result.req_type == "header"
        assert result.data == {"X-Request-Id": "123e4567-e89b-12d3-a456-426614174000"}

    def test_path_parameters_only(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets/{petId}", "get", "request")
        assert result.req_type is None
        assert result.data == {}
        assert result.error is None


class TestSwaggerResponse:
    def test_array_of_refs(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets", "get")
        assert result.data == [
            {
                "id": 0,
                "name": "doggie",
                "tag": "string",
                "owner": {"email": "user@example.com", "pets": [{}]},
            }
        ]

    def test_primitive_response(self, swagger_doc):
        assert generate_swagger_example(ExampleGenerator(swagger_doc), "/health", "get").data is True

    def test_missing_status_code(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/pets", "post", "response", "200")
        assert result.data == {}
        assert result.error.kind == "StatusCodeNotFoundError"

    def test_integer_status_code_keys(self):
        doc = {
            "swagger": "2.0",
            "paths": {"/x": {"get": {"responses": {200: {"schema": {"type": "integer"}}}}}},
        }
        assert generate_swagger_example(ExampleGenerator(doc), "/x", "get").data == 0

    def test_missing_path(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/nope", "get")
        assert result.data == {}
        assert result.error.kind == "PathNotFoundError"

    def test_missing_method(self, swagger_doc):
        result = generate_swagger_example(ExampleGenerator(swagger_doc), "/health", "delete")
        assert result.error.kind == "MethodNotFoundError"

    def test_unresolved_ref_degrades(self):
        doc = {
            "swagger": "2.0",
            "paths": {"/x": {"get": {"responses": {"200": {"schema": {"$ref": "#/definitions/Gone"}}}}}},
        }
        result = generate_swagger_example(ExampleGenerator(doc), "/x", "get")
        assert result.data == {}
        assert result.error.kind == "UnresolvedReferenceError"


class TestParamToSchema:
    def test_only_present_keys(self):
        param = {"name": "limit", "in": "query", "type": "integer", "required": True}
        assert param_to_schema(param) == {"type": "integer"}

    def test_explicit_schema(self):
        param = {"name": "body", "in": "body", "schema": {"type": "string"}}
        assert param_to_schema(param) == {"type": "string"}

    def test_array_items(self):
        param = {"name": "ids", "in": "query", "type": "array", "items": {"type": "integer"}}
        assert param_to_schema(param) == {"type": "array", "items": {"type": "integer"}}


class TestOpenApiRequest:
    def test_query_parameters_with_ref_and_content(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets", "get", "request")
        assert result.req_type == "query"
        assert result.data == {"limit": 1, "page_token": "U3dhZ2dlciByb2Nrcw=="}

    def test_request_body_ref(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets", "post", "request")
        assert result.req_type == "body"
        assert list(result.data) == ["name", "tag", "secret", "born"]
        assert result.data["secret"] == "********"

    def test_request_body_without_write_only(self, openapi_doc):
        generator = ExampleGenerator(openapi_doc, ParserOptions(include_write_only=False))
        result = generate_openapi_example(generator, "/pets", "post", "request")
        assert "secret" not in result.data

    def test_header_parameter_default(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets/{petId}", "get", "request")
        assert result.req_type == "header"
        assert result.data == {"X-Api-Version": "v2"}

    def test_no_request(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets/{petId}", "delete", "request")
        assert result.req_type is None
        assert result.data == {}

    def test_required_only_body(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {
                "/items": {
                    "post": {
                        "requestBody": {
                            "content": {
                                "application/json": {
                                    "schema": {
                                        "type": "object",
                                        "properties": {"id": {"type": "integer"}, "note": {"type": "string"}},
                                        "required": ["id"],
                                    }
                                }
                            }
                        }
                    }
                }
            },
        }
        generator = ExampleGenerator(doc, ParserOptions(required_only=True))
        result = generate_openapi_example(generator, "/items", "post", "request")
        assert result.data == {"id": 0}


class TestOpenApiResponse:
    def test_all_of_response(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets/{petId}", "get")
        assert set(result.data) == {"name", "tag", "secret", "born", "id"}
        assert result.data["id"] == 0

    def test_response_ref(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets", "post", "response", "201")
        assert result.data == {"id": "123e4567-e89b-12d3-a456-426614174000"}

    def test_response_without_content(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets/{petId}", "delete", "response", "204")
        assert result.data == {}
        assert result.error is None

    def test_missing_status_code(self, openapi_doc):
        result = generate_openapi_example(ExampleGenerator(openapi_doc), "/pets/{petId}", "delete")
        assert result.data == {}
        assert result.error.kind == "StatusCodeNotFoundError"
        assert result.error.direction == "response"

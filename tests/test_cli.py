import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import yaml
from click.testing import CliRunner

from api_doc_examples.cli import main
from api_doc_examples.parser.errors import DocumentFetchError

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliParse:
    def test_parse_swagger_file(self, tmp_path):
        output_file = tmp_path / "out" / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "parse", str(FIXTURES / "petstore_swagger2.yaml"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert len(data["apiList"]) == 5
        assert data["apiInfo"]["title"] == "Swagger Petstore"
        assert "diagnostics" not in data

    def test_parse_with_options(self, tmp_path):
        output_file = tmp_path / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "parse", str(FIXTURES / "petstore_openapi3.yaml"),
            "-o", str(output_file),
            "--required-only",
            "--exclude-write-only",
            "--min-items", "2",
            "--show-diagnostics",
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        post = [r for r in data["apiList"] if r["method"] == "post"][0]
        assert post["reqExample"] == {"name": "string"}
        get = [r for r in data["apiList"] if r["method"] == "get" and r["path"] == "/pets"][0]
        assert len(get["resExample"]) == 2
        assert data["diagnostics"]

    def test_parse_external_refs_relative_to_file(self, tmp_path):
        output_file = tmp_path / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "parse", str(FIXTURES / "external" / "main.yaml"),
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["apiList"][0]["resExample"]["tag"] == "friendly"

    @patch("api_doc_examples.cli.fetch_document", new_callable=AsyncMock)
    def test_parse_url(self, mock_fetch, tmp_path):
        mock_fetch.return_value = {
            "swagger": "2.0",
            "paths": {"/ping": {"get": {"responses": {"200": {"schema": {"type": "string"}}}}}},
        }
        output_file = tmp_path / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "parse", "https://example.com/swagger.json",
            "-o", str(output_file),
            "--timeout", "5",
        ])

        assert result.exit_code == 0
        mock_fetch.assert_awaited_once_with("https://example.com/swagger.json", timeout=5.0)
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert data["apiList"][0]["resExample"] == "string"

    @patch("api_doc_examples.cli.fetch_document", new_callable=AsyncMock)
    def test_parse_defaults_to_doc_url(self, mock_fetch, tmp_path):
        mock_fetch.return_value = {"openapi": "3.0.0", "paths": {}}
        env_file = tmp_path / ".env"
        env_file.write_text("DOC_URL=http://localhost:3000/api-docs\n")

        runner = CliRunner()
        result = runner.invoke(main, ["--env-file", str(env_file), "parse"], env={"DOC_URL": None})

        assert result.exit_code == 0
        assert mock_fetch.await_args.args[0] == "http://localhost:3000/api-docs"

    @patch("api_doc_examples.cli.fetch_document", new_callable=AsyncMock)
    def test_fetch_failure(self, mock_fetch):
        mock_fetch.side_effect = DocumentFetchError("https://example.com/x.json", "404 Not Found")
        runner = CliRunner()
        result = runner.invoke(main, ["parse", "https://example.com/x.json"])

        assert result.exit_code == 1
        assert "404 Not Found" in result.output

    def test_no_source(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("")
        runner = CliRunner()
        result = runner.invoke(main, ["--env-file", str(env_file), "parse"], env={"DOC_URL": None})

        assert result.exit_code != 0
        assert "DOC_URL" in result.output

    def test_unsupported_document(self, tmp_path):
        doc_file = tmp_path / "doc.yaml"
        doc_file.write_text("info:\n  title: nothing\n")
        output_file = tmp_path / "api.json"
        runner = CliRunner()
        result = runner.invoke(main, ["parse", str(doc_file), "-o", str(output_file)])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == {"apiList": [], "apiInfo": {}}


class TestCliExample:
    def test_example_from_schema_file(self, tmp_path):
        schema_file = tmp_path / "schema.yaml"
        schema_file.write_text(yaml.safe_dump({
            "type": "object",
            "required": ["id"],
            "properties": {"id": {"type": "integer"}, "email": {"type": "string", "format": "email"}},
        }))
        output_file = tmp_path / "example.json"
        runner = CliRunner()
        result = runner.invoke(main, ["example", str(schema_file), "-o", str(output_file)])

        assert result.exit_code == 0
        assert json.loads(output_file.read_text(encoding="utf-8")) == {"id": 0, "email": "user@example.com"}

    def test_example_with_refs(self, tmp_path):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text(json.dumps({"$ref": "#/definitions/Pet"}))
        output_file = tmp_path / "example.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "example", str(schema_file),
            "--doc", str(FIXTURES / "petstore_swagger2.yaml"),
            "--exclude-read-only",
            "-o", str(output_file),
        ])

        assert result.exit_code == 0
        data = json.loads(output_file.read_text(encoding="utf-8"))
        assert "id" not in data
        assert data["name"] == "doggie"

    def test_example_unresolved_ref(self, tmp_path):
        schema_file = tmp_path / "schema.json"
        schema_file.write_text(json.dumps({"$ref": "#/definitions/Pet"}))
        runner = CliRunner()
        result = runner.invoke(main, ["example", str(schema_file)])

        assert result.exit_code == 1
        assert "Unable to resolve reference" in result.output

"""CLI entry point for api-doc-examples."""

import asyncio
import json
import logging
from pathlib import Path
from urllib.parse import urlparse

import click
from pydantic import ValidationError

from api_doc_examples.config import LOG_LEVELS, load_settings
from api_doc_examples.fetch import fetch_document
from api_doc_examples.parse import parse_api_doc
from api_doc_examples.parser.base import ParserOptions
from api_doc_examples.parser.detect import load_document
from api_doc_examples.parser.errors import ApiDocError
from api_doc_examples.parser.example import generate_example


def _is_url(source: str) -> bool:
    return urlparse(source).scheme in ("http", "https")


def _options(include_read_only: bool, include_write_only: bool, required_only: bool, min_items: int) -> ParserOptions:
    return ParserOptions(
        include_read_only=include_read_only,
        include_write_only=include_write_only,
        required_only=required_only,
        default_min_items=min_items,
    )


def _emit(data, output: Path | None, indent: int | None):
    text = json.dumps(data, ensure_ascii=False, indent=indent)
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    click.echo(f"Saved to {output}", err=True)


def option_flags(func):
    """Example-generation flags shared by `parse` and `example`."""
    func = click.option("--min-items", default=1, show_default=True, type=click.IntRange(min=0), help="Default number of items in generated arrays.")(func)
    func = click.option("--required-only", is_flag=True, help="Only include required properties.")(func)
    func = click.option("--include-write-only/--exclude-write-only", default=True, show_default=True, help="Include writeOnly properties.")(func)
    func = click.option("--include-read-only/--exclude-read-only", default=True, show_default=True, help="Include readOnly properties.")(func)
    func = click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path), default=None, help="Write JSON to this file instead of stdout.")(func)
    func = click.option("--indent", default=2, show_default=True, type=int, help="JSON indentation.")(func)
    return func


@click.group()
@click.option("--env-file", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="Load settings from this .env file.")
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None, help="Override API_DOC_LOG_LEVEL.")
@click.pass_context
def main(ctx: click.Context, env_file: Path | None, log_level: str | None):
    """API Doc Examples: flatten Swagger/OpenAPI documents and synthesize example payloads."""
    try:
        settings = load_settings(env_file)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.argument("source", required=False)
@option_flags
@click.option("--timeout", type=float, default=None, help="Fetch timeout in seconds (default: API_DOC_TIMEOUT or 15).")
@click.option("--show-diagnostics/--hide-diagnostics", default=False, help="Include per-endpoint diagnostics in the output.")
@click.pass_obj
def parse(settings, source: str | None, indent: int, output: Path | None, include_read_only: bool,
          include_write_only: bool, required_only: bool, min_items: int, timeout: float | None,
          show_diagnostics: bool):
    """Parse SOURCE (file path or URL, default DOC_URL) into an API list with examples."""
    source = source or settings.doc_url
    if not source:
        raise click.UsageError("No SOURCE given and DOC_URL is not set.")

    options = _options(include_read_only, include_write_only, required_only, min_items)
    try:
        if _is_url(source):
            doc = asyncio.run(fetch_document(source, timeout=timeout or settings.fetch_timeout))
        else:
            doc = load_document(Path(source))
    except (ApiDocError, OSError) as e:
        raise click.ClickException(str(e))

    result = asyncio.run(parse_api_doc(doc, options, base_uri=source))
    click.echo(f"Found {len(result.api_list)} endpoints.", err=True)
    _emit(result.to_json_dict(include_diagnostics=show_diagnostics), output, indent)


@main.command()
@click.argument("schema_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@option_flags
@click.option("--doc", "doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="API document used to resolve $ref pointers in the schema.")
def example(schema_path: Path, indent: int, output: Path | None, include_read_only: bool,
            include_write_only: bool, required_only: bool, min_items: int, doc_path: Path | None):
    """Generate an example value for the schema in SCHEMA_PATH."""
    options = _options(include_read_only, include_write_only, required_only, min_items)
    try:
        schema = load_document(schema_path)
        document = load_document(doc_path) if doc_path else None
        data = generate_example(schema, options, document)
    except ApiDocError as e:
        raise click.ClickException(str(e))
    _emit(data, output, indent)

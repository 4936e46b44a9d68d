"""CLI entry point for openapi-graph."""

import logging
import sys
from pathlib import Path

import click

from openapi_graph.deserializer import DeserializationResult, Deserializer
from openapi_graph.exceptions import OpenApiGraphError
from openapi_graph.options import ReaderOptions, RefSiblingPolicy
from openapi_graph.parser.context import ComponentKind
from openapi_graph.writer import SchemaWriter


def _read_doc(doc_path: Path, lenient: bool, merge_ref_siblings: bool) -> DeserializationResult:
    """Deserialize the document, turning library errors into a CLI failure."""
    options = ReaderOptions(
        strict=not lenient,
        ref_siblings=RefSiblingPolicy.MERGE if merge_ref_siblings else RefSiblingPolicy.IGNORE,
    )
    try:
        return Deserializer(options).deserialize_path(doc_path)
    except OpenApiGraphError as e:
        raise click.ClickException(str(e)) from e


def _echo_diagnostics(result: DeserializationResult) -> None:
    if not result.diagnostics:
        return
    click.echo(f"Diagnostics ({len(result.diagnostics)}):")
    for diagnostic in result.diagnostics:
        click.echo(f"  {diagnostic}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """openapi-graph: read OpenAPI 3.1 documents into a resolved object graph."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--lenient", is_flag=True, help="Substitute defaults for missing required properties instead of failing.")
@click.option("--merge-ref-siblings", is_flag=True, help="Keep schema keywords next to $ref (JSON Schema 2020-12 semantics).")
def inspect(doc_path: Path, lenient: bool, merge_ref_siblings: bool):
    """Summarize a document and list its diagnostics."""
    result = _read_doc(doc_path, lenient, merge_ref_siblings)
    document = result.document

    click.echo(f"OpenAPI {document.openapi}: {document.info.title} {document.info.version}".rstrip())
    operations = list(document.operations())
    click.echo(f"Paths: {len(document.paths)}, operations: {len(operations)}")
    for path, method, operation in operations:
        label = operation.operation_id or operation.summary or ""
        click.echo(f"  {method.upper():7} {path} {label}".rstrip())

    counts = [
        f"{kind.value}={len(getattr(document.components, kind.attribute))}"
        for kind in ComponentKind
        if getattr(document.components, kind.attribute)
    ]
    if counts:
        click.echo("Components: " + ", ".join(counts))

    _echo_diagnostics(result)
    if not result.success:
        sys.exit(1)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("name")
@click.option("--lenient", is_flag=True, help="Substitute defaults for missing required properties instead of failing.")
@click.option("--merge-ref-siblings", is_flag=True, help="Keep schema keywords next to $ref (JSON Schema 2020-12 semantics).")
def schema(doc_path: Path, name: str, lenient: bool, merge_ref_siblings: bool):
    """Print the component schema NAME as JSON."""
    result = _read_doc(doc_path, lenient, merge_ref_siblings)
    components = result.document.components
    if name not in components.schemas:
        raise click.ClickException(f"No schema named '{name}' in components")
    click.echo(SchemaWriter(components).dumps(components.schemas[name]))


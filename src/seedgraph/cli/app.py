"""Typer CLI application."""

from pathlib import Path
from typing import List, Optional
import typer

from seedgraph.config.settings import get_settings
from seedgraph.config.logging import setup_logging
from seedgraph.generation.engine.edge_generator import JsonEdgeConfigStore
from seedgraph.generation.engine.pipeline import run
from seedgraph.generation.engine.writer import write_batches
from seedgraph.generation.errors import SeedGraphError
from seedgraph.generation.graph import build_parsed_schema
from seedgraph.ir.validators import validate_schema
from seedgraph.utils.schema_io import load_schema_from_json

app = typer.Typer(help="seedgraph: dependency-ordered synthetic rows for relational schemas")


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(None, help="Log level (defaults to SEEDGRAPH_LOG_LEVEL)"),
    log_file: Optional[Path] = typer.Option(None, help="Also write logs to this file"),
):
    """Configure logging before running a command."""
    try:
        setup_logging(level=log_level, log_file=log_file)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level")


def _split_restrict(restrict: Optional[str]) -> Optional[List[str]]:
    if not restrict:
        return None
    return [name.strip() for name in restrict.split(",") if name.strip()]


@app.command()
def generate(
    schema_json: Path,
    out_dir: Optional[Path] = typer.Option(None, help="Directory for the CSV files"),
    row_count: Optional[int] = typer.Option(None, help="Rows per entity (edges in edge mode)"),
    restrict: Optional[str] = typer.Option(None, help="Comma-separated entities to generate"),
    edge_name: Optional[str] = typer.Option(None, help="Generate rows for this edge instead"),
    edge_config: Optional[Path] = typer.Option(None, help="JSON dump of assoc_edge_config"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
):
    """
    Generate rows for a schema and write one CSV per table.

    Args:
        schema_json: Path to the schema JSON file
    """
    settings = get_settings()

    typer.echo(f"Loading schema from {schema_json}")
    try:
        schema = load_schema_from_json(schema_json)
    except (FileNotFoundError, SeedGraphError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    edge_config = edge_config or settings.edge_config_path
    if edge_name and edge_config is None:
        typer.echo("Error: --edge-config is required with --edge-name", err=True)
        raise typer.Exit(1)

    typer.echo("Generating data...")
    try:
        result = run(
            schema,
            row_count=row_count or settings.row_count,
            restrict=_split_restrict(restrict),
            edge_name=edge_name,
            edge_store=JsonEdgeConfigStore(edge_config) if edge_name else None,
            seed=seed if seed is not None else settings.seed,
        )
        written = write_batches(result.batches, out_dir or settings.output_dir)
    except SeedGraphError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo("SUMMARY:")
    for line in result.summaries:
        typer.echo(line)
    typer.echo(f"✓ Complete! Wrote {len(written)} table(s) to {out_dir or settings.output_dir}")


@app.command()
def validate(schema_json: Path, restrict: Optional[str] = typer.Option(None)):
    """
    Validate a schema without generating rows.

    Args:
        schema_json: Path to the schema JSON file
    """
    try:
        schema = load_schema_from_json(schema_json)
    except (FileNotFoundError, SeedGraphError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    issues = validate_schema(schema, _split_restrict(restrict))
    for issue in issues:
        typer.echo(f"{issue.severity.upper()} [{issue.code}] {issue.message}")

    errors = [i for i in issues if i.severity == "error"]
    if errors:
        typer.echo(f"✗ {len(errors)} error(s)", err=True)
        raise typer.Exit(1)

    try:
        order = build_parsed_schema(schema).topological_order()
    except SeedGraphError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"✓ Schema is valid. Generation order: {', '.join(order)}")


@app.command()
def edges(schema_json: Path):
    """
    List the association edge catalogue of a schema.

    Args:
        schema_json: Path to the schema JSON file
    """
    try:
        parsed = build_parsed_schema(load_schema_from_json(schema_json))
    except (FileNotFoundError, SeedGraphError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if not parsed.edges:
        typer.echo("No association edges")
        return
    for name, edge in sorted(parsed.edges.items()):
        flags = []
        if edge.symmetric:
            flags.append("symmetric")
        if edge.inverse_edge:
            flags.append(f"inverse={edge.inverse_edge}")
        suffix = f" ({', '.join(flags)})" if flags else ""
        typer.echo(f"{name}: {edge.id1_type} -> {edge.id2_type}{suffix}")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()

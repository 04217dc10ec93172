"""CLI for gridsort listing operations."""

import logging
from pathlib import Path

import typer

from gridsort import __version__
from gridsort.config import GridsortConfig, find_config, load_config


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"gridsort {__version__}")
        raise typer.Exit()


app = typer.Typer(
    help="gridsort: relation-aware sorting for list views",
    no_args_is_help=True,
)

# Global state for config (set in callback, used in commands)
_loaded_config: GridsortConfig | None = None


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True, help="Show version"
    ),
    config: Path = typer.Option(None, "--config", "-c", help="Path to config file (gridsort.yaml)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log resolved paths and join plans"),
):
    """gridsort CLI.

    Listings, entities and the database connection come from a config file
    (gridsort.yaml or gridsort.json), discovered upwards from the current
    directory unless --config is given.
    """
    global _loaded_config

    if verbose:
        logging.basicConfig(level=logging.DEBUG)

    config_path = config or find_config()
    _loaded_config = None

    if config_path:
        try:
            _loaded_config = load_config(config_path)
            typer.echo(f"Loaded config from: {config_path}", err=True)
        except Exception as e:
            typer.echo(f"Error: Failed to load config: {e}", err=True)
            raise typer.Exit(1)


def _require_config() -> GridsortConfig:
    if _loaded_config is None:
        typer.echo("Error: No config file found (gridsort.yaml, gridsort.yml or gridsort.json)", err=True)
        raise typer.Exit(1)
    return _loaded_config


def _open_listing(name: str):
    from gridsort.listing import Listing

    config = _require_config()
    try:
        return Listing.from_config(config, name)
    except KeyError:
        typer.echo(f"Error: Listing {name} not found", err=True)
        raise typer.Exit(1)


@app.command()
def info():
    """
    Show listings and their sortable fields.

    Examples:
      gridsort info
      gridsort --config app/gridsort.yaml info
    """
    config = _require_config()

    if not config.listings:
        typer.echo("No listings found")
        raise typer.Exit(0)

    for listing in config.listings:
        typer.echo(f"● {listing.name}")
        typer.echo(f"  Entity: {listing.entity}")
        typer.echo(f"  Columns: {len(listing.columns)}")
        for label, path in listing.sortable.items():
            typer.echo(f"  Sortable: {label} -> {path}")
        typer.echo()


@app.command()
def sql(
    listing: str = typer.Argument(..., help="Listing name"),
    column: str = typer.Argument(..., help="Sort label or registered dotted path"),
    direction: str = typer.Option("asc", "--direction", "-d", help="asc or desc"),
):
    """
    Show the SQL for a sorted listing without executing it.

    Examples:
      gridsort sql teams City
      gridsort sql teams "Cheerleader Hat" --direction desc
    """
    from gridsort.validation import SortValidationError

    with _open_listing(listing) as view:
        try:
            typer.echo(view.compile(column, direction))
        except SortValidationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)


@app.command()
def plan(
    listing: str = typer.Argument(..., help="Listing name"),
    column: str = typer.Argument(..., help="Sort label or registered dotted path"),
):
    """
    Show the join plan a sort column resolves to.

    Examples:
      gridsort plan teams "Cheerleader Hat"
    """
    from gridsort.validation import SortValidationError

    with _open_listing(listing) as view:
        try:
            validated = view.applier.validate(column)
            typer.echo(str(view.applier.plan(view.entity, validated)))
        except SortValidationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)


@app.command()
def query(
    listing: str = typer.Argument(..., help="Listing name"),
    column: str = typer.Argument(..., help="Sort label or registered dotted path"),
    direction: str = typer.Option("asc", "--direction", "-d", help="asc or desc"),
    output: Path = typer.Option(None, "--output", "-o", help="Output file (default: stdout)"),
):
    """
    Execute a sorted listing and output its rows as CSV.

    Examples:
      gridsort query teams City
      gridsort query teams City --direction desc --output teams.csv
    """
    import csv
    import sys

    from gridsort.validation import SortValidationError

    with _open_listing(listing) as view:
        try:
            rows = view.sort(column, direction).rows()
        except SortValidationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    columns = list(rows[0]) if rows else []
    if output:
        with open(output, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(columns)
            writer.writerows(row.values() for row in rows)
        typer.echo(f"Results written to {output}", err=True)
    else:
        writer = csv.writer(sys.stdout)
        writer.writerow(columns)
        writer.writerows(row.values() for row in rows)


@app.command()
def validate():
    """
    Validate entity definitions and every listing's sortable paths.

    Examples:
      gridsort validate
    """
    from gridsort.core.registry import SortFieldRegistry
    from gridsort.core.schema_provider import SchemaProvider
    from gridsort.validation import SortConfigurationError, validate_registry

    config = _require_config()

    try:
        provider = SchemaProvider.from_entities(config.entities)
    except (SortConfigurationError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    errors = []
    for listing in config.listings:
        try:
            registry = SortFieldRegistry(listing.sortable)
        except SortConfigurationError as e:
            errors.append(f"Listing '{listing.name}': {e}")
            continue
        for error in validate_registry(registry, listing.entity, provider, config.max_path_depth):
            errors.append(f"Listing '{listing.name}': {error}")

    if errors:
        for error in errors:
            typer.echo(f"✗ {error}", err=True)
        raise typer.Exit(1)

    typer.echo(f"✓ {len(config.listings)} listing(s) valid")


if __name__ == "__main__":
    app()

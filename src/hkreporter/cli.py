import json, logging

from datetime import datetime
from typing import IO, Any, Dict, Tuple

import click

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install as install_traceback

from hkreporter.environment import set_current_env
from hkreporter.errors import HealthKitError
from hkreporter.iso8601 import Iso8601DateFormatter
from hkreporter.metadata import Metadata
from hkreporter.settings import get_settings


console = Console()
error_console = Console(stderr=True)
install_traceback(show_locals=True, word_wrap=True, console=error_console)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Route log records through rich on stderr, keeping stdout for command output."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
    )


def describe_validation_error(exc: ValidationError) -> str:
    """Collapse a pydantic ValidationError into a single line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def load_metadata(source: IO[str]) -> Metadata:
    """Decode a typed metadata JSON document, turning decode failures into a CLI error."""
    try:
        metadata = Metadata.model_validate_json(source.read())
    except ValidationError as exc:
        raise click.ClickException(f"Invalid metadata document: {describe_validation_error(exc)}") from exc
    logger.debug(f"Loaded {len(metadata)} metadata entries from {source.name}")
    return metadata


@click.group()
@click.option('--env', type=click.Choice(['development', 'testing', 'staging', 'production']), default=None, help='Environment to use.')
def cli(env: str | None) -> None:
    """hkreporter: inspect and convert health-sample metadata."""
    if env:
        set_current_env(env)
    configure_logging(get_settings().app.log_level)


@cli.command()
@click.argument('source', type=click.File('r'))
def show(source: IO[str]) -> None:
    """Render a typed metadata JSON document as a table."""
    metadata = load_metadata(source)

    table = Table(title=f"Metadata ({len(metadata)} entries)")
    table.add_column("Key", style="cyan")
    table.add_column("Type", style="magenta")
    table.add_column("Value")
    for key, value in sorted(metadata.items()):
        table.add_row(key, value.type, str(value.model_dump(mode="json")["value"]))

    console.print(table)


@cli.command()
@click.argument('source', type=click.File('r'))
@click.option('--date', 'date_keys', multiple=True, help='Key whose ISO-8601 text should become a date value. Repeatable.')
@click.option('--indent', type=int, default=None, help='Indent the JSON output.')
def wrap(source: IO[str], date_keys: Tuple[str, ...], indent: int | None) -> None:
    """Convert a plain JSON object of scalars into typed metadata JSON."""
    try:
        data = json.load(source)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise click.ClickException("Expected a JSON object at the top level.")

    formatter = Iso8601DateFormatter.from_settings()
    for key in date_keys:
        if not isinstance(text := data.get(key), str):
            raise click.ClickException(f"--date key {key!r} must name a text entry.")
        try:
            data[key] = formatter.decode(text)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    try:
        metadata = Metadata.make(data)
    except HealthKitError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(metadata.model_dump_json(indent=indent))


@cli.command()
@click.argument('source', type=click.File('r'))
@click.option('--indent', type=int, default=None, help='Indent the JSON output.')
def unwrap(source: IO[str], indent: int | None) -> None:
    """Convert typed metadata JSON back into a plain JSON object (null when empty)."""
    original = load_metadata(source).original

    plain: Dict[str, Any] | None = None
    if original is not None:
        formatter = Iso8601DateFormatter.from_settings()
        plain = {
            key: formatter.encode(value) if isinstance(value, datetime) else value
            for key, value in original.items()
        }

    click.echo(json.dumps(plain, indent=indent))


if __name__ == "__main__":
    cli()

"""Typer CLI: ``csvcalc [FILE]`` prints the resolved table."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from csvcalc._config import Settings, get_settings
from csvcalc._errors import CalcError, FileOpenError
from csvcalc._reader import load_file
from csvcalc._writer import render
from csvcalc.calc._protocol import ResolutionStrategy

NO_FILE_MESSAGE = "Filename not passed to the program, finishing execution"

app = typer.Typer(
    add_completion=False,
    help="Resolve the formulas of a comma-separated table and print the result.",
)


def _configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level_int,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def run(
    filename: Annotated[
        Optional[Path],
        typer.Argument(help="Table file to resolve.", show_default=False),
    ] = None,
    strategy: Annotated[
        Optional[ResolutionStrategy],
        typer.Option("--strategy", "-s", help="Formula resolution strategy."),
    ] = None,
    max_value: Annotated[
        Optional[int],
        typer.Option("--max-value", min=1, help="Largest allowed cell value."),
    ] = None,
) -> None:
    """Resolve FILE and print it with every formula replaced by its value."""
    overrides: dict[str, Any] = {}
    if strategy is not None:
        overrides["strategy"] = strategy
    if max_value is not None:
        overrides["max_value"] = max_value
    settings = Settings(**overrides) if overrides else get_settings()
    _configure_logging(settings)

    if filename is None:
        typer.echo(NO_FILE_MESSAGE)
        return

    try:
        table = load_file(filename, settings)
    except FileOpenError:
        typer.echo("Error: could not open the file")
        raise typer.Exit(code=1) from None
    except CalcError as e:
        typer.echo(f"Error: {e}")
        raise typer.Exit(code=1) from None

    typer.echo(render(table), nl=False)


def main() -> None:
    app()

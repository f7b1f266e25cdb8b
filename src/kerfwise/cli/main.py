"""Typer CLI for kerfwise."""

from pathlib import Path
from typing import Annotated

import typer

from kerfwise import __version__
from kerfwise.cli.commands import (
    check_material,
    compensate,
    constraints,
    materials,
    nest,
    settings,
    validate,
)
from kerfwise.cli.common import CliState, configure_logging

app = typer.Typer(
    name="kerfwise",
    help="Check laser-cut designs for manufacturability and nest parts onto stock sheets.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"kerfwise {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", "-c", help="JSON catalog overrides merged over the built-ins"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log algorithm progress to stderr")
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version"
        ),
    ] = False,
) -> None:
    """Manufacturability validation and material nesting."""
    configure_logging(verbose)
    ctx.obj = CliState(catalog_path=catalog, verbose=verbose)


app.command(name="materials")(materials)
app.command(name="constraints")(constraints)
app.command(name="check-material")(check_material)
app.command(name="settings")(settings)
app.command(name="validate")(validate)
app.command(name="compensate")(compensate)
app.command(name="nest")(nest)


if __name__ == "__main__":
    app()

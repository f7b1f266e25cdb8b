"""State and error display shared by the kerfwise CLI commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import NoReturn

import typer

from kerfwise.application.config import ConfigError, catalog_from_config, load_catalog_config
from kerfwise.domain.errors import KerfwiseError
from kerfwise.domain.services.catalog import MaterialCatalog

logger = logging.getLogger(__name__)

# Exit codes
EXIT_ERROR = 1
EXIT_FINDINGS = 2


@dataclass
class CliState:
    """Options set by the top-level callback.

    Attributes:
        catalog_path: Optional catalog override file.
        verbose: Whether debug logging is on.
    """

    catalog_path: Path | None = None
    verbose: bool = False
    _catalog: MaterialCatalog | None = field(default=None, init=False, repr=False)

    def catalog(self) -> MaterialCatalog:
        """Built-in catalog, or the override file merged over it. Loaded once."""
        if self._catalog is None:
            if self.catalog_path is None:
                self._catalog = MaterialCatalog()
            else:
                config = load_config_or_exit(load_catalog_config, self.catalog_path)
                try:
                    self._catalog = catalog_from_config(config)
                except KerfwiseError as e:
                    fail(f"Invalid catalog {self.catalog_path}: {e}")
                logger.info("Loaded catalog overrides from %s", self.catalog_path)
        return self._catalog


def state(ctx: typer.Context) -> CliState:
    """The CliState of the current invocation."""
    if not isinstance(ctx.obj, CliState):
        ctx.obj = CliState()
    return ctx.obj


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; debug when verbose, warnings otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def fail(message: str) -> NoReturn:
    """Print an error and exit with code 1."""
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=EXIT_ERROR)


def display_load_error(error: ConfigError) -> None:
    """Display a configuration loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type == "validation":
        for detail in error.details:
            path = detail.get("path") or "<root>"
            typer.echo(f"  {path}: {detail.get('message', 'Unknown error')}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def load_config_or_exit(loader, path: Path):
    """Run a config loader, displaying errors and exiting with code 1 on failure."""
    try:
        return loader(path)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=EXIT_ERROR)


def write_output(path: Path, content: str, label: str) -> None:
    """Write text to a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    typer.echo(f"{label} written to {path}")

"""Design commands: manufacturability validation and kerf compensation."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from kerfwise.application.config import (
    DesignConfig,
    features_from_config,
    load_design_config,
    paths_from_config,
)
from kerfwise.cli.common import (
    EXIT_FINDINGS,
    fail,
    load_config_or_exit,
    state,
    write_output,
)
from kerfwise.domain.errors import KerfwiseError
from kerfwise.domain.services.validation import ManufacturabilityValidator
from kerfwise.domain.value_objects import CompensationMode
from kerfwise.infrastructure import JsonExporter, ValidationReportFormatter


class ReportFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def _validator(ctx: typer.Context, design: DesignConfig) -> ManufacturabilityValidator:
    """Resolve the design's constraints and build a validator."""
    catalog = state(ctx).catalog()
    try:
        constraints = catalog.resolve_constraints(
            design.material, design.machine, design.precision
        )
    except KerfwiseError as e:
        fail(str(e))
    return ManufacturabilityValidator(constraints)


def validate(
    ctx: typer.Context,
    design_file: Annotated[Path, typer.Argument(help="Path to the JSON design file")],
    output_format: Annotated[
        ReportFormat, typer.Option("--format", "-f", help="Report format")
    ] = ReportFormat.TEXT,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the report to a file")
    ] = None,
) -> None:
    """Check a design for laser-cutting problems.

    Exit codes:
        0 - Design is manufacturable
        1 - Design file or catalog lookup failed
        2 - Design has violations
    """
    design = load_config_or_exit(load_design_config, design_file)
    validator = _validator(ctx, design)
    try:
        result = validator.validate(features_from_config(design.features))
    except KerfwiseError as e:
        fail(str(e))

    if output_format == ReportFormat.JSON:
        report = JsonExporter().export_validation(result)
    else:
        report = ValidationReportFormatter().format(
            result, title=f"MANUFACTURABILITY REPORT: {design_file.name}"
        )

    if output is not None:
        write_output(output, report, "Report")
    else:
        typer.echo(report)

    if not result.is_valid:
        raise typer.Exit(code=EXIT_FINDINGS)


def compensate(
    ctx: typer.Context,
    design_file: Annotated[Path, typer.Argument(help="Path to the JSON design file")],
    mode: Annotated[
        CompensationMode | None,
        typer.Option("--mode", "-m", help="Override the machine's compensation mode"),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the paths to a file")
    ] = None,
) -> None:
    """Offset a design's cut paths by half the kerf and print them as JSON."""
    design = load_config_or_exit(load_design_config, design_file)
    if not design.paths:
        fail(f"{design_file} has no paths to compensate")

    validator = _validator(ctx, design)
    try:
        paths = validator.compensate(
            paths_from_config(design.paths), mode or design.compensation
        )
    except KerfwiseError as e:
        fail(str(e))

    dropped = len(design.paths) - len(paths)
    if dropped:
        typer.echo(f"Warning: {dropped} path(s) collapsed and were dropped", err=True)

    content = JsonExporter().export_paths(paths)
    if output is not None:
        write_output(output, content, "Paths")
    else:
        typer.echo(content)

"""Nest command: lay parts out on stock sheets."""

from __future__ import annotations

import dataclasses
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from kerfwise.application.config import (
    cost_model_from_job,
    load_nesting_job,
    options_from_job,
    parts_from_job,
    sheets_from_job,
)
from kerfwise.cli.common import EXIT_FINDINGS, fail, load_config_or_exit, write_output
from kerfwise.domain.errors import KerfwiseError
from kerfwise.domain.services.nesting import MaterialNestingOptimizer
from kerfwise.domain.value_objects import NestingAlgorithm
from kerfwise.infrastructure import (
    JsonExporter,
    NestingDxfExporter,
    NestingLayoutRenderer,
    NestingReportFormatter,
)


class SummaryFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def nest(
    job_file: Annotated[Path, typer.Argument(help="Path to the JSON nesting job")],
    algorithm: Annotated[
        NestingAlgorithm | None,
        typer.Option("--algorithm", "-a", help="Override the job's nesting algorithm"),
    ] = None,
    svg: Annotated[
        Path | None, typer.Option("--svg", help="Write the layout diagram (SVG)")
    ] = None,
    dxf: Annotated[
        Path | None, typer.Option("--dxf", help="Write the cut file (DXF)")
    ] = None,
    json_path: Annotated[
        Path | None, typer.Option("--json", help="Write the full result as JSON")
    ] = None,
    output_format: Annotated[
        SummaryFormat, typer.Option("--format", "-f", help="Summary format on stdout")
    ] = SummaryFormat.TEXT,
) -> None:
    """Nest parts onto sheets and report usage and cost.

    Exit codes:
        0 - Every part was placed
        1 - Job file could not be loaded or is malformed
        2 - Some parts could not be placed
    """
    job = load_config_or_exit(load_nesting_job, job_file)
    try:
        options = options_from_job(job)
        if algorithm is not None:
            options = dataclasses.replace(options, algorithm=algorithm)
        optimizer = MaterialNestingOptimizer(
            options=options,
            cost_model=cost_model_from_job(job),
            renderer=NestingLayoutRenderer() if svg is not None else None,
        )
        result = optimizer.optimize(parts_from_job(job), sheets_from_job(job))
    except KerfwiseError as e:
        fail(str(e))

    exporter = JsonExporter()
    if output_format == SummaryFormat.JSON:
        typer.echo(exporter.export_nesting(result))
    else:
        typer.echo(NestingReportFormatter().format(result))

    if svg is not None:
        write_output(svg, result.visualization, "SVG layout")
    if dxf is not None:
        if result.sheets:
            dxf.parent.mkdir(parents=True, exist_ok=True)
            NestingDxfExporter().export(result, dxf)
            typer.echo(f"DXF written to {dxf}")
        else:
            typer.echo("Warning: no sheets used, DXF not written", err=True)
    if json_path is not None:
        write_output(json_path, exporter.export_nesting(result), "JSON result")

    if not result.summary.all_placed:
        raise typer.Exit(code=EXIT_FINDINGS)

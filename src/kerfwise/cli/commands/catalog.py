"""Catalog commands: list materials, show constraints and settings, check a choice."""

from __future__ import annotations

from typing import Annotated

import typer

from kerfwise.cli.common import EXIT_FINDINGS, fail, state
from kerfwise.domain.errors import CatalogError
from kerfwise.domain.services.catalog import (
    DEFAULT_MACHINE,
    MaterialRequirements,
)
from kerfwise.infrastructure import (
    ConstraintsFormatter,
    MachineSettingsFormatter,
    MaterialChoiceFormatter,
    MaterialListFormatter,
)


def materials(
    ctx: typer.Context,
    intent: Annotated[
        str | None,
        typer.Option("--intent", "-i", help="Only list materials recommended for a design intent"),
    ] = None,
) -> None:
    """List catalog materials, or the recommendations for an intent."""
    catalog = state(ctx).catalog()
    if intent is None:
        typer.echo(MaterialListFormatter().format(catalog))
        return
    typer.echo(f"Recommended for '{intent}':")
    for key in catalog.recommend_materials(intent):
        typer.echo(f"  {key}")


def constraints(
    ctx: typer.Context,
    material: Annotated[str, typer.Argument(help="Material key, e.g. plywood-3mm")],
    machine: Annotated[str, typer.Option("--machine", "-m", help="Machine key")] = DEFAULT_MACHINE,
    precision: Annotated[
        str, typer.Option("--precision", "-p", help="high-precision, standard or quick")
    ] = "standard",
) -> None:
    """Show the manufacturing constraints for a material on a machine."""
    catalog = state(ctx).catalog()
    try:
        resolved = catalog.resolve_constraints(material, machine, precision)
    except CatalogError as e:
        fail(str(e))
    typer.echo(ConstraintsFormatter().format(resolved))


def check_material(
    ctx: typer.Context,
    material: Annotated[str, typer.Argument(help="Material key to check")],
    max_span: Annotated[
        float | None, typer.Option("--max-span", help="Longest unsupported span (mm)")
    ] = None,
    min_feature: Annotated[
        float | None, typer.Option("--min-feature", help="Smallest feature needed (mm)")
    ] = None,
    flexible: Annotated[bool, typer.Option("--flexible", help="Part must bend")] = False,
    transparent: Annotated[
        bool, typer.Option("--transparent", help="Part must let light through")
    ] = False,
    outdoor: Annotated[bool, typer.Option("--outdoor", help="Part is used outdoors")] = False,
) -> None:
    """Check a material against design requirements.

    Exit codes:
        0 - Material is suitable
        2 - Material is not suitable (alternatives are listed)
    """
    catalog = state(ctx).catalog()
    requirements = MaterialRequirements(
        max_span=max_span,
        min_feature=min_feature,
        needs_flexibility=flexible,
        needs_transparency=transparent,
        outdoor_use=outdoor,
    )
    report = catalog.validate_material_choice(material, requirements)
    typer.echo(MaterialChoiceFormatter().format(material, report))
    if not report.is_valid:
        raise typer.Exit(code=EXIT_FINDINGS)


def settings(
    ctx: typer.Context,
    material: Annotated[str, typer.Argument(help="Material key")],
) -> None:
    """Show cut, score and engrave settings for a material."""
    catalog = state(ctx).catalog()
    try:
        machine_settings = catalog.machine_settings(material)
    except CatalogError as e:
        fail(str(e))
    typer.echo(MachineSettingsFormatter().format(material, machine_settings))

"""Pytest configuration and shared fixtures for kerfwise tests."""

from __future__ import annotations

import pytest

from kerfwise.domain.services.catalog import MaterialCatalog
from kerfwise.domain.value_objects import (
    ManufacturingConstraints,
    MaterialSheet,
    NestingOptions,
    PartShape,
)


# =============================================================================
# Catalog fixtures
# =============================================================================


@pytest.fixture
def catalog() -> MaterialCatalog:
    """Catalog serving the built-in tables."""
    return MaterialCatalog()


@pytest.fixture
def plywood_constraints(catalog: MaterialCatalog) -> ManufacturingConstraints:
    """plywood-3mm on the default machine at standard precision."""
    return catalog.resolve_constraints("plywood-3mm")


@pytest.fixture
def acrylic_constraints(catalog: MaterialCatalog) -> ManufacturingConstraints:
    """acrylic-3mm on the default machine at standard precision."""
    return catalog.resolve_constraints("acrylic-3mm")


# =============================================================================
# Nesting fixtures
# =============================================================================


@pytest.fixture
def small_sheet() -> MaterialSheet:
    """300x200mm plywood sheet with a 5mm margin."""
    return MaterialSheet(
        id="ply-300",
        name="Plywood 300x200",
        width=300,
        height=200,
        thickness=3,
        material_type="plywood",
        cost_per_sheet=4.5,
        margin=5,
    )


@pytest.fixture
def square_parts() -> list[PartShape]:
    """Ten distinct 40x40mm parts."""
    return [PartShape(id=f"sq{i}", name=f"Square {i}", width=40, height=40) for i in range(10)]


@pytest.fixture
def tight_options() -> NestingOptions:
    """Options with no spacing, for exact-fit arithmetic."""
    return NestingOptions(minimum_spacing=0)

"""CLI command implementations for kerfwise.

This package contains the subcommands of the kerfwise CLI:
- materials, constraints, check-material, settings: catalog lookups
- validate, compensate: design checks and kerf compensation
- nest: material nesting
"""

from kerfwise.cli.commands.catalog import check_material, constraints, materials, settings
from kerfwise.cli.commands.design import compensate, validate
from kerfwise.cli.commands.nest import nest

__all__ = [
    "check_material",
    "compensate",
    "constraints",
    "materials",
    "nest",
    "settings",
    "validate",
]

"""Material property catalog.

This package provides the built-in material, machine and limit tables and the
MaterialCatalog service that resolves them into ManufacturingConstraints.

Example:
    >>> from kerfwise.domain.services.catalog import MaterialCatalog
    >>> catalog = MaterialCatalog()
    >>> catalog.recommend_materials("structural")
    ['plywood-6mm', 'hardwood-maple-3mm', 'acrylic-6mm']
"""

from .catalog import MaterialCatalog, default_catalog
from .models import (
    CatalogSnapshot,
    MachineSettings,
    MaterialChoiceReport,
    MaterialRequirements,
    PowerSetting,
)
from .tables import (
    DEFAULT_MACHINE,
    DEFAULT_MATERIAL,
    DEFAULT_PRECISION,
    builtin_snapshot,
)

__all__ = [
    "CatalogSnapshot",
    "DEFAULT_MACHINE",
    "DEFAULT_MATERIAL",
    "DEFAULT_PRECISION",
    "MachineSettings",
    "MaterialCatalog",
    "MaterialChoiceReport",
    "MaterialRequirements",
    "PowerSetting",
    "builtin_snapshot",
    "default_catalog",
]

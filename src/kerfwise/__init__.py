"""kerfwise - manufacturability checks and material nesting for laser cutting.

The three entry points are the material catalog, the manufacturability
validator and the nesting optimizer:

    >>> from kerfwise import default_catalog, validate, optimize
    >>> constraints = default_catalog().resolve_constraints("plywood-3mm")
    >>> validate(features, constraints).score
    100
"""

from kerfwise.domain.errors import (
    CatalogError,
    InvalidInputError,
    KerfwiseError,
    UnknownMachineError,
    UnknownMaterialError,
    UnknownPrecisionError,
)
from kerfwise.domain.services.catalog import MaterialCatalog, default_catalog
from kerfwise.domain.services.nesting import CostModel, MaterialNestingOptimizer, optimize
from kerfwise.domain.services.validation import ManufacturabilityValidator, validate

__version__ = "0.1.0"

__all__ = [
    "CatalogError",
    "CostModel",
    "InvalidInputError",
    "KerfwiseError",
    "ManufacturabilityValidator",
    "MaterialCatalog",
    "MaterialNestingOptimizer",
    "UnknownMachineError",
    "UnknownMaterialError",
    "UnknownPrecisionError",
    "__version__",
    "default_catalog",
    "optimize",
    "validate",
]

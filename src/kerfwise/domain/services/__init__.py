"""Domain services: catalog, manufacturability validation and nesting."""

from .catalog import MaterialCatalog, default_catalog
from .nesting import CostModel, MaterialNestingOptimizer
from .validation import ManufacturabilityValidator

__all__ = [
    "CostModel",
    "ManufacturabilityValidator",
    "MaterialCatalog",
    "MaterialNestingOptimizer",
    "default_catalog",
]

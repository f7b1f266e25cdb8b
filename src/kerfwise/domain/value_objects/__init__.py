"""Value objects for the kerfwise domain.

This module provides the immutable data types shared by the catalog, the
validator and the nesting optimizer. All classes are re-exported from
sub-modules for convenience.
"""

from __future__ import annotations

# Design geometry
from ._geometry import (
    FEATURE_TYPES,
    BeamFeature,
    BoundingBox,
    CantileverFeature,
    CurveFeature,
    FeatureKind,
    GeometricFeature,
    HoleFeature,
    JointFeature,
    LineFeature,
    Path,
    Point2D,
    SlotFeature,
)

# Materials, machines and resolved constraints
from ._materials import (
    CompensationMode,
    DimensionalLimits,
    JointFit,
    KerfProperties,
    MachineCapabilities,
    MachineType,
    ManufacturingConstraints,
    MaterialCategory,
    MaterialProperties,
    PrecisionTier,
    StructuralLimits,
    TemperatureRange,
    ValueRange,
)

# Nesting
from ._nesting import (
    THICKNESS_TOLERANCE,
    CostAnalysis,
    MaterialSheet,
    NestingAlgorithm,
    NestingOptions,
    NestingResult,
    NestingSummary,
    OptimizationMetrics,
    PartShape,
    PlacedPart,
    SheetLayout,
    UnplacedPart,
)

# Validation results
from ._validation import (
    Severity,
    ValidationResult,
    Violation,
    ViolationCategory,
)

__all__ = [
    # Geometry
    "BeamFeature",
    "BoundingBox",
    "CantileverFeature",
    "CurveFeature",
    "FEATURE_TYPES",
    "FeatureKind",
    "GeometricFeature",
    "HoleFeature",
    "JointFeature",
    "LineFeature",
    "Path",
    "Point2D",
    "SlotFeature",
    # Materials
    "CompensationMode",
    "DimensionalLimits",
    "JointFit",
    "KerfProperties",
    "MachineCapabilities",
    "MachineType",
    "ManufacturingConstraints",
    "MaterialCategory",
    "MaterialProperties",
    "PrecisionTier",
    "StructuralLimits",
    "TemperatureRange",
    "ValueRange",
    # Nesting
    "CostAnalysis",
    "MaterialSheet",
    "NestingAlgorithm",
    "NestingOptions",
    "NestingResult",
    "NestingSummary",
    "OptimizationMetrics",
    "PartShape",
    "PlacedPart",
    "SheetLayout",
    "THICKNESS_TOLERANCE",
    "UnplacedPart",
    # Validation
    "Severity",
    "ValidationResult",
    "Violation",
    "ViolationCategory",
]

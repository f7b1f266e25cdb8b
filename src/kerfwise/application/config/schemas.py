"""Pydantic configuration schema models.

This module defines the JSON schemas for the three kerfwise input files:
catalog overrides (CatalogConfig), designs to validate (DesignConfig) and
nesting jobs (NestingJobConfig). It uses Pydantic v2 for validation.

Domain enums are reused so configuration values and domain values never
drift apart.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from kerfwise.domain.services.catalog import DEFAULT_MACHINE
from kerfwise.domain.value_objects import (
    CompensationMode,
    JointFit,
    MachineType,
    MaterialCategory,
    NestingAlgorithm,
    PrecisionTier,
)

# Supported schema versions for configuration files
# Version 1.0: Initial schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

Coordinate = tuple[float, float]


class _VersionedConfig(BaseModel):
    """Root model carrying a "major.minor" schema version."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v
        major = v.split(".")[0]
        if any(s.split(".")[0] == major for s in SUPPORTED_VERSIONS):
            return v
        raise ValueError(
            f"Unsupported schema version: {v}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )


# =============================================================================
# Catalog
# =============================================================================


class RangeConfig(BaseModel):
    """Inclusive min/max pair."""

    model_config = ConfigDict(extra="forbid")

    min: float
    max: float

    @model_validator(mode="after")
    def validate_order(self) -> RangeConfig:
        if self.min > self.max:
            raise ValueError("min must not exceed max")
        return self


class MaterialConfig(BaseModel):
    """One material record. Its key is the mapping key in CatalogConfig."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1)
    category: MaterialCategory
    thickness: float = Field(..., gt=0, description="Sheet thickness in mm")
    density: float = Field(..., ge=0, description="kg/m^3")
    tensile_strength: float = Field(..., ge=0, description="MPa")
    elastic_modulus: float = Field(..., ge=0, description="GPa")
    kerf_width: float = Field(..., ge=0)
    heat_affected_zone: float = Field(..., ge=0)
    char_depth: float = Field(default=0.0, ge=0)
    min_feature_size: float = Field(..., ge=0)
    min_hole_size: float = Field(..., ge=0)
    min_slot_width: float = Field(..., ge=0)
    max_aspect_ratio: float = Field(..., gt=0)
    thermal_expansion: float = Field(default=0.0, ge=0)
    operating_temp_range: RangeConfig = Field(
        default_factory=lambda: RangeConfig(min=-20.0, max=60.0)
    )
    press_fit_tolerance: float = Field(default=0.0)
    loose_fit_tolerance: float = Field(default=0.0)
    sliding_fit_tolerance: float = Field(default=0.0)


class KerfProfileConfig(BaseModel):
    """Kerf behaviour of one machine."""

    model_config = ConfigDict(extra="forbid")

    width: float = Field(..., ge=0)
    variation: float = Field(default=0.0, ge=0)
    compensation: CompensationMode = CompensationMode.CENTER
    corner_effect: float = Field(default=0.0, ge=0)


class StructuralLimitsConfig(BaseModel):
    """Structural limits for one "<category>-<thickness>mm" key."""

    model_config = ConfigDict(extra="forbid")

    max_span_without_support: float = Field(..., gt=0)
    max_cantilever_length: float = Field(..., gt=0)
    min_wall_thickness: float = Field(..., ge=0)
    min_beam_width: float = Field(..., ge=0)
    safety_factor: float = Field(..., gt=0)


class DimensionalLimitsConfig(BaseModel):
    """Dimensional limits for one precision tier."""

    model_config = ConfigDict(extra="forbid")

    min_gap: float = Field(..., ge=0)
    min_radius: float = Field(..., ge=0)
    max_length: float = Field(..., gt=0)
    positional_accuracy: float = Field(..., ge=0)


class MachineConfig(BaseModel):
    """Capabilities of one machine."""

    model_config = ConfigDict(extra="forbid")

    machine_type: MachineType = MachineType.LASER
    work_area_width: float = Field(..., gt=0)
    work_area_height: float = Field(..., gt=0)
    max_thickness: float = Field(..., gt=0)
    min_feature_resolution: float = Field(default=0.1, ge=0)
    power_range: RangeConfig = Field(default_factory=lambda: RangeConfig(min=0, max=100))
    speed_range: RangeConfig = Field(default_factory=lambda: RangeConfig(min=1, max=1000))
    acceleration_x: float = Field(default=0.0, ge=0)
    acceleration_y: float = Field(default=0.0, ge=0)


class PowerSettingConfig(BaseModel):
    """Power, speed and passes for one operation."""

    model_config = ConfigDict(extra="forbid")

    power: float = Field(..., ge=0, le=100)
    speed: float = Field(..., gt=0)
    passes: int = Field(default=1, ge=1)


class MachineSettingsConfig(BaseModel):
    """Recommended settings for one material."""

    model_config = ConfigDict(extra="forbid")

    cut: PowerSettingConfig
    score: PowerSettingConfig
    engrave: PowerSettingConfig


class CatalogConfig(_VersionedConfig):
    """Catalog override file.

    In "merge" mode the records are added to (or replace) the built-in
    tables; in "replace" mode they are the whole catalog.

    Example:
        >>> config = CatalogConfig(
        ...     schema_version="1.0",
        ...     kerf_profiles={"shop-laser": KerfProfileConfig(width=0.12)},
        ... )
    """

    mode: Literal["merge", "replace"] = "merge"
    materials: dict[str, MaterialConfig] = Field(default_factory=dict)
    kerf_profiles: dict[str, KerfProfileConfig] = Field(default_factory=dict)
    structural_limits: dict[str, StructuralLimitsConfig] = Field(default_factory=dict)
    dimensional_limits: dict[PrecisionTier, DimensionalLimitsConfig] = Field(
        default_factory=dict
    )
    machines: dict[str, MachineConfig] = Field(default_factory=dict)
    machine_settings: dict[str, MachineSettingsConfig] = Field(default_factory=dict)
    intents: dict[str, list[str]] = Field(default_factory=dict)
    default_material: str | None = None

    @model_validator(mode="after")
    def validate_replace_is_complete(self) -> CatalogConfig:
        """A replacement catalog must be usable on its own."""
        if self.mode != "replace":
            return self
        missing = [
            name
            for name in ("materials", "kerf_profiles", "dimensional_limits", "machines")
            if not getattr(self, name)
        ]
        if missing:
            raise ValueError(f"replace mode requires non-empty: {', '.join(missing)}")
        if self.default_material is None:
            raise ValueError("replace mode requires default_material")
        return self


# =============================================================================
# Designs
# =============================================================================


class LineFeatureConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["line"]
    start: Coordinate
    end: Coordinate


class CurveFeatureConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["curve"]
    center: Coordinate
    radius: float = Field(..., gt=0)
    sweep_degrees: float = Field(default=90.0, gt=0, le=360)


class HoleFeatureConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["hole"]
    center: Coordinate
    diameter: float = Field(..., gt=0)


class _RectFeatureConfig(BaseModel):
    """Feature placed by its top-left corner, length along X unless vertical."""

    model_config = ConfigDict(extra="forbid")

    x: float
    y: float
    length: float = Field(..., ge=0)
    width: float = Field(..., ge=0)
    horizontal: bool = True


class SlotFeatureConfig(_RectFeatureConfig):
    type: Literal["slot"]


class BeamFeatureConfig(_RectFeatureConfig):
    type: Literal["beam"]


class CantileverFeatureConfig(_RectFeatureConfig):
    type: Literal["cantilever"]


class JointFeatureConfig(_RectFeatureConfig):
    type: Literal["joint"]
    fit: JointFit = JointFit.LOOSE


FeatureConfig = Annotated[
    Union[
        LineFeatureConfig,
        CurveFeatureConfig,
        HoleFeatureConfig,
        SlotFeatureConfig,
        BeamFeatureConfig,
        CantileverFeatureConfig,
        JointFeatureConfig,
    ],
    Field(discriminator="type"),
]


class PathConfig(BaseModel):
    """A cut path given as a list of [x, y] points."""

    model_config = ConfigDict(extra="forbid")

    points: list[Coordinate]
    closed: bool = True

    @model_validator(mode="after")
    def validate_point_count(self) -> PathConfig:
        minimum = 3 if self.closed else 2
        if len(self.points) < minimum:
            raise ValueError(f"{'closed' if self.closed else 'open'} path needs {minimum} points")
        return self


class DesignConfig(_VersionedConfig):
    """A design to check: material, machine, features and cut paths."""

    material: str = Field(..., min_length=1)
    machine: str = Field(default=DEFAULT_MACHINE, min_length=1)
    precision: PrecisionTier = PrecisionTier.STANDARD
    features: list[FeatureConfig] = Field(default_factory=list)
    paths: list[PathConfig] = Field(default_factory=list)
    compensation: CompensationMode | None = None


# =============================================================================
# Nesting jobs
# =============================================================================


class PartConfig(BaseModel):
    """A part to nest, as its rectangular footprint."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)
    rotation: float = 0.0
    priority: int = Field(default=5, ge=1, le=10)
    material_type: str = ""
    thickness: float = Field(default=0.0, ge=0)
    geometry: str = ""


class SheetConfig(BaseModel):
    """A stock sheet entry."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = ""
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    thickness: float = Field(default=0.0, ge=0)
    material_type: str = ""
    cost_per_sheet: float = Field(default=0.0, ge=0)
    usable_area: float = Field(default=100.0, gt=0, le=100)
    margin: float = Field(default=0.0, ge=0)
    quantity: int = Field(default=1, ge=1)


class NestingOptionsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    algorithm: NestingAlgorithm = NestingAlgorithm.EFFICIENCY
    allow_rotation: bool = True
    minimum_spacing: float = Field(default=2.0, ge=0)
    prioritize_order: bool = False


class CostConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    minutes_per_sheet: float = Field(default=45.0, ge=0)
    hourly_rate: float = Field(default=25.0, ge=0)
    cut_speed: float = Field(default=1200.0, gt=0, description="mm/min")
    rapid_speed: float = Field(default=6000.0, gt=0, description="mm/min")


class NestingJobConfig(_VersionedConfig):
    """Parts and stock for one nesting run."""

    parts: list[PartConfig] = Field(..., min_length=1)
    sheets: list[SheetConfig] = Field(..., min_length=1)
    options: NestingOptionsConfig = Field(default_factory=NestingOptionsConfig)
    cost: CostConfig = Field(default_factory=CostConfig)

    @model_validator(mode="after")
    def validate_unique_part_ids(self) -> NestingJobConfig:
        seen: set[str] = set()
        for part in self.parts:
            if part.id in seen:
                raise ValueError(f"Duplicate part id: {part.id}")
            seen.add(part.id)
        return self

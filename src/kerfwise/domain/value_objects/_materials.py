"""Material, kerf, structural, dimensional and machine value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kerfwise.domain.errors import InvalidInputError


class MaterialCategory(str, Enum):
    """Broad family a cuttable material belongs to."""

    WOOD = "wood"
    ACRYLIC = "acrylic"
    METAL = "metal"
    PAPER = "paper"
    FABRIC = "fabric"
    COMPOSITE = "composite"


class CompensationMode(str, Enum):
    """How a cut path is offset to account for kerf.

    Attributes:
        NONE: Cut exactly on the drawn line.
        INSIDE: Shrink the path by half the kerf (interior cut-outs).
        OUTSIDE: Grow the path by half the kerf (parts that must keep size).
        CENTER: Cut centred on the line, same offset as NONE.
    """

    NONE = "none"
    INSIDE = "inside"
    OUTSIDE = "outside"
    CENTER = "center"


class PrecisionTier(str, Enum):
    """Precision tier selecting a DimensionalLimits record."""

    HIGH_PRECISION = "high-precision"
    STANDARD = "standard"
    QUICK = "quick"


class MachineType(str, Enum):
    """Cutting technology of a machine family."""

    LASER = "laser"
    CNC = "cnc"
    PLASMA = "plasma"
    WATERJET = "waterjet"


class JointFit(str, Enum):
    """Assembly fit selecting one of the material's stored tolerances."""

    PRESS = "press"
    LOOSE = "loose"
    SLIDING = "sliding"


def _require_non_negative(owner: str, **fields: float) -> None:
    for name, value in fields.items():
        if value < 0:
            raise InvalidInputError(f"{owner}.{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class TemperatureRange:
    """Safe operating temperature range in degrees Celsius."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise InvalidInputError("Temperature range min must not exceed max")

    def contains(self, temperature: float) -> bool:
        """Check whether a temperature lies inside the range."""
        return self.min <= temperature <= self.max


@dataclass(frozen=True)
class ValueRange:
    """Inclusive numeric range (power %, speed units)."""

    min: float
    max: float

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise InvalidInputError("Range min must not exceed max")


@dataclass(frozen=True)
class MaterialProperties:
    """Reference data for one material at one thickness.

    Attributes:
        key: Catalog key (e.g. "plywood-3mm").
        name: Display name.
        category: Material family.
        thickness: Sheet thickness in mm.
        density: Density in kg/m^3.
        tensile_strength: Tensile strength in MPa.
        elastic_modulus: Young's modulus in GPa.
        kerf_width: Typical laser kerf in this material (mm).
        heat_affected_zone: Discoloured/weakened band beside a cut (mm).
        char_depth: Carbonisation depth (mm).
        min_feature_size: Smallest reliably cut feature (mm).
        min_hole_size: Smallest clean hole diameter (mm).
        min_slot_width: Narrowest slot that will not close up (mm).
        max_aspect_ratio: Length:width limit for thin features.
        thermal_expansion: Linear expansion coefficient per degree C.
        operating_temp_range: Safe operating temperatures.
        press_fit_tolerance: Press fit allowance (mm, usually negative).
        loose_fit_tolerance: Loose fit allowance (mm).
        sliding_fit_tolerance: Sliding fit allowance (mm).
    """

    key: str
    name: str
    category: MaterialCategory
    thickness: float
    density: float
    tensile_strength: float
    elastic_modulus: float
    kerf_width: float
    heat_affected_zone: float
    char_depth: float
    min_feature_size: float
    min_hole_size: float
    min_slot_width: float
    max_aspect_ratio: float
    thermal_expansion: float
    operating_temp_range: TemperatureRange
    press_fit_tolerance: float
    loose_fit_tolerance: float
    sliding_fit_tolerance: float

    def __post_init__(self) -> None:
        if not self.key:
            raise InvalidInputError("Material key must not be empty")
        if self.thickness <= 0:
            raise InvalidInputError("Material thickness must be positive")
        _require_non_negative(
            f"MaterialProperties[{self.key}]",
            density=self.density,
            tensile_strength=self.tensile_strength,
            elastic_modulus=self.elastic_modulus,
            kerf_width=self.kerf_width,
            heat_affected_zone=self.heat_affected_zone,
            char_depth=self.char_depth,
            min_feature_size=self.min_feature_size,
            min_hole_size=self.min_hole_size,
            min_slot_width=self.min_slot_width,
            max_aspect_ratio=self.max_aspect_ratio,
        )

    def fit_tolerance(self, fit: JointFit) -> float:
        """Stored base tolerance for an assembly fit."""
        if fit == JointFit.PRESS:
            return self.press_fit_tolerance
        if fit == JointFit.LOOSE:
            return self.loose_fit_tolerance
        return self.sliding_fit_tolerance

    @property
    def structural_key(self) -> str:
        """Key into the structural limits table ("wood-3mm")."""
        return f"{self.category.value}-{self.thickness:g}mm"


@dataclass(frozen=True)
class KerfProperties:
    """Kerf profile of a machine at its standard power setting."""

    width: float
    variation: float
    compensation: CompensationMode = CompensationMode.CENTER
    corner_effect: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative(
            "KerfProperties",
            width=self.width,
            variation=self.variation,
            corner_effect=self.corner_effect,
        )

    @property
    def worst_case_width(self) -> float:
        """Widest kerf to expect including variation."""
        return self.width + self.variation


@dataclass(frozen=True)
class StructuralLimits:
    """Structural limits for a material family at one thickness."""

    max_span_without_support: float
    max_cantilever_length: float
    min_wall_thickness: float
    min_beam_width: float
    safety_factor: float

    def __post_init__(self) -> None:
        _require_non_negative(
            "StructuralLimits",
            max_span_without_support=self.max_span_without_support,
            max_cantilever_length=self.max_cantilever_length,
            min_wall_thickness=self.min_wall_thickness,
            min_beam_width=self.min_beam_width,
        )
        if self.safety_factor <= 0:
            raise InvalidInputError("Safety factor must be positive")


@dataclass(frozen=True)
class DimensionalLimits:
    """Dimensional limits of a precision tier."""

    min_gap: float
    min_radius: float
    max_length: float
    positional_accuracy: float

    def __post_init__(self) -> None:
        _require_non_negative(
            "DimensionalLimits",
            min_gap=self.min_gap,
            min_radius=self.min_radius,
            max_length=self.max_length,
            positional_accuracy=self.positional_accuracy,
        )


@dataclass(frozen=True)
class MachineCapabilities:
    """Capabilities of a machine family."""

    machine_type: MachineType
    work_area_width: float
    work_area_height: float
    max_thickness: float
    min_feature_resolution: float
    power_range: ValueRange
    speed_range: ValueRange
    acceleration_x: float
    acceleration_y: float

    def __post_init__(self) -> None:
        if self.work_area_width <= 0 or self.work_area_height <= 0:
            raise InvalidInputError("Machine work area must be positive")
        _require_non_negative(
            "MachineCapabilities",
            max_thickness=self.max_thickness,
            min_feature_resolution=self.min_feature_resolution,
            acceleration_x=self.acceleration_x,
            acceleration_y=self.acceleration_y,
        )

    def fits_work_area(self, width: float, height: float) -> bool:
        """Check whether a width x height extent fits the bed in either orientation."""
        direct = width <= self.work_area_width and height <= self.work_area_height
        turned = height <= self.work_area_width and width <= self.work_area_height
        return direct or turned


@dataclass(frozen=True)
class ManufacturingConstraints:
    """Resolved constraint bundle for one (material, machine, precision) triple.

    Built on demand by MaterialCatalog.resolve_constraints and never mutated.
    """

    material: MaterialProperties
    kerf: KerfProperties
    structural: StructuralLimits
    dimensional: DimensionalLimits
    machine: MachineCapabilities
    machine_key: str = ""
    precision: PrecisionTier = PrecisionTier.STANDARD

    @property
    def material_key(self) -> str:
        """Catalog key of the resolved material."""
        return self.material.key

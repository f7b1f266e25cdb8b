"""Nesting value objects: parts, stock sheets, layouts and results.

All dataclasses are frozen so results can be shared across threads and
compared for equality in determinism checks.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from kerfwise.domain.errors import InvalidInputError

# Thickness difference below which a part and a sheet are the same stock
THICKNESS_TOLERANCE = 0.01


class NestingAlgorithm(str, Enum):
    """Packing strategy selected through NestingOptions.

    Attributes:
        SPEED: Baseline shelf packer, input order, cursor walk.
        EFFICIENCY: Guillotine shelf packer, largest first, best-fit shelf.
        MINIMAL_WASTE: Guillotine packer over several orderings, best kept.
    """

    SPEED = "speed"
    EFFICIENCY = "efficiency"
    MINIMAL_WASTE = "minimal_waste"


@dataclass(frozen=True)
class NestingOptions:
    """Options for a nesting run.

    Attributes:
        algorithm: Packing strategy.
        allow_rotation: Whether parts may be turned 90 degrees to fit.
        minimum_spacing: Gap left between neighbouring parts and rows (mm).
        prioritize_order: Place higher-priority parts first.
    """

    algorithm: NestingAlgorithm = NestingAlgorithm.EFFICIENCY
    allow_rotation: bool = True
    minimum_spacing: float = 2.0
    prioritize_order: bool = False

    def __post_init__(self) -> None:
        if self.minimum_spacing < 0:
            raise InvalidInputError("Minimum spacing must be non-negative")


@dataclass(frozen=True)
class PartShape:
    """A nestable part requested by the caller.

    Attributes:
        id: Unique part identifier.
        name: Display name.
        width: Width in mm before rotation.
        height: Height in mm before rotation.
        quantity: Number of copies required.
        rotation: Preferred rotation in degrees.
        priority: 1 (lowest) to 10 (highest).
        material_type: Required material type; empty matches any sheet.
        thickness: Required thickness in mm; zero matches any sheet.
        geometry: Opaque source geometry (e.g. SVG path data).
    """

    id: str
    name: str
    width: float
    height: float
    quantity: int = 1
    rotation: float = 0.0
    priority: int = 5
    material_type: str = ""
    thickness: float = 0.0
    geometry: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidInputError("Part id must not be empty")
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Part '{self.id}' dimensions must be positive, "
                f"got {self.width}x{self.height}"
            )
        if self.quantity <= 0:
            raise InvalidInputError(
                f"Part '{self.id}' quantity must be positive, got {self.quantity}"
            )
        if not 1 <= self.priority <= 10:
            raise InvalidInputError(
                f"Part '{self.id}' priority must be between 1 and 10, got {self.priority}"
            )
        if self.thickness < 0:
            raise InvalidInputError(f"Part '{self.id}' thickness must be non-negative")

    @property
    def area(self) -> float:
        """Area of one copy in mm^2."""
        return self.width * self.height

    def footprint(self, rotation: float) -> tuple[float, float]:
        """Axis-aligned width and height of the part turned by rotation degrees."""
        angle = math.radians(rotation % 360)
        cos_a = abs(math.cos(angle))
        sin_a = abs(math.sin(angle))
        # Snap right angles so 90 degree turns swap sides exactly
        if math.isclose(cos_a, 0.0, abs_tol=1e-12):
            return self.height, self.width
        if math.isclose(sin_a, 0.0, abs_tol=1e-12):
            return self.width, self.height
        return (
            self.width * cos_a + self.height * sin_a,
            self.width * sin_a + self.height * cos_a,
        )

    def is_compatible_with(self, sheet: MaterialSheet) -> bool:
        """Check whether this part may be cut from a sheet's stock."""
        if self.material_type and self.material_type.lower() != sheet.material_type.lower():
            return False
        if self.thickness and abs(self.thickness - sheet.thickness) > THICKNESS_TOLERANCE:
            return False
        return True


@dataclass(frozen=True)
class MaterialSheet:
    """A stock sheet the optimizer may cut parts from.

    Attributes:
        id: Sheet identifier.
        name: Display name.
        width: Sheet width in mm.
        height: Sheet height in mm.
        thickness: Sheet thickness in mm.
        material_type: Material type (e.g. "plywood").
        cost_per_sheet: Purchase cost of one sheet.
        usable_area: Percentage of the sheet free of defects (0-100].
        margin: Unusable band along every edge in mm.
        quantity: Number of identical physical sheets in stock.
    """

    id: str
    name: str
    width: float
    height: float
    thickness: float = 0.0
    material_type: str = ""
    cost_per_sheet: float = 0.0
    usable_area: float = 100.0
    margin: float = 0.0
    quantity: int = 1

    def __post_init__(self) -> None:
        if not self.id:
            raise InvalidInputError("Sheet id must not be empty")
        if self.width <= 0 or self.height <= 0:
            raise InvalidInputError(
                f"Sheet '{self.id}' dimensions must be positive, "
                f"got {self.width}x{self.height}"
            )
        if self.thickness < 0:
            raise InvalidInputError(f"Sheet '{self.id}' thickness must be non-negative")
        if self.cost_per_sheet < 0:
            raise InvalidInputError(f"Sheet '{self.id}' cost must be non-negative")
        if not 0 < self.usable_area <= 100:
            raise InvalidInputError(
                f"Sheet '{self.id}' usable area must be in (0, 100], got {self.usable_area}"
            )
        if self.margin < 0:
            raise InvalidInputError(f"Sheet '{self.id}' margin must be non-negative")
        if self.usable_width <= 0 or self.usable_height <= 0:
            raise InvalidInputError(
                f"Sheet '{self.id}' margin {self.margin} leaves no usable area"
            )
        if self.quantity <= 0:
            raise InvalidInputError(
                f"Sheet '{self.id}' quantity must be positive, got {self.quantity}"
            )

    @property
    def area(self) -> float:
        """Full sheet area in mm^2."""
        return self.width * self.height

    @property
    def usable_width(self) -> float:
        """Width available for placement after margins."""
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        """Height available for placement after margins."""
        return self.height - 2 * self.margin

    @property
    def capacity(self) -> float:
        """Largest total part area the sheet may carry (usable-area share)."""
        return self.area * self.usable_area / 100


@dataclass(frozen=True)
class PlacedPart:
    """One part instance positioned on a sheet.

    Coordinates are measured from the sheet's top-left corner and include the
    margin. Width and height are the placed footprint after rotation, which
    is larger than the part itself at angles other than multiples of 90
    degrees. `part_area` is the area of the part; when unset it is the
    footprint area.
    """

    part_id: str
    instance_id: str
    x: float
    y: float
    rotation: float
    width: float
    height: float
    part_area: float | None = None

    @property
    def footprint_area(self) -> float:
        return self.width * self.height

    @property
    def area(self) -> float:
        """Material area of the part itself."""
        return self.footprint_area if self.part_area is None else self.part_area

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def bottom_edge(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class SheetLayout:
    """Parts placed on one physical sheet.

    Attributes:
        sheet: The stock sheet used.
        sheet_index: Zero-based position of this sheet in the result.
        placed_parts: Part instances in placement order.
        cutting_path: Human-readable cutting order.
        estimated_cut_minutes: Estimated machine time for this sheet.
    """

    sheet: MaterialSheet
    sheet_index: int
    placed_parts: tuple[PlacedPart, ...]
    cutting_path: str = ""
    estimated_cut_minutes: float = 0.0

    def __post_init__(self) -> None:
        if self.sheet_index < 0:
            raise InvalidInputError("Sheet index must be non-negative")

    @property
    def used_area(self) -> float:
        """Total area of placed parts."""
        return sum(p.area for p in self.placed_parts)

    @property
    def waste_area(self) -> float:
        """Sheet area not covered by parts."""
        return self.sheet.area - self.used_area

    @property
    def utilization(self) -> float:
        """Placed part area as a percentage of the full sheet area."""
        return self.used_area / self.sheet.area * 100

    @property
    def part_count(self) -> int:
        return len(self.placed_parts)

    @property
    def estimated_cut_time(self) -> str:
        """Cut time as display text, e.g. "12.5 min"."""
        return f"{self.estimated_cut_minutes:.1f} min"


@dataclass(frozen=True)
class UnplacedPart:
    """Copies of a part the optimizer could not place."""

    part_id: str
    quantity: int
    reason: str


@dataclass(frozen=True)
class NestingSummary:
    """Totals of a nesting run."""

    total_parts: int
    parts_placed: int
    parts_not_placed: tuple[UnplacedPart, ...]
    sheets_used: int
    total_material_cost: float
    average_utilization: float
    total_waste_area: float

    @property
    def not_placed_count(self) -> int:
        """Number of part copies left unplaced."""
        return sum(p.quantity for p in self.parts_not_placed)

    @property
    def all_placed(self) -> bool:
        return not self.parts_not_placed


@dataclass(frozen=True)
class OptimizationMetrics:
    """How the layout was produced.

    Attributes:
        algorithm: Strategy that produced the kept layout.
        iterations: Number of packing passes run.
        efficiency: Area-weighted utilisation across used sheets (0-100).
        improvements: Notes on what the search improved over the first pass.
    """

    algorithm: NestingAlgorithm
    iterations: int
    efficiency: float
    improvements: tuple[str, ...] = ()


@dataclass(frozen=True)
class CostAnalysis:
    """Project cost breakdown.

    Attributes:
        material_costs: Sheets used times average cost per used sheet.
        waste_costs: Share of material cost lost to waste.
        cutting_time: Total machine minutes.
        labor_costs: Machine time priced at the hourly rate.
        total_project_cost: Material plus waste plus labor.
        cost_per_part: Material cost per requested part copy.
        savings_opportunities: Ideas for reducing cost.
    """

    material_costs: float
    waste_costs: float
    cutting_time: float
    labor_costs: float
    total_project_cost: float
    cost_per_part: float
    savings_opportunities: tuple[str, ...] = ()


@dataclass(frozen=True)
class NestingResult:
    """Aggregate result of a nesting run."""

    layout_id: str
    sheets: tuple[SheetLayout, ...]
    summary: NestingSummary
    metrics: OptimizationMetrics
    cost_analysis: CostAnalysis
    recommendations: tuple[str, ...] = ()
    visualization: str = ""

    @property
    def placed_parts(self) -> tuple[PlacedPart, ...]:
        """Every placed part instance across all sheets."""
        return tuple(p for sheet in self.sheets for p in sheet.placed_parts)

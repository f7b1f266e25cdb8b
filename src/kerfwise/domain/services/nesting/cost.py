"""Cutting time and project cost estimation.

Cost formulas:
- material = sheets used x average cost per used sheet
- waste = material x (1 - measured utilisation)
- cutting time = sheets used x minutes per sheet
- labor = cutting time / 60 x hourly rate
- total = material + waste + labor
- cost per part = material / total parts requested
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.value_objects import CostAnalysis, PlacedPart, SheetLayout

# Row grouping tolerance for serpentine ordering (mm)
_ROW_TOLERANCE = 0.5

# Utilisation thresholds driving savings suggestions (percent)
LOW_UTILIZATION = 70.0
POOR_FIT_UTILIZATION = 60.0
PARTIAL_SHEET_UTILIZATION = 50.0


@dataclass(frozen=True)
class CostModel:
    """Rates used to cost a nesting result.

    Attributes:
        minutes_per_sheet: Machine minutes charged per sheet (setup and cutting).
        hourly_rate: Labor rate per hour.
        cut_speed: Cutting feed rate in mm/min, for per-sheet time estimates.
        rapid_speed: Travel rate between parts in mm/min.
    """

    minutes_per_sheet: float = 45.0
    hourly_rate: float = 25.0
    cut_speed: float = 1200.0
    rapid_speed: float = 6000.0

    def __post_init__(self) -> None:
        if self.minutes_per_sheet < 0:
            raise InvalidInputError("Minutes per sheet must be non-negative")
        if self.hourly_rate < 0:
            raise InvalidInputError("Hourly rate must be non-negative")
        if self.cut_speed <= 0 or self.rapid_speed <= 0:
            raise InvalidInputError("Cut and rapid speeds must be positive")


def serpentine_order(parts: Sequence[PlacedPart]) -> list[list[PlacedPart]]:
    """Group parts into rows top to bottom, alternating direction per row."""
    rows: list[list[PlacedPart]] = []
    for part in sorted(parts, key=lambda p: (p.y, p.x, p.instance_id)):
        if rows and abs(rows[-1][0].y - part.y) <= _ROW_TOLERANCE:
            rows[-1].append(part)
        else:
            rows.append([part])
    for index, row in enumerate(rows):
        row.sort(key=lambda p: (p.x, p.instance_id), reverse=index % 2 == 1)
    return rows


def cutting_path(parts: Sequence[PlacedPart]) -> str:
    """Cutting order as text, rows separated by "|"."""
    rows = serpentine_order(parts)
    if not rows:
        return ""
    return " | ".join(" > ".join(p.instance_id for p in row) for row in rows)


def estimate_cut_minutes(parts: Sequence[PlacedPart], cost_model: CostModel) -> float:
    """Perimeter at cutting speed plus head travel at rapid speed.

    Travel starts at the sheet origin and visits each part's corner in
    serpentine order.
    """
    if not parts:
        return 0.0
    perimeter = sum(2 * (p.width + p.height) for p in parts)
    travel = 0.0
    x, y = 0.0, 0.0
    for row in serpentine_order(parts):
        for part in row:
            travel += math.hypot(part.x - x, part.y - y)
            x, y = part.x, part.y
    return perimeter / cost_model.cut_speed + travel / cost_model.rapid_speed


def area_weighted_utilization(layouts: Sequence[SheetLayout]) -> float:
    """Placed area over total area of the used sheets, as a percentage."""
    total_area = sum(layout.sheet.area for layout in layouts)
    if total_area == 0:
        return 0.0
    return sum(layout.used_area for layout in layouts) / total_area * 100


def savings_opportunities(
    layouts: Sequence[SheetLayout],
    utilization: float,
    oversize_parts: bool,
) -> tuple[str, ...]:
    """Savings ideas drawn from the measured layout."""
    ideas: list[str] = []
    if layouts and utilization < LOW_UTILIZATION:
        ideas.append("Optimize nesting to reduce material waste by 15-20%")
    if len(layouts) > 1 and layouts[-1].utilization < PARTIAL_SHEET_UTILIZATION:
        ideas.append("Batch multiple projects to improve utilization")
    if oversize_parts or (layouts and utilization < POOR_FIT_UTILIZATION):
        ideas.append("Consider alternative sheet sizes for better fit")
    return tuple(ideas)


def build_cost_analysis(
    layouts: Sequence[SheetLayout],
    total_parts_requested: int,
    cost_model: CostModel,
    oversize_parts: bool = False,
) -> CostAnalysis:
    """Cost a set of used sheet layouts.

    Args:
        layouts: Layouts of sheets that carry at least one part.
        total_parts_requested: Total copies requested across all parts.
        cost_model: Rates to apply.
        oversize_parts: Whether some parts fit no compatible sheet.

    Returns:
        CostAnalysis with the cost breakdown and savings ideas.
    """
    sheets_used = len(layouts)
    average_cost = (
        sum(layout.sheet.cost_per_sheet for layout in layouts) / sheets_used
        if sheets_used
        else 0.0
    )
    material_costs = sheets_used * average_cost
    utilization = area_weighted_utilization(layouts)
    waste_costs = material_costs * (1 - utilization / 100) if sheets_used else 0.0
    cutting_time = sheets_used * cost_model.minutes_per_sheet
    labor_costs = cutting_time / 60 * cost_model.hourly_rate
    cost_per_part = material_costs / total_parts_requested if total_parts_requested else 0.0

    return CostAnalysis(
        material_costs=round(material_costs, 2),
        waste_costs=round(waste_costs, 2),
        cutting_time=round(cutting_time, 2),
        labor_costs=round(labor_costs, 2),
        total_project_cost=round(material_costs + waste_costs + labor_costs, 2),
        cost_per_part=round(cost_per_part, 2),
        savings_opportunities=savings_opportunities(layouts, utilization, oversize_parts),
    )

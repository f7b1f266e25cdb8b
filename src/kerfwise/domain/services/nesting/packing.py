"""Shared packing internals.

Placement requests, the physical sheet stock pool and the outcome record
shared by the shelf and guillotine packers.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from kerfwise.domain.value_objects import (
    MaterialSheet,
    NestingOptions,
    PartShape,
    PlacedPart,
    UnplacedPart,
)

REASON_NO_COMPATIBLE_SHEET = "No sheet matches the part's material and thickness"
REASON_TOO_LARGE = "Part does not fit on any compatible sheet"
REASON_STOCK_EXHAUSTED = "Compatible sheet stock exhausted"


@dataclass(frozen=True)
class PlacementRequest:
    """One copy of a part waiting to be placed.

    Attributes:
        part: The part being placed.
        instance_id: "<part id>_<copy number>", numbered from 1.
        sequence: Position in the expanded request list.
    """

    part: PartShape
    instance_id: str
    sequence: int


@dataclass(frozen=True)
class Orientation:
    """A candidate rotation and the footprint it produces."""

    rotation: float
    width: float
    height: float


def expand_requests(
    parts: Sequence[PartShape], prioritize_order: bool = False
) -> list[PlacementRequest]:
    """Expand parts by quantity into individual placement requests.

    Each part with quantity N becomes N requests. With prioritize_order the
    requests are stably sorted by descending priority; otherwise input order
    is kept.
    """
    ordered = (
        sorted(parts, key=lambda p: -p.priority) if prioritize_order else list(parts)
    )
    requests: list[PlacementRequest] = []
    for part in ordered:
        for copy in range(part.quantity):
            requests.append(
                PlacementRequest(
                    part=part,
                    instance_id=f"{part.id}_{copy + 1}",
                    sequence=len(requests),
                )
            )
    return requests


def orientations(part: PartShape, allow_rotation: bool) -> list[Orientation]:
    """Preferred orientation first, then a quarter turn when rotation is allowed."""
    preferred = part.rotation % 360
    width, height = part.footprint(preferred)
    result = [Orientation(preferred, width, height)]
    if allow_rotation:
        turned = (preferred + 90) % 360
        t_width, t_height = part.footprint(turned)
        if (t_width, t_height) != (width, height):
            result.append(Orientation(turned, t_width, t_height))
    return result


def fits_empty_sheet(sheet: MaterialSheet, width: float, height: float, area: float) -> bool:
    """Check whether a footprint fits an empty sheet within margins and capacity.

    Capacity is measured against the part's own area, not its footprint.
    """
    return width <= sheet.usable_width and height <= sheet.usable_height and area <= sheet.capacity


class StockPool:
    """Physical sheets available to a packing run.

    Each MaterialSheet contributes `quantity` physical sheets; stock entries
    are offered in input order and each physical sheet is taken at most once.
    """

    def __init__(self, sheets: Sequence[MaterialSheet]) -> None:
        self.sheets = list(sheets)
        self._remaining = [sheet.quantity for sheet in self.sheets]

    def compatible(self, part: PartShape) -> list[int]:
        """Indices of stock entries the part may be cut from, in input order."""
        return [i for i, sheet in enumerate(self.sheets) if part.is_compatible_with(sheet)]

    def has_stock(self, index: int) -> bool:
        return self._remaining[index] > 0

    def take(self, index: int) -> MaterialSheet:
        """Remove one physical sheet of a stock entry from the pool."""
        if self._remaining[index] <= 0:
            raise LookupError(f"No stock left for sheet '{self.sheets[index].id}'")
        self._remaining[index] -= 1
        return self.sheets[index]

    def open_orientation(
        self, index: int, request: PlacementRequest, options: NestingOptions
    ) -> Orientation | None:
        """First orientation of a request that fits an empty sheet of an entry."""
        sheet = self.sheets[index]
        for orientation in orientations(request.part, options.allow_rotation):
            if fits_empty_sheet(sheet, orientation.width, orientation.height, request.part.area):
                return orientation
        return None

    def failure_reason(self, request: PlacementRequest, options: NestingOptions) -> str:
        """Why a request that found no room could not be placed."""
        candidates = self.compatible(request.part)
        if not candidates:
            return REASON_NO_COMPATIBLE_SHEET
        if all(self.open_orientation(i, request, options) is None for i in candidates):
            return REASON_TOO_LARGE
        return REASON_STOCK_EXHAUSTED


@dataclass
class PackedSheet:
    """A physical sheet opened during a run and the parts placed on it."""

    sheet: MaterialSheet
    stock_index: int
    placed: list[PlacedPart] = field(default_factory=list)

    @property
    def used_area(self) -> float:
        return sum(p.area for p in self.placed)

    def has_capacity_for(self, area: float) -> bool:
        return self.used_area + area <= self.sheet.capacity


@dataclass
class PackOutcome:
    """Raw result of one packing pass, before costing and reporting."""

    sheets: list[PackedSheet]
    unplaced: list[tuple[PlacementRequest, str]]

    @property
    def placed_count(self) -> int:
        return sum(len(s.placed) for s in self.sheets)

    @property
    def used_sheets(self) -> list[PackedSheet]:
        """Opened sheets that carry at least one part."""
        return [s for s in self.sheets if s.placed]

    def unplaced_parts(self, parts: Sequence[PartShape]) -> tuple[UnplacedPart, ...]:
        """Unplaced copies grouped per part, in part input order.

        The reason given is the first one recorded for that part.
        """
        counts: dict[str, int] = {}
        reasons: dict[str, str] = {}
        for request, reason in self.unplaced:
            part_id = request.part.id
            counts[part_id] = counts.get(part_id, 0) + 1
            reasons.setdefault(part_id, reason)
        seen: dict[str, None] = dict.fromkeys(p.id for p in parts)
        return tuple(
            UnplacedPart(part_id=part_id, quantity=counts[part_id], reason=reasons[part_id])
            for part_id in seen
            if part_id in counts
        )


def place(
    request: PlacementRequest, orientation: Orientation, x: float, y: float
) -> PlacedPart:
    """PlacedPart for a request at a position."""
    return PlacedPart(
        part_id=request.part.id,
        instance_id=request.instance_id,
        x=x,
        y=y,
        rotation=orientation.rotation,
        width=orientation.width,
        height=orientation.height,
        part_area=request.part.area,
    )

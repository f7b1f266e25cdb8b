"""Guillotine shelf packer.

The shelf algorithm creates horizontal bands (shelves) across each sheet.
Each shelf's height is set by the first part placed on it and parts are
placed left-to-right within a shelf, so every cut runs edge to edge. Unlike
the baseline cursor packer, every open sheet stays available: a part goes to
the best-fitting shelf on any sheet before a new shelf or sheet is opened.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from kerfwise.domain.value_objects import MaterialSheet, NestingOptions, PartShape, PlacedPart

from .packing import (
    Orientation,
    PackedSheet,
    PackOutcome,
    PlacementRequest,
    StockPool,
    expand_requests,
    orientations,
    place,
)

logger = logging.getLogger(__name__)

# Orderings tried by the minimal-waste search; at most MAX_ORDERINGS of them run
RequestOrdering = Callable[[PlacementRequest], tuple]

ORDERINGS: dict[str, RequestOrdering] = {
    "area": lambda r: (-r.part.area, -max(r.part.width, r.part.height)),
    "longest-side": lambda r: (-max(r.part.width, r.part.height), -r.part.area),
    "height": lambda r: (-r.part.height, -r.part.width),
    "width": lambda r: (-r.part.width, -r.part.height),
    "perimeter": lambda r: (-(r.part.width + r.part.height), -r.part.area),
    "input": lambda r: (),
}
MAX_ORDERINGS = 6


@dataclass
class _Shelf:
    """Horizontal band on a sheet where parts are placed left-to-right.

    Attributes:
        y: Top edge of the shelf.
        height: Height of the shelf (set by first part placed).
        next_x: Left edge for the next part.
        remaining_width: Width remaining for more parts.
        parts: Parts placed on this shelf.
    """

    y: float
    height: float
    next_x: float
    remaining_width: float
    parts: list[PlacedPart] = field(default_factory=list)


@dataclass
class _SheetState:
    """Packing state of one open sheet.

    Attributes:
        packed: Sheet and its placed parts.
        shelves: Shelves on this sheet.
        current_y: Top edge for the next new shelf.
    """

    packed: PackedSheet
    shelves: list[_Shelf]
    current_y: float

    @property
    def sheet(self) -> MaterialSheet:
        return self.packed.sheet

    @property
    def available_height(self) -> float:
        """Remaining height for new shelves."""
        return self.sheet.height - self.sheet.margin - self.current_y


class GuillotinePacker:
    """First-fit decreasing shelf packer with best-fit shelf selection.

    Attributes:
        options: Nesting options (rotation, spacing, priority ordering).
    """

    def __init__(self, options: NestingOptions) -> None:
        self.options = options

    def pack(
        self,
        parts: Sequence[PartShape],
        sheets: Sequence[MaterialSheet],
        ordering: str = "area",
    ) -> PackOutcome:
        """Pack parts onto sheets, minimizing waste.

        Args:
            parts: Parts to place; expanded by quantity.
            sheets: Stock sheets, opened in input order.
            ordering: Name of the request ordering from ORDERINGS.

        Returns:
            PackOutcome with opened sheets and unplaced requests.
        """
        requests = self.order_requests(expand_requests(parts), ordering)
        return self.pack_requests(requests, sheets)

    def order_requests(
        self, requests: Sequence[PlacementRequest], ordering: str
    ) -> list[PlacementRequest]:
        """Sort requests by an ordering, higher priority first when requested.

        Ties keep expansion order, so copies of a part stay together.
        """
        key = ORDERINGS[ordering]
        if self.options.prioritize_order:
            return sorted(requests, key=lambda r: (-r.part.priority, key(r), r.sequence))
        return sorted(requests, key=lambda r: (key(r), r.sequence))

    def pack_requests(
        self,
        requests: Sequence[PlacementRequest],
        sheets: Sequence[MaterialSheet],
    ) -> PackOutcome:
        """Pack requests in the given order."""
        pool = StockPool(sheets)
        states: list[_SheetState] = []
        unplaced: list[tuple[PlacementRequest, str]] = []
        spacing = self.options.minimum_spacing

        logger.debug("Guillotine packing %d requests", len(requests))

        for request in requests:
            compatible = set(pool.compatible(request.part))
            candidates = [s for s in states if s.packed.stock_index in compatible]

            if self._place_on_best_shelf(request, candidates, spacing):
                continue
            if self._place_on_new_shelf(request, candidates, spacing):
                continue

            state = self._open_sheet(request, pool, sorted(compatible))
            if state is None:
                reason = pool.failure_reason(request, self.options)
                unplaced.append((request, reason))
                logger.debug("Could not place %s: %s", request.instance_id, reason)
                continue
            states.append(state)

        for index, state in enumerate(states):
            logger.debug(
                "Sheet %d (%s): %d parts on %d shelves",
                index,
                state.sheet.id,
                len(state.packed.placed),
                len(state.shelves),
            )
        return PackOutcome(sheets=[s.packed for s in states], unplaced=unplaced)

    def _place_on_best_shelf(
        self,
        request: PlacementRequest,
        states: list[_SheetState],
        spacing: float,
    ) -> bool:
        """Place on the existing shelf with least height waste across all sheets."""
        best: tuple[_SheetState, _Shelf, Orientation, float] | None = None

        for state in states:
            usable_width = state.sheet.usable_width
            for shelf in state.shelves:
                orientation = self._fits_on_shelf(request, state, shelf, spacing)
                if orientation is None:
                    continue
                height_waste = shelf.height - orientation.height
                # Only reject if BOTH: high height waste AND shelf has lots of room
                waste_ratio = height_waste / shelf.height if shelf.height > 0 else 0
                width_usage = 1 - (shelf.remaining_width / usable_width)
                if waste_ratio < 0.7 or width_usage > 0.3:
                    if best is None or height_waste < best[3]:
                        best = (state, shelf, orientation, height_waste)
                        if height_waste == 0:
                            break
            if best is not None and best[3] == 0:
                break

        if best is None:
            return False
        state, shelf, orientation, _ = best
        self._place_on_shelf(request, state, shelf, orientation, spacing)
        return True

    def _place_on_new_shelf(
        self,
        request: PlacementRequest,
        states: list[_SheetState],
        spacing: float,
    ) -> bool:
        """Start a new shelf on the open sheet with the most height left."""
        for state in sorted(states, key=lambda s: s.available_height, reverse=True):
            orientation = self._fits_new_shelf(request, state)
            if orientation is None:
                continue
            shelf = _Shelf(
                y=state.current_y,
                height=orientation.height,
                next_x=state.sheet.margin,
                remaining_width=state.sheet.usable_width,
            )
            state.shelves.append(shelf)
            state.current_y += orientation.height + spacing
            self._place_on_shelf(request, state, shelf, orientation, spacing)
            return True
        return False

    def _open_sheet(
        self,
        request: PlacementRequest,
        pool: StockPool,
        compatible: list[int],
    ) -> _SheetState | None:
        """Open a fresh physical sheet from the first stock entry that can hold the part."""
        for index in compatible:
            if not pool.has_stock(index):
                continue
            orientation = pool.open_orientation(index, request, self.options)
            if orientation is None:
                continue
            packed = PackedSheet(sheet=pool.take(index), stock_index=index)
            margin = packed.sheet.margin
            state = _SheetState(packed=packed, shelves=[], current_y=margin)
            shelf = _Shelf(
                y=margin,
                height=orientation.height,
                next_x=margin,
                remaining_width=packed.sheet.usable_width,
            )
            state.shelves.append(shelf)
            state.current_y = margin + orientation.height + self.options.minimum_spacing
            self._place_on_shelf(request, state, shelf, orientation, self.options.minimum_spacing)
            return state
        return None

    def _fits_on_shelf(
        self,
        request: PlacementRequest,
        state: _SheetState,
        shelf: _Shelf,
        spacing: float,
    ) -> Orientation | None:
        """First orientation that fits an existing shelf, or None."""
        for orientation in orientations(request.part, self.options.allow_rotation):
            width_needed = orientation.width + (spacing if shelf.parts else 0)
            if (
                orientation.height <= shelf.height
                and width_needed <= shelf.remaining_width
                and state.packed.has_capacity_for(request.part.area)
            ):
                return orientation
        return None

    def _fits_new_shelf(
        self, request: PlacementRequest, state: _SheetState
    ) -> Orientation | None:
        """First orientation that can start a new shelf, or None."""
        for orientation in orientations(request.part, self.options.allow_rotation):
            if (
                orientation.height <= state.available_height
                and orientation.width <= state.sheet.usable_width
                and state.packed.has_capacity_for(request.part.area)
            ):
                return orientation
        return None

    def _place_on_shelf(
        self,
        request: PlacementRequest,
        state: _SheetState,
        shelf: _Shelf,
        orientation: Orientation,
        spacing: float,
    ) -> None:
        """Place a request on a shelf and update shelf state."""
        x = shelf.next_x + (spacing if shelf.parts else 0)
        placed = place(request, orientation, x, shelf.y)
        shelf.parts.append(placed)
        shelf.remaining_width -= orientation.width + (spacing if len(shelf.parts) > 1 else 0)
        shelf.next_x = x + orientation.width
        state.packed.placed.append(placed)

        if orientation.rotation != request.part.rotation % 360:
            logger.debug(
                "Part %s placed rotated to %g degrees at (%g, %g)",
                request.instance_id,
                orientation.rotation,
                x,
                shelf.y,
            )

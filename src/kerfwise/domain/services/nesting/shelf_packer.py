"""Baseline shelf packer.

The deterministic fallback behind every nesting strategy. Parts are placed
in request order at a cursor that walks each sheet left to right and top to
bottom:

1. Place the part at the cursor, starting at (margin, margin).
2. If it overruns the row (sheet width minus margin), start a new row at
   y + row height + minimum spacing.
3. If it overruns the sheet height, close the sheet and open the next
   physical sheet of compatible stock.
4. Parts that fit no remaining sheet are reported as not placed.

A closed sheet never receives more parts.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from kerfwise.domain.value_objects import MaterialSheet, NestingOptions, PartShape

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


@dataclass
class _Cursor:
    """Cursor over one open sheet.

    Attributes:
        packed: Sheet being filled.
        x: Left edge for the next part.
        y: Top edge of the current row.
        row_height: Tallest part placed in the current row.
    """

    packed: PackedSheet
    x: float
    y: float
    row_height: float = 0.0

    @classmethod
    def start(cls, packed: PackedSheet) -> _Cursor:
        margin = packed.sheet.margin
        return cls(packed=packed, x=margin, y=margin)


class ShelfPacker:
    """Row-by-row cursor packer.

    Each stock entry keeps at most one open sheet; parts try the open sheets
    of their compatible stock entries in input order before a new physical
    sheet is opened.

    Attributes:
        options: Nesting options (rotation, spacing, priority ordering).
    """

    def __init__(self, options: NestingOptions) -> None:
        self.options = options

    def pack(
        self,
        parts: Sequence[PartShape],
        sheets: Sequence[MaterialSheet],
    ) -> PackOutcome:
        """Pack parts onto sheets in request order.

        Args:
            parts: Parts to place; expanded by quantity.
            sheets: Stock sheets, offered in input order.

        Returns:
            PackOutcome with opened sheets and unplaced requests.
        """
        requests = expand_requests(parts, self.options.prioritize_order)
        return self.pack_requests(requests, sheets)

    def pack_requests(
        self,
        requests: Sequence[PlacementRequest],
        sheets: Sequence[MaterialSheet],
    ) -> PackOutcome:
        """Pack already expanded requests in the given order."""
        pool = StockPool(sheets)
        opened: list[PackedSheet] = []
        cursors: dict[int, _Cursor] = {}
        unplaced: list[tuple[PlacementRequest, str]] = []

        logger.debug("Shelf packing %d requests onto %d stock entries", len(requests), len(sheets))

        for request in requests:
            candidates = pool.compatible(request.part)

            if any(self._place_at_cursor(cursors[i], request) for i in candidates if i in cursors):
                continue

            # No open sheet had room: close and replace the first stock entry
            # that can hold the part on a fresh sheet
            placed = False
            for index in candidates:
                if not pool.has_stock(index):
                    continue
                orientation = pool.open_orientation(index, request, self.options)
                if orientation is None:
                    continue
                packed = PackedSheet(sheet=pool.take(index), stock_index=index)
                opened.append(packed)
                cursor = _Cursor.start(packed)
                cursors[index] = cursor
                self._place_at_cursor(cursor, request)
                logger.debug(
                    "Opened sheet %d (%s) for %s",
                    len(opened) - 1,
                    packed.sheet.id,
                    request.instance_id,
                )
                placed = True
                break

            if not placed:
                reason = pool.failure_reason(request, self.options)
                unplaced.append((request, reason))
                logger.debug("Could not place %s: %s", request.instance_id, reason)

        return PackOutcome(sheets=opened, unplaced=unplaced)

    def _place_at_cursor(self, cursor: _Cursor, request: PlacementRequest) -> bool:
        """Place a request at the cursor in the first orientation that fits."""
        for orientation in orientations(request.part, self.options.allow_rotation):
            position = self._cursor_position(cursor, request, orientation)
            if position is None:
                continue
            x, y = position
            cursor.packed.placed.append(place(request, orientation, x, y))
            if y != cursor.y:
                cursor.y = y
                cursor.row_height = 0.0
            cursor.row_height = max(cursor.row_height, orientation.height)
            cursor.x = x + orientation.width + self.options.minimum_spacing
            return True
        return False

    def _cursor_position(
        self, cursor: _Cursor, request: PlacementRequest, orientation: Orientation
    ) -> tuple[float, float] | None:
        """Where a footprint would land from the cursor, or None if the sheet is full."""
        sheet = cursor.packed.sheet
        right = sheet.width - sheet.margin
        bottom = sheet.height - sheet.margin
        x, y = cursor.x, cursor.y

        if x + orientation.width > right and x > sheet.margin:
            x = sheet.margin
            y = cursor.y + cursor.row_height + self.options.minimum_spacing

        if x + orientation.width > right or y + orientation.height > bottom:
            return None
        if not cursor.packed.has_capacity_for(request.part.area):
            return None
        return x, y

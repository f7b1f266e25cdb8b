"""Material nesting.

This package lays rectangular part footprints out on stock sheets. The
MaterialNestingOptimizer facade picks a packing strategy, then costs the
result and adds recommendations.

Example:
    >>> from kerfwise.domain.services.nesting import optimize
    >>> result = optimize(parts, sheets)
    >>> result.summary.sheets_used
    1
"""

from .cost import (
    CostModel,
    area_weighted_utilization,
    build_cost_analysis,
    cutting_path,
    estimate_cut_minutes,
    serpentine_order,
)
from .guillotine import MAX_ORDERINGS, ORDERINGS, GuillotinePacker
from .optimizer import MaterialNestingOptimizer, optimize
from .packing import (
    REASON_NO_COMPATIBLE_SHEET,
    REASON_STOCK_EXHAUSTED,
    REASON_TOO_LARGE,
    PackOutcome,
    expand_requests,
)
from .shelf_packer import ShelfPacker

__all__ = [
    "CostModel",
    "GuillotinePacker",
    "MAX_ORDERINGS",
    "MaterialNestingOptimizer",
    "ORDERINGS",
    "PackOutcome",
    "REASON_NO_COMPATIBLE_SHEET",
    "REASON_STOCK_EXHAUSTED",
    "REASON_TOO_LARGE",
    "ShelfPacker",
    "area_weighted_utilization",
    "build_cost_analysis",
    "cutting_path",
    "estimate_cut_minutes",
    "expand_requests",
    "optimize",
    "serpentine_order",
]

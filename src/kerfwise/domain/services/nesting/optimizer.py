"""MaterialNestingOptimizer facade.

This module provides the MaterialNestingOptimizer class, which selects a
packing strategy, turns the raw packing outcome into sheet layouts, and adds
the summary, metrics, cost analysis and recommendations. The module-level
optimize() function wraps a one-off call.
"""

from __future__ import annotations

import dataclasses
import hashlib
import logging
from collections.abc import Sequence

from kerfwise.contracts import LayoutRenderer
from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.value_objects import (
    MaterialSheet,
    NestingAlgorithm,
    NestingOptions,
    NestingResult,
    NestingSummary,
    OptimizationMetrics,
    PartShape,
    SheetLayout,
    UnplacedPart,
)

from .cost import (
    CostModel,
    area_weighted_utilization,
    build_cost_analysis,
    cutting_path,
    estimate_cut_minutes,
)
from .guillotine import MAX_ORDERINGS, ORDERINGS, GuillotinePacker
from .packing import REASON_TOO_LARGE, PackOutcome
from .shelf_packer import ShelfPacker

logger = logging.getLogger(__name__)

# Below this area-weighted utilisation the speed strategy suggests a better one
SPEED_UPGRADE_UTILIZATION = 75.0
UNDERUSED_SHEET_UTILIZATION = 50.0


def _outcome_rank(outcome: PackOutcome) -> tuple[int, int, float, float]:
    """Sort key: most parts placed, fewest sheets, cheapest, best utilised."""
    used = outcome.used_sheets
    area = sum(s.sheet.area for s in used)
    utilization = sum(s.used_area for s in used) / area if area else 0.0
    cost = sum(s.sheet.cost_per_sheet for s in used)
    return (-outcome.placed_count, len(used), cost, -utilization)


class MaterialNestingOptimizer:
    """Packs parts onto stock sheets and costs the result.

    Strategies:
        - speed: baseline cursor shelf packer in request order.
        - efficiency: guillotine shelf packer, largest parts first.
        - minimal_waste: guillotine packer over every ordering in ORDERINGS,
          keeping the best layout.

    The baseline shelf layout is always computed for the non-speed
    strategies and kept if it beats the strategy's own layout.

    Example:
        >>> optimizer = MaterialNestingOptimizer()
        >>> result = optimizer.optimize(parts, sheets)
        >>> result.summary.parts_placed
        10
    """

    def __init__(
        self,
        options: NestingOptions | None = None,
        cost_model: CostModel | None = None,
        renderer: LayoutRenderer | None = None,
    ) -> None:
        """Initialize the optimizer.

        Args:
            options: Nesting options. Uses defaults if not provided.
            cost_model: Rates for the cost analysis. Uses defaults if not provided.
            renderer: Optional collaborator that draws the layout.
        """
        self.options = options or NestingOptions()
        self.cost_model = cost_model or CostModel()
        self.renderer = renderer

    def optimize(
        self,
        parts: Sequence[PartShape],
        sheets: Sequence[MaterialSheet],
    ) -> NestingResult:
        """Lay parts out on sheets.

        Infeasible requests never raise: parts that cannot be placed are
        reported in summary.parts_not_placed.

        Args:
            parts: Parts to place, each with its required quantity.
            sheets: Stock sheets, used in input order.

        Returns:
            NestingResult with layouts, summary, metrics, costs and advice.

        Raises:
            InvalidInputError: If an item is not a PartShape or MaterialSheet,
                or part ids repeat.
        """
        self._check_inputs(parts, sheets)

        outcome, iterations, improvements = self._run_strategy(parts, sheets)

        layouts = tuple(
            SheetLayout(
                sheet=packed.sheet,
                sheet_index=index,
                placed_parts=tuple(packed.placed),
                cutting_path=cutting_path(packed.placed),
                estimated_cut_minutes=round(
                    estimate_cut_minutes(packed.placed, self.cost_model), 2
                ),
            )
            for index, packed in enumerate(outcome.used_sheets)
        )
        not_placed = outcome.unplaced_parts(parts)
        total_parts = sum(p.quantity for p in parts)

        summary = NestingSummary(
            total_parts=total_parts,
            parts_placed=outcome.placed_count,
            parts_not_placed=not_placed,
            sheets_used=len(layouts),
            total_material_cost=round(sum(l.sheet.cost_per_sheet for l in layouts), 2),
            average_utilization=(
                round(sum(l.utilization for l in layouts) / len(layouts), 2) if layouts else 0.0
            ),
            total_waste_area=round(sum(l.waste_area for l in layouts), 2),
        )
        efficiency = area_weighted_utilization(layouts)
        metrics = OptimizationMetrics(
            algorithm=self.options.algorithm,
            iterations=iterations,
            efficiency=round(efficiency, 2),
            improvements=tuple(improvements),
        )
        cost_analysis = build_cost_analysis(
            layouts,
            total_parts,
            self.cost_model,
            oversize_parts=any(p.reason == REASON_TOO_LARGE for p in not_placed),
        )

        result = NestingResult(
            layout_id=self._layout_id(parts, sheets),
            sheets=layouts,
            summary=summary,
            metrics=metrics,
            cost_analysis=cost_analysis,
            recommendations=self._recommendations(layouts, not_placed, efficiency),
        )
        if self.renderer is not None:
            result = dataclasses.replace(result, visualization=self.renderer.render(result))

        logger.info(
            "Nested %d/%d parts on %d sheets (%.1f%% efficiency, %s)",
            summary.parts_placed,
            total_parts,
            summary.sheets_used,
            efficiency,
            self.options.algorithm.value,
        )
        return result

    def _check_inputs(
        self, parts: Sequence[PartShape], sheets: Sequence[MaterialSheet]
    ) -> None:
        seen: set[str] = set()
        for index, part in enumerate(parts):
            if not isinstance(part, PartShape):
                raise InvalidInputError(f"Part {index} is not a PartShape: {type(part).__name__}")
            if part.id in seen:
                raise InvalidInputError(f"Duplicate part id: {part.id}")
            seen.add(part.id)
        for index, sheet in enumerate(sheets):
            if not isinstance(sheet, MaterialSheet):
                raise InvalidInputError(
                    f"Sheet {index} is not a MaterialSheet: {type(sheet).__name__}"
                )

    def _run_strategy(
        self,
        parts: Sequence[PartShape],
        sheets: Sequence[MaterialSheet],
    ) -> tuple[PackOutcome, int, list[str]]:
        """Run the selected strategy; returns outcome, pass count and notes."""
        baseline = ShelfPacker(self.options).pack(parts, sheets)
        if self.options.algorithm == NestingAlgorithm.SPEED:
            return baseline, 1, []

        packer = GuillotinePacker(self.options)
        names = (
            list(ORDERINGS)[:MAX_ORDERINGS]
            if self.options.algorithm == NestingAlgorithm.MINIMAL_WASTE
            else ["area"]
        )

        first = packer.pack(parts, sheets, ordering=names[0])
        best, best_name = first, names[0]
        for name in names[1:]:
            candidate = packer.pack(parts, sheets, ordering=name)
            logger.debug(
                "Ordering %s: %d placed on %d sheets",
                name,
                candidate.placed_count,
                len(candidate.used_sheets),
            )
            if _outcome_rank(candidate) < _outcome_rank(best):
                best, best_name = candidate, name

        improvements: list[str] = []
        if best is not first:
            improvements.extend(self._describe_gain(first, best, f"{best_name} ordering"))

        if _outcome_rank(baseline) < _outcome_rank(best):
            improvements = [
                "Baseline shelf layout kept",
                *self._describe_gain(best, baseline, "baseline shelf layout"),
            ]
            best = baseline

        return best, len(names) + 1, improvements

    @staticmethod
    def _describe_gain(before: PackOutcome, after: PackOutcome, label: str) -> list[str]:
        notes: list[str] = []
        placed_gain = after.placed_count - before.placed_count
        if placed_gain > 0:
            notes.append(f"{label} placed {placed_gain} more parts")
        sheets_saved = len(before.used_sheets) - len(after.used_sheets)
        if sheets_saved > 0:
            notes.append(f"{label} used {sheets_saved} fewer sheets")
        if not notes:
            notes.append(f"{label} reduced material cost or waste")
        return notes

    def _recommendations(
        self,
        layouts: Sequence[SheetLayout],
        not_placed: Sequence[UnplacedPart],
        efficiency: float,
    ) -> tuple[str, ...]:
        advice: list[str] = []
        for item in not_placed:
            advice.append(f"{item.quantity} x {item.part_id} not placed: {item.reason}")
        if not_placed and not self.options.allow_rotation:
            advice.append("Allow rotation to fit more parts")
        if len(layouts) > 1:
            last = layouts[-1]
            if last.utilization < UNDERUSED_SHEET_UTILIZATION:
                advice.append(
                    f"Sheet {last.sheet_index + 1} is only {last.utilization:.0f}% utilized; "
                    "use the offcut for smaller parts or batch with another job"
                )
        if (
            layouts
            and self.options.algorithm == NestingAlgorithm.SPEED
            and efficiency < SPEED_UPGRADE_UTILIZATION
        ):
            advice.append("Try the efficiency or minimal_waste algorithm for a tighter layout")
        return tuple(advice)

    def _layout_id(self, parts: Sequence[PartShape], sheets: Sequence[MaterialSheet]) -> str:
        """Digest of every input, identical for identical requests."""
        digest = hashlib.sha256()
        for item in (*parts, *sheets, self.options, self.cost_model):
            digest.update(repr(item).encode("utf-8"))
        return f"layout_{digest.hexdigest()[:16]}"


def optimize(
    parts: Sequence[PartShape],
    sheets: Sequence[MaterialSheet],
    options: NestingOptions | None = None,
    cost_model: CostModel | None = None,
    renderer: LayoutRenderer | None = None,
) -> NestingResult:
    """Lay parts out on sheets with a one-off optimizer.

    Args:
        parts: Parts to place.
        sheets: Stock sheets.
        options: Nesting options.
        cost_model: Rates for the cost analysis.
        renderer: Optional layout renderer.

    Returns:
        NestingResult.
    """
    return MaterialNestingOptimizer(options, cost_model, renderer).optimize(parts, sheets)

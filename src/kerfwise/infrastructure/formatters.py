"""Output formatters for validation and nesting results."""

from __future__ import annotations

import json
from typing import Any

from kerfwise.domain.services.catalog import (
    MachineSettings,
    MaterialCatalog,
    MaterialChoiceReport,
)
from kerfwise.domain.value_objects import (
    ManufacturingConstraints,
    NestingResult,
    Path,
    Severity,
    ValidationResult,
    Violation,
)

_SEVERITY_TAGS = {
    Severity.HIGH: "[HIGH]",
    Severity.MEDIUM: "[MED] ",
    Severity.LOW: "[LOW] ",
}


class MaterialListFormatter:
    """Formats the catalog's materials as a table."""

    def format(self, catalog: MaterialCatalog) -> str:
        lines = [
            "MATERIALS",
            "=" * 78,
            f"{'Key':<22} {'Category':<12} {'Thick':<7} {'Kerf':<6} "
            f"{'Min feat':<9} {'Min hole':<9} {'Name'}",
            "-" * 78,
        ]
        for key in catalog.material_keys():
            m = catalog.material(key)
            lines.append(
                f"{key:<22} {m.category.value:<12} {m.thickness:<7g} {m.kerf_width:<6g} "
                f"{m.min_feature_size:<9g} {m.min_hole_size:<9g} {m.name}"
            )
        lines.append("-" * 78)
        lines.append(f"Machines: {', '.join(catalog.machine_keys())}")
        return "\n".join(lines)


class ConstraintsFormatter:
    """Formats resolved manufacturing constraints."""

    def format(self, constraints: ManufacturingConstraints) -> str:
        m = constraints.material
        k = constraints.kerf
        s = constraints.structural
        d = constraints.dimensional
        machine = constraints.machine
        lines = [
            f"CONSTRAINTS: {m.name} on {constraints.machine_key or machine.machine_type.value} "
            f"({constraints.precision.value})",
            "=" * 60,
            "Material",
            f"  Thickness:          {m.thickness:g} mm",
            f"  Min feature size:   {m.min_feature_size:g} mm",
            f"  Min hole size:      {m.min_hole_size:g} mm",
            f"  Min slot width:     {m.min_slot_width:g} mm",
            f"  Max aspect ratio:   {m.max_aspect_ratio:g}",
            f"  Heat-affected zone: {m.heat_affected_zone:g} mm",
            "Kerf",
            f"  Width:              {k.width:g} mm (+/- {k.variation:g})",
            f"  Compensation:       {k.compensation.value}",
            "Structural",
            f"  Max span:           {s.max_span_without_support:g} mm",
            f"  Max cantilever:     {s.max_cantilever_length:g} mm",
            f"  Min beam width:     {s.min_beam_width:g} mm",
            f"  Safety factor:      {s.safety_factor:g}",
            "Dimensional",
            f"  Min gap:            {d.min_gap:g} mm",
            f"  Min radius:         {d.min_radius:g} mm",
            f"  Max length:         {d.max_length:g} mm",
            f"  Positional accuracy:{d.positional_accuracy:>6g} mm",
            "Machine",
            f"  Work area:          {machine.work_area_width:g} x {machine.work_area_height:g} mm",
            f"  Max thickness:      {machine.max_thickness:g} mm",
        ]
        return "\n".join(lines)


class ValidationReportFormatter:
    """Formats a validation result as a text report.

    Example:
        ```python
        formatter = ValidationReportFormatter()
        print(formatter.format(validate(features, constraints)))
        ```
    """

    def format(self, result: ValidationResult, title: str = "MANUFACTURABILITY REPORT") -> str:
        """Generate the report.

        Args:
            result: Completed validation result.
            title: Heading line.

        Returns:
            Report text.
        """
        status = "PASS" if result.is_valid else "FAIL"
        lines = [
            title,
            "=" * 60,
            f"Status: {status}",
            f"Score: {result.score}/100 (estimated success {result.estimated_success}%)",
            f"Violations: {result.count(Severity.HIGH)} high, "
            f"{result.count(Severity.MEDIUM)} medium, {result.count(Severity.LOW)} low",
        ]
        if result.violations:
            lines.append("")
            lines.append("Violations:")
            lines.extend(self._format_violation(v) for v in result.violations)
        if result.recommendations:
            lines.append("")
            lines.append("Recommendations:")
            lines.extend(f"  - {r}" for r in result.recommendations)
        return "\n".join(lines)

    def _format_violation(self, violation: Violation) -> str:
        box = violation.location
        return (
            f"  {_SEVERITY_TAGS[violation.severity]} {violation.category.value:<12} "
            f"{violation.message} at ({box.x:g}, {box.y:g}, {box.width:g} x {box.height:g})"
        )


class MaterialChoiceFormatter:
    """Formats a material choice report."""

    def format(self, material_key: str, report: MaterialChoiceReport) -> str:
        if report.is_valid:
            return f"{material_key}: suitable"
        lines = [f"{material_key}: not suitable"]
        lines.extend(f"  - {issue}" for issue in report.issues)
        if report.alternatives:
            lines.append(f"Alternatives: {', '.join(report.alternatives)}")
        return "\n".join(lines)


class MachineSettingsFormatter:
    """Formats cut, score and engrave power settings."""

    def format(self, material_key: str, settings: MachineSettings) -> str:
        lines = [
            f"MACHINE SETTINGS: {material_key}",
            f"{'Operation':<10} {'Power %':<9} {'Speed':<7} {'Passes'}",
        ]
        for name in ("cut", "score", "engrave"):
            setting = getattr(settings, name)
            lines.append(
                f"{name:<10} {setting.power:<9g} {setting.speed:<7g} {setting.passes}"
            )
        return "\n".join(lines)


class NestingReportFormatter:
    """Formats a nesting result: summary, per-sheet details, costs and advice."""

    def format(self, result: NestingResult) -> str:
        summary = result.summary
        cost = result.cost_analysis
        lines = [
            "NESTING SUMMARY",
            "=" * 60,
            f"Layout: {result.layout_id}",
            f"Algorithm: {result.metrics.algorithm.value} "
            f"({result.metrics.iterations} iteration"
            f"{'s' if result.metrics.iterations != 1 else ''})",
            f"Parts placed: {summary.parts_placed} of {summary.total_parts}",
            f"Sheets used: {summary.sheets_used}",
            f"Efficiency: {result.metrics.efficiency:.1f}% "
            f"(average per sheet {summary.average_utilization:.1f}%)",
            f"Waste area: {summary.total_waste_area:g} mm²",
        ]

        if result.sheets:
            lines.append("")
            lines.append("Per-Sheet Details:")
            for layout in result.sheets:
                lines.append(
                    f"  Sheet {layout.sheet_index + 1} ({layout.sheet.name}): "
                    f"{layout.part_count} part{'s' if layout.part_count != 1 else ''}, "
                    f"{layout.utilization:.1f}% utilized, cut {layout.estimated_cut_time}"
                )

        if summary.parts_not_placed:
            lines.append("")
            lines.append("Not Placed:")
            for item in summary.parts_not_placed:
                lines.append(f"  {item.part_id} x{item.quantity}: {item.reason}")

        lines.append("")
        lines.append("Costs:")
        lines.append(f"  Material:      {cost.material_costs:.2f}")
        lines.append(f"  Waste:         {cost.waste_costs:.2f}")
        lines.append(f"  Labor:         {cost.labor_costs:.2f} ({cost.cutting_time:g} min)")
        lines.append(f"  Total:         {cost.total_project_cost:.2f}")
        lines.append(f"  Per part:      {cost.cost_per_part:.2f}")

        advice = [*result.recommendations, *cost.savings_opportunities]
        if advice:
            lines.append("")
            lines.append("Recommendations:")
            lines.extend(f"  - {item}" for item in advice)
        return "\n".join(lines)


class JsonExporter:
    """Exports validation and nesting results as JSON."""

    def export_validation(self, result: ValidationResult) -> str:
        """Export a validation result as a JSON string."""
        data = {
            "is_valid": result.is_valid,
            "score": result.score,
            "estimated_success": result.estimated_success,
            "violations": [self._format_violation(v) for v in result.violations],
            "recommendations": list(result.recommendations),
        }
        return json.dumps(data, indent=2)

    def export_paths(self, paths: tuple[Path, ...]) -> str:
        """Export compensated paths as JSON point lists."""
        data = {
            "paths": [
                {"closed": path.closed, "points": [list(p) for p in path.coords]}
                for path in paths
            ]
        }
        return json.dumps(data, indent=2)

    def export_nesting(self, result: NestingResult) -> str:
        """Export a nesting result as a JSON string.

        The SVG visualization is omitted; it is written separately.
        """
        summary = result.summary
        cost = result.cost_analysis
        data = {
            "layout_id": result.layout_id,
            "sheets": [
                {
                    "sheet_id": layout.sheet.id,
                    "sheet_index": layout.sheet_index,
                    "utilization": round(layout.utilization, 2),
                    "waste_area": round(layout.waste_area, 2),
                    "cutting_path": layout.cutting_path,
                    "estimated_cut_time": layout.estimated_cut_time,
                    "placed_parts": [
                        {
                            "part_id": p.part_id,
                            "instance_id": p.instance_id,
                            "x": p.x,
                            "y": p.y,
                            "rotation": p.rotation,
                            "width": p.width,
                            "height": p.height,
                        }
                        for p in layout.placed_parts
                    ],
                }
                for layout in result.sheets
            ],
            "summary": {
                "total_parts": summary.total_parts,
                "parts_placed": summary.parts_placed,
                "parts_not_placed": [
                    {"part_id": u.part_id, "quantity": u.quantity, "reason": u.reason}
                    for u in summary.parts_not_placed
                ],
                "sheets_used": summary.sheets_used,
                "total_material_cost": summary.total_material_cost,
                "average_utilization": summary.average_utilization,
                "total_waste_area": summary.total_waste_area,
            },
            "metrics": {
                "algorithm": result.metrics.algorithm.value,
                "iterations": result.metrics.iterations,
                "efficiency": result.metrics.efficiency,
                "improvements": list(result.metrics.improvements),
            },
            "cost_analysis": {
                "material_costs": cost.material_costs,
                "waste_costs": cost.waste_costs,
                "cutting_time": cost.cutting_time,
                "labor_costs": cost.labor_costs,
                "total_project_cost": cost.total_project_cost,
                "cost_per_part": cost.cost_per_part,
                "savings_opportunities": list(cost.savings_opportunities),
            },
            "recommendations": list(result.recommendations),
        }
        return json.dumps(data, indent=2)

    def _format_violation(self, violation: Violation) -> dict[str, Any]:
        box = violation.location
        return {
            "category": violation.category.value,
            "severity": violation.severity.value,
            "message": violation.message,
            "location": {"x": box.x, "y": box.y, "width": box.width, "height": box.height},
            "fix": violation.fix,
        }

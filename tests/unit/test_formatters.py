"""Tests for text formatters and the JSON exporter."""

from __future__ import annotations

import json

import pytest

from kerfwise.domain.services.catalog import MaterialCatalog, MaterialRequirements
from kerfwise.domain.services.nesting import optimize
from kerfwise.domain.services.validation import validate
from kerfwise.domain.value_objects import (
    BeamFeature,
    HoleFeature,
    ManufacturingConstraints,
    MaterialSheet,
    NestingResult,
    Path,
    PartShape,
)
from kerfwise.infrastructure import (
    ConstraintsFormatter,
    JsonExporter,
    MachineSettingsFormatter,
    MaterialChoiceFormatter,
    MaterialListFormatter,
    NestingReportFormatter,
    ValidationReportFormatter,
)


@pytest.fixture
def nesting_result(square_parts: list[PartShape], small_sheet: MaterialSheet) -> NestingResult:
    return optimize(square_parts, [small_sheet])


@pytest.fixture
def partial_result(small_sheet: MaterialSheet) -> NestingResult:
    """Result with one part left over."""
    parts = [
        PartShape(id="panel", name="Panel", width=100, height=50, quantity=2),
        PartShape(id="huge", name="Huge", width=900, height=900),
    ]
    return optimize(parts, [small_sheet])


# =============================================================================
# Catalog formatters
# =============================================================================


class TestCatalogFormatters:
    """Tests for material, constraint and settings output."""

    def test_material_list(self, catalog: MaterialCatalog) -> None:
        output = MaterialListFormatter().format(catalog)
        lines = output.splitlines()
        assert lines[0] == "MATERIALS"
        rows = [line for line in lines if line.startswith("plywood-3mm")]
        assert len(rows) == 1
        assert "wood" in rows[0]
        assert lines[-1] == "Machines: generic-co2, glowforge-basic, glowforge-pro"

    def test_constraints(self, acrylic_constraints: ManufacturingConstraints) -> None:
        output = ConstraintsFormatter().format(acrylic_constraints)
        assert output.startswith("CONSTRAINTS: ")
        assert "on glowforge-basic (standard)" in output.splitlines()[0]
        assert "Min hole size:      1.8 mm" in output
        assert "Max span:           80 mm" in output
        assert "Work area:          279 x 508 mm" in output

    def test_suitable_material_choice(self, catalog: MaterialCatalog) -> None:
        report = catalog.validate_material_choice("plywood-3mm", MaterialRequirements())
        assert MaterialChoiceFormatter().format("plywood-3mm", report) == "plywood-3mm: suitable"

    def test_unsuitable_material_choice(self, catalog: MaterialCatalog) -> None:
        report = catalog.validate_material_choice(
            "plywood-3mm", MaterialRequirements(max_span=150)
        )
        lines = MaterialChoiceFormatter().format("plywood-3mm", report).splitlines()
        assert lines[0] == "plywood-3mm: not suitable"
        assert lines[1].startswith("  - Design span 150mm")
        assert lines[-1] == "Alternatives: plywood-6mm, hardwood-maple-3mm"

    def test_machine_settings(self, catalog: MaterialCatalog) -> None:
        settings = catalog.machine_settings("acrylic-3mm")
        output = MachineSettingsFormatter().format("acrylic-3mm", settings)
        lines = output.splitlines()
        assert lines[0] == "MACHINE SETTINGS: acrylic-3mm"
        assert lines[2].split() == ["cut", "65", "200", "1"]
        assert [line.split()[0] for line in lines[2:]] == ["cut", "score", "engrave"]


# =============================================================================
# Validation report
# =============================================================================


class TestValidationReportFormatter:
    """Tests for ValidationReportFormatter."""

    def test_passing_report(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([BeamFeature.at(0, 0, length=50, width=20)], plywood_constraints)
        output = ValidationReportFormatter().format(result)
        assert "Status: PASS" in output
        assert "Score: 100/100 (estimated success 95%)" in output
        assert "Violations: 0 high, 0 medium, 0 low" in output
        assert "Violations:\n" not in output

    def test_failing_report(self, acrylic_constraints: ManufacturingConstraints) -> None:
        result = validate([HoleFeature.at(10, 10, diameter=1.0)], acrylic_constraints)
        output = ValidationReportFormatter().format(result, title="PANEL")

        assert output.startswith("PANEL\n")
        assert "Status: FAIL" in output
        assert "Violations: 0 high, 1 medium, 0 low" in output
        (line,) = [text for text in output.splitlines() if text.startswith("  [MED]")]
        assert "hole_size" in line
        assert "Hole diameter 1mm below minimum 1.8mm at (9.5, 9.5, 1 x 1)" in line
        for recommendation in result.recommendations:
            assert f"  - {recommendation}" in output


# =============================================================================
# Nesting report
# =============================================================================


class TestNestingReportFormatter:
    """Tests for NestingReportFormatter."""

    def test_summary_lines(self, nesting_result: NestingResult) -> None:
        output = NestingReportFormatter().format(nesting_result)
        assert output.startswith("NESTING SUMMARY")
        assert f"Layout: {nesting_result.layout_id}" in output
        assert "Algorithm: efficiency (2 iterations)" in output
        assert "Parts placed: 10 of 10" in output
        assert "Efficiency: 26.7% (average per sheet 26.7%)" in output

    def test_per_sheet_details(self, nesting_result: NestingResult) -> None:
        output = NestingReportFormatter().format(nesting_result)
        assert "  Sheet 1 (Plywood 300x200): 10 parts, 26.7% utilized, cut " in output
        assert "Not Placed:" not in output

    def test_costs(self, nesting_result: NestingResult) -> None:
        output = NestingReportFormatter().format(nesting_result)
        assert "  Material:      4.50" in output
        assert "(45 min)" in output

    def test_unplaced_parts_listed(self, partial_result: NestingResult) -> None:
        output = NestingReportFormatter().format(partial_result)
        assert "Not Placed:" in output
        assert "  huge x1: Part does not fit on any compatible sheet" in output
        assert "  - Consider alternative sheet sizes for better fit" in output


# =============================================================================
# JSON export
# =============================================================================


class TestJsonExporter:
    """Tests for JsonExporter."""

    def test_validation_json(self, acrylic_constraints: ManufacturingConstraints) -> None:
        result = validate([HoleFeature.at(10, 10, diameter=1.0)], acrylic_constraints)
        data = json.loads(JsonExporter().export_validation(result))

        assert data["is_valid"] is False
        assert data["score"] == 97
        assert data["estimated_success"] == 80
        (violation,) = data["violations"]
        assert violation["category"] == "hole_size"
        assert violation["severity"] == "medium"
        assert violation["location"] == {"x": 9.5, "y": 9.5, "width": 1.0, "height": 1.0}
        assert violation["fix"] == "Increase hole diameter to minimum 1.8mm"

    def test_paths_json(self) -> None:
        data = json.loads(JsonExporter().export_paths((Path.rectangle(0, 0, 2, 1),)))
        (path,) = data["paths"]
        assert path["closed"] is True
        assert path["points"][0] == [0, 0]

    def test_nesting_json(self, partial_result: NestingResult) -> None:
        data = json.loads(JsonExporter().export_nesting(partial_result))

        assert set(data) == {
            "layout_id",
            "sheets",
            "summary",
            "metrics",
            "cost_analysis",
            "recommendations",
        }
        assert data["layout_id"] == partial_result.layout_id
        (sheet,) = data["sheets"]
        assert sheet["sheet_id"] == "ply-300"
        assert [p["instance_id"] for p in sheet["placed_parts"]] == ["panel_1", "panel_2"]
        assert data["summary"]["parts_not_placed"] == [
            {
                "part_id": "huge",
                "quantity": 1,
                "reason": "Part does not fit on any compatible sheet",
            }
        ]
        assert data["metrics"]["algorithm"] == "efficiency"
        assert "visualization" not in data

"""Integration tests for the kerfwise CLI.

These tests run the Typer app end-to-end against the JSON fixtures,
checking output text, written files and exit codes:
- 0 when the design passes or every part is placed
- 1 when an input file or catalog lookup fails
- 2 when the design has violations or parts are left over
"""

import json
import xml.etree.ElementTree as ET
from pathlib import Path

import ezdxf
import pytest
from typer.testing import CliRunner

from kerfwise import __version__
from kerfwise.cli.main import app

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures"


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


def _fixture(name: str) -> str:
    return str(FIXTURES_PATH / name)


class TestTopLevel:
    """Tests for global options."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"kerfwise {__version__}" in result.output

    def test_no_arguments_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(app, [])
        assert "nest" in result.output
        assert "validate" in result.output


# =============================================================================
# Catalog commands
# =============================================================================


class TestCatalogCommands:
    """Tests for materials, constraints, check-material and settings."""

    def test_materials_table(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["materials"])
        assert result.exit_code == 0
        assert "plywood-3mm" in result.output
        assert "Machines: generic-co2, glowforge-basic, glowforge-pro" in result.output

    def test_materials_for_intent(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["materials", "--intent", "structural"])
        assert result.exit_code == 0
        assert "Recommended for 'structural':" in result.output
        assert "  plywood-6mm" in result.output

    def test_constraints(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["constraints", "acrylic-3mm", "--machine", "generic-co2"])
        assert result.exit_code == 0
        assert "on generic-co2 (standard)" in result.output
        assert "Max span:           80 mm" in result.output

    def test_constraints_unknown_material(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["constraints", "unobtainium-3mm"])
        assert result.exit_code == 1
        assert "Error: Unknown material: unobtainium-3mm" in result.output

    def test_constraints_unknown_precision(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["constraints", "plywood-3mm", "-p", "sloppy"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_check_material_suitable(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["check-material", "plywood-3mm", "--max-span", "100"])
        assert result.exit_code == 0
        assert "plywood-3mm: suitable" in result.output

    def test_check_material_unsuitable(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["check-material", "plywood-3mm", "--max-span", "150", "--transparent"]
        )
        assert result.exit_code == 2
        assert "plywood-3mm: not suitable" in result.output
        assert "Alternatives: plywood-6mm, hardwood-maple-3mm, acrylic-3mm" in result.output

    def test_settings(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["settings", "acrylic-3mm"])
        assert result.exit_code == 0
        assert "MACHINE SETTINGS: acrylic-3mm" in result.output

    def test_settings_fall_back_to_default_material(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["settings", "hardwood-maple-3mm"])
        assert result.exit_code == 0
        assert "MACHINE SETTINGS: hardwood-maple-3mm" in result.output


# =============================================================================
# Design commands
# =============================================================================


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_design(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", _fixture("design_valid.json")])
        assert result.exit_code == 0
        assert "MANUFACTURABILITY REPORT: design_valid.json" in result.output
        assert "Status: PASS" in result.output

    def test_design_with_violation(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", _fixture("design_invalid.json")])
        assert result.exit_code == 2
        assert "Status: FAIL" in result.output
        assert "Hole diameter 1mm below minimum 1.8mm" in result.output

    def test_json_report(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["validate", _fixture("design_invalid.json"), "--format", "json"]
        )
        assert result.exit_code == 2
        data = json.loads(result.stdout)
        assert data["score"] == 97
        assert data["violations"][0]["category"] == "hole_size"

    def test_report_written_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "reports" / "report.txt"
        result = runner.invoke(
            app, ["validate", _fixture("design_valid.json"), "-o", str(output)]
        )
        assert result.exit_code == 0
        assert "Report written to" in result.output
        assert "Status: PASS" in output.read_text(encoding="utf-8")

    def test_file_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", _fixture("nonexistent.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", _fixture("invalid_json.json")])
        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Line " in result.output

    def test_schema_error_names_field(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "design.json"
        path.write_text(
            json.dumps(
                {
                    "schema_version": "1.0",
                    "material": "plywood-3mm",
                    "features": [{"type": "slot", "x": 0, "y": 0, "length": -1, "width": 1}],
                }
            ),
            encoding="utf-8",
        )
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "features[0].slot.length" in result.output

    def test_unknown_material(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["validate", _fixture("design_unknown_material.json")])
        assert result.exit_code == 1
        assert "Error: Unknown material: unobtainium-3mm" in result.output


class TestCompensateCommand:
    """Tests for the compensate command."""

    def test_paths_grow_by_half_kerf(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["compensate", _fixture("design_paths.json")])
        assert result.exit_code == 0
        (path,) = json.loads(result.stdout)["paths"]
        xs = [x for x, _ in path["points"]]
        assert path["closed"] is True
        assert min(xs) == pytest.approx(-0.05)
        assert max(xs) == pytest.approx(10.05)

    def test_mode_override(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["compensate", _fixture("design_paths.json"), "--mode", "none"]
        )
        assert result.exit_code == 0
        (path,) = json.loads(result.stdout)["paths"]
        assert path["points"] == [[0, 0], [10, 0], [10, 10], [0, 10]]

    def test_paths_written_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "paths.json"
        result = runner.invoke(
            app, ["compensate", _fixture("design_paths.json"), "-o", str(output)]
        )
        assert result.exit_code == 0
        assert "Paths written to" in result.output
        assert len(json.loads(output.read_text(encoding="utf-8"))["paths"]) == 1

    def test_design_without_paths(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["compensate", _fixture("design_valid.json")])
        assert result.exit_code == 1
        assert "has no paths to compensate" in result.output


# =============================================================================
# Nesting
# =============================================================================


class TestNestCommand:
    """Tests for the nest command."""

    def test_all_parts_placed(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["nest", _fixture("job.json")])
        assert result.exit_code == 0
        assert "NESTING SUMMARY" in result.output
        assert "Parts placed: 10 of 10" in result.output
        assert "Sheets used: 1" in result.output

    def test_parts_left_over(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["nest", _fixture("job_overflow.json")])
        assert result.exit_code == 2
        assert "big x198: Compatible sheet stock exhausted" in result.output

    def test_algorithm_override(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["nest", _fixture("job.json"), "--algorithm", "speed"])
        assert result.exit_code == 0
        assert "Algorithm: speed (1 iteration)" in result.output

    def test_json_summary(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["nest", _fixture("job.json"), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["parts_placed"] == 10
        assert data["layout_id"].startswith("layout_")

    def test_output_files(self, runner: CliRunner, tmp_path: Path) -> None:
        svg = tmp_path / "layout.svg"
        dxf = tmp_path / "cut" / "layout.dxf"
        json_path = tmp_path / "result.json"
        result = runner.invoke(
            app,
            [
                "nest",
                _fixture("job.json"),
                "--svg",
                str(svg),
                "--dxf",
                str(dxf),
                "--json",
                str(json_path),
            ],
        )
        assert result.exit_code == 0
        assert "SVG layout written to" in result.output
        assert "DXF written to" in result.output
        assert "JSON result written to" in result.output

        root = ET.fromstring(svg.read_text(encoding="utf-8"))
        assert root.tag.endswith("svg")
        doc = ezdxf.readfile(dxf)
        assert len(doc.modelspace().query('LWPOLYLINE[layer=="PARTS"]')) == 10
        assert json.loads(json_path.read_text(encoding="utf-8"))["summary"]["sheets_used"] == 1

    def test_file_not_found(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["nest", _fixture("missing_job.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output


# =============================================================================
# Catalog overrides
# =============================================================================


class TestCatalogOverride:
    """Tests for the --catalog option."""

    def test_override_adds_material(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["--catalog", _fixture("catalog.json"), "materials"])
        assert result.exit_code == 0
        assert "birch-4mm" in result.output
        assert "plywood-3mm" in result.output

    def test_override_intent(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["-c", _fixture("catalog.json"), "materials", "--intent", "shop"]
        )
        assert result.exit_code == 0
        assert "  birch-4mm" in result.output

    def test_override_material_is_checkable(self, runner: CliRunner) -> None:
        result = runner.invoke(
            app, ["-c", _fixture("catalog.json"), "constraints", "birch-4mm"]
        )
        assert result.exit_code == 0
        assert "Min hole size:      1.6 mm" in result.output

    def test_missing_catalog_file(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["-c", _fixture("missing.json"), "materials"])
        assert result.exit_code == 1
        assert "File not found" in result.output

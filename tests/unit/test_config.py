"""Tests for configuration loading, schema validation and adapters.

Tests cover:
- Loader error types for missing files, bad JSON and schema failures
- Schema version acceptance
- Catalog, design and nesting job schema rules
- Conversion of configuration into domain objects
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from kerfwise.application.config import (
    CatalogConfig,
    ConfigError,
    DesignConfig,
    NestingJobConfig,
    catalog_from_config,
    cost_model_from_job,
    features_from_config,
    load_catalog_config,
    load_config_from_dict,
    load_design_config,
    load_nesting_job,
    options_from_job,
    parts_from_job,
    paths_from_config,
    sheets_from_job,
)
from kerfwise.application.config.loader import json_path
from kerfwise.domain.errors import CatalogError, UnknownMaterialError
from kerfwise.domain.value_objects import (
    BeamFeature,
    BoundingBox,
    CantileverFeature,
    CurveFeature,
    HoleFeature,
    JointFeature,
    JointFit,
    LineFeature,
    NestingAlgorithm,
    SlotFeature,
)

MATERIAL_DATA: dict[str, Any] = {
    "name": "Shop birch 4mm",
    "category": "wood",
    "thickness": 4,
    "density": 650,
    "tensile_strength": 45,
    "elastic_modulus": 10,
    "kerf_width": 0.12,
    "heat_affected_zone": 0.2,
    "min_feature_size": 0.4,
    "min_hole_size": 1.6,
    "min_slot_width": 0.5,
    "max_aspect_ratio": 18,
    "press_fit_tolerance": -0.05,
    "loose_fit_tolerance": 0.15,
    "sliding_fit_tolerance": 0.25,
}

JOB_DATA: dict[str, Any] = {
    "schema_version": "1.0",
    "parts": [{"id": "side", "width": 120, "height": 60, "quantity": 2}],
    "sheets": [{"id": "birch", "name": "Birch 300x200", "width": 300, "height": 200}],
}


def _write_json(path: Path, data: Any) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


# =============================================================================
# Loader
# =============================================================================


class TestLoader:
    """Tests for file loading and error mapping."""

    def test_loads_valid_job(self, tmp_path: Path) -> None:
        job = load_nesting_job(_write_json(tmp_path / "job.json", JOB_DATA))
        assert isinstance(job, NestingJobConfig)
        assert job.parts[0].quantity == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "missing.json"
        with pytest.raises(ConfigError) as exc_info:
            load_design_config(path)
        assert exc_info.value.error_type == "file_not_found"
        assert exc_info.value.path == path

    def test_invalid_json_reports_position(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text('{"schema_version": "1.0",}', encoding="utf-8")
        with pytest.raises(ConfigError) as exc_info:
            load_nesting_job(path)

        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 1
        assert "line 1" in str(error)

    def test_validation_details_use_json_paths(self, tmp_path: Path) -> None:
        data = {**JOB_DATA, "parts": [{"id": "side", "width": -5, "height": 60}]}
        with pytest.raises(ConfigError) as exc_info:
            load_nesting_job(_write_json(tmp_path / "job.json", data))

        error = exc_info.value
        assert error.error_type == "validation"
        (detail,) = error.details
        assert detail["path"] == "parts[0].width"
        assert detail["value"] == -5
        assert "parts[0].width" in error.message
        assert "(got: -5)" in error.message
        assert error.message.startswith("NestingJobConfig: 1 invalid field\n")

    @pytest.mark.parametrize(
        ("loc", "expected"),
        [
            (("sheet",), "sheet"),
            (("parts", 0, "width"), "parts[0].width"),
            ((0, "id"), "[0].id"),
            ((), ""),
        ],
    )
    def test_json_path(self, loc: tuple[str | int, ...], expected: str) -> None:
        assert json_path(loc) == expected

    def test_feature_errors_name_the_feature_type(self) -> None:
        data = {
            "schema_version": "1.0",
            "material": "plywood-3mm",
            "features": [{"type": "hole", "center": [5, 5], "diameter": 0}],
        }
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(DesignConfig, data)
        assert exc_info.value.details[0]["path"] == "features[0].hole.diameter"

    def test_unknown_fields_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(NestingJobConfig, {**JOB_DATA, "sheet": []})
        assert exc_info.value.details[0]["path"] == "sheet"

    def test_load_catalog_file(self, tmp_path: Path) -> None:
        data = {"schema_version": "1.0", "materials": {"birch-4mm": MATERIAL_DATA}}
        config = load_catalog_config(_write_json(tmp_path / "catalog.json", data))
        assert config.mode == "merge"
        assert "birch-4mm" in config.materials


class TestSchemaVersion:
    """Tests for schema_version acceptance."""

    @pytest.mark.parametrize("version", ["1.0", "1.5"])
    def test_accepted(self, version: str) -> None:
        job = load_config_from_dict(NestingJobConfig, {**JOB_DATA, "schema_version": version})
        assert job.schema_version == version

    @pytest.mark.parametrize("version", ["2.0", "0.9"])
    def test_other_majors_rejected(self, version: str) -> None:
        with pytest.raises(ConfigError, match="Unsupported schema version"):
            load_config_from_dict(NestingJobConfig, {**JOB_DATA, "schema_version": version})

    @pytest.mark.parametrize("version", ["1", "v1.0", "1.0.0"])
    def test_malformed_rejected(self, version: str) -> None:
        with pytest.raises(ConfigError):
            load_config_from_dict(NestingJobConfig, {**JOB_DATA, "schema_version": version})


# =============================================================================
# Schemas
# =============================================================================


class TestNestingJobSchema:
    """Tests for NestingJobConfig rules."""

    def test_duplicate_part_ids_rejected(self) -> None:
        data = {**JOB_DATA, "parts": [JOB_DATA["parts"][0], JOB_DATA["parts"][0]]}
        with pytest.raises(ConfigError, match="Duplicate part id: side"):
            load_config_from_dict(NestingJobConfig, data)

    def test_parts_and_sheets_required(self) -> None:
        with pytest.raises(ConfigError):
            load_config_from_dict(NestingJobConfig, {**JOB_DATA, "sheets": []})

    def test_priority_bounds(self) -> None:
        data = {**JOB_DATA, "parts": [{"id": "a", "width": 1, "height": 1, "priority": 11}]}
        with pytest.raises(ConfigError):
            load_config_from_dict(NestingJobConfig, data)


class TestCatalogSchema:
    """Tests for CatalogConfig rules."""

    def test_replace_mode_needs_every_core_table(self) -> None:
        data = {
            "schema_version": "1.0",
            "mode": "replace",
            "materials": {"birch-4mm": MATERIAL_DATA},
            "default_material": "birch-4mm",
        }
        with pytest.raises(ConfigError, match="kerf_profiles, dimensional_limits, machines"):
            load_config_from_dict(CatalogConfig, data)

    def test_replace_mode_needs_default_material(self) -> None:
        data = {
            "schema_version": "1.0",
            "mode": "replace",
            "materials": {"birch-4mm": MATERIAL_DATA},
            "kerf_profiles": {"shop": {"width": 0.1}},
            "dimensional_limits": {
                "standard": {
                    "min_gap": 0.3,
                    "min_radius": 0.2,
                    "max_length": 500,
                    "positional_accuracy": 0.1,
                }
            },
            "machines": {
                "shop": {"work_area_width": 400, "work_area_height": 300, "max_thickness": 8}
            },
        }
        with pytest.raises(ConfigError, match="default_material"):
            load_config_from_dict(CatalogConfig, data)

    def test_range_order_checked(self) -> None:
        material = {**MATERIAL_DATA, "operating_temp_range": {"min": 50, "max": 10}}
        with pytest.raises(ConfigError, match="min must not exceed max"):
            load_config_from_dict(
                CatalogConfig, {"schema_version": "1.0", "materials": {"x": material}}
            )


class TestDesignSchema:
    """Tests for DesignConfig rules."""

    def test_defaults(self) -> None:
        design = load_config_from_dict(
            DesignConfig, {"schema_version": "1.0", "material": "plywood-3mm"}
        )
        assert design.machine == "glowforge-basic"
        assert design.precision.value == "standard"
        assert design.features == []
        assert design.compensation is None

    def test_unknown_feature_type_rejected(self) -> None:
        data = {
            "schema_version": "1.0",
            "material": "plywood-3mm",
            "features": [{"type": "triangle", "x": 0, "y": 0}],
        }
        with pytest.raises(ConfigError):
            load_config_from_dict(DesignConfig, data)

    @pytest.mark.parametrize(
        ("closed", "points"),
        [(True, [[0, 0], [1, 0]]), (False, [[0, 0]])],
    )
    def test_paths_need_enough_points(self, closed: bool, points: list) -> None:
        data = {
            "schema_version": "1.0",
            "material": "plywood-3mm",
            "paths": [{"points": points, "closed": closed}],
        }
        with pytest.raises(ConfigError, match="path needs"):
            load_config_from_dict(DesignConfig, data)


# =============================================================================
# Adapters
# =============================================================================


class TestFeatureAdapters:
    """Tests for features_from_config and paths_from_config."""

    def test_every_feature_type(self) -> None:
        design = load_config_from_dict(
            DesignConfig,
            {
                "schema_version": "1.0",
                "material": "plywood-3mm",
                "features": [
                    {"type": "line", "start": [0, 0], "end": [30, 40]},
                    {"type": "curve", "center": [10, 10], "radius": 5},
                    {"type": "hole", "center": [5, 5], "diameter": 2},
                    {"type": "slot", "x": 1, "y": 2, "length": 10, "width": 1},
                    {"type": "beam", "x": 0, "y": 0, "length": 80, "width": 10},
                    {
                        "type": "cantilever",
                        "x": 0,
                        "y": 0,
                        "length": 30,
                        "width": 5,
                        "horizontal": False,
                    },
                    {"type": "joint", "x": 0, "y": 0, "length": 6, "width": 3, "fit": "press"},
                ],
            },
        )
        features = features_from_config(design.features)

        expected_types = [
            LineFeature,
            CurveFeature,
            HoleFeature,
            SlotFeature,
            BeamFeature,
            CantileverFeature,
            JointFeature,
        ]
        assert [type(f) for f in features] == expected_types
        line, curve, hole, slot, _, cantilever, joint = features
        assert line.length == pytest.approx(50)
        assert curve.radius == 5
        assert hole.bounds == BoundingBox(4, 4, 2, 2)
        assert slot.bounds == BoundingBox(1, 2, 10, 1)
        assert cantilever.bounds == BoundingBox(0, 0, 5, 30)
        assert joint.fit == JointFit.PRESS

    def test_paths(self) -> None:
        design = load_config_from_dict(
            DesignConfig,
            {
                "schema_version": "1.0",
                "material": "plywood-3mm",
                "paths": [
                    {"points": [[0, 0], [10, 0], [10, 10]]},
                    {"points": [[0, 0], [5, 5]], "closed": False},
                ],
            },
        )
        closed, open_path = paths_from_config(design.paths)
        assert closed.closed
        assert not open_path.closed
        assert open_path.coords == [(0, 0), (5, 5)]


class TestCatalogAdapters:
    """Tests for catalog_from_config."""

    def test_merge_adds_to_builtin_tables(self) -> None:
        config = load_config_from_dict(
            CatalogConfig,
            {
                "schema_version": "1.0",
                "materials": {"birch-4mm": MATERIAL_DATA},
                "intents": {"Shop": ["birch-4mm"]},
            },
        )
        catalog = catalog_from_config(config)

        assert "birch-4mm" in catalog.material_keys()
        assert "plywood-3mm" in catalog.material_keys()
        assert catalog.recommend_materials("shop") == ["birch-4mm"]
        constraints = catalog.resolve_constraints("birch-4mm")
        assert constraints.material.min_hole_size == 1.6
        # Structural limits fall back to the nearest wood thickness
        assert constraints.structural.max_span_without_support == 120

    def test_replace_discards_builtin_tables(self) -> None:
        config = load_config_from_dict(
            CatalogConfig,
            {
                "schema_version": "1.0",
                "mode": "replace",
                "materials": {"birch-4mm": MATERIAL_DATA},
                "kerf_profiles": {"shop": {"width": 0.15, "variation": 0.02}},
                "dimensional_limits": {
                    "standard": {
                        "min_gap": 0.3,
                        "min_radius": 0.2,
                        "max_length": 500,
                        "positional_accuracy": 0.1,
                    }
                },
                "machines": {
                    "shop": {"work_area_width": 400, "work_area_height": 300, "max_thickness": 8}
                },
                "default_material": "birch-4mm",
            },
        )
        catalog = catalog_from_config(config)

        assert catalog.material_keys() == ["birch-4mm"]
        assert catalog.machine_keys() == ["shop"]
        with pytest.raises(UnknownMaterialError):
            catalog.material("plywood-3mm")
        # No structural table was supplied
        with pytest.raises(CatalogError):
            catalog.resolve_constraints("birch-4mm", "shop")


class TestJobAdapters:
    """Tests for the nesting job adapters."""

    def test_parts_and_sheets(self) -> None:
        job = load_config_from_dict(NestingJobConfig, JOB_DATA)
        (part,) = parts_from_job(job)
        (sheet,) = sheets_from_job(job)

        assert part.name == "side"
        assert part.quantity == 2
        assert sheet.name == "Birch 300x200"
        assert sheet.area == 60000

    def test_options_and_cost(self) -> None:
        job = load_config_from_dict(
            NestingJobConfig,
            {
                **JOB_DATA,
                "options": {"algorithm": "minimal_waste", "minimum_spacing": 1},
                "cost": {"hourly_rate": 40},
            },
        )
        options = options_from_job(job)
        assert options.algorithm == NestingAlgorithm.MINIMAL_WASTE
        assert options.minimum_spacing == 1
        assert options.allow_rotation

        cost = cost_model_from_job(job)
        assert cost.hourly_rate == 40
        assert cost.minutes_per_sheet == 45

"""Tests for the manufacturability validator.

Tests cover:
- Hole, feature size, structural, kerf, dimensional and material checks
- Per-feature reporting order and whole-design checks
- Score and estimated success aggregation
- Joint tolerance calculation
"""

from __future__ import annotations

import dataclasses

import pytest

from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.services.validation import (
    ManufacturabilityValidator,
    beam_max_span,
    build_result,
    effective_span_limit,
    estimated_success,
    joint_tolerance,
    manufacturability_score,
    validate,
)
from kerfwise.domain.services.validation.checks import check_dimensional
from kerfwise.domain.value_objects import (
    BeamFeature,
    BoundingBox,
    CantileverFeature,
    CurveFeature,
    HoleFeature,
    JointFeature,
    JointFit,
    LineFeature,
    ManufacturingConstraints,
    Severity,
    SlotFeature,
    Violation,
    ViolationCategory,
)


def _violation(severity: Severity) -> Violation:
    return Violation(
        category=ViolationCategory.MATERIAL,
        severity=severity,
        message="test",
        location=BoundingBox(0, 0, 1, 1),
    )


# =============================================================================
# Beam model
# =============================================================================


class TestBeamModel:
    """Tests for the simplified beam span estimate."""

    def test_span_scales_with_fourth_root_of_width(self) -> None:
        narrow = beam_max_span(width=10, thickness=3, elastic_modulus_gpa=9, safety_factor=2)
        wide = beam_max_span(width=160, thickness=3, elastic_modulus_gpa=9, safety_factor=2)
        assert wide == pytest.approx(narrow * 2)

    def test_safety_factor_divides_span(self) -> None:
        base = beam_max_span(width=20, thickness=3, elastic_modulus_gpa=9, safety_factor=1)
        safer = beam_max_span(width=20, thickness=3, elastic_modulus_gpa=9, safety_factor=2)
        assert safer == pytest.approx(base / 2)

    def test_degenerate_section_has_no_span(self) -> None:
        assert beam_max_span(width=0, thickness=3, elastic_modulus_gpa=9, safety_factor=2) == 0

    def test_non_positive_safety_factor_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            beam_max_span(width=20, thickness=3, elastic_modulus_gpa=9, safety_factor=0)

    def test_effective_limit_never_below_table(self) -> None:
        limit = effective_span_limit(
            width=20,
            thickness=3,
            elastic_modulus_gpa=9,
            safety_factor=2,
            max_span_without_support=120,
        )
        assert limit == 120


# =============================================================================
# Scoring
# =============================================================================


class TestScoring:
    """Tests for score and estimated success."""

    def test_clean_design(self) -> None:
        result = build_result([])
        assert result.is_valid
        assert result.score == 100
        assert result.estimated_success == 95

    def test_score_subtracts_weights(self) -> None:
        violations = [_violation(s) for s in (Severity.HIGH, Severity.MEDIUM, Severity.LOW)]
        assert manufacturability_score(violations) == 91

    def test_score_floors_at_zero(self) -> None:
        assert manufacturability_score([_violation(Severity.HIGH)] * 30) == 0

    @pytest.mark.parametrize(
        ("severities", "expected"),
        [
            ([Severity.HIGH], 60),
            ([Severity.HIGH] * 2, 40),
            ([Severity.HIGH] * 5, 20),
            ([Severity.MEDIUM], 80),
            ([Severity.MEDIUM] * 4, 60),
            ([Severity.LOW] * 3, 95),
            ([Severity.HIGH, Severity.MEDIUM], 60),
        ],
    )
    def test_estimated_success(self, severities: list[Severity], expected: int) -> None:
        assert estimated_success([_violation(s) for s in severities]) == expected

    def test_any_violation_makes_design_invalid(self) -> None:
        assert not build_result([_violation(Severity.LOW)]).is_valid

    def test_adding_violations_never_raises_score(self) -> None:
        violations: list[Violation] = []
        previous = manufacturability_score(violations)
        for severity in [Severity.LOW, Severity.HIGH, Severity.MEDIUM] * 10:
            violations.append(_violation(severity))
            current = manufacturability_score(violations)
            assert current <= previous
            previous = current


# =============================================================================
# Validator
# =============================================================================


class TestValidate:
    """Tests for ManufacturabilityValidator.validate."""

    def test_undersized_hole_on_acrylic(self, acrylic_constraints: ManufacturingConstraints) -> None:
        result = validate([HoleFeature.at(10, 10, diameter=1.0)], acrylic_constraints)

        assert not result.is_valid
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.category == ViolationCategory.HOLE_SIZE
        assert violation.severity == Severity.MEDIUM
        assert violation.message == "Hole diameter 1mm below minimum 1.8mm"
        assert violation.fix == "Increase hole diameter to minimum 1.8mm"
        assert result.score == 97
        assert result.estimated_success == 80

    def test_short_beam_on_plywood_is_valid(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        result = validate([BeamFeature.at(0, 0, length=50, width=20)], plywood_constraints)
        assert result.is_valid
        assert result.violations == ()
        assert result.score == 100
        assert result.estimated_success == 95

    def test_empty_design_is_valid(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([], plywood_constraints)
        assert result.is_valid
        assert result.score == 100

    def test_long_beam_exceeds_span(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([BeamFeature.at(0, 0, length=200, width=20)], plywood_constraints)
        structural = result.by_category(ViolationCategory.STRUCTURAL)
        assert len(structural) == 1
        assert structural[0].severity == Severity.HIGH
        assert structural[0].message == "Beam span 200mm exceeds safe limit of 120mm"

    def test_narrow_beam(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([BeamFeature.at(0, 0, length=30, width=2)], plywood_constraints)
        assert len(result.violations) == 1
        assert result.violations[0].severity == Severity.MEDIUM
        assert "below structural minimum 3mm" in result.violations[0].message

    def test_long_cantilever(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([CantileverFeature.at(0, 0, length=50, width=10)], plywood_constraints)
        structural = result.by_category(ViolationCategory.STRUCTURAL)
        assert [v.message for v in structural] == ["Cantilever 50mm exceeds limit of 40mm"]

    def test_per_feature_check_order(self, acrylic_constraints: ManufacturingConstraints) -> None:
        """A hairline slot trips size, kerf, dimensional and material checks in order."""
        result = validate([SlotFeature.at(0, 0, length=10, width=0.05)], acrylic_constraints)

        assert [v.category for v in result.violations] == [
            ViolationCategory.FEATURE_SIZE,
            ViolationCategory.KERF,
            ViolationCategory.DIMENSIONAL,
            ViolationCategory.MATERIAL,
            ViolationCategory.MATERIAL,
        ]
        assert [v.severity for v in result.violations] == [
            Severity.HIGH,
            Severity.HIGH,
            Severity.LOW,
            Severity.MEDIUM,
            Severity.LOW,
        ]
        assert result.score == 85
        assert result.estimated_success == 40

    def test_violations_grouped_by_feature_in_input_order(
        self, acrylic_constraints: ManufacturingConstraints
    ) -> None:
        features = [
            HoleFeature.at(10, 10, diameter=1.0),
            SlotFeature.at(50, 50, length=10, width=0.05),
            HoleFeature.at(100, 100, diameter=1.2),
        ]
        result = validate(features, acrylic_constraints)

        categories = [v.category for v in result.violations]
        assert categories[0] == ViolationCategory.HOLE_SIZE
        assert categories[-1] == ViolationCategory.HOLE_SIZE
        assert categories.count(ViolationCategory.HOLE_SIZE) == 2
        assert result.violations[-1].location == features[2].bounds

    def test_recommendations_are_distinct(
        self, acrylic_constraints: ManufacturingConstraints
    ) -> None:
        features = [HoleFeature.at(10, 10, diameter=1.0), HoleFeature.at(100, 100, diameter=1.0)]
        result = validate(features, acrylic_constraints)
        assert len(result.violations) == 2
        assert result.recommendations == ("Increase hole diameter to minimum 1.8mm",)
        assert result.score == 94
        assert result.estimated_success == 70

    def test_close_holes_flag_spacing(self, plywood_constraints: ManufacturingConstraints) -> None:
        features = [HoleFeature.at(10, 10, diameter=2), HoleFeature.at(10, 10, diameter=2.3)]
        result = validate(features, plywood_constraints)

        spacing = result.by_category(ViolationCategory.FEATURE_SPACING)
        assert len(spacing) == 2
        assert all(v.severity == Severity.HIGH for v in spacing)
        assert spacing[0].message == "Features 0.15mm apart, minimum is 0.2mm"
        assert len(result.violations) == 2

    def test_neighbours_are_found_by_centre(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        # Edges 0.15mm apart, centres 2.15mm apart: outside the 0.3mm search radius
        features = [HoleFeature.at(10, 10, diameter=2), HoleFeature.at(12.15, 10, diameter=2)]
        result = validate(features, plywood_constraints)
        assert result.by_category(ViolationCategory.FEATURE_SPACING) == ()

    def test_outline_with_shared_corners_is_valid(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        outline = [
            LineFeature.between(0, 0, 100, 0),
            LineFeature.between(100, 0, 100, 100),
            LineFeature.between(100, 100, 0, 100),
            LineFeature.between(0, 100, 0, 0),
        ]
        result = validate(outline, plywood_constraints)
        assert result.is_valid
        assert result.score == 100

    def test_hole_beside_diagonal_line_is_valid(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        features = [LineFeature.between(0, 10, 10, 0), HoleFeature.at(0.95, 0.95, diameter=1.6)]
        result = validate(features, plywood_constraints)
        assert result.by_category(ViolationCategory.FEATURE_SPACING) == ()
        assert result.is_valid

    def test_crossing_lines_flag_spacing(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        features = [LineFeature.between(0, 0, 10, 10), LineFeature.between(0, 10, 10, 0)]
        result = validate(features, plywood_constraints)
        spacing = result.by_category(ViolationCategory.FEATURE_SPACING)
        assert [v.message for v in spacing] == ["Features 0mm apart, minimum is 0.2mm"] * 2

    def test_design_larger_than_bed(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([LineFeature.between(0, 0, 600, 0)], plywood_constraints)
        messages = [v.message for v in result.violations]
        assert "Cut length 600mm exceeds maximum single cut 500mm" in messages
        assert messages[-1] == "Design 600x0mm exceeds machine work area 279x508mm"
        assert result.violations[-1].severity == Severity.HIGH

    def test_material_thicker_than_machine_allows(
        self, plywood_constraints: ManufacturingConstraints
    ) -> None:
        thin_machine = dataclasses.replace(plywood_constraints.machine, max_thickness=2)
        constraints = dataclasses.replace(plywood_constraints, machine=thin_machine)
        result = validate([BeamFeature.at(0, 0, length=50, width=20)], constraints)
        assert [v.category for v in result.violations] == [ViolationCategory.MATERIAL]
        assert "exceeds machine maximum 2mm" in result.violations[0].message

    def test_narrow_joint_finger(self, plywood_constraints: ManufacturingConstraints) -> None:
        result = validate([JointFeature.at(0, 0, length=5, width=0.35)], plywood_constraints)
        kerf = result.by_category(ViolationCategory.KERF)
        assert len(kerf) == 1
        assert kerf[0].fix == "Widen joint finger to at least 0.4mm"

    def test_slot_between_kerf_and_minimum(
        self, acrylic_constraints: ManufacturingConstraints
    ) -> None:
        result = validate([SlotFeature.at(0, 0, length=4, width=0.45)], acrylic_constraints)
        kerf = result.by_category(ViolationCategory.KERF)
        assert len(kerf) == 1
        assert kerf[0].severity == Severity.MEDIUM

    def test_small_curve_radius(self, plywood_constraints: ManufacturingConstraints) -> None:
        curve = CurveFeature.arc(0, 0, radius=0.1, sweep_degrees=360)
        violations = check_dimensional(curve, plywood_constraints)
        assert any(v.message == "Curve radius 0.1mm below minimum 0.2mm" for v in violations)

    def test_validation_is_deterministic(
        self, acrylic_constraints: ManufacturingConstraints
    ) -> None:
        features = [
            HoleFeature.at(10, 10, diameter=1.0),
            HoleFeature.at(11.5, 10, diameter=1.0),
            SlotFeature.at(0, 20, length=50, width=0.3),
        ]
        assert validate(features, acrylic_constraints) == validate(features, acrylic_constraints)

    def test_non_feature_rejected(self, plywood_constraints: ManufacturingConstraints) -> None:
        with pytest.raises(InvalidInputError, match="Feature 1"):
            validate(
                [HoleFeature.at(0, 0, 2), {"type": "hole"}],  # type: ignore[list-item]
                plywood_constraints,
            )

    def test_validator_requires_constraints(self) -> None:
        with pytest.raises(InvalidInputError):
            ManufacturabilityValidator("plywood-3mm")  # type: ignore[arg-type]


class TestJointTolerance:
    """Tests for joint_tolerance."""

    @pytest.mark.parametrize(
        ("fit", "expected"),
        [
            (JointFit.PRESS, -0.05 + 0.12),
            (JointFit.LOOSE, 0.15 + 0.12),
            (JointFit.SLIDING, 0.25 + 0.12),
        ],
    )
    def test_material_tolerance_plus_kerf(
        self,
        plywood_constraints: ManufacturingConstraints,
        fit: JointFit,
        expected: float,
    ) -> None:
        assert joint_tolerance(plywood_constraints, fit) == pytest.approx(expected)

    def test_accepts_string_fit(self, plywood_constraints: ManufacturingConstraints) -> None:
        validator = ManufacturabilityValidator(plywood_constraints)
        assert validator.joint_tolerance(JointFit.LOOSE) == joint_tolerance(
            plywood_constraints, "loose"
        )

    def test_unknown_fit_rejected(self, plywood_constraints: ManufacturingConstraints) -> None:
        with pytest.raises(InvalidInputError, match="Unknown joint fit"):
            joint_tolerance(plywood_constraints, "snug")

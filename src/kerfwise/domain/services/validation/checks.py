"""Per-feature and per-design manufacturability checks.

Each check takes a feature (or the whole design) and the resolved
ManufacturingConstraints and returns the violations it finds, in a fixed
order. Checks never raise for a bad design; a design problem is a Violation.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import reduce

from kerfwise.domain.value_objects import (
    BeamFeature,
    BoundingBox,
    CantileverFeature,
    CurveFeature,
    GeometricFeature,
    HoleFeature,
    JointFeature,
    ManufacturingConstraints,
    Severity,
    SlotFeature,
    Violation,
    ViolationCategory,
)

from .beam import effective_span_limit


def _mm(value: float) -> str:
    """Length for messages: at most two decimals, no trailing zeros."""
    return f"{round(value, 2):g}"


def check_feature_size(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Smallest extent against the material's minimum feature size."""
    minimum = constraints.material.min_feature_size
    if feature.min_dimension >= minimum:
        return []
    return [
        Violation(
            category=ViolationCategory.FEATURE_SIZE,
            severity=Severity.HIGH,
            message=f"Feature {_mm(feature.min_dimension)}mm below minimum {_mm(minimum)}mm",
            location=feature.bounds,
            fix=f"Increase feature size to minimum {_mm(minimum)}mm",
        )
    ]


def check_hole_size(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Hole diameter against the material's minimum clean hole."""
    if not isinstance(feature, HoleFeature):
        return []
    minimum = constraints.material.min_hole_size
    if feature.diameter >= minimum:
        return []
    return [
        Violation(
            category=ViolationCategory.HOLE_SIZE,
            severity=Severity.MEDIUM,
            message=f"Hole diameter {_mm(feature.diameter)}mm below minimum {_mm(minimum)}mm",
            location=feature.bounds,
            fix=f"Increase hole diameter to minimum {_mm(minimum)}mm",
        )
    ]


def check_structural(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Beam span, cantilever length and strip width."""
    if not isinstance(feature, (BeamFeature, CantileverFeature)):
        return []

    structural = constraints.structural
    violations: list[Violation] = []

    if isinstance(feature, BeamFeature):
        limit = effective_span_limit(
            width=feature.width,
            thickness=constraints.material.thickness,
            elastic_modulus_gpa=constraints.material.elastic_modulus,
            safety_factor=structural.safety_factor,
            max_span_without_support=structural.max_span_without_support,
        )
        if feature.length > limit:
            violations.append(
                Violation(
                    category=ViolationCategory.STRUCTURAL,
                    severity=Severity.HIGH,
                    message=f"Beam span {_mm(feature.length)}mm exceeds safe limit of {_mm(limit)}mm",
                    location=feature.bounds,
                    fix=f"Add support or reduce span to {_mm(limit)}mm",
                )
            )
    else:
        limit = structural.max_cantilever_length
        if feature.length > limit:
            violations.append(
                Violation(
                    category=ViolationCategory.STRUCTURAL,
                    severity=Severity.HIGH,
                    message=f"Cantilever {_mm(feature.length)}mm exceeds limit of {_mm(limit)}mm",
                    location=feature.bounds,
                    fix=f"Reduce cantilever to {_mm(limit)}mm or add support",
                )
            )

    if feature.width < structural.min_beam_width:
        label = "Beam" if isinstance(feature, BeamFeature) else "Cantilever"
        violations.append(
            Violation(
                category=ViolationCategory.STRUCTURAL,
                severity=Severity.MEDIUM,
                message=(
                    f"{label} width {_mm(feature.width)}mm below structural minimum "
                    f"{_mm(structural.min_beam_width)}mm"
                ),
                location=feature.bounds,
                fix=f"Widen {label.lower()} to at least {_mm(structural.min_beam_width)}mm",
            )
        )
    return violations


def check_kerf(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Slots and joint fingers against the material removed by the beam."""
    kerf = constraints.kerf
    material = constraints.material

    if isinstance(feature, SlotFeature):
        widest_kerf = kerf.worst_case_width
        if feature.width < widest_kerf:
            return [
                Violation(
                    category=ViolationCategory.KERF,
                    severity=Severity.HIGH,
                    message=(
                        f"Slot width {_mm(feature.width)}mm is narrower than the "
                        f"kerf {_mm(widest_kerf)}mm"
                    ),
                    location=feature.bounds,
                    fix=f"Widen slot to at least {_mm(material.min_slot_width)}mm",
                )
            ]
        if feature.width < material.min_slot_width:
            return [
                Violation(
                    category=ViolationCategory.KERF,
                    severity=Severity.MEDIUM,
                    message=(
                        f"Slot width {_mm(feature.width)}mm below minimum "
                        f"{_mm(material.min_slot_width)}mm"
                    ),
                    location=feature.bounds,
                    fix=f"Widen slot to at least {_mm(material.min_slot_width)}mm",
                )
            ]
        return []

    if isinstance(feature, JointFeature):
        remaining = feature.width - kerf.width
        if remaining < material.min_feature_size:
            needed = material.min_feature_size + kerf.width
            return [
                Violation(
                    category=ViolationCategory.KERF,
                    severity=Severity.MEDIUM,
                    message=(
                        f"Joint finger {_mm(feature.width)}mm leaves {_mm(remaining)}mm "
                        f"after kerf, minimum is {_mm(material.min_feature_size)}mm"
                    ),
                    location=feature.bounds,
                    fix=f"Widen joint finger to at least {_mm(needed)}mm",
                )
            ]
    return []


def check_dimensional(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Cut length, corner radius and positional accuracy for the precision tier."""
    limits = constraints.dimensional
    violations: list[Violation] = []

    if feature.cut_length > limits.max_length:
        violations.append(
            Violation(
                category=ViolationCategory.DIMENSIONAL,
                severity=Severity.MEDIUM,
                message=(
                    f"Cut length {_mm(feature.cut_length)}mm exceeds maximum single cut "
                    f"{_mm(limits.max_length)}mm"
                ),
                location=feature.bounds,
                fix=f"Split the cut into segments under {_mm(limits.max_length)}mm",
            )
        )

    if isinstance(feature, CurveFeature) and feature.radius < limits.min_radius:
        violations.append(
            Violation(
                category=ViolationCategory.DIMENSIONAL,
                severity=Severity.LOW,
                message=(
                    f"Curve radius {_mm(feature.radius)}mm below minimum "
                    f"{_mm(limits.min_radius)}mm"
                ),
                location=feature.bounds,
                fix=f"Increase corner radius to {_mm(limits.min_radius)}mm",
            )
        )

    resolvable = 2 * limits.positional_accuracy
    if feature.min_dimension < resolvable:
        violations.append(
            Violation(
                category=ViolationCategory.DIMENSIONAL,
                severity=Severity.LOW,
                message=(
                    f"Feature {_mm(feature.min_dimension)}mm is below positional "
                    f"accuracy range {_mm(resolvable)}mm"
                ),
                location=feature.bounds,
                fix="Use a higher precision tier or enlarge the feature",
            )
        )
    return violations


def check_material(
    feature: GeometricFeature, constraints: ManufacturingConstraints
) -> list[Violation]:
    """Aspect ratio and heat-affected zone against the material."""
    material = constraints.material
    violations: list[Violation] = []

    if isinstance(feature, (SlotFeature, BeamFeature, CantileverFeature, JointFeature)):
        if feature.width > 0 and feature.aspect_ratio > material.max_aspect_ratio:
            max_length = material.max_aspect_ratio * feature.width
            violations.append(
                Violation(
                    category=ViolationCategory.MATERIAL,
                    severity=Severity.MEDIUM,
                    message=(
                        f"Aspect ratio {feature.aspect_ratio:.1f}:1 exceeds material "
                        f"limit {material.max_aspect_ratio:g}:1"
                    ),
                    location=feature.bounds,
                    fix=f"Shorten to {_mm(max_length)}mm or widen the feature",
                )
            )

    heat_band = 2 * material.heat_affected_zone
    if feature.min_dimension < heat_band:
        violations.append(
            Violation(
                category=ViolationCategory.MATERIAL,
                severity=Severity.LOW,
                message=(
                    f"Feature {_mm(feature.min_dimension)}mm lies within the "
                    f"heat-affected zone ({_mm(heat_band)}mm)"
                ),
                location=feature.bounds,
                fix=f"Increase feature to at least {_mm(heat_band)}mm to avoid heat damage",
            )
        )
    return violations


# Per-feature checks in reporting order; spacing runs between size and structure
FEATURE_CHECKS = (
    check_feature_size,
    check_hole_size,
)
POST_SPACING_CHECKS = (
    check_structural,
    check_kerf,
    check_dimensional,
    check_material,
)


def design_extents(features: Sequence[GeometricFeature]) -> BoundingBox | None:
    """Bounding box of every feature, or None for an empty design."""
    if not features:
        return None
    return reduce(lambda acc, f: acc.union(f.bounds), features[1:], features[0].bounds)


def check_design(
    features: Sequence[GeometricFeature], constraints: ManufacturingConstraints
) -> list[Violation]:
    """Whole-design checks: machine bed size and material thickness."""
    extents = design_extents(features)
    if extents is None:
        return []

    machine = constraints.machine
    violations: list[Violation] = []

    if not machine.fits_work_area(extents.width, extents.height):
        violations.append(
            Violation(
                category=ViolationCategory.DIMENSIONAL,
                severity=Severity.HIGH,
                message=(
                    f"Design {_mm(extents.width)}x{_mm(extents.height)}mm exceeds machine "
                    f"work area {_mm(machine.work_area_width)}x{_mm(machine.work_area_height)}mm"
                ),
                location=extents,
                fix="Split the design into parts that fit the machine bed",
            )
        )

    thickness = constraints.material.thickness
    if thickness > machine.max_thickness:
        violations.append(
            Violation(
                category=ViolationCategory.MATERIAL,
                severity=Severity.HIGH,
                message=(
                    f"Material thickness {_mm(thickness)}mm exceeds machine maximum "
                    f"{_mm(machine.max_thickness)}mm"
                ),
                location=extents,
                fix=f"Choose material no thicker than {_mm(machine.max_thickness)}mm",
            )
        )
    return violations

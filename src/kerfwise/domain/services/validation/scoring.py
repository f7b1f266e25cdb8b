"""Manufacturability scoring."""

from __future__ import annotations

from collections.abc import Sequence

from kerfwise.domain.value_objects import Severity, ValidationResult, Violation

MAX_SCORE = 100
CLEAN_SUCCESS = 95


def manufacturability_score(violations: Sequence[Violation]) -> int:
    """100 minus the summed severity weights, floored at zero."""
    return max(0, MAX_SCORE - sum(v.severity.weight for v in violations))


def estimated_success(violations: Sequence[Violation]) -> int:
    """Estimated chance of a clean cut, driven by the worst severity present.

    Any high-severity finding caps the estimate at 80 minus 20 per finding
    (floor 20); otherwise medium findings cap it at 90 minus 10 per finding
    (floor 60); low findings alone leave it at 95.
    """
    high = sum(1 for v in violations if v.severity == Severity.HIGH)
    if high:
        return max(20, 80 - 20 * high)
    medium = sum(1 for v in violations if v.severity == Severity.MEDIUM)
    if medium:
        return max(60, 90 - 10 * medium)
    return CLEAN_SUCCESS


def build_result(violations: Sequence[Violation]) -> ValidationResult:
    """Aggregate violations into a ValidationResult."""
    recommendations = tuple(dict.fromkeys(v.fix for v in violations if v.fix))
    return ValidationResult(
        is_valid=not violations,
        violations=tuple(violations),
        recommendations=recommendations,
        score=manufacturability_score(violations),
        estimated_success=estimated_success(violations),
    )

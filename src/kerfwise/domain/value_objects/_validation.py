"""Validation result value objects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from kerfwise.domain.errors import InvalidInputError

from ._geometry import BoundingBox


class ViolationCategory(str, Enum):
    """What kind of manufacturing rule a violation breaks."""

    KERF = "kerf"
    FEATURE_SIZE = "feature_size"
    HOLE_SIZE = "hole_size"
    FEATURE_SPACING = "feature_spacing"
    STRUCTURAL = "structural"
    DIMENSIONAL = "dimensional"
    MATERIAL = "material"


class Severity(str, Enum):
    """Violation severity with its score deduction."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        """Points deducted from the manufacturability score."""
        return _SEVERITY_WEIGHTS[self]


_SEVERITY_WEIGHTS = {Severity.LOW: 1, Severity.MEDIUM: 3, Severity.HIGH: 5}


@dataclass(frozen=True)
class Violation:
    """A single manufacturing rule broken by a design.

    Attributes:
        category: Rule family.
        severity: How badly the finding hurts manufacturability.
        message: Human-readable description with measured values.
        location: Bounding box of the offending geometry.
        fix: Suggested corrective action, if one is known.
    """

    category: ViolationCategory
    severity: Severity
    message: str
    location: BoundingBox
    fix: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Verdict of validating a design against a constraint bundle.

    Attributes:
        is_valid: True when the design has no violations at all.
        violations: Findings in check order.
        recommendations: Distinct fix texts, in the order first seen.
        score: Manufacturability score, 0-100.
        estimated_success: Estimated probability of a clean cut, 0-100.
    """

    is_valid: bool
    violations: tuple[Violation, ...]
    recommendations: tuple[str, ...]
    score: int
    estimated_success: int

    def __post_init__(self) -> None:
        if not 0 <= self.score <= 100:
            raise InvalidInputError("Score must be between 0 and 100")
        if not 0 <= self.estimated_success <= 100:
            raise InvalidInputError("Estimated success must be between 0 and 100")

    def count(self, severity: Severity) -> int:
        """Number of violations at a severity."""
        return sum(1 for v in self.violations if v.severity == severity)

    def by_category(self, category: ViolationCategory) -> tuple[Violation, ...]:
        """Violations of one category, in check order."""
        return tuple(v for v in self.violations if v.category == category)

"""ManufacturabilityValidator facade.

This module provides the ManufacturabilityValidator class, which runs every
manufacturability check against one resolved constraint bundle, and the
module-level validate / joint_tolerance functions for one-off calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.value_objects import (
    FEATURE_TYPES,
    CompensationMode,
    GeometricFeature,
    JointFit,
    ManufacturingConstraints,
    Path,
    ValidationResult,
    Violation,
)

from .checks import FEATURE_CHECKS, POST_SPACING_CHECKS, check_design
from .kerf_compensation import compensate
from .scoring import build_result
from .spacing import check_spacing

logger = logging.getLogger(__name__)


class ManufacturabilityValidator:
    """Validates designs against one set of manufacturing constraints.

    Violations are reported per feature in input order. For each feature the
    checks run as: feature size, hole size, spacing, structural, kerf,
    dimensional, material. Whole-design checks (machine bed, material
    thickness) follow the last feature.

    Example:
        >>> constraints = MaterialCatalog().resolve_constraints("acrylic-3mm")
        >>> validator = ManufacturabilityValidator(constraints)
        >>> result = validator.validate([HoleFeature.at(10, 10, diameter=1.0)])
        >>> result.is_valid
        False
    """

    def __init__(self, constraints: ManufacturingConstraints) -> None:
        """Initialize the validator.

        Args:
            constraints: Resolved constraint bundle to validate against.

        Raises:
            InvalidInputError: If constraints is not a ManufacturingConstraints.
        """
        if not isinstance(constraints, ManufacturingConstraints):
            raise InvalidInputError(
                f"Expected ManufacturingConstraints, got {type(constraints).__name__}"
            )
        self.constraints = constraints

    def validate(self, features: Sequence[GeometricFeature]) -> ValidationResult:
        """Check a design and score it.

        Args:
            features: Parsed design features.

        Returns:
            ValidationResult; a bad design is reported, never raised.

        Raises:
            InvalidInputError: If an item is not a geometric feature.
        """
        for index, feature in enumerate(features):
            if not isinstance(feature, FEATURE_TYPES):
                raise InvalidInputError(
                    f"Feature {index} is not a geometric feature: {type(feature).__name__}"
                )

        constraints = self.constraints
        spacing = check_spacing(features, constraints)

        violations: list[Violation] = []
        for index, feature in enumerate(features):
            for check in FEATURE_CHECKS:
                violations.extend(check(feature, constraints))
            if index in spacing:
                violations.append(spacing[index])
            for check in POST_SPACING_CHECKS:
                violations.extend(check(feature, constraints))
        violations.extend(check_design(features, constraints))

        result = build_result(violations)
        logger.info(
            "Validated %d features on %s: %d violations, score %d",
            len(features),
            constraints.material_key,
            len(result.violations),
            result.score,
        )
        return result

    def compensate(
        self,
        paths: Sequence[Path],
        mode: CompensationMode | None = None,
    ) -> tuple[Path, ...]:
        """Offset paths by half the machine's kerf.

        Args:
            paths: Cut paths to offset.
            mode: Compensation mode; the kerf profile's default if not provided.

        Returns:
            Compensated paths.
        """
        kerf = self.constraints.kerf
        return compensate(paths, kerf.width, mode or kerf.compensation)

    def joint_tolerance(self, fit: JointFit) -> float:
        """Clearance to design into a joint of the given fit (mm)."""
        return joint_tolerance(self.constraints, fit)


def validate(
    features: Sequence[GeometricFeature],
    constraints: ManufacturingConstraints,
) -> ValidationResult:
    """Validate a design against a constraint bundle.

    Args:
        features: Parsed design features.
        constraints: Resolved constraints from the catalog.

    Returns:
        ValidationResult with violations, score and estimated success.
    """
    return ManufacturabilityValidator(constraints).validate(features)


def joint_tolerance(constraints: ManufacturingConstraints, fit: JointFit | str) -> float:
    """Joint clearance: the material's fit tolerance plus kerf width and variation.

    Args:
        constraints: Resolved constraints supplying material and kerf.
        fit: Press, loose or sliding.

    Returns:
        Tolerance in mm.

    Raises:
        InvalidInputError: If fit is not a known joint fit.
    """
    try:
        fit = JointFit(fit)
    except ValueError:
        raise InvalidInputError(f"Unknown joint fit: {fit}") from None
    kerf = constraints.kerf
    return constraints.material.fit_tolerance(fit) + kerf.width + kerf.variation

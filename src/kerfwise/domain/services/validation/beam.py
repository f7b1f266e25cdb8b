"""Simplified beam model for laser-cut strips.

A beam is treated as a simply supported rectangular strip carrying a uniform
reference load. The maximum span is the length at which mid-span deflection
reaches one hundredth of the sheet thickness:

    delta = 5 * q * L^4 / (384 * E * I)
    L = (384 * E * I * delta / (5 * q)) ** 0.25 / safety_factor

Where:
- E = elastic modulus (MPa, i.e. N/mm^2)
- I = second moment of area = width * thickness^3 / 12 (mm^4)
- delta = allowed deflection = thickness / 100 (mm)
- q = REFERENCE_LOAD (N/mm)

The reference load is an assumption, not derived from the design. This is an
advisory estimate only and should not be used for structural engineering.
"""

from __future__ import annotations

from kerfwise.domain.errors import InvalidInputError

# Uniform reference load: 1 N/mm (1000 N/m) along the strip
REFERENCE_LOAD = 1.0

# Allowed deflection as a fraction of thickness
DEFLECTION_RATIO = 0.01

GPA_TO_MPA = 1000.0


def second_moment_of_area(width: float, thickness: float) -> float:
    """Second moment of area of a rectangular section (mm^4)."""
    return width * thickness**3 / 12


def beam_max_span(
    width: float,
    thickness: float,
    elastic_modulus_gpa: float,
    safety_factor: float,
    load: float = REFERENCE_LOAD,
) -> float:
    """Longest span that stays within the deflection limit.

    Args:
        width: Strip width across the span (mm).
        thickness: Sheet thickness (mm).
        elastic_modulus_gpa: Young's modulus of the material (GPa).
        safety_factor: Divisor applied to the computed span.
        load: Uniform load per unit length (N/mm).

    Returns:
        Maximum span in mm; zero for degenerate sections.
    """
    if width <= 0 or thickness <= 0 or elastic_modulus_gpa <= 0 or load <= 0:
        return 0.0
    if safety_factor <= 0:
        raise InvalidInputError("Safety factor must be positive")

    modulus = elastic_modulus_gpa * GPA_TO_MPA
    inertia = second_moment_of_area(width, thickness)
    deflection = thickness * DEFLECTION_RATIO

    span = (384 * modulus * inertia * deflection / (5 * load)) ** 0.25
    return span / safety_factor


def effective_span_limit(
    width: float,
    thickness: float,
    elastic_modulus_gpa: float,
    safety_factor: float,
    max_span_without_support: float,
) -> float:
    """Span ceiling used by the structural check.

    The larger of the beam model and the tabulated unsupported span limit.
    """
    computed = beam_max_span(width, thickness, elastic_modulus_gpa, safety_factor)
    return max(computed, max_span_without_support)

"""Manufacturability validation.

This package provides the checks that decide whether a design can be cut
from a material on a machine, the scoring that summarises them, and kerf
compensation of cut paths.
"""

from .beam import REFERENCE_LOAD, beam_max_span, effective_span_limit
from .kerf_compensation import compensate, offset_distance
from .scoring import build_result, estimated_success, manufacturability_score
from .spacing import check_spacing, edge_gap, footprint
from .validator import ManufacturabilityValidator, joint_tolerance, validate

__all__ = [
    "ManufacturabilityValidator",
    "REFERENCE_LOAD",
    "beam_max_span",
    "build_result",
    "check_spacing",
    "compensate",
    "edge_gap",
    "effective_span_limit",
    "estimated_success",
    "footprint",
    "joint_tolerance",
    "manufacturability_score",
    "offset_distance",
    "validate",
]

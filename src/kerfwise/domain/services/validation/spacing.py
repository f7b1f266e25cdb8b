"""Feature spacing check.

A feature's neighbours are the features whose centres lie within three kerf
widths of its own centre. The gap to the closest of them is measured edge to
edge between real footprints: discs for holes, segments for cut lines, the
circle outline for curves and rectangles for everything else. A footprint
nested inside another is measured boundary to boundary; partially
overlapping or touching footprints have no gap at all.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from shapely import STRtree
from shapely.geometry import LineString, Point, box
from shapely.geometry.base import BaseGeometry

from kerfwise.domain.value_objects import (
    CurveFeature,
    GeometricFeature,
    HoleFeature,
    LineFeature,
    ManufacturingConstraints,
    Severity,
    Violation,
    ViolationCategory,
)

logger = logging.getLogger(__name__)

# Neighbour search radius and minimum gap, in kerf widths
SEARCH_RADIUS_KERFS = 3.0
MIN_GAP_KERFS = 2.0

# Segments per quarter circle for round footprints
_QUAD_SEGS = 16


def footprint(feature: GeometricFeature) -> BaseGeometry:
    """Shapely geometry of the material a feature occupies or cuts."""
    bounds = feature.bounds
    center = bounds.center
    if isinstance(feature, HoleFeature):
        return Point(center.x, center.y).buffer(feature.diameter / 2, quad_segs=_QUAD_SEGS)
    if isinstance(feature, LineFeature):
        if feature.endpoints is not None:
            start, end = feature.endpoints
            coords = [(start.x, start.y), (end.x, end.y)]
        else:
            coords = [(bounds.x, bounds.y), (bounds.max_x, bounds.max_y)]
        if coords[0] == coords[1]:
            return Point(coords[0])
        return LineString(coords)
    if isinstance(feature, CurveFeature):
        return Point(center.x, center.y).buffer(feature.radius, quad_segs=_QUAD_SEGS).exterior
    if bounds.width == 0 and bounds.height == 0:
        return Point(bounds.x, bounds.y)
    if bounds.width == 0 or bounds.height == 0:
        return LineString([(bounds.x, bounds.y), (bounds.max_x, bounds.max_y)])
    return box(bounds.x, bounds.y, bounds.max_x, bounds.max_y)


def edge_gap(a: BaseGeometry, b: BaseGeometry) -> float:
    """Edge-to-edge gap between two footprints."""
    if not a.intersects(b):
        return a.distance(b)
    if a.area > 0 and a.contains(b):
        return a.boundary.distance(b.boundary if b.area > 0 else b)
    if b.area > 0 and b.contains(a):
        return b.boundary.distance(a.boundary if a.area > 0 else a)
    return 0.0


def nearest_neighbour(
    index: int, features: Sequence[GeometricFeature], centers: STRtree, radius: float
) -> int | None:
    """Index of the feature whose centre is closest to ``features[index]``'s.

    Only centres within ``radius`` count; ties go to the lowest index.
    """
    center = features[index].bounds.center
    window = box(center.x - radius, center.y - radius, center.x + radius, center.y + radius)
    nearest: tuple[float, int] | None = None
    for other in sorted(int(i) for i in centers.query(window)):
        if other == index:
            continue
        distance = center.distance_to(features[other].bounds.center)
        if distance > radius:
            continue
        if nearest is None or distance < nearest[0]:
            nearest = (distance, other)
    return None if nearest is None else nearest[1]


def check_spacing(
    features: Sequence[GeometricFeature], constraints: ManufacturingConstraints
) -> dict[int, Violation]:
    """Find features closer than two kerf widths to their nearest neighbour.

    Args:
        features: The design's features.
        constraints: Resolved constraints supplying the kerf width.

    Returns:
        Mapping of feature index to its spacing violation.
    """
    kerf_width = constraints.kerf.width
    if len(features) < 2 or kerf_width <= 0:
        return {}

    search_radius = SEARCH_RADIUS_KERFS * kerf_width
    min_gap = MIN_GAP_KERFS * kerf_width

    centers = STRtree([Point(f.bounds.center.x, f.bounds.center.y) for f in features])
    shapes = [footprint(f) for f in features]

    violations: dict[int, Violation] = {}
    for index, feature in enumerate(features):
        other = nearest_neighbour(index, features, centers, search_radius)
        if other is None:
            continue
        gap = edge_gap(shapes[index], shapes[other])
        if gap >= min_gap:
            continue

        logger.debug("Feature %d is %.3fmm from feature %d", index, gap, other)
        violations[index] = Violation(
            category=ViolationCategory.FEATURE_SPACING,
            severity=Severity.HIGH,
            message=f"Features {round(gap, 2):g}mm apart, minimum is {round(min_gap, 2):g}mm",
            location=feature.bounds.union(features[other].bounds),
            fix=f"Increase spacing to {round(min_gap, 2):g}mm or merge features",
        )
    return violations

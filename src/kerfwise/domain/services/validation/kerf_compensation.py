"""Kerf compensation by true path offsetting.

Closed paths are buffered as polygons with mitred joins so square corners
stay square; open paths are offset sideways with shapely's offset_curve
(positive offsets move to the left of the drawing direction). Offsetting
outward and then inward by the same kerf returns the original outline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from shapely.geometry import LinearRing, LineString, MultiLineString, MultiPolygon, Polygon
from shapely.geometry.polygon import orient

from kerfwise.domain.errors import InvalidInputError
from kerfwise.domain.value_objects import CompensationMode, Path

logger = logging.getLogger(__name__)

# Mitre joins longer than this many offset distances are bevelled
MITRE_LIMIT = 5.0


def offset_distance(kerf_width: float, mode: CompensationMode) -> float:
    """Signed offset applied to every path for a compensation mode.

    Args:
        kerf_width: Nominal kerf width in mm.
        mode: Compensation mode.

    Returns:
        -kerf/2 for inside, +kerf/2 for outside, 0 otherwise.
    """
    if kerf_width < 0:
        raise InvalidInputError(f"Kerf width must be non-negative, got {kerf_width}")
    if mode == CompensationMode.INSIDE:
        return -kerf_width / 2
    if mode == CompensationMode.OUTSIDE:
        return kerf_width / 2
    return 0.0


def _polygons(geometry) -> Iterable[Polygon]:
    if geometry.is_empty:
        return ()
    if isinstance(geometry, Polygon):
        return (geometry,)
    if isinstance(geometry, MultiPolygon):
        return tuple(geometry.geoms)
    return ()


def _lines(geometry) -> Iterable[LineString]:
    if geometry.is_empty:
        return ()
    if isinstance(geometry, LineString):
        return (geometry,)
    if isinstance(geometry, MultiLineString):
        return tuple(geometry.geoms)
    return ()


def _offset_closed(path: Path, distance: float) -> list[Path]:
    ring = LinearRing(path.coords)
    polygon = Polygon(ring)
    if not polygon.is_valid:
        raise InvalidInputError("Closed path must not intersect itself")

    sign = 1.0 if ring.is_ccw else -1.0
    shifted = polygon.buffer(distance, join_style="mitre", mitre_limit=MITRE_LIMIT)

    result: list[Path] = []
    for part in _polygons(shifted):
        part = orient(part, sign=sign)
        # Shapely repeats the first vertex at the end of a ring
        result.append(Path.from_coords(list(part.exterior.coords)[:-1], closed=True))
    return result


def _offset_open(path: Path, distance: float) -> list[Path]:
    line = LineString(path.coords)
    shifted = line.offset_curve(distance, join_style="mitre", mitre_limit=MITRE_LIMIT)
    return [
        Path.from_coords(list(part.coords), closed=False)
        for part in _lines(shifted)
        if len(part.coords) >= 2
    ]


def compensate(
    paths: Sequence[Path],
    kerf_width: float,
    mode: CompensationMode,
) -> tuple[Path, ...]:
    """Offset cut paths so the finished part keeps its drawn size.

    Args:
        paths: Paths to compensate.
        kerf_width: Nominal kerf width in mm.
        mode: Inside shrinks paths, outside grows them, center and none
            leave them unchanged.

    Returns:
        Compensated paths. Closed paths keep their orientation; an inset may
        split one path into several or remove it entirely.

    Raises:
        InvalidInputError: If the kerf width is negative or a closed path
            intersects itself.
    """
    distance = offset_distance(kerf_width, mode)
    if distance == 0:
        return tuple(paths)

    result: list[Path] = []
    for index, path in enumerate(paths):
        shifted = _offset_closed(path, distance) if path.closed else _offset_open(path, distance)
        if not shifted:
            logger.warning(
                "Path %d collapsed under %.3fmm %s offset and was dropped",
                index,
                abs(distance),
                mode.value,
            )
        result.extend(shifted)

    logger.debug("Compensated %d paths (%s, kerf %.3fmm)", len(paths), mode.value, kerf_width)
    return tuple(result)

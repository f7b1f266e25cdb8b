"""Design geometry value objects.

GeometricFeature is a sum type: one frozen dataclass per feature kind, so a
hole always carries a diameter and a beam always carries its length and
width. Features are produced by an external geometry parser and are only
read by the validator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from kerfwise.domain.errors import InvalidInputError

from ._materials import JointFit


class FeatureKind(str, Enum):
    """Kinds of parsed design geometry."""

    LINE = "line"
    CURVE = "curve"
    HOLE = "hole"
    SLOT = "slot"
    BEAM = "beam"
    CANTILEVER = "cantilever"
    JOINT = "joint"


@dataclass(frozen=True)
class Point2D:
    """2D point in design coordinates (mm). Negative values are valid."""

    x: float
    y: float

    def distance_to(self, other: Point2D) -> float:
        """Euclidean distance to another point."""
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box anchored at its minimum corner."""

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise InvalidInputError("Bounding box dimensions must be non-negative")

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point2D:
        """Centre point of the box."""
        return Point2D(self.x + self.width / 2, self.y + self.height / 2)

    def union(self, other: BoundingBox) -> BoundingBox:
        """Smallest box containing both boxes."""
        min_x = min(self.x, other.x)
        min_y = min(self.y, other.y)
        return BoundingBox(
            x=min_x,
            y=min_y,
            width=max(self.max_x, other.max_x) - min_x,
            height=max(self.max_y, other.max_y) - min_y,
        )

    def expanded(self, margin: float) -> BoundingBox:
        """Box grown by margin on every side."""
        return BoundingBox(
            x=self.x - margin,
            y=self.y - margin,
            width=self.width + 2 * margin,
            height=self.height + 2 * margin,
        )

    @classmethod
    def around(cls, center_x: float, center_y: float, width: float, height: float) -> BoundingBox:
        """Box of the given size centred on a point."""
        return cls(
            x=center_x - width / 2, y=center_y - height / 2, width=width, height=height
        )


@dataclass(frozen=True)
class Path:
    """A cut path: an open polyline or a closed polygon ring.

    Closed paths do not repeat their first point at the end.

    Attributes:
        points: Vertices in drawing order.
        closed: True for polygon rings, False for open polylines.
    """

    points: tuple[Point2D, ...]
    closed: bool = True

    def __post_init__(self) -> None:
        minimum = 3 if self.closed else 2
        if len(self.points) < minimum:
            kind = "Closed" if self.closed else "Open"
            raise InvalidInputError(
                f"{kind} path needs at least {minimum} points, got {len(self.points)}"
            )

    @classmethod
    def from_coords(
        cls, coords: list[tuple[float, float]] | tuple[tuple[float, float], ...], closed: bool = True
    ) -> Path:
        """Build a path from (x, y) tuples."""
        return cls(points=tuple(Point2D(float(x), float(y)) for x, y in coords), closed=closed)

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float) -> Path:
        """Closed counter-clockwise rectangle."""
        return cls.from_coords(
            [(x, y), (x + width, y), (x + width, y + height), (x, y + height)]
        )

    @property
    def coords(self) -> list[tuple[float, float]]:
        """Vertices as (x, y) tuples."""
        return [(p.x, p.y) for p in self.points]

    @property
    def length(self) -> float:
        """Total cut length, including the closing segment of a ring."""
        pts = list(self.points)
        if self.closed:
            pts.append(pts[0])
        return sum(a.distance_to(b) for a, b in zip(pts, pts[1:]))

    @property
    def bounds(self) -> BoundingBox:
        xs = [p.x for p in self.points]
        ys = [p.y for p in self.points]
        return BoundingBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


# =============================================================================
# Geometric features
# =============================================================================


@dataclass(frozen=True)
class _FeatureBase:
    """Fields shared by every feature kind.

    Attributes:
        bounds: Axis-aligned bounding box in design coordinates.
        min_dimension: Smallest extent of the feature (mm).
        max_dimension: Largest extent of the feature (mm).
        area: Enclosed area (mm^2); zero for pure cut lines.
    """

    bounds: BoundingBox
    min_dimension: float
    max_dimension: float
    area: float

    kind: ClassVar[FeatureKind]

    def __post_init__(self) -> None:
        if self.min_dimension < 0 or self.max_dimension < 0:
            raise InvalidInputError(
                f"{self.kind.value} feature extents must be non-negative"
            )
        if self.min_dimension > self.max_dimension:
            raise InvalidInputError(
                f"{self.kind.value} feature min_dimension exceeds max_dimension"
            )
        if self.area < 0:
            raise InvalidInputError(f"{self.kind.value} feature area must be non-negative")

    @property
    def cut_length(self) -> float:
        """Length of the laser path needed to cut this feature."""
        return 2 * (self.bounds.width + self.bounds.height)


@dataclass(frozen=True)
class LineFeature(_FeatureBase):
    """A single open cut line.

    Attributes:
        length: Cut length (mm).
        endpoints: Start and end of the cut. When unset the line is taken to
            run corner to corner across its bounds.
    """

    length: float
    endpoints: tuple[Point2D, Point2D] | None = None

    kind: ClassVar[FeatureKind] = FeatureKind.LINE

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.length < 0:
            raise InvalidInputError("Line length must be non-negative")

    @property
    def cut_length(self) -> float:
        return self.length

    @classmethod
    def between(cls, x1: float, y1: float, x2: float, y2: float) -> LineFeature:
        """Straight cut between two points; its only extent is its length."""
        length = math.hypot(x2 - x1, y2 - y1)
        bounds = BoundingBox(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1))
        return cls(
            bounds=bounds,
            min_dimension=length,
            max_dimension=length,
            area=0.0,
            length=length,
            endpoints=(Point2D(x1, y1), Point2D(x2, y2)),
        )


@dataclass(frozen=True)
class CurveFeature(_FeatureBase):
    """An arc or spline segment with its tightest radius of curvature."""

    length: float
    radius: float

    kind: ClassVar[FeatureKind] = FeatureKind.CURVE

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.length < 0:
            raise InvalidInputError("Curve length must be non-negative")
        if self.radius <= 0:
            raise InvalidInputError("Curve radius must be positive")

    @property
    def cut_length(self) -> float:
        return self.length

    @classmethod
    def arc(
        cls, center_x: float, center_y: float, radius: float, sweep_degrees: float = 90.0
    ) -> CurveFeature:
        """Circular arc; bounds are the full circle's box."""
        length = math.radians(sweep_degrees) * radius
        return cls(
            bounds=BoundingBox.around(center_x, center_y, 2 * radius, 2 * radius),
            min_dimension=min(2 * radius, length),
            max_dimension=max(2 * radius, length),
            area=0.0,
            length=length,
            radius=radius,
        )


@dataclass(frozen=True)
class HoleFeature(_FeatureBase):
    """A circular through-hole."""

    diameter: float

    kind: ClassVar[FeatureKind] = FeatureKind.HOLE

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.diameter <= 0:
            raise InvalidInputError("Hole diameter must be positive")

    @property
    def cut_length(self) -> float:
        return math.pi * self.diameter

    @classmethod
    def at(cls, center_x: float, center_y: float, diameter: float) -> HoleFeature:
        """Hole of the given diameter centred on a point."""
        if diameter <= 0:
            raise InvalidInputError("Hole diameter must be positive")
        return cls(
            bounds=BoundingBox.around(center_x, center_y, diameter, diameter),
            min_dimension=diameter,
            max_dimension=diameter,
            area=math.pi * diameter**2 / 4,
            diameter=diameter,
        )


@dataclass(frozen=True)
class _LengthWidthFeature(_FeatureBase):
    """Elongated feature described by length along its axis and width across it."""

    length: float
    width: float

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.length < 0 or self.width < 0:
            raise InvalidInputError(
                f"{self.kind.value} length and width must be non-negative"
            )

    @property
    def aspect_ratio(self) -> float:
        """Length divided by width; infinite for zero-width features."""
        if self.width == 0:
            return math.inf
        return self.length / self.width

    @classmethod
    def at(
        cls,
        x: float,
        y: float,
        length: float,
        width: float,
        horizontal: bool = True,
    ):
        """Feature with its minimum corner at (x, y), running along x or y."""
        if length < 0 or width < 0:
            raise InvalidInputError(f"{cls.kind.value} length and width must be non-negative")
        box_w, box_h = (length, width) if horizontal else (width, length)
        return cls(
            bounds=BoundingBox(x, y, box_w, box_h),
            min_dimension=min(length, width),
            max_dimension=max(length, width),
            area=length * width,
            length=length,
            width=width,
        )


@dataclass(frozen=True)
class SlotFeature(_LengthWidthFeature):
    """A narrow rectangular cut-out."""

    kind: ClassVar[FeatureKind] = FeatureKind.SLOT


@dataclass(frozen=True)
class BeamFeature(_LengthWidthFeature):
    """A strip of material supported at both ends."""

    kind: ClassVar[FeatureKind] = FeatureKind.BEAM

    @property
    def cut_length(self) -> float:
        # Beams are regions left between cuts, the two long edges are cut
        return 2 * self.length


@dataclass(frozen=True)
class CantileverFeature(_LengthWidthFeature):
    """A strip of material supported at one end only."""

    kind: ClassVar[FeatureKind] = FeatureKind.CANTILEVER

    @property
    def cut_length(self) -> float:
        return 2 * self.length + self.width


@dataclass(frozen=True)
class JointFeature(_FeatureBase):
    """A finger, tab or mating slot of an assembly joint."""

    length: float
    width: float
    fit: JointFit = JointFit.LOOSE

    kind: ClassVar[FeatureKind] = FeatureKind.JOINT

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.length < 0 or self.width < 0:
            raise InvalidInputError("joint length and width must be non-negative")

    @property
    def aspect_ratio(self) -> float:
        if self.width == 0:
            return math.inf
        return self.length / self.width

    @classmethod
    def at(
        cls,
        x: float,
        y: float,
        length: float,
        width: float,
        fit: JointFit = JointFit.LOOSE,
        horizontal: bool = True,
    ) -> JointFeature:
        """Joint finger with its minimum corner at (x, y)."""
        if length < 0 or width < 0:
            raise InvalidInputError("joint length and width must be non-negative")
        box_w, box_h = (length, width) if horizontal else (width, length)
        return cls(
            bounds=BoundingBox(x, y, box_w, box_h),
            min_dimension=min(length, width),
            max_dimension=max(length, width),
            area=length * width,
            length=length,
            width=width,
            fit=fit,
        )


GeometricFeature = Union[
    LineFeature,
    CurveFeature,
    HoleFeature,
    SlotFeature,
    BeamFeature,
    CantileverFeature,
    JointFeature,
]

FEATURE_TYPES: tuple[type, ...] = (
    LineFeature,
    CurveFeature,
    HoleFeature,
    SlotFeature,
    BeamFeature,
    CantileverFeature,
    JointFeature,
)

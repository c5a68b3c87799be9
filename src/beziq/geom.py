"""Handling geometries"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Sequence, Tuple

import numpy as np

from beziq.common import Point, Point2D, Point3D, PointLike


###############################################################################
# GeomMath
###############################################################################
class GeomMath:
    """Class to provide various static methods for points and vectors given as tuples.

    Vectors may be 2D or 3D unless stated otherwise. Divisions follow IEEE semantics:
    dividing by zero gives inf or NaN instead of raising.
    """

    @staticmethod
    def as_point(point: PointLike) -> Point:
        """Convert an indexable 2D or 3D point into a tuple of floats.

        Raises:
            ValueError: If the point is not 2D or 3D
        """
        result = tuple(float(value) for value in point)
        if len(result) not in (2, 3):
            raise ValueError(f"Points must be 2D or 3D, got {len(result)} components")
        return result

    @staticmethod
    def divide(numerator: float, denominator: float) -> float:
        """Divide two floats, returning inf or NaN on division by zero."""
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.divide(numerator, denominator))

    @staticmethod
    def add(a: Sequence[float], b: Sequence[float]) -> Point:
        """Component-wise sum a + b."""
        return tuple(x + y for x, y in zip(a, b))

    @staticmethod
    def sub(a: Sequence[float], b: Sequence[float]) -> Point:
        """Component-wise difference a - b."""
        return tuple(x - y for x, y in zip(a, b))

    @staticmethod
    def scale(a: Sequence[float], factor: float) -> Point:
        """Vector a multiplied by a scalar."""
        return tuple(x * factor for x in a)

    @staticmethod
    def lerp(a: Sequence[float], b: Sequence[float], t: float) -> Point:
        """Unclamped linear interpolation (1-t)·a + t·b."""
        omt = 1.0 - t
        return tuple(omt * x + t * y for x, y in zip(a, b))

    @staticmethod
    def dot(a: Sequence[float], b: Sequence[float]) -> float:
        """Dot product of two vectors."""
        return sum(x * y for x, y in zip(a, b))

    @staticmethod
    def determinant(a: Sequence[float], b: Sequence[float]) -> float:
        """2D determinant (z of the cross product), positive if b is counter-clockwise of a."""
        return a[0] * b[1] - a[1] * b[0]

    @staticmethod
    def cross(a: Sequence[float], b: Sequence[float]) -> Point3D:
        """3D cross product a × b."""
        return (
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        )

    @staticmethod
    def sqr_magnitude(a: Sequence[float]) -> float:
        """Squared length of a vector."""
        return sum(x * x for x in a)

    @staticmethod
    def magnitude(a: Sequence[float]) -> float:
        """Length of a vector."""
        return math.sqrt(GeomMath.sqr_magnitude(a))

    @staticmethod
    def normalize(a: Sequence[float]) -> Point:
        """Unit vector in the direction of a. A zero vector gives NaN components."""
        length = GeomMath.magnitude(a)
        return tuple(GeomMath.divide(x, length) for x in a)

    @staticmethod
    def rotate90_ccw(a: Sequence[float]) -> Point2D:
        """Rotate a 2D vector 90 degrees counter-clockwise."""
        return (-a[1], a[0])


###############################################################################
# Box
###############################################################################
@dataclass(frozen=True, init=False)
class Box:
    """
    Represents an axis-aligned box in 2D or 3D.

    Attributes:
        min (Point): The minimum corner.
        max (Point): The maximum corner.
    """

    min: Point
    max: Point

    def __init__(self, minimum: PointLike, maximum: PointLike):
        """Initialize Box with two corners.

        The corners are normalized per axis, so that min ≤ max on every axis.

        Args:
            minimum: The minimum corner
            maximum: The maximum corner

        Raises:
            ValueError: If the corners have different or unsupported dimensions
        """
        corner_a = GeomMath.as_point(minimum)
        corner_b = GeomMath.as_point(maximum)
        if len(corner_a) != len(corner_b):
            raise ValueError(f"Box corners must have the same dimension, got {len(corner_a)} and {len(corner_b)}")
        object.__setattr__(self, "min", tuple(min(a, b) for a, b in zip(corner_a, corner_b)))
        object.__setattr__(self, "max", tuple(max(a, b) for a, b in zip(corner_a, corner_b)))

    @classmethod
    def from_points(cls, points: Iterable[PointLike]) -> Box:
        """Create the smallest Box containing all given points.

        Raises:
            ValueError: If no points are given
        """
        pts = [GeomMath.as_point(p) for p in points]
        if not pts:
            raise ValueError("At least one point is required to create a Box")
        return cls(tuple(map(min, zip(*pts))), tuple(map(max, zip(*pts))))

    @property
    def dim(self) -> int:
        """int: The dimension of the box, 2 or 3."""
        return len(self.min)

    @property
    def xmin(self) -> float:
        """float: The minimum x-coordinate."""
        return self.min[0]

    @property
    def ymin(self) -> float:
        """float: The minimum y-coordinate."""
        return self.min[1]

    @property
    def xmax(self) -> float:
        """float: The maximum x-coordinate."""
        return self.max[0]

    @property
    def ymax(self) -> float:
        """float: The maximum y-coordinate."""
        return self.max[1]

    @property
    def width(self) -> float:
        """float: The extent along x."""
        return self.max[0] - self.min[0]

    @property
    def height(self) -> float:
        """float: The extent along y."""
        return self.max[1] - self.min[1]

    @property
    def size(self) -> Point:
        """The extent along every axis."""
        return GeomMath.sub(self.max, self.min)

    @property
    def center(self) -> Point:
        """The center of the box."""
        return tuple((a + b) / 2 for a, b in zip(self.min, self.max))

    def contains(self, point: PointLike, tolerance: float = 0.0) -> bool:
        """Return True if the point lies inside the box or on its border (within tolerance)."""
        pt = GeomMath.as_point(point)
        return all(lo - tolerance <= v <= hi + tolerance for v, lo, hi in zip(pt, self.min, self.max))

    def encapsulate(self, point: PointLike) -> Box:
        """Return a box grown to contain the given point."""
        pt = GeomMath.as_point(point)
        return Box(tuple(map(min, self.min, pt)), tuple(map(max, self.max, pt)))

    @classmethod
    def from_dict(cls, data: Dict[str, Sequence[float]]) -> Box:
        """Create a Box instance from a dictionary with "min" and "max" entries."""
        return cls(data["min"], data["max"])

    def to_dict(self) -> Dict[str, Tuple[float, ...]]:
        """Convert the Box instance to a dictionary."""
        return {"min": self.min, "max": self.max}

    def __str__(self):
        """Returns a string representation of the Box instance."""
        return f"Box(min={self.min}, max={self.max}, size={self.size})"


###############################################################################
# Circles
###############################################################################
@dataclass(frozen=True)
class Circle2D:
    """A 2D circle with a center and a radius."""

    center: Point2D
    radius: float

    @property
    def area(self) -> float:
        """float: The area of the circle."""
        return math.pi * self.radius * self.radius

    @property
    def circumference(self) -> float:
        """float: The circumference of the circle."""
        return 2.0 * math.pi * self.radius

    @classmethod
    def from_osculating(cls, point: PointLike, velocity: PointLike, acceleration: PointLike) -> Circle2D:
        """Create the osculating circle of a curve from its point, velocity and acceleration.

        The center lies along the counter-clockwise normal at the signed radius 1/κ.
        At inflection points (κ = 0) the center and radius are not finite.
        """
        curvature = GeomMath.divide(
            GeomMath.determinant(velocity, acceleration), GeomMath.magnitude(velocity) ** 3
        )
        normal = GeomMath.rotate90_ccw(GeomMath.normalize(velocity))
        signed_radius = GeomMath.divide(1.0, curvature)
        center = GeomMath.add(point, GeomMath.scale(normal, signed_radius))
        return cls((center[0], center[1]), abs(signed_radius))


@dataclass(frozen=True)
class Circle3D:
    """A 3D circle with a center, a normal/axis and a radius."""

    center: Point3D
    normal: Point3D
    radius: float

    @property
    def area(self) -> float:
        """float: The area of the circle."""
        return math.pi * self.radius * self.radius

    @property
    def circumference(self) -> float:
        """float: The circumference of the circle."""
        return 2.0 * math.pi * self.radius

    @classmethod
    def from_osculating(cls, point: PointLike, velocity: PointLike, acceleration: PointLike) -> Circle3D:
        """Create the osculating circle of a 3D curve from its point, velocity and acceleration.

        The circle lies in the osculating plane; its normal is the axis of curvature.
        Where velocity and acceleration are parallel the result is not finite.
        """
        curvature_vector = GeomMath.scale(
            GeomMath.cross(velocity, acceleration),
            GeomMath.divide(1.0, GeomMath.magnitude(velocity) ** 3),
        )
        curvature = GeomMath.magnitude(curvature_vector)
        axis = GeomMath.normalize(curvature_vector)
        normal = GeomMath.normalize(GeomMath.cross(velocity, GeomMath.cross(acceleration, velocity)))
        signed_radius = GeomMath.divide(1.0, curvature)
        center = GeomMath.add(point, GeomMath.scale(normal, signed_radius))
        return cls((center[0], center[1], center[2]), (axis[0], axis[1], axis[2]), abs(signed_radius))


###############################################################################
# Linear shapes
###############################################################################
@dataclass(frozen=True)
class Line2D:
    """An infinite 2D line through origin along direction."""

    origin: Point2D
    direction: Point2D


@dataclass(frozen=True)
class Ray2D:
    """A 2D half-line starting at origin and extending along direction."""

    origin: Point2D
    direction: Point2D


@dataclass(frozen=True)
class LineSegment2D:
    """A finite 2D line segment between start and end."""

    start: Point2D
    end: Point2D

    @property
    def direction(self) -> Point2D:
        """The (non-normalized) vector from start to end."""
        return (self.end[0] - self.start[0], self.end[1] - self.start[1])

    @property
    def length_squared(self) -> float:
        """float: The squared length of the segment."""
        return GeomMath.sqr_magnitude(self.direction)

    @property
    def length(self) -> float:
        """float: The length of the segment."""
        return math.sqrt(self.length_squared)


def main():
    """Main"""
    box = Box.from_points([(0.0, 1.0), (2.0, -1.0), (1.0, 3.0)])
    print(box)
    print(Circle2D.from_osculating((0.0, 0.0), (1.0, 0.0), (0.0, 1.0)))


if __name__ == "__main__":
    main()

"""2D cubic Bezier curves: curvature, osculating circles and line intersections."""

from __future__ import annotations

import math
from typing import ClassVar, Optional, Tuple, Union

from beziq.bezier import CubicBezier, bezier_polynomial
from beziq.bezier3d import CubicBezier3D
from beziq.common import Point2D
from beziq.geom import Circle2D, GeomMath, Line2D, LineSegment2D, Ray2D
from beziq.results import ResultsMax3

LinearShape2D = Union[Line2D, Ray2D, LineSegment2D]


###############################################################################
# CubicBezier2D
###############################################################################
class CubicBezier2D(CubicBezier):
    """A cubic Bezier curve in the plane."""

    dimension: ClassVar[Optional[int]] = 2

    def to_3d(self, z: float = 0.0) -> CubicBezier3D:
        """Return this curve in 3D, lying in the plane at height z."""
        return CubicBezier3D(*((p[0], p[1], z) for p in self.points))

    ###########################################################################
    # Differential geometry
    ###########################################################################

    def tangent(self, t: float) -> Point2D:
        """Return the normalized direction of the curve at t."""
        x, y = GeomMath.normalize(self.derivative(t))
        return (x, y)

    def normal(self, t: float) -> Point2D:
        """Return the tangent at t rotated 90 degrees counter-clockwise."""
        return GeomMath.rotate90_ccw(self.tangent(t))

    def curvature(self, t: float) -> float:
        """Return the signed curvature at t, the reciprocal radius of the osculating circle.

        Positive values turn counter-clockwise. Where the velocity is zero the result
        is inf or NaN.
        """
        velocity, acceleration = self.first_two_derivatives(t)
        return GeomMath.divide(
            GeomMath.determinant(velocity, acceleration), GeomMath.magnitude(velocity) ** 3
        )

    def osculating_circle(self, t: float) -> Circle2D:
        """Return the osculating circle at t.

        It is defined everywhere except at inflection points, where curvature is 0 and
        the center and radius are not finite.
        """
        return Circle2D.from_osculating(*self.point_and_first_two_derivatives(t))

    ###########################################################################
    # Intersections
    ###########################################################################

    def _intersect(
        self,
        origin: Point2D,
        direction: Point2D,
        range_limited: bool = False,
        min_line_t: float = -math.inf,
        max_line_t: float = math.inf,
    ) -> ResultsMax3[float]:
        """Return curve t values in (0, 1) where the curve crosses a line.

        The control points are expressed in the frame of the line: their signed
        distance to the line (scaled by the direction length) forms a cubic whose roots
        are the crossings. For rays and segments the coordinate along the line
        (scaled by the squared direction length) is checked against the valid range.
        """
        relative = [GeomMath.sub(p, origin) for p in self.points]
        heights = bezier_polynomial(*(GeomMath.determinant(p, direction) for p in relative))
        roots = heights.roots.where(lambda t: 0.0 < t < 1.0)

        if not range_limited:
            return roots

        along = bezier_polynomial(*(GeomMath.dot(p, direction) for p in relative))
        return roots.where(lambda t: min_line_t <= along.sample(t) <= max_line_t)

    def intersect(self, shape: LinearShape2D) -> ResultsMax3[float]:
        """Return the curve t values where the curve intersects a line, ray or segment.

        Args:
            shape: A Line2D, Ray2D or LineSegment2D

        Returns:
            ResultsMax3[float]: Up to three t values in (0, 1), in solver order

        Raises:
            TypeError: If shape is not a supported linear shape
        """
        if isinstance(shape, Line2D):
            return self._intersect(shape.origin, shape.direction)
        if isinstance(shape, Ray2D):
            return self._intersect(shape.origin, shape.direction, range_limited=True, min_line_t=0.0)
        if isinstance(shape, LineSegment2D):
            return self._intersect(
                shape.start, shape.direction, range_limited=True, min_line_t=0.0, max_line_t=shape.length_squared
            )
        raise TypeError(f"Can't intersect a cubic Bezier curve with {type(shape).__name__}")

    def intersection_points(self, shape: LinearShape2D) -> ResultsMax3[Point2D]:
        """Return the points where the curve intersects a line, ray or segment."""
        return self.intersect(shape).map(self.point)

    def raycast(self, ray: Ray2D, max_dist: float = math.inf) -> Optional[Tuple[Point2D, float]]:
        """Return the first hit of a ray against the curve.

        Distances are measured along the ray, scaled by the length of its direction.

        Args:
            ray: The ray to cast
            max_dist: Hits further along the ray are ignored

        Returns:
            The hit point and its curve t value, or None if the ray misses
        """
        closest: Optional[Tuple[Point2D, float]] = None
        closest_dist = math.inf
        for t in self.intersect(ray):
            hit = self.point(t)
            dist = GeomMath.dot(ray.direction, GeomMath.sub(hit, ray.origin))
            if dist < closest_dist and dist <= max_dist:
                closest_dist = dist
                closest = ((hit[0], hit[1]), t)
        return closest

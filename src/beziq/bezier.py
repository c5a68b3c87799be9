"""Cubic Bezier curve evaluation and dimension-independent curve analysis.

Positions and derivatives are evaluated with an unrolled de Casteljau scheme. For each
axis the control points are linearly interpolated three levels deep::

    a = lerp(p0, p1)    b = lerp(p1, p2)    c = lerp(p2, p3)
    d = lerp(a, b)      e = lerp(b, c)
    point = lerp(d, e)

with ``lerp(u, v, t) = (1-t)·u + t·v``. The derivatives fall out of the same terms:
``B'(t) = 3·(e - d)``, ``B''(t) = 6·(a - 2b + c)`` and the constant
``B'''(t) = -6·p0 + 18·p1 - 18·p2 + 6·p3``. The fused accessors share these terms and
return exactly the values of the single-quantity accessors.
"""

from __future__ import annotations

import logging
import math
from typing import ClassVar, List, Optional, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray

from beziq.common import Point, PointLike
from beziq.consts import (
    ARC_LENGTH_ACCURACY,
    PROJECT_ITERATIONS,
    PROJECT_SUBDIVISIONS,
    SAMPLE_NUMPY_THRESHOLD,
)
from beziq.geom import Box, GeomMath
from beziq.polynomial import Polynomial, solve_quadratic
from beziq.results import ResultsMax2

logger = logging.getLogger(__name__)

_MAX_PROJECTION_CANDIDATES: int = 3  # one per root of the cubic polynomial degree


def bezier_polynomial(p0: float, p1: float, p2: float, p3: float) -> Polynomial:
    """Return the cubic polynomial a·t³ + b·t² + c·t + d of one Bezier component."""
    return Polynomial(
        -p0 + 3.0 * (p1 - p2) + p3,
        3.0 * (p0 - 2.0 * p1 + p2),
        3.0 * (-p0 + p1),
        p0,
    )


###############################################################################
# CubicBezier
###############################################################################
class CubicBezier:
    """A cubic Bezier curve with four 2D or 3D control points.

    The curve is a plain value object: control points may be replaced, but no derived
    state is cached. Evaluation is defined for every real t; values outside [0, 1]
    extrapolate the curve.
    """

    dimension: ClassVar[Optional[int]] = None  # fixed by the 2D and 3D subclasses

    def __init__(self, p0: PointLike, p1: PointLike, p2: PointLike, p3: PointLike):
        """Initialize the curve from four control points.

        Args:
            p0: The start point of the curve
            p1: The start tangent point
            p2: The end tangent point
            p3: The end point of the curve

        Raises:
            ValueError: If the points are not all 2D or all 3D, or don't match the
                dimension of the curve class
        """
        points = [GeomMath.as_point(p) for p in (p0, p1, p2, p3)]
        dim = len(points[0])
        if any(len(p) != dim for p in points):
            raise ValueError(f"All control points must have the same dimension, got {[len(p) for p in points]}")
        self._check_dimension(dim)
        self._points: List[Point] = points

    @classmethod
    def from_points(cls, points: Sequence[PointLike]):
        """Create a curve from a sequence of exactly four control points.

        Raises:
            ValueError: If the number of points is not four
        """
        if len(points) != 4:
            raise ValueError(f"A cubic Bezier curve requires exactly 4 control points, got {len(points)}")
        return cls(*points)

    def _check_dimension(self, dim: int) -> None:
        if self.dimension is not None and dim != self.dimension:
            raise ValueError(f"{type(self).__name__} requires {self.dimension}D points, got {dim}D")

    ###########################################################################
    # Control points
    ###########################################################################

    @property
    def dim(self) -> int:
        """int: The dimension of the control points, 2 or 3."""
        return len(self._points[0])

    @property
    def degree(self) -> int:
        """int: The degree of the curve."""
        return 3

    @property
    def count(self) -> int:
        """int: The number of control points."""
        return 4

    @property
    def points(self) -> Tuple[Point, Point, Point, Point]:
        """The four control points."""
        p0, p1, p2, p3 = self._points
        return (p0, p1, p2, p3)

    def __getitem__(self, index: int) -> Point:
        if not 0 <= index <= 3:
            raise IndexError(f"Control point index has to be in the 0 to 3 range, got {index}")
        return self._points[index]

    def __setitem__(self, index: int, value: PointLike) -> None:
        if not 0 <= index <= 3:
            raise IndexError(f"Control point index has to be in the 0 to 3 range, got {index}")
        point = GeomMath.as_point(value)
        if len(point) != self.dim:
            raise ValueError(f"Control point must be {self.dim}D, got {len(point)}D")
        self._points[index] = point

    @property
    def p0(self) -> Point:
        """The start point of the curve."""
        return self._points[0]

    @p0.setter
    def p0(self, value: PointLike) -> None:
        self[0] = value

    @property
    def p1(self) -> Point:
        """The second control point, the start tangent point."""
        return self._points[1]

    @p1.setter
    def p1(self, value: PointLike) -> None:
        self[1] = value

    @property
    def p2(self) -> Point:
        """The third control point, the end tangent point."""
        return self._points[2]

    @p2.setter
    def p2(self, value: PointLike) -> None:
        self[2] = value

    @property
    def p3(self) -> Point:
        """The end point of the curve."""
        return self._points[3]

    @p3.setter
    def p3(self, value: PointLike) -> None:
        self[3] = value

    @property
    def start_point(self) -> Point:
        """The start point of the curve, equal to p0."""
        return self._points[0]

    @property
    def end_point(self) -> Point:
        """The end point of the curve, equal to p3."""
        return self._points[3]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubicBezier):
            return NotImplemented
        return self._points == other._points

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(p) for p in self._points)})"

    def to_numpy(self) -> NDArray[np.float64]:
        """Return the control points as an array of shape (4, dim)."""
        return np.array(self._points, dtype=np.float64)

    def translated(self, offset: Sequence[float]):
        """Return a copy of this curve moved by offset."""
        return type(self)(*(GeomMath.add(p, offset) for p in self._points))

    ###########################################################################
    # Evaluation
    ###########################################################################

    @staticmethod
    def _casteljau_axis(
        p0: float, p1: float, p2: float, p3: float, t: float
    ) -> Tuple[float, float, float, float, float]:
        """Return the first two de Casteljau levels (a, b, c, d, e) of one axis."""
        omt = 1.0 - t
        a = omt * p0 + t * p1
        b = omt * p1 + t * p2
        c = omt * p2 + t * p3
        d = omt * a + t * b
        e = omt * b + t * c
        return a, b, c, d, e

    def _levels(self, t: float) -> List[Tuple[float, float, float, float, float]]:
        p0, p1, p2, p3 = self._points
        return [self._casteljau_axis(p0[i], p1[i], p2[i], p3[i], t) for i in range(len(p0))]

    @staticmethod
    def _point_from_level(level: Tuple[float, float, float, float, float], t: float) -> float:
        _, _, _, d, e = level
        return (1.0 - t) * d + t * e

    @staticmethod
    def _derivative_from_level(level: Tuple[float, float, float, float, float]) -> float:
        _, _, _, d, e = level
        return 3.0 * (e - d)

    @staticmethod
    def _second_derivative_from_level(level: Tuple[float, float, float, float, float]) -> float:
        a, b, c, _, _ = level
        return 6.0 * (a - 2.0 * b + c)

    def point(self, t: float) -> Point:
        """Return the point on the curve at parameter t."""
        return tuple(self._point_from_level(level, t) for level in self._levels(t))

    def derivative(self, t: float) -> Point:
        """Return the first derivative (velocity) of the curve at parameter t."""
        return tuple(self._derivative_from_level(level) for level in self._levels(t))

    def second_derivative(self, t: float) -> Point:
        """Return the second derivative (acceleration) of the curve at parameter t."""
        return tuple(self._second_derivative_from_level(level) for level in self._levels(t))

    def third_derivative(self, t: float = 0.0) -> Point:  # pylint: disable=unused-argument
        """Return the third derivative (jerk) of the curve, which is constant in t."""
        p0, p1, p2, p3 = self._points
        return tuple(-6.0 * p0[i] + 18.0 * p1[i] - 18.0 * p2[i] + 6.0 * p3[i] for i in range(len(p0)))

    def point_and_derivative(self, t: float) -> Tuple[Point, Point]:
        """Return the point and the first derivative at parameter t."""
        levels = self._levels(t)
        return (
            tuple(self._point_from_level(level, t) for level in levels),
            tuple(self._derivative_from_level(level) for level in levels),
        )

    def first_two_derivatives(self, t: float) -> Tuple[Point, Point]:
        """Return the first and second derivative at parameter t."""
        levels = self._levels(t)
        return (
            tuple(self._derivative_from_level(level) for level in levels),
            tuple(self._second_derivative_from_level(level) for level in levels),
        )

    def point_and_first_two_derivatives(self, t: float) -> Tuple[Point, Point, Point]:
        """Return the point, first and second derivative at parameter t."""
        levels = self._levels(t)
        return (
            tuple(self._point_from_level(level, t) for level in levels),
            tuple(self._derivative_from_level(level) for level in levels),
            tuple(self._second_derivative_from_level(level) for level in levels),
        )

    def all_three_derivatives(self, t: float) -> Tuple[Point, Point, Point]:
        """Return the first, second and third derivative at parameter t."""
        velocity, acceleration = self.first_two_derivatives(t)
        return velocity, acceleration, self.third_derivative(t)

    def point_component(self, axis: int, t: float) -> float:
        """Return a single coordinate of the point at parameter t.

        Raises:
            ValueError: If axis is not a valid axis of this curve
        """
        self._check_axis(axis)
        p0, p1, p2, p3 = self._points
        return self._point_from_level(self._casteljau_axis(p0[axis], p1[axis], p2[axis], p3[axis], t), t)

    def _check_axis(self, axis: int) -> None:
        if not 0 <= axis < self.dim:
            raise ValueError(f"axis has to be in the 0 to {self.dim - 1} range, got {axis}")

    ###########################################################################
    # Polynomial factors
    ###########################################################################

    def cubic_factors(self, axis: int) -> Tuple[float, float, float, float]:
        """Return the factors (a, b, c, d) of one axis in the form a·t³ + b·t² + c·t + d."""
        self._check_axis(axis)
        return bezier_polynomial(*(p[axis] for p in self._points)).factors

    def derivative_factors_axis(self, axis: int) -> Tuple[float, float, float]:
        """Return the factors (a, b, c) of one axis of the derivative, a·t² + b·t + c."""
        self._check_axis(axis)
        p0, p1, p2, p3 = (p[axis] for p in self._points)
        return (
            3.0 * (-p0 + 3.0 * (p1 - p2) + p3),
            6.0 * (p0 - 2.0 * p1 + p2),
            3.0 * (-p0 + p1),
        )

    def coefficients(self) -> Tuple[Point, Point, Point, Point]:
        """Return the polynomial coefficients (c3, c2, c1, c0), so B(t) = c3·t³ + c2·t² + c1·t + c0."""
        factors = [self.cubic_factors(axis) for axis in range(self.dim)]
        c3, c2, c1, c0 = (tuple(f[i] for f in factors) for i in range(4))
        return c3, c2, c1, c0

    def derivative_factors(self) -> Tuple[Point, Point, Point]:
        """Return the derivative factors (a, b, c) as vectors, B'(t) = a·t² + b·t + c."""
        factors = [self.derivative_factors_axis(axis) for axis in range(self.dim)]
        a, b, c = (tuple(f[i] for f in factors) for i in range(3))
        return a, b, c

    def second_derivative_factors(self) -> Tuple[Point, Point]:
        """Return the second derivative factors (a, b) as vectors, B''(t) = a·t + b."""
        a, b, _ = self.derivative_factors()
        return GeomMath.scale(a, 2.0), b

    ###########################################################################
    # Vectorized evaluation & sampling
    ###########################################################################

    def points_at(self, t_values: Sequence[float]) -> NDArray[np.float64]:
        """Evaluate the curve at many parameters at once via Bernstein weights.

        Returns:
            NDArray[np.float64]: Points of shape (len(t_values), dim)
        """
        t = np.asarray(t_values, dtype=np.float64)
        omt = 1.0 - t
        omt2 = omt * omt
        t2 = t * t
        weights = np.stack((omt2 * omt, 3.0 * omt2 * t, 3.0 * omt * t2, t2 * t), axis=-1)
        return weights @ self.to_numpy()

    def derivatives_at(self, t_values: Sequence[float]) -> NDArray[np.float64]:
        """Evaluate the first derivative at many parameters at once via Bernstein weights.

        Returns:
            NDArray[np.float64]: Derivatives of shape (len(t_values), dim)
        """
        t = np.asarray(t_values, dtype=np.float64)
        omt = 1.0 - t
        t2 = t * t
        weights = np.stack((-3.0 * omt * omt, 9.0 * t2 - 12.0 * t + 3.0, 6.0 * t - 9.0 * t2, 3.0 * t2), axis=-1)
        return weights @ self.to_numpy()

    def sample_points(self, steps: int) -> NDArray[np.float64]:
        """Sample the curve uniformly in t into steps segments.

        Uses pure Python forward differencing for small step counts, NumPy for larger ones.

        Args:
            steps: Number of segments to divide the curve into

        Returns:
            NDArray[np.float64]: Points of shape (steps+1, dim), first p0 and last p3

        Raises:
            ValueError: If steps is smaller than 1
        """
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")
        if steps < SAMPLE_NUMPY_THRESHOLD:
            return self._sample_points_python(steps)
        return self.points_at(np.linspace(0.0, 1.0, steps + 1, dtype=np.float64))

    def _sample_points_python(self, steps: int) -> NDArray[np.float64]:
        """Forward differencing: O(1) per point, the third difference is constant for cubics."""
        h = 1.0 / steps
        output = np.empty((steps + 1, self.dim), dtype=np.float64)

        # exact points at t = 0, h, 2h, 3h give exact initial differences
        b0, b1, b2, b3 = (self.point(i * h) for i in range(4))
        for axis in range(self.dim):
            value = b0[axis]
            d_first = b1[axis] - b0[axis]
            d_second = b2[axis] - 2.0 * b1[axis] + b0[axis]
            d_third = b3[axis] - 3.0 * b2[axis] + 3.0 * b1[axis] - b0[axis]

            output[0, axis] = value
            for i in range(1, steps + 1):
                value += d_first
                d_first += d_second
                d_second += d_third
                output[i, axis] = value

        # pin the end point, accumulated round-off must not move it
        output[steps] = self._points[3]
        return output

    ###########################################################################
    # Splitting & blending
    ###########################################################################

    def split(self, t: float):
        """Split this curve at t into two curves of the exact same shape.

        Returns:
            Tuple of the curve before t and the curve after t
        """
        levels = self._levels(t)
        a = tuple(level[0] for level in levels)
        c = tuple(level[2] for level in levels)
        d = tuple(level[3] for level in levels)
        e = tuple(level[4] for level in levels)
        p = tuple(self._point_from_level(level, t) for level in levels)
        cls = type(self)
        return cls(self.p0, a, d, p), cls(p, e, c, self.p3)

    @classmethod
    def lerp(cls, a: CubicBezier, b: CubicBezier, t: float):
        """Return the linear blend between two curves, by blending their control points."""
        if a.dim != b.dim:
            raise ValueError(f"Can't blend a {a.dim}D curve with a {b.dim}D curve")
        return cls(*(GeomMath.lerp(pa, pb, t) for pa, pb in zip(a.points, b.points)))

    ###########################################################################
    # Extrema & bounds
    ###########################################################################

    def local_extrema(self, axis: int) -> ResultsMax2[float]:
        """Return the t values in (0, 1) where the given axis has a local extremum.

        These are the roots of the per-axis derivative polynomial.

        Raises:
            ValueError: If axis is not a valid axis of this curve
        """
        roots = solve_quadratic(*self.derivative_factors_axis(axis))
        return roots.where(lambda t: 0.0 < t < 1.0)

    def local_extrema_points(self, axis: int) -> ResultsMax2[float]:
        """Return the coordinate values along the given axis at its local extrema."""
        return self.local_extrema(axis).map(lambda t: self.point_component(axis, t))

    def bounds(self) -> Box:
        """Return the tight axis-aligned bounding box of the curve over t in [0, 1]."""
        p0, p3 = self._points[0], self._points[3]
        minimum = [min(a, b) for a, b in zip(p0, p3)]
        maximum = [max(a, b) for a, b in zip(p0, p3)]
        for axis in range(self.dim):
            for value in self.local_extrema_points(axis):
                minimum[axis] = min(minimum[axis], value)
                maximum[axis] = max(maximum[axis], value)
        return Box(minimum, maximum)

    ###########################################################################
    # Arc length
    ###########################################################################

    def arc_length(self, accuracy: int = ARC_LENGTH_ACCURACY) -> float:
        """Approximate the length of the curve by summing chords between sampled points.

        The curve is sampled at ``t = i / (accuracy - 1)``; more samples give a closer
        (always shorter or equal) approximation of the true length.

        Args:
            accuracy: Number of sample points, including both end points

        Returns:
            float: The approximate length; the chord length p0-p3 if accuracy <= 2
        """
        if accuracy <= 2:
            return GeomMath.magnitude(GeomMath.sub(self.p3, self.p0))
        samples = self.sample_points(accuracy - 1)
        return float(np.sum(np.linalg.norm(np.diff(samples, axis=0), axis=1)))

    ###########################################################################
    # Point projection
    ###########################################################################

    def project_point(
        self,
        point: PointLike,
        initial_subdivisions: int = PROJECT_SUBDIVISIONS,
        refinement_iterations: int = PROJECT_ITERATIONS,
    ) -> Tuple[Point, float]:
        """Return the point on the curve closest to the given point, and its t value.

        The squared distance to the query point has its critical points where
        ``f(t) = dot(B(t) - point, B'(t))`` is zero. f is sampled uniformly over [0, 1]
        to bracket sign changes; each bracket midpoint is refined with Newton-Raphson
        using ``f'(t) = dot(B(t) - point, B''(t)) + dot(B'(t), B'(t))``. The refined
        candidates and both end points are compared by squared distance.

        Coarse subdivisions can miss a bracket, and with it the true closest point.

        Args:
            point: The point to project
            initial_subdivisions: Number of uniform samples used to find brackets
            refinement_iterations: Number of Newton-Raphson steps per bracket

        Returns:
            Tuple of the closest point on the curve and its t value in [0, 1]

        Raises:
            ValueError: If the point dimension doesn't match or initial_subdivisions < 2
        """
        query = GeomMath.as_point(point)
        if len(query) != self.dim:
            raise ValueError(f"Point must be {self.dim}D, got {len(query)}D")
        if initial_subdivisions < 2:
            raise ValueError(f"initial_subdivisions must be at least 2, got {initial_subdivisions}")

        # the curve relative to the query point; distances become magnitudes
        relative = CubicBezier(*(GeomMath.sub(p, query) for p in self._points))

        # bracket sign changes of dot(B, B'), at most three fit the polynomial degree
        t_samples = np.linspace(0.0, 1.0, initial_subdivisions, dtype=np.float64)
        dist_sq_delta = np.einsum("ij,ij->i", relative.points_at(t_samples), relative.derivatives_at(t_samples))
        signs = np.where(dist_sq_delta >= 0.0, 1, -1)
        brackets = np.nonzero(signs[1:] != signs[:-1])[0]
        if len(brackets) > _MAX_PROJECTION_CANDIDATES:
            logger.debug("Found %d brackets, refining only the first %d", len(brackets), _MAX_PROJECTION_CANDIDATES)

        candidates: List[float] = [
            float(t_samples[i] + t_samples[i + 1]) / 2.0 for i in brackets[:_MAX_PROJECTION_CANDIDATES]
        ]
        candidates = [relative._refine_projection(t, refinement_iterations) for t in candidates]

        # end points first, then the refined interior candidates
        t_closest = 0.0
        dist_sq_closest = GeomMath.sqr_magnitude(relative.p0)
        if GeomMath.sqr_magnitude(relative.p3) <= dist_sq_closest:
            t_closest = 1.0
            dist_sq_closest = GeomMath.sqr_magnitude(relative.p3)
        for t in candidates:
            dist_sq = GeomMath.sqr_magnitude(relative.point(t))
            if dist_sq < dist_sq_closest:
                dist_sq_closest = dist_sq
                t_closest = t

        if t_closest == 0.0:
            return self.p0, t_closest
        if t_closest == 1.0:
            return self.p3, t_closest
        return self.point(t_closest), t_closest

    def _refine_projection(self, t: float, iterations: int) -> float:
        """Newton-Raphson on dot(B, B') of a curve relative to the query point, t kept in [0, 1]."""
        for _ in range(iterations):
            position, velocity, acceleration = self.point_and_first_two_derivatives(t)
            slope = GeomMath.dot(position, acceleration) + GeomMath.dot(velocity, velocity)
            if slope == 0.0 or not math.isfinite(slope):
                break
            t = min(max(t - GeomMath.dot(position, velocity) / slope, 0.0), 1.0)
        return t


def main():
    """Main"""
    curve = CubicBezier((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
    print(curve)
    print("point(0.5):   ", curve.point(0.5))
    print("bounds:       ", curve.bounds())
    print("arc_length:   ", curve.arc_length(64))
    print("project (.5,2)", curve.project_point((0.5, 2.0)))


if __name__ == "__main__":
    main()

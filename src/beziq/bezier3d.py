"""3D cubic Bezier curves: curvature vector, torsion and the Frenet frame."""

from __future__ import annotations

from typing import ClassVar, Optional, Tuple

from beziq.bezier import CubicBezier
from beziq.common import Point3D
from beziq.geom import Circle3D, GeomMath


def _as_point3d(vector) -> Point3D:
    x, y, z = vector
    return (x, y, z)


###############################################################################
# CubicBezier3D
###############################################################################
class CubicBezier3D(CubicBezier):
    """A cubic Bezier curve in space."""

    dimension: ClassVar[Optional[int]] = 3

    def tangent(self, t: float) -> Point3D:
        """Return the normalized direction of the curve at t."""
        return _as_point3d(GeomMath.normalize(self.derivative(t)))

    def curvature(self, t: float) -> Point3D:
        """Return the curvature vector at t.

        Its length is the curvature (reciprocal radius of the osculating circle) and its
        direction is the axis the curve turns around. Where the velocity is zero the
        components are not finite.
        """
        velocity, acceleration = self.first_two_derivatives(t)
        return _as_point3d(
            GeomMath.scale(
                GeomMath.cross(velocity, acceleration),
                GeomMath.divide(1.0, GeomMath.magnitude(velocity) ** 3),
            )
        )

    def torsion(self, t: float) -> float:
        """Return the torsion at t, how fast the curve twists out of its osculating plane.

        A planar curve has zero torsion. Where velocity and acceleration are parallel
        the result is inf or NaN.
        """
        velocity, acceleration, jerk = self.all_three_derivatives(t)
        cross = GeomMath.cross(velocity, acceleration)
        return GeomMath.divide(GeomMath.dot(cross, jerk), GeomMath.sqr_magnitude(cross))

    def osculating_circle(self, t: float) -> Circle3D:
        """Return the osculating circle at t, lying in the osculating plane."""
        return Circle3D.from_osculating(*self.point_and_first_two_derivatives(t))

    def arc_binormal(self, t: float) -> Point3D:
        """Return the unit binormal at t, perpendicular to the osculating plane."""
        velocity, acceleration = self.first_two_derivatives(t)
        return _as_point3d(GeomMath.normalize(GeomMath.cross(velocity, acceleration)))

    def arc_normal(self, t: float) -> Point3D:
        """Return the unit principal normal at t, pointing towards the center of curvature."""
        velocity, acceleration = self.first_two_derivatives(t)
        binormal = GeomMath.normalize(GeomMath.cross(velocity, acceleration))
        return _as_point3d(GeomMath.cross(binormal, GeomMath.normalize(velocity)))

    def frenet_frame(self, t: float) -> Tuple[Point3D, Point3D, Point3D]:
        """Return the Frenet frame at t.

        Returns:
            Tuple of the unit tangent, principal normal and binormal. The frame is
            undefined (NaN) on straight parts of the curve.
        """
        velocity, acceleration = self.first_two_derivatives(t)
        tangent = GeomMath.normalize(velocity)
        binormal = GeomMath.normalize(GeomMath.cross(velocity, acceleration))
        normal = GeomMath.cross(binormal, tangent)
        return _as_point3d(tangent), _as_point3d(normal), _as_point3d(binormal)


def main():
    """Main"""
    helix = CubicBezier3D((1.0, 0.0, 0.0), (1.0, 0.55, 0.25), (0.55, 1.0, 0.5), (0.0, 1.0, 0.75))
    print(helix)
    print("curvature(0.5):", helix.curvature(0.5))
    print("torsion(0.5):  ", helix.torsion(0.5))
    print("frenet(0.5):   ", helix.frenet_frame(0.5))


if __name__ == "__main__":
    main()

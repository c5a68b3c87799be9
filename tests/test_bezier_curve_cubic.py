"""Test module for the cubic Bezier evaluator and curve analysis in beziq.bezier

The tests are run using pytest.
These tests ensure that evaluation, factored forms, sampling, bounds, arc length
and point projection stay consistent with each other.
"""

import math

import numpy as np
import pytest

from beziq.bezier import CubicBezier, bezier_polynomial
from beziq.bezier2d import CubicBezier2D
from beziq.bezier3d import CubicBezier3D
from beziq.geom import Box
from beziq.polynomial import Polynomial

ARCH = ((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))


def random_curves(count, dim, seed=42):
    """Yield curves with random control points in [-10, 10]."""
    rng = np.random.default_rng(seed)
    for _ in range(count):
        yield CubicBezier(*rng.uniform(-10.0, 10.0, (4, dim)))


###############################################################################
# Construction & control points
###############################################################################


class TestControlPoints:
    """Test construction, validation and control point access."""

    def test_dimension_validation(self):
        with pytest.raises(ValueError):
            CubicBezier((0.0, 0.0), (1.0, 1.0), (2.0, 2.0, 2.0), (3.0, 3.0))
        with pytest.raises(ValueError):
            CubicBezier((0.0,), (1.0,), (2.0,), (3.0,))
        with pytest.raises(ValueError):
            CubicBezier2D((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0), (3.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            CubicBezier3D(*ARCH)

    def test_from_points(self):
        curve = CubicBezier2D.from_points(np.array(ARCH))
        assert isinstance(curve, CubicBezier2D)
        assert curve.points == ARCH
        with pytest.raises(ValueError):
            CubicBezier.from_points(ARCH[:3])

    def test_properties(self):
        curve = CubicBezier(*ARCH)
        assert curve.dim == 2
        assert curve.degree == 3
        assert curve.count == 4
        assert curve.start_point == (0.0, 0.0)
        assert curve.end_point == (1.0, 0.0)
        assert curve.to_numpy().shape == (4, 2)

    def test_index_access(self):
        curve = CubicBezier(*ARCH)
        assert curve[2] == (1.0, 1.0)
        curve[1] = [0.0, 2.0]
        assert curve.p1 == (0.0, 2.0)
        curve.p3 = (4.0, 0.0)
        assert curve[3] == (4.0, 0.0)
        assert curve.end_point == (4.0, 0.0)

    def test_index_errors(self):
        curve = CubicBezier(*ARCH)
        with pytest.raises(IndexError):
            _ = curve[4]
        with pytest.raises(IndexError):
            curve[-1] = (0.0, 0.0)
        with pytest.raises(ValueError):
            curve[0] = (0.0, 0.0, 0.0)

    def test_equality_and_repr(self):
        assert CubicBezier(*ARCH) == CubicBezier(*ARCH)
        assert CubicBezier(*ARCH) != CubicBezier(*reversed(ARCH))
        assert repr(CubicBezier2D(*ARCH)).startswith("CubicBezier2D((0.0, 0.0), (0.0, 1.0)")

    def test_translated_and_lerp(self):
        curve = CubicBezier2D(*ARCH)
        moved = curve.translated((1.0, 2.0))
        assert isinstance(moved, CubicBezier2D)
        assert moved.p0 == (1.0, 2.0)
        blended = CubicBezier2D.lerp(curve, moved, 0.5)
        assert blended.point(0.5) == pytest.approx((1.0, 1.75))
        with pytest.raises(ValueError):
            CubicBezier.lerp(curve, CubicBezier3D(*((x, y, 0.0) for x, y in ARCH)), 0.5)


###############################################################################
# Evaluation
###############################################################################


class TestEvaluation:
    """Test points, derivatives and the fused accessors."""

    def test_arch_midpoint(self):
        assert CubicBezier(*ARCH).point(0.5) == pytest.approx((0.5, 0.75))

    def test_end_points_exact(self):
        for dim in (2, 3):
            for curve in random_curves(50, dim):
                assert curve.point(0.0) == curve.p0
                assert curve.point(1.0) == curve.p3

    def test_fused_accessors_match_single(self):
        rng = np.random.default_rng(7)
        for curve in random_curves(30, 3):
            t = float(rng.uniform(-0.5, 1.5))
            point, velocity = curve.point_and_derivative(t)
            assert point == pytest.approx(curve.point(t))
            assert velocity == pytest.approx(curve.derivative(t))

            velocity, acceleration = curve.first_two_derivatives(t)
            assert velocity == pytest.approx(curve.derivative(t))
            assert acceleration == pytest.approx(curve.second_derivative(t))

            fused = curve.point_and_first_two_derivatives(t)
            assert fused[0] == pytest.approx(curve.point(t))
            assert fused[1] == pytest.approx(curve.derivative(t))
            assert fused[2] == pytest.approx(curve.second_derivative(t))

            all_three = curve.all_three_derivatives(t)
            assert all_three[2] == pytest.approx(curve.third_derivative(t))

    def test_third_derivative_is_constant(self):
        for curve in random_curves(20, 2):
            assert curve.third_derivative(0.0) == curve.third_derivative(0.3) == curve.third_derivative(1.0)
            slope = np.subtract(curve.second_derivative(1.0), curve.second_derivative(0.0))
            assert np.allclose(slope, curve.third_derivative())

    def test_derivative_matches_finite_difference(self):
        h = 1e-6
        for curve in random_curves(20, 2, seed=3):
            for t in (0.1, 0.5, 0.9):
                numeric = np.subtract(curve.point(t + h), curve.point(t - h)) / (2.0 * h)
                assert np.allclose(numeric, curve.derivative(t), rtol=1e-5, atol=1e-5)

    def test_derivative_at_end_points(self):
        curve = CubicBezier(*ARCH)
        assert curve.derivative(0.0) == pytest.approx((0.0, 3.0))
        assert curve.derivative(1.0) == pytest.approx((0.0, -3.0))

    def test_point_component(self):
        curve = CubicBezier(*ARCH)
        assert curve.point_component(0, 0.5) == pytest.approx(0.5)
        assert curve.point_component(1, 0.5) == pytest.approx(0.75)
        with pytest.raises(ValueError):
            curve.point_component(2, 0.5)


###############################################################################
# Factored forms
###############################################################################


class TestFactors:
    """Test the polynomial forms of position and derivatives."""

    def test_bezier_polynomial(self):
        assert bezier_polynomial(0.0, 0.0, 1.0, 1.0) == Polynomial(-2.0, 3.0, 0.0, 0.0)

    def test_cubic_factors(self):
        curve = CubicBezier(*ARCH)
        assert curve.cubic_factors(0) == pytest.approx((-2.0, 3.0, 0.0, 0.0))
        assert curve.cubic_factors(1) == pytest.approx((0.0, -3.0, 3.0, 0.0))
        with pytest.raises(ValueError):
            curve.cubic_factors(2)

    def test_factors_match_evaluation(self):
        for curve in random_curves(20, 3, seed=11):
            c3, c2, c1, c0 = curve.coefficients()
            a, b, c = curve.derivative_factors()
            second_a, second_b = curve.second_derivative_factors()
            for t in (0.0, 0.25, 0.8):
                point = np.add(np.add(np.multiply(c3, t**3), np.multiply(c2, t**2)), np.multiply(c1, t)) + c0
                assert np.allclose(point, curve.point(t))
                velocity = np.multiply(a, t**2) + np.multiply(b, t) + c
                assert np.allclose(velocity, curve.derivative(t))
                acceleration = np.multiply(second_a, t) + second_b
                assert np.allclose(acceleration, curve.second_derivative(t))

    def test_derivative_factors_axis(self):
        assert CubicBezier(*ARCH).derivative_factors_axis(0) == pytest.approx((-6.0, 6.0, 0.0))


###############################################################################
# Vectorized evaluation & sampling
###############################################################################


class TestSampling:
    """Test bulk evaluation and uniform sampling."""

    def test_points_at_matches_point(self):
        curve = CubicBezier(*ARCH)
        t_values = [0.0, 0.2, 0.5, 1.0]
        expected = np.array([curve.point(t) for t in t_values])
        assert np.allclose(curve.points_at(t_values), expected)

    def test_derivatives_at_matches_derivative(self):
        for curve in random_curves(5, 3):
            t_values = np.linspace(0.0, 1.0, 7)
            expected = np.array([curve.derivative(t) for t in t_values])
            assert np.allclose(curve.derivatives_at(t_values), expected)

    @pytest.mark.parametrize("steps", [1, 3, 10, 69, 70, 200])
    def test_sample_points(self, steps):
        curve = CubicBezier(*ARCH)
        samples = curve.sample_points(steps)
        assert samples.shape == (steps + 1, 2)
        assert tuple(samples[0]) == curve.p0
        assert tuple(samples[-1]) == curve.p3
        expected = curve.points_at(np.linspace(0.0, 1.0, steps + 1))
        assert np.allclose(samples, expected, atol=1e-9)

    def test_sample_points_invalid(self):
        with pytest.raises(ValueError):
            CubicBezier(*ARCH).sample_points(0)


###############################################################################
# Splitting
###############################################################################


class TestSplit:
    """Test splitting into two curves of the same shape."""

    def test_split_continuity(self):
        curve = CubicBezier2D(*ARCH)
        left, right = curve.split(0.3)
        assert isinstance(left, CubicBezier2D)
        assert left.p0 == curve.p0
        assert right.p3 == curve.p3
        assert left.p3 == right.p0
        assert left.p3 == pytest.approx(curve.point(0.3))

    def test_split_same_shape(self):
        for curve in random_curves(10, 3, seed=5):
            left, right = curve.split(0.4)
            for u in (0.0, 0.5, 1.0):
                assert left.point(u) == pytest.approx(curve.point(0.4 * u), abs=1e-9)
                assert right.point(u) == pytest.approx(curve.point(0.4 + 0.6 * u), abs=1e-9)


###############################################################################
# Extrema & bounds
###############################################################################


class TestBounds:
    """Test local extrema and tight bounding boxes."""

    def test_local_extrema(self):
        curve = CubicBezier(*ARCH)
        assert curve.local_extrema(0).count == 0
        extrema = curve.local_extrema(1)
        assert extrema.to_tuple() == pytest.approx((0.5,))
        assert curve.local_extrema_points(1).to_tuple() == pytest.approx((0.75,))
        with pytest.raises(ValueError):
            curve.local_extrema(2)

    def test_arch_bounds(self):
        box = CubicBezier(*ARCH).bounds()
        assert isinstance(box, Box)
        assert box.min == pytest.approx((0.0, 0.0))
        assert box.max == pytest.approx((1.0, 0.75))

    def test_bounds_are_tight(self):
        for dim in (2, 3):
            for curve in random_curves(20, dim, seed=9):
                box = curve.bounds()
                samples = curve.sample_points(500)
                assert np.all(samples >= np.array(box.min) - 1e-9)
                assert np.all(samples <= np.array(box.max) + 1e-9)
                # sampling gets within a small distance of every side of the box
                assert np.allclose(samples.min(axis=0), box.min, atol=1e-3)
                assert np.allclose(samples.max(axis=0), box.max, atol=1e-3)


###############################################################################
# Arc length
###############################################################################


class TestArcLength:
    """Test chord-sum arc length approximation."""

    def test_straight_line(self):
        curve = CubicBezier((0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0))
        assert curve.arc_length() == pytest.approx(3.0)
        assert curve.arc_length(2) == pytest.approx(3.0)

    def test_straight_line_3d(self):
        curve = CubicBezier3D((0.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 2.0), (0.0, 0.0, 3.0))
        assert curve.arc_length(16) == pytest.approx(3.0)

    def test_low_accuracy_gives_chord(self):
        curve = CubicBezier(*ARCH)
        assert curve.arc_length(2) == pytest.approx(1.0)
        assert curve.arc_length(0) == pytest.approx(1.0)

    def test_more_samples_longer(self):
        """Nested samples only ever add length, bounded by the control polygon."""
        curve = CubicBezier(*ARCH)
        coarse = curve.arc_length(8)
        fine = curve.arc_length(64)
        assert 1.0 < coarse <= fine < 3.0

    def test_quarter_circle(self):
        k = 0.5522847498
        curve = CubicBezier((1.0, 0.0), (1.0, k), (k, 1.0), (0.0, 1.0))
        assert curve.arc_length(256) == pytest.approx(math.pi / 2.0, rel=1e-3)


###############################################################################
# Point projection
###############################################################################


class TestProjectPoint:
    """Test closest point projection."""

    def test_point_above_arch(self):
        curve = CubicBezier(*ARCH)
        query = (0.5, 2.0)
        projected, t = curve.project_point(query)
        assert 0.0 <= t <= 1.0
        distance = math.dist(projected, query)
        assert distance <= math.dist(curve.p0, query)
        assert distance <= math.dist(curve.p3, query)
        assert t == pytest.approx(0.5)
        assert projected == pytest.approx((0.5, 0.75))

    def test_point_beyond_end_points(self):
        curve = CubicBezier(*ARCH)
        assert curve.project_point((-1.0, -1.0)) == (curve.p0, 0.0)
        assert curve.project_point((2.0, -1.0)) == (curve.p3, 1.0)

    def test_point_on_curve(self):
        curve = CubicBezier(*ARCH)
        on_curve = curve.point(0.3)
        projected, t = curve.project_point(on_curve)
        assert t == pytest.approx(0.3, abs=1e-6)
        assert projected == pytest.approx(on_curve, abs=1e-9)

    @pytest.mark.parametrize(
        "query",
        [(0.5, 0.3), (0.2, 0.5), (1.5, 0.5), (-0.3, 0.8), (0.9, 0.1), (0.5, -1.0)],
    )
    def test_projection_beats_dense_sampling(self, query):
        curve = CubicBezier(*ARCH)
        projected, _ = curve.project_point(query, initial_subdivisions=64, refinement_iterations=8)
        samples = curve.sample_points(400)
        best = np.min(np.linalg.norm(samples - np.array(query), axis=1))
        assert math.dist(projected, query) <= best + 1e-6

    def test_projection_3d(self):
        curve = CubicBezier3D(*((x, y, 1.0) for x, y in ARCH))
        projected, t = curve.project_point((0.5, 2.0, 3.0))
        assert t == pytest.approx(0.5)
        assert projected == pytest.approx((0.5, 0.75, 1.0))

    def test_invalid_arguments(self):
        curve = CubicBezier(*ARCH)
        with pytest.raises(ValueError):
            curve.project_point((0.0, 0.0, 0.0))
        with pytest.raises(ValueError):
            curve.project_point((0.0, 0.0), initial_subdivisions=1)

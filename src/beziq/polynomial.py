"""Polynomial classification and closed-form real root solving up to cubics.

Polynomials are given by their factors, highest degree first, e.g. ``(a, b, c, d)``
for ``a·t³ + b·t² + c·t + d``. Factors whose absolute value is below
``POLYNOMIAL_EPSILON`` are treated as zero, so a cubic with a vanishing leading
factor is solved as a quadratic, and so on down to a constant.

Constant polynomials (including the identically zero one, which strictly has
infinitely many roots) are reported as having no roots.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from beziq.common import PolynomialType
from beziq.consts import ACOS_SATURATION, DISCRIMINANT_TOLERANCE, POLYNOMIAL_EPSILON
from beziq.results import ResultsMax2, ResultsMax3

logger = logging.getLogger(__name__)

_TAU: float = 2.0 * math.pi


###############################################################################
# Classification
###############################################################################


def factor_almost_zero(value: float) -> bool:
    """Return True if a polynomial factor is small enough to be treated as zero."""
    return abs(value) < POLYNOMIAL_EPSILON


def get_polynomial_type(*factors: float) -> PolynomialType:
    """Return the effective type/degree of a polynomial, accounting for near-zero factors.

    The leading factor is checked first. If it is almost zero the remaining factors
    are classified as a polynomial of one degree less, down to a constant.

    Args:
        *factors: 1 to 4 factors, highest degree first

    Returns:
        PolynomialType: The type whose formula should be used to solve the polynomial

    Raises:
        ValueError: If no factors or more than four factors are given
    """
    if not 1 <= len(factors) <= 4:
        raise ValueError(f"Polynomial type requires 1 to 4 factors, got {len(factors)}")
    for index, factor in enumerate(factors[:-1]):
        if not factor_almost_zero(factor):
            return PolynomialType(len(factors) - 1 - index)
    return PolynomialType.CONSTANT


def cbrt(value: float) -> float:
    """Cube root that keeps the sign of negative inputs."""
    return math.copysign(abs(value) ** (1.0 / 3.0), value)


###############################################################################
# Public root solvers
###############################################################################


def solve_linear(a: float, b: float) -> Optional[float]:
    """Return the root of ``a·t + b = 0``, or None if the polynomial is constant."""
    if get_polynomial_type(a, b) is PolynomialType.CONSTANT:
        return None
    return _solve_linear_root(a, b)


def solve_quadratic(a: float, b: float, c: float) -> ResultsMax2[float]:
    """Return the real roots of ``a·t² + b·t + c = 0``.

    There are either 0, 1 or 2 roots. Two roots are sorted ascending. A double root
    is reported once.

    Args:
        a: The quadratic factor
        b: The linear factor
        c: The constant factor

    Returns:
        ResultsMax2[float]: The roots
    """
    poly_type = get_polynomial_type(a, b, c)
    if poly_type is PolynomialType.QUADRATIC:
        return _solve_quadratic_roots(a, b, c)
    if poly_type is PolynomialType.LINEAR:
        return ResultsMax2(_solve_linear_root(b, c))
    logger.debug("Constant polynomial (%s, %s, %s) treated as having no roots", a, b, c)
    return ResultsMax2()


def solve_cubic(a: float, b: float, c: float, d: float) -> ResultsMax3[float]:
    """Return the real roots of ``a·t³ + b·t² + c·t + d = 0``.

    There are either 0, 1, 2 or 3 roots. Lower degree polynomials are dispatched to
    the quadratic and linear solvers. The roots of a true cubic are not sorted.

    Args:
        a: The cubic factor
        b: The quadratic factor
        c: The linear factor
        d: The constant factor

    Returns:
        ResultsMax3[float]: The roots
    """
    poly_type = get_polynomial_type(a, b, c, d)
    if poly_type is PolynomialType.CUBIC:
        return _solve_cubic_roots(a, b, c, d)
    if poly_type is PolynomialType.QUADRATIC:
        return ResultsMax3.from_results_max2(_solve_quadratic_roots(b, c, d))
    if poly_type is PolynomialType.LINEAR:
        return ResultsMax3(_solve_linear_root(c, d))
    logger.debug("Constant polynomial (%s, %s, %s, %s) treated as having no roots", a, b, c, d)
    return ResultsMax3()


###############################################################################
# Internal root solvers
###############################################################################
# These presume the leading factor is nonzero; use the public solvers above.


def _solve_linear_root(a: float, b: float) -> float:
    return -b / a


def _solve_quadratic_roots(a: float, b: float, c: float) -> ResultsMax2[float]:
    discriminant = b * b - 4.0 * a * c
    if factor_almost_zero(discriminant):
        return ResultsMax2(-b / (2.0 * a))  # two coincident roots at one point

    if discriminant >= 0.0:
        root = math.sqrt(discriminant)
        r0 = (-b - root) / (2.0 * a)
        r1 = (-b + root) / (2.0 * a)
        return ResultsMax2(min(r0, r1), max(r0, r1))

    return ResultsMax2()


def _solve_cubic_roots(a: float, b: float, c: float, d: float) -> ResultsMax3[float]:
    # depress the cubic, t = x - b/(3a), to get t³ + pt + q = 0
    p = (3.0 * a * c - b * b) / (3.0 * a * a)
    q = (2.0 * b * b * b - 9.0 * a * b * c + 27.0 * a * a * d) / (27.0 * a * a * a)

    offset = b / (3.0 * a)
    return _solve_depressed_cubic_roots(p, q).map(lambda root: root - offset)


def _solve_depressed_cubic_roots(p: float, q: float) -> ResultsMax3[float]:
    """Return the real roots of the depressed cubic ``t³ + p·t + q = 0``."""
    if factor_almost_zero(p):
        return ResultsMax3(cbrt(-q))  # triple root, t³ = -q

    discriminant = 4.0 * p * p * p + 27.0 * q * q

    if discriminant < DISCRIMINANT_TOLERANCE and p < 0.0:
        # two or three real roots, trigonometric solution
        pre = 2.0 * math.sqrt(-p / 3.0)
        acos_inner = ((3.0 * q) / (2.0 * p)) * math.sqrt(-3.0 / p)
        phase = math.acos(min(max(acos_inner, -1.0), 1.0)) / 3.0

        def root(k: int) -> float:
            return pre * math.cos(phase - (_TAU / 3.0) * k)

        # a saturated acos makes two of the offsets coincide: one double and one single root
        if acos_inner >= ACOS_SATURATION:
            return ResultsMax3(root(0), root(2))
        if acos_inner <= -ACOS_SATURATION:
            return ResultsMax3(root(1), root(2))
        return ResultsMax3(root(0), root(1), root(2))

    if p < 0.0:
        # one real root, hyperbolic cosine solution
        cosh_arg = max((-3.0 * abs(q) / (2.0 * p)) * math.sqrt(-3.0 / p), 1.0)
        cosh_inner = math.acosh(cosh_arg) / 3.0
        return ResultsMax3(-2.0 * math.copysign(1.0, q) * math.sqrt(-p / 3.0) * math.cosh(cosh_inner))

    # p > 0, one real root, hyperbolic sine solution
    sinh_inner = math.asinh(((3.0 * q) / (2.0 * p)) * math.sqrt(3.0 / p)) / 3.0
    return ResultsMax3(-2.0 * math.sqrt(p / 3.0) * math.sinh(sinh_inner))


###############################################################################
# Polynomial
###############################################################################
@dataclass(frozen=True)
class Polynomial:
    """A polynomial of the form ``a·t³ + b·t² + c·t + d``, up to a cubic.

    Attributes:
        cubic (float): The cubic factor a
        quadratic (float): The quadratic factor b
        linear (float): The linear factor c
        constant (float): The constant factor d
    """

    cubic: float = 0.0
    quadratic: float = 0.0
    linear: float = 0.0
    constant: float = 0.0

    @classmethod
    def from_linear(cls, a: float, b: float) -> Polynomial:
        """Create a polynomial of the form ``a·t + b``."""
        return cls(0.0, 0.0, a, b)

    @classmethod
    def from_quadratic(cls, a: float, b: float, c: float) -> Polynomial:
        """Create a polynomial of the form ``a·t² + b·t + c``."""
        return cls(0.0, a, b, c)

    @classmethod
    def from_cubic(cls, a: float, b: float, c: float, d: float) -> Polynomial:
        """Create a polynomial of the form ``a·t³ + b·t² + c·t + d``."""
        return cls(a, b, c, d)

    @property
    def factors(self) -> Tuple[float, float, float, float]:
        """The factors (a, b, c, d), highest degree first."""
        return (self.cubic, self.quadratic, self.linear, self.constant)

    @property
    def type(self) -> PolynomialType:
        """PolynomialType: The effective type, accounting for near-zero factors."""
        return get_polynomial_type(*self.factors)

    @property
    def derivative(self) -> Polynomial:
        """Polynomial: The derivative (rate of change) of this polynomial."""
        return Polynomial(0.0, 3.0 * self.cubic, 2.0 * self.quadratic, self.linear)

    @property
    def roots(self) -> ResultsMax3[float]:
        """ResultsMax3[float]: The real values where this polynomial is zero."""
        return solve_cubic(*self.factors)

    def sample(self, t: float) -> float:
        """Evaluate the polynomial at ``t``."""
        return self.cubic * (t * t * t) + self.quadratic * (t * t) + self.linear * t + self.constant


def main():
    """Main"""
    logging.basicConfig(level=logging.DEBUG)
    print("x³-6x²+11x-6:", solve_cubic(1.0, -6.0, 11.0, -6.0))
    print("x²-5x+6:     ", solve_quadratic(1.0, -5.0, 6.0))
    print("0:           ", solve_cubic(0.0, 0.0, 0.0, 0.0))


if __name__ == "__main__":
    main()

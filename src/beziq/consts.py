"""Central module containing numeric constants and tunable defaults"""

from __future__ import annotations

###############################################################################
# Polynomial classification and root solving
###############################################################################

# Factors with an absolute value below this threshold are treated as zero
# when determining the effective degree of a polynomial.
POLYNOMIAL_EPSILON: float = 1.0e-5

# Depressed cubics with a discriminant below this value use the
# trigonometric (three real roots) branch.
DISCRIMINANT_TOLERANCE: float = 1.0e-5

# An acos argument beyond this magnitude means two of the three
# trigonometric roots coincide.
ACOS_SATURATION: float = 0.9999

###############################################################################
# Curve analysis defaults
###############################################################################

PROJECT_SUBDIVISIONS: int = 16
PROJECT_ITERATIONS: int = 4
ARC_LENGTH_ACCURACY: int = 8

# Below this step count sampling uses forward differencing, above it numpy.
SAMPLE_NUMPY_THRESHOLD: int = 70


def main():
    """Main"""
    print("POLYNOMIAL_EPSILON:    ", POLYNOMIAL_EPSILON)
    print("DISCRIMINANT_TOLERANCE:", DISCRIMINANT_TOLERANCE)
    print("ACOS_SATURATION:       ", ACOS_SATURATION)
    print()
    print("PROJECT_SUBDIVISIONS:  ", PROJECT_SUBDIVISIONS)
    print("PROJECT_ITERATIONS:    ", PROJECT_ITERATIONS)
    print("ARC_LENGTH_ACCURACY:   ", ARC_LENGTH_ACCURACY)
    print("SAMPLE_NUMPY_THRESHOLD:", SAMPLE_NUMPY_THRESHOLD)


if __name__ == "__main__":
    main()

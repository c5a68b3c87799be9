"""Central module containing shared types and enums for polynomial and curve handling."""

from __future__ import annotations

from enum import Enum
from typing import Sequence, Tuple, Union

###############################################################################
# Types
###############################################################################

Point2D = Tuple[float, float]
Point3D = Tuple[float, float, float]
Point = Tuple[float, ...]  # 2D or 3D point, also used for vectors
PointLike = Sequence[Union[int, float]]  # anything indexable, e.g. tuple, list or numpy row


###############################################################################
# Enums
###############################################################################


class PolynomialType(Enum):
    """Enum to define the effective type/degree of a polynomial."""

    CONSTANT = 0  # d
    LINEAR = 1  # ct+d
    QUADRATIC = 2  # bt²+ct+d
    CUBIC = 3  # at³+bt²+ct+d

    @property
    def degree(self) -> int:
        """int: The degree of the polynomial type."""
        return self.value


###############################################################################
# Functions
###############################################################################


def main() -> None:
    """Display the polynomial type enum values."""
    for poly_type in PolynomialType:
        print(poly_type, poly_type.degree)


if __name__ == "__main__":
    main()

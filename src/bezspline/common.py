"""Central module containing types, constants and errors for spline handling."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

###############################################################################
# Types
###############################################################################


@dataclass(frozen=True)
class Point:
    """Immutable 2D point, also used as a 2D vector.

    Attributes:
        x (float): The x-coordinate.
        y (float): The y-coordinate.
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def norm(self) -> float:
        """float: The euclidean length of this point seen as a vector."""
        return math.hypot(self.x, self.y)

    def cross(self, other: Point) -> float:
        """z-component of the cross product of two 2D vectors."""
        return self.x * other.y - self.y * other.x

    def as_tuple(self) -> Tuple[float, float]:
        """The point as Tuple (x, y)."""
        return (self.x, self.y)

    def __str__(self):
        return f"Point(x={self.x}, y={self.y})"


###############################################################################
# Enums and Consts
###############################################################################

# Minimum number of knots for which cubic segments are built.
# Two knots would form a straight line, which is not represented here.
MIN_KNOTS: int = 3

# Scale of the central difference used as knot tangent
DEFAULT_TENSION: float = 0.5

# Composite Simpson subdivisions per quadrature (must be even)
DEFAULT_QUADRATURE_SUBDIVISIONS: int = 10

# Bisection stop criterion on the arc-length residual and its iteration budget
DEFAULT_BISECTION_TOLERANCE: float = 1.0e-6
DEFAULT_BISECTION_MAX_ITERATIONS: int = 50


###############################################################################
# Errors
###############################################################################


class SplineError(Exception):
    """Base exception for spline-related errors."""


class ValidationError(SplineError, ValueError):
    """Raised when malformed input reaches a mutation or configuration boundary."""


###############################################################################
# Functions
###############################################################################


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp _value_ into the closed interval [lower, upper]."""
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


def main() -> None:
    """Display the default constants and a small point computation."""
    print("MIN_KNOTS:                       ", MIN_KNOTS)
    print("DEFAULT_TENSION:                 ", DEFAULT_TENSION)
    print("DEFAULT_QUADRATURE_SUBDIVISIONS: ", DEFAULT_QUADRATURE_SUBDIVISIONS)
    print("DEFAULT_BISECTION_TOLERANCE:     ", DEFAULT_BISECTION_TOLERANCE)
    print("DEFAULT_BISECTION_MAX_ITERATIONS:", DEFAULT_BISECTION_MAX_ITERATIONS)
    print()

    p = Point(3.0, 4.0)
    print(p, "norm:", p.norm())
    print()


if __name__ == "__main__":
    main()

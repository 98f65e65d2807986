"""Tunable precision and shape settings for cubic Bezier splines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from bezspline.common import (
    DEFAULT_BISECTION_MAX_ITERATIONS,
    DEFAULT_BISECTION_TOLERANCE,
    DEFAULT_QUADRATURE_SUBDIVISIONS,
    DEFAULT_TENSION,
    MIN_KNOTS,
    ValidationError,
)

###############################################################################
# SplineSettings
###############################################################################


@dataclass(frozen=True)
class SplineSettings:
    """Settings controlling spline shape and numerical precision.

    Attributes:
        tension: Scale of the central difference used as knot tangent.
        quadrature_subdivisions: Even number of Simpson subintervals per integration.
        bisection_tolerance: Arc-length residual at which the bisection stops.
        bisection_max_iterations: Iteration budget of the bisection.
        max_knots: Maximum number of knots. None means unlimited.
    """

    tension: float = DEFAULT_TENSION
    quadrature_subdivisions: int = DEFAULT_QUADRATURE_SUBDIVISIONS
    bisection_tolerance: float = DEFAULT_BISECTION_TOLERANCE
    bisection_max_iterations: int = DEFAULT_BISECTION_MAX_ITERATIONS
    max_knots: Optional[int] = None

    def __post_init__(self):
        if not self.tension > 0.0:
            raise ValidationError(f"tension must be positive, got {self.tension}")
        if self.quadrature_subdivisions < 2 or self.quadrature_subdivisions % 2 != 0:
            raise ValidationError(
                f"quadrature_subdivisions must be an even number >= 2, got {self.quadrature_subdivisions}"
            )
        if not self.bisection_tolerance > 0.0:
            raise ValidationError(f"bisection_tolerance must be positive, got {self.bisection_tolerance}")
        if self.bisection_max_iterations < 1:
            raise ValidationError(
                f"bisection_max_iterations must be at least 1, got {self.bisection_max_iterations}"
            )
        if self.max_knots is not None and self.max_knots < MIN_KNOTS:
            raise ValidationError(f"max_knots must be at least {MIN_KNOTS}, got {self.max_knots}")

    def to_dict(self) -> dict:
        """Convert settings to a dictionary."""
        return {
            "tension": self.tension,
            "quadrature_subdivisions": self.quadrature_subdivisions,
            "bisection_tolerance": self.bisection_tolerance,
            "bisection_max_iterations": self.bisection_max_iterations,
            "max_knots": self.max_knots,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SplineSettings":
        """Create SplineSettings from a dictionary, using defaults for missing keys."""
        return cls(
            tension=data.get("tension", DEFAULT_TENSION),
            quadrature_subdivisions=data.get("quadrature_subdivisions", DEFAULT_QUADRATURE_SUBDIVISIONS),
            bisection_tolerance=data.get("bisection_tolerance", DEFAULT_BISECTION_TOLERANCE),
            bisection_max_iterations=data.get("bisection_max_iterations", DEFAULT_BISECTION_MAX_ITERATIONS),
            max_knots=data.get("max_knots"),
        )


DEFAULT_SETTINGS = SplineSettings()

"""Arc-length quadrature and arc-length-to-parameter inversion for cubic segments.

Both classes are stateless apart from their precision settings: every call is an
independent computation. Precision budgets are fixed, so cost is deterministic
and the result is an approximation that never fails.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy.integrate import simpson

from bezspline.bezier import CubicSegment
from bezspline.common import clamp
from bezspline.settings import DEFAULT_SETTINGS, SplineSettings

logger = logging.getLogger(__name__)


###############################################################################
# ArcLengthIntegrator
###############################################################################


class ArcLengthIntegrator:
    """Composite Simpson quadrature of a segment's speed |B'(t)| over [ta, tb]."""

    def __init__(self, subdivisions: Optional[int] = None):
        """Initialize the integrator.

        Args:
            subdivisions: Even number of Simpson subintervals. Defaults to the
                value of DEFAULT_SETTINGS. Invalid values raise ValidationError.
        """
        if subdivisions is None:
            subdivisions = DEFAULT_SETTINGS.quadrature_subdivisions
        else:
            # reuse the settings validation for the subdivision count
            SplineSettings(quadrature_subdivisions=subdivisions)
        self._subdivisions = subdivisions

    @classmethod
    def from_settings(cls, settings: SplineSettings) -> ArcLengthIntegrator:
        """Create an integrator using the quadrature settings of _settings_."""
        return cls(settings.quadrature_subdivisions)

    @property
    def subdivisions(self) -> int:
        """int: Number of Simpson subintervals per integration."""
        return self._subdivisions

    def integrate(self, segment: CubicSegment, ta: float = 0.0, tb: float = 1.0) -> float:
        """
        Approximate the arc length of _segment_ between parameters ta and tb.

        Args:
            segment (CubicSegment): The curve to measure
            ta (float): Start parameter, clamped to [0, 1]
            tb (float): End parameter, clamped to [0, 1]

        Returns:
            float: the approximated arc length, 0.0 for empty or reversed intervals
        """
        ta = clamp(float(ta), 0.0, 1.0)
        tb = clamp(float(tb), 0.0, 1.0)
        if not tb > ta:
            return 0.0

        ts = np.linspace(ta, tb, self._subdivisions + 1, dtype=np.float64)
        speeds: NDArray[np.float64] = segment.speeds(ts)
        if not speeds.any():
            # coincident control points
            return 0.0
        return float(simpson(speeds, dx=(tb - ta) / self._subdivisions))


###############################################################################
# ParameterInverter
###############################################################################


class ParameterInverter:
    """Map arc lengths to curve parameters by bisection.

    The local arc-length function f(t) = integrate(segment, 0, t) is monotone
    non-decreasing, so halving the bracket [lo, hi] around the target converges.
    """

    def __init__(
        self,
        integrator: Optional[ArcLengthIntegrator] = None,
        tolerance: Optional[float] = None,
        max_iterations: Optional[int] = None,
    ):
        """Initialize the inverter.

        Args:
            integrator: Quadrature used to evaluate f(t). Defaults to a new
                ArcLengthIntegrator with default subdivisions.
            tolerance: Stop when |f(mid) - target| drops below this value.
            max_iterations: Iteration budget; the best midpoint is returned when exhausted.
        """
        self._integrator = integrator if integrator is not None else ArcLengthIntegrator()
        self._tolerance = DEFAULT_SETTINGS.bisection_tolerance if tolerance is None else tolerance
        self._max_iterations = (
            DEFAULT_SETTINGS.bisection_max_iterations if max_iterations is None else max_iterations
        )
        # reuse the settings validation for tolerance and budget
        SplineSettings(bisection_tolerance=self._tolerance, bisection_max_iterations=self._max_iterations)

    @classmethod
    def from_settings(cls, settings: SplineSettings) -> ParameterInverter:
        """Create an inverter using the quadrature and bisection settings of _settings_."""
        return cls(
            ArcLengthIntegrator.from_settings(settings),
            settings.bisection_tolerance,
            settings.bisection_max_iterations,
        )

    @property
    def integrator(self) -> ArcLengthIntegrator:
        """ArcLengthIntegrator: The quadrature used for f(t)."""
        return self._integrator

    @property
    def tolerance(self) -> float:
        """float: Residual at which the bisection stops."""
        return self._tolerance

    @property
    def max_iterations(self) -> int:
        """int: Iteration budget of the bisection."""
        return self._max_iterations

    @staticmethod
    def locate(table: NDArray[np.float64], s: float) -> Tuple[int, float]:
        """
        Find the segment containing global arc length s.

        Args:
            table: Cumulative arc lengths, table[i] being the length up to the end of segment i
            s: Global arc length, clamped to [0, table[-1]]

        Returns:
            Tuple[int, float]: segment index (-1 for an empty table) and arc length
            local to that segment
        """
        if len(table) == 0:
            return -1, 0.0
        s = clamp(float(s), 0.0, float(table[-1]))
        # first index whose cumulative value is >= s
        index = int(np.searchsorted(table, s, side="left"))
        index = min(index, len(table) - 1)
        start = float(table[index - 1]) if index > 0 else 0.0
        return index, max(s - start, 0.0)

    def invert(self, segment: CubicSegment, local_length: float, segment_length: Optional[float] = None) -> float:
        """
        Find the parameter t of _segment_ at which the arc length from t=0 equals _local_length_.

        Args:
            segment: The curve to search
            local_length: Target arc length measured from the segment start
            segment_length: Total length of the segment if already known

        Returns:
            float: the parameter t in [0, 1]
        """
        if segment_length is None:
            segment_length = self._integrator.integrate(segment, 0.0, 1.0)
        if local_length <= 0.0:
            return 0.0
        if local_length >= segment_length:
            return 1.0

        lo = 0.0
        hi = 1.0
        mid = 0.5
        residual = 0.0
        for _ in range(self._max_iterations):
            mid = 0.5 * (lo + hi)
            residual = self._integrator.integrate(segment, 0.0, mid) - local_length
            if abs(residual) < self._tolerance:
                return mid
            if residual < 0.0:
                lo = mid
            else:
                hi = mid

        logger.debug(
            "Bisection budget of %d iterations exhausted for target %g (residual %g)",
            self._max_iterations,
            local_length,
            residual,
        )
        return mid

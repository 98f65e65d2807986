"""Interpolating cubic Bezier spline with natural and arc-length parameterization."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bezspline.arc_length import ArcLengthIntegrator, ParameterInverter
from bezspline.bezier import CubicSegment
from bezspline.common import MIN_KNOTS, Point, ValidationError, clamp
from bezspline.settings import DEFAULT_SETTINGS, SplineSettings

logger = logging.getLogger(__name__)


###############################################################################
# CubicBezierSpline
###############################################################################


class CubicBezierSpline:
    """Piecewise cubic Bezier curve passing exactly through an ordered set of knots.

    Each pair of consecutive knots is joined by one CubicSegment. The inner control
    points are derived from a central-difference tangent per knot, so adjacent
    segments share tangent directions (C1) without solving a global system.
    A closed spline adds a segment from the last knot back to the first.

    Mutations (add_control_point, set_data, clear) only record the new knots.
    Segments and the cumulative arc-length table are rebuilt by recompute(),
    which geometry queries also invoke whenever the knots changed since the
    last build. Changing closed rebuilds immediately.

    Geometry queries never raise: parameters are clamped, out-of-range segment
    indices return None, and a spline without segments evaluates to its first
    knot (or the origin when empty) with a zero derivative.

    Attributes:
        _knots: The interpolated points
        _segments: Cubic segments of the last build
        _arc_length_table: Cumulative arc length at the end of each segment
        _closed: Whether the last knot connects back to the first
        _stale: True if knots or closed changed since the last build
    """

    _knots: List[Point]
    _segments: List[CubicSegment]
    _arc_length_table: NDArray[np.float64]
    _closed: bool
    _stale: bool

    def __init__(self, settings: Optional[SplineSettings] = None, closed: bool = False):
        """
        Initialize an empty spline.

        Args:
            settings: Shape and precision settings. Defaults to DEFAULT_SETTINGS.
            closed: Whether the spline wraps from the last knot to the first.
        """
        self._settings = settings if settings is not None else DEFAULT_SETTINGS
        self._integrator = ArcLengthIntegrator.from_settings(self._settings)
        self._inverter = ParameterInverter.from_settings(self._settings)
        self._closed = bool(closed)
        self._points_view: Optional[NDArray[np.float64]] = None
        self._reset()

    def _reset(self) -> None:
        self._knots = []
        self._segments = []
        self._arc_length_table = np.empty(0, dtype=np.float64)
        self._arc_length_table.flags.writeable = False
        self._points_view = None
        self._stale = False

    ###########################################################################
    # Properties
    ###########################################################################

    @property
    def settings(self) -> SplineSettings:
        """SplineSettings: The settings this spline was created with."""
        return self._settings

    @property
    def num_points(self) -> int:
        """int: The number of knots."""
        return len(self._knots)

    @property
    def knots(self) -> Tuple[Point, ...]:
        """Tuple[Point, ...]: Snapshot of the current knots."""
        return tuple(self._knots)

    @property
    def points(self) -> NDArray[np.float64]:
        """
        The knots as a read-only numpy array of shape (n_points, 2).
        """
        if self._points_view is None:
            arr = np.array([p.as_tuple() for p in self._knots], dtype=np.float64).reshape(-1, 2)
            arr.flags.writeable = False
            self._points_view = arr
        return self._points_view

    @property
    def closed(self) -> bool:
        """bool: Whether the spline wraps around. Setting it rebuilds the segments."""
        return self._closed

    @closed.setter
    def closed(self, value: bool) -> None:
        value = bool(value)
        if value == self._closed:
            return
        self._closed = value
        self._stale = True
        self._rebuild()

    @property
    def segments(self) -> Tuple[CubicSegment, ...]:
        """Tuple[CubicSegment, ...]: Snapshot of the current segments."""
        self._ensure_current()
        return tuple(self._segments)

    @property
    def num_segments(self) -> int:
        """int: The number of cubic segments."""
        self._ensure_current()
        return len(self._segments)

    @property
    def arc_length_table(self) -> NDArray[np.float64]:
        """
        Read-only cumulative arc lengths; entry i is the length up to the end of segment i.
        """
        self._ensure_current()
        return self._arc_length_table

    @property
    def length(self) -> float:
        """float: Total arc length, 0.0 if no segments exist."""
        self._ensure_current()
        if len(self._arc_length_table) == 0:
            return 0.0
        return float(self._arc_length_table[-1])

    ###########################################################################
    # Mutation
    ###########################################################################

    def add_control_point(self, x: float, y: float) -> None:
        """
        Append a knot. Existing segments stay as they are until the next recompute.

        Args:
            x (float): x-coordinate of the knot
            y (float): y-coordinate of the knot

        Raises:
            ValidationError: If a coordinate is not finite or the knot limit is reached
        """
        x = float(x)
        y = float(y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValidationError(f"Knot coordinates must be finite, got ({x}, {y})")
        max_knots = self._settings.max_knots
        if max_knots is not None and len(self._knots) >= max_knots:
            raise ValidationError(f"Knot limit of {max_knots} exceeded")

        self._knots.append(Point(x, y))
        self._points_view = None
        self._stale = True

    def set_data(
        self,
        xs: Union[Sequence[float], NDArray[np.float64]],
        ys: Union[Sequence[float], NDArray[np.float64]],
    ) -> None:
        """
        Replace all knots at once. Nothing changes if validation fails.

        Args:
            xs: x-coordinates of the knots
            ys: y-coordinates of the knots, same length as xs

        Raises:
            ValidationError: If the lengths differ, a coordinate is not finite,
                or the knot limit is exceeded
        """
        x_arr = np.asarray(xs, dtype=np.float64)
        y_arr = np.asarray(ys, dtype=np.float64)
        if x_arr.ndim != 1 or y_arr.ndim != 1:
            raise ValidationError(f"xs and ys must be 1-dimensional, got {x_arr.ndim} and {y_arr.ndim}")
        if x_arr.shape[0] != y_arr.shape[0]:
            raise ValidationError(f"xs and ys must have equal length, got {x_arr.shape[0]} and {y_arr.shape[0]}")
        if not (np.all(np.isfinite(x_arr)) and np.all(np.isfinite(y_arr))):
            raise ValidationError("Knot coordinates must be finite")
        max_knots = self._settings.max_knots
        if max_knots is not None and x_arr.shape[0] > max_knots:
            raise ValidationError(f"Knot limit of {max_knots} exceeded by {x_arr.shape[0]} knots")

        self._knots = [Point(float(x), float(y)) for x, y in zip(x_arr, y_arr)]
        self._points_view = None
        self._stale = True

    def clear(self) -> None:
        """Remove all knots, segments and the arc-length table."""
        self._reset()

    def recompute(self) -> None:
        """
        Rebuild segments and the arc-length table from the current knots.

        Idempotent; calling it without intervening mutations does no work.

        Raises:
            ValidationError: If there are one or two knots
        """
        if 0 < len(self._knots) < MIN_KNOTS:
            raise ValidationError(f"At least {MIN_KNOTS} knots are required, got {len(self._knots)}")
        self._ensure_current()

    def _ensure_current(self) -> None:
        if self._stale:
            self._rebuild()

    def _rebuild(self) -> None:
        n = len(self._knots)
        if n < MIN_KNOTS:
            self._segments = []
            self._arc_length_table = np.empty(0, dtype=np.float64)
        else:
            tangents = self._knot_tangents()
            num_segments = n if self._closed else n - 1
            segments = []
            for i in range(num_segments):
                j = (i + 1) % n
                segments.append(
                    CubicSegment(
                        self._knots[i],
                        self._knots[i] + tangents[i] / 3.0,
                        self._knots[j] - tangents[j] / 3.0,
                        self._knots[j],
                    )
                )
            lengths = np.array([self._integrator.integrate(seg, 0.0, 1.0) for seg in segments], dtype=np.float64)
            self._segments = segments
            self._arc_length_table = np.cumsum(lengths)
        self._arc_length_table.flags.writeable = False
        self._stale = False

        logger.debug(
            "Rebuilt spline: %d knots, %d segments, closed=%s, length=%g",
            n,
            len(self._segments),
            self._closed,
            float(self._arc_length_table[-1]) if len(self._arc_length_table) else 0.0,
        )

    def _knot_tangents(self) -> List[Point]:
        """Tangent per knot, the central difference scaled by the tension."""
        knots = self._knots
        n = len(knots)
        tension = self._settings.tension
        tangents = []
        for i in range(n):
            if self._closed:
                prev_knot = knots[(i - 1) % n]
                next_knot = knots[(i + 1) % n]
            else:
                # one-sided difference at the ends
                prev_knot = knots[max(i - 1, 0)]
                next_knot = knots[min(i + 1, n - 1)]
            tangents.append((next_knot - prev_knot) * tension)
        return tangents

    ###########################################################################
    # Segment access
    ###########################################################################

    def get_cubic_segment(self, index: int) -> Optional[CubicSegment]:
        """
        Get the segment at _index_.

        Args:
            index (int): Segment index

        Returns:
            Optional[CubicSegment]: the segment, or None if index is out of range
        """
        self._ensure_current()
        if 0 <= index < len(self._segments):
            return self._segments[index]
        return None

    def _segment_at_t(self, t: float) -> Tuple[int, float]:
        """Map a global natural parameter onto (segment index, local parameter)."""
        num_segments = len(self._segments)
        u = clamp(float(t), 0.0, 1.0) * num_segments
        index = min(int(u), num_segments - 1)
        return index, u - index

    def segment_at_s(self, s: float) -> Tuple[int, float]:
        """
        Resolve a global arc length into a segment and its local parameter.

        Args:
            s (float): Arc length, clamped to [0, length]

        Returns:
            Tuple[int, float]: segment index (-1 if there are no segments) and parameter t in [0, 1]
        """
        self._ensure_current()
        table = self._arc_length_table
        index, local_length = self._inverter.locate(table, s)
        if index < 0:
            return index, 0.0
        start = float(table[index - 1]) if index > 0 else 0.0
        segment_length = float(table[index]) - start
        return index, self._inverter.invert(self._segments[index], local_length, segment_length)

    ###########################################################################
    # Natural parameter queries
    ###########################################################################

    def _fallback_point(self) -> Point:
        return self._knots[0] if self._knots else Point(0.0, 0.0)

    def get_point(self, t: float) -> Point:
        """
        Evaluate the spline at global natural parameter t.

        Segment i covers t in [i/m, (i+1)/m] for m segments, so t = i/m is knot i.

        Args:
            t (float): Natural parameter, clamped to [0, 1]

        Returns:
            Point: the point on the spline
        """
        self._ensure_current()
        if not self._segments:
            return self._fallback_point()
        index, local_t = self._segment_at_t(t)
        return self._segments[index].position(local_t)

    def get_tangent(self, t: float) -> Point:
        """Derivative of the segment-local curve at global natural parameter t."""
        self._ensure_current()
        if not self._segments:
            return Point(0.0, 0.0)
        index, local_t = self._segment_at_t(t)
        return self._segments[index].tangent(local_t)

    def get_x(self, t: float) -> float:
        return self.get_point(t).x

    def get_y(self, t: float) -> float:
        return self.get_point(t).y

    def get_x_prime(self, t: float) -> float:
        return self.get_tangent(t).x

    def get_y_prime(self, t: float) -> float:
        return self.get_tangent(t).y

    ###########################################################################
    # Arc-length parameter queries
    ###########################################################################

    def get_point_at_s(self, s: float) -> Point:
        """
        Evaluate the spline at arc length s from the first knot.

        Args:
            s (float): Arc length, clamped to [0, length]

        Returns:
            Point: the point on the spline
        """
        index, t = self.segment_at_s(s)
        if index < 0:
            return self._fallback_point()
        return self._segments[index].position(t)

    def get_tangent_at_s(self, s: float) -> Point:
        """Derivative of the segment-local curve at arc length s."""
        index, t = self.segment_at_s(s)
        if index < 0:
            return Point(0.0, 0.0)
        return self._segments[index].tangent(t)

    def get_x_at_s(self, s: float) -> float:
        return self.get_point_at_s(s).x

    def get_y_at_s(self, s: float) -> float:
        return self.get_point_at_s(s).y

    def get_x_prime_at_s(self, s: float) -> float:
        return self.get_tangent_at_s(s).x

    def get_y_prime_at_s(self, s: float) -> float:
        return self.get_tangent_at_s(s).y

    ###########################################################################
    # Rendering support
    ###########################################################################

    def polygonize(self, steps_per_segment: int) -> NDArray[np.float64]:
        """
        Polygonize all segments into one polyline.

        Joints between segments appear once. Without segments the knots are returned.

        Args:
            steps_per_segment: Number of line segments per cubic segment

        Returns:
            NDArray[np.float64] of shape (m*steps_per_segment+1, 2) for m segments
        """
        self._ensure_current()
        if not self._segments:
            return np.array(self.points, dtype=np.float64)
        parts = [self._segments[0].polygonize(steps_per_segment)]
        for segment in self._segments[1:]:
            parts.append(segment.polygonize(steps_per_segment)[1:])
        return np.concatenate(parts, axis=0)

    def __str__(self):
        return (
            f"CubicBezierSpline(num_points={self.num_points}, closed={self._closed}, "
            f"num_segments={self.num_segments}, length={self.length})"
        )


def main():
    """Build a small open spline and print its segments and arc-length samples."""
    spline = CubicBezierSpline()
    spline.set_data([0.0, 10.0, 10.0, 0.0], [0.0, 0.0, 10.0, 10.0])
    spline.recompute()

    print(spline)
    for i in range(spline.num_segments):
        print(f"  segment {i}: {spline.get_cubic_segment(i)}")
    print()

    total = spline.length
    for k in range(5):
        s = total * k / 4
        print(f"  s={s:8.4f}  x={spline.get_x_at_s(s):8.4f}  y={spline.get_y_at_s(s):8.4f}")
    print()

    spline.closed = True
    print(spline)
    print()


if __name__ == "__main__":
    main()

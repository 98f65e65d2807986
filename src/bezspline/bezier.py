"""Cubic Bezier segment evaluation for spline construction and rendering."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import Union

import numpy as np
from numpy.typing import NDArray

from bezspline.common import Point, ValidationError, clamp


@dataclass(frozen=True)
class CubicSegment:
    """A single cubic Bezier curve defined by two anchors and two control points.

    The curve is only defined on t in [0, 1]; parameters outside are clamped.

    Attributes:
        p0 (Point): Start anchor, coincides with a knot.
        c0 (Point): First control point.
        c1 (Point): Second control point.
        p1 (Point): End anchor, coincides with the next knot.
    """

    p0: Point
    c0: Point
    c1: Point
    p1: Point

    @cached_property
    def control_points(self) -> NDArray[np.float64]:
        """Read-only array of shape (4, 2) containing p0, c0, c1, p1."""
        arr = np.array(
            [self.p0.as_tuple(), self.c0.as_tuple(), self.c1.as_tuple(), self.p1.as_tuple()],
            dtype=np.float64,
        )
        arr.flags.writeable = False
        return arr

    def position(self, t: float) -> Point:
        """
        Evaluate the curve at parameter t.

        B(t) = (1-t)^3*P0 + 3*(1-t)^2*t*C0 + 3*(1-t)*t^2*C1 + t^3*P1

        Args:
            t (float): Curve parameter, clamped to [0, 1]

        Returns:
            Point: the point on the curve
        """
        t = clamp(float(t), 0.0, 1.0)
        if t == 0.0:
            return self.p0
        if t == 1.0:
            return self.p1
        omt = 1.0 - t
        omt2 = omt * omt
        omt3 = omt2 * omt
        t2 = t * t
        t3 = t2 * t
        x = omt3 * self.p0.x + 3.0 * omt2 * t * self.c0.x + 3.0 * omt * t2 * self.c1.x + t3 * self.p1.x
        y = omt3 * self.p0.y + 3.0 * omt2 * t * self.c0.y + 3.0 * omt * t2 * self.c1.y + t3 * self.p1.y
        return Point(x, y)

    def tangent(self, t: float) -> Point:
        """
        Evaluate the first derivative of the curve at parameter t.

        B'(t) = 3*(1-t)^2*(C0-P0) + 6*(1-t)*t*(C1-C0) + 3*t^2*(P1-C1)

        Args:
            t (float): Curve parameter, clamped to [0, 1]

        Returns:
            Point: the derivative vector (dx/dt, dy/dt)
        """
        t = clamp(float(t), 0.0, 1.0)
        omt = 1.0 - t
        a = 3.0 * omt * omt
        b = 6.0 * omt * t
        c = 3.0 * t * t
        x = a * (self.c0.x - self.p0.x) + b * (self.c1.x - self.c0.x) + c * (self.p1.x - self.c1.x)
        y = a * (self.c0.y - self.p0.y) + b * (self.c1.y - self.c0.y) + c * (self.p1.y - self.c1.y)
        return Point(x, y)

    def tangents(self, ts: Union[NDArray[np.float64], list]) -> NDArray[np.float64]:
        """
        Vectorized derivative evaluation.

        Args:
            ts: Curve parameters, each clamped to [0, 1]

        Returns:
            NDArray[np.float64] of shape (len(ts), 2) containing (dx/dt, dy/dt)
        """
        t = np.clip(np.asarray(ts, dtype=np.float64), 0.0, 1.0)
        pts = self.control_points
        omt = 1.0 - t
        a = 3.0 * omt * omt
        b = 6.0 * omt * t
        c = 3.0 * t * t
        d0 = pts[1] - pts[0]
        d1 = pts[2] - pts[1]
        d2 = pts[3] - pts[2]
        return a[:, np.newaxis] * d0 + b[:, np.newaxis] * d1 + c[:, np.newaxis] * d2

    def speeds(self, ts: Union[NDArray[np.float64], list]) -> NDArray[np.float64]:
        """Vectorized evaluation of the speed |B'(t)|, the arc-length integrand."""
        derivatives = self.tangents(ts)
        return np.hypot(derivatives[:, 0], derivatives[:, 1])

    def polygonize(self, steps: int) -> NDArray[np.float64]:
        """
        Polygonize the curve into line segments at uniformly spaced parameters.

        Args:
            steps: Number of line segments to divide the curve into

        Returns:
            NDArray[np.float64] of shape (steps+1, 2) containing the polygonized points

        Raises:
            ValidationError: If steps is smaller than 1
        """
        if steps < 1:
            raise ValidationError(f"steps must be at least 1, got {steps}")

        pts = self.control_points
        t = np.linspace(0, 1, steps + 1, dtype=np.float64)

        # Cubic Bezier basis functions
        omt = 1 - t
        omt2 = omt**2
        omt3 = omt2 * omt
        t2 = t**2
        t3 = t2 * t

        x = omt3 * pts[0, 0] + 3 * omt2 * t * pts[1, 0] + 3 * omt * t2 * pts[2, 0] + t3 * pts[3, 0]
        y = omt3 * pts[0, 1] + 3 * omt2 * t * pts[1, 1] + 3 * omt * t2 * pts[2, 1] + t3 * pts[3, 1]

        result = np.column_stack((x, y))
        # Anchors exactly, independent of rounding in the basis functions
        result[0] = pts[0]
        result[-1] = pts[3]
        return result

    def __str__(self):
        return f"CubicSegment(p0={self.p0}, c0={self.c0}, c1={self.c1}, p1={self.p1})"

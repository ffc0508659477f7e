"""
geometry.py — Screen-space primitives for polyline hit-testing.

Provides the Offset value used for every projected vertex and tap position,
and the point-to-segment distance used to decide whether a tap touches a
rendered line.

Reference:
    Closest point on a line segment, via the clamped projection parameter
    t = dot(p - a, b - a) / |b - a|^2.
"""

from __future__ import annotations

import math
from typing import NamedTuple


class Offset(NamedTuple):
    """A 2-D point in rendering-surface pixel space."""

    dx: float
    dy: float

    def __add__(self, other: "Offset") -> "Offset":  # type: ignore[override]
        return Offset(self.dx + other.dx, self.dy + other.dy)

    def __sub__(self, other: "Offset") -> "Offset":
        return Offset(self.dx - other.dx, self.dy - other.dy)

    def __mul__(self, factor: float) -> "Offset":  # type: ignore[override]
        return Offset(self.dx * factor, self.dy * factor)

    def __truediv__(self, factor: float) -> "Offset":
        return Offset(self.dx / factor, self.dy / factor)

    @property
    def distance(self) -> float:
        """Euclidean length of the offset measured from the origin."""
        return math.hypot(self.dx, self.dy)


def squared_segment_distance(
    px: float,
    py: float,
    x0: float,
    y0: float,
    x1: float,
    y1: float,
) -> float:
    """
    Squared distance from the point (px, py) to the segment [(x0, y0), (x1, y1)].

    The segment is finite: points beyond either end measure to the nearest
    endpoint. A zero-length segment measures to its start point.

    Args:
        px, py: Coordinates of the test point.
        x0, y0: Segment start.
        x1, y1: Segment end.

    Returns:
        The squared Euclidean distance (always >= 0).
    """
    dx = x1 - x0
    dy = y1 - y0

    if dx != 0 or dy != 0:
        t = ((px - x0) * dx + (py - y0) * dy) / (dx * dx + dy * dy)
        if t > 1:
            dx = px - x1
            dy = py - y1
            return dx * dx + dy * dy
        elif t > 0:
            dx = px - (x0 + dx * t)
            dy = py - (y0 + dy * t)
            return dx * dx + dy * dy

    # Degenerate segment or projection before the start point
    dx = px - x0
    dy = py - y0
    return dx * dx + dy * dy


def segment_distance(point: Offset, start: Offset, end: Offset) -> float:
    """Distance from ``point`` to the segment [start, end] in pixels."""
    return math.sqrt(
        squared_segment_distance(
            point.dx, point.dy, start.dx, start.dy, end.dx, end.dy,
        )
    )

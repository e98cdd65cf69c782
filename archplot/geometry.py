"""Polyline helpers shared by the router and the renderer."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from .models import Point

if TYPE_CHECKING:
    from collections.abc import Sequence


def distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Euclidean distance between two points."""
    return math.hypot(b[0] - a[0], b[1] - a[1])


def midpoint(a: tuple[float, float], b: tuple[float, float]) -> Point:
    return Point((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)


def remove_consecutive_duplicates(points: Sequence[Point]) -> list[Point]:
    """Drop points equal to their predecessor."""
    result: list[Point] = []
    for point in points:
        if not result or result[-1] != point:
            result.append(point)
    return result


def path_length(points: Sequence[tuple[float, float]]) -> float:
    """Total length of the polyline through ``points``."""
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))


def compute_path_center(points: Sequence[tuple[float, float]]) -> Point:
    """Compute the center point of a path using arc length.

    Finds the point that is equidistant (by path length) from both endpoints.

    Args:
        points: List of path points

    Returns:
        Point at half of the cumulative polyline length
    """
    if len(points) < 2:
        return Point(*points[0]) if points else Point(0, 0)

    if len(points) == 2:
        return midpoint(points[0], points[1])

    # Calculate cumulative arc lengths
    arc_lengths = [0.0]
    for i in range(1, len(points)):
        arc_lengths.append(arc_lengths[-1] + distance(points[i - 1], points[i]))

    total_length = arc_lengths[-1]
    if total_length == 0:
        return Point(*points[0])

    target_length = total_length / 2

    # Find the segment containing the center
    for i in range(1, len(arc_lengths)):
        if arc_lengths[i] >= target_length:
            segment_start = arc_lengths[i - 1]
            segment_length = arc_lengths[i] - segment_start

            if segment_length == 0:
                return Point(*points[i - 1])

            t = (target_length - segment_start) / segment_length
            x = points[i - 1][0] + t * (points[i][0] - points[i - 1][0])
            y = points[i - 1][1] + t * (points[i][1] - points[i - 1][1])
            return Point(x, y)

    return Point(*points[-1])


def _format_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def to_path_data(points: Sequence[tuple[float, float]]) -> str:
    """Build SVG path data for a polyline."""
    if not points:
        return ""
    commands = [f"M {_format_number(points[0][0])},{_format_number(points[0][1])}"]
    for x, y in points[1:]:
        commands.append(f"L {_format_number(x)},{_format_number(y)}")
    return " ".join(commands)

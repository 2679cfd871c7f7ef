"""Geographic helpers: haversine distance and coordinate formatting."""

from __future__ import annotations

import math
from collections.abc import Sequence

# Earth radius in kilometers
EARTH_RADIUS_KM = 6371.0

Point = tuple[float, float]


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate great-circle distance between two points.

    Args:
        lat1: Latitude of the first point in degrees.
        lon1: Longitude of the first point in degrees.
        lat2: Latitude of the second point in degrees.
        lon2: Longitude of the second point in degrees.

    Returns:
        Distance in kilometers.
    """
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def round_half_up(value: float, digits: int = 1) -> float:
    """Round with ties going up, independent of float banker's rounding."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def calculate_distance(points: Sequence[Point]) -> float:
    """Calculate the length of a path through ordered points.

    Args:
        points: Sequence of (lat, lon) tuples in degrees.

    Returns:
        Total distance in kilometers, rounded to one decimal.
        0.0 for fewer than two points.
    """
    total = 0.0
    for (lat1, lon1), (lat2, lon2) in zip(points, points[1:]):
        total += haversine(lat1, lon1, lat2, lon2)
    return round_half_up(total, 1)


def format_coordinate(point: Point) -> str:
    """Format a (lat, lon) pair as ``"lat, lon"`` with 4 decimals each."""
    return f"{point[0]:.4f}, {point[1]:.4f}"

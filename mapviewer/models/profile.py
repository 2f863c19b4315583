"""Elevation profile model.

A profile is an ordered, immutable sequence of ``ProfilePoint``. All
statistics are derived on access from the point list; nothing is cached.
Every statistic is ``0`` for profiles with fewer than two points.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shapely.geometry import LineString

# Hiking speed polynomial (minutes per kilometre as a function of the
# slope in tenths), SchweizMobil variant of the Swiss hiking formula.
HIKING_TIME_COEFFICIENTS: tuple[float, ...] = (
    14.271,
    3.6991,
    2.5922,
    -1.4384,
    0.32105,
    0.81542,
    -0.090261,
    -0.20757,
    0.010192,
    0.028588,
    -0.00057466,
    -0.0021842,
    1.5176e-5,
    8.6894e-5,
    -1.3584e-7,
    -1.4026e-6,
)

# The polynomial is only used within (-4, 4) tenths (-40% .. +40%),
# linear approximations apply outside of it.
HIKING_POLYNOMIAL_SLOPE_LIMIT = 4.0
STEEP_ASCENT_MINUTES_FACTOR = 17.0
STEEP_DESCENT_MINUTES_FACTOR = -9.0

METRES_PER_KILOMETRE = 1000.0


@dataclass(frozen=True, slots=True)
class ProfilePoint:
    """One profile sample.

    Attributes:
        dist: Distance from the first point, in metres.
        coordinate: Planar ``(x, y)`` coordinate of the sample.
        elevation: Elevation in metres (COMB elevation model).
    """

    dist: float
    coordinate: tuple[float, float]
    elevation: float


class ElevationProfile:
    """Read-only elevation profile with derived statistics."""

    def __init__(self, points: Iterable[ProfilePoint]) -> None:
        self._points: tuple[ProfilePoint, ...] = tuple(points)

    @property
    def points(self) -> tuple[ProfilePoint, ...]:
        return self._points

    def __len__(self) -> int:
        return len(self._points)

    @property
    def has_data(self) -> bool:
        """True if the profile has at least 2 points."""
        return len(self._points) >= 2

    @property
    def max_dist(self) -> float:
        if not self.has_data:
            return 0
        return self._points[-1].dist or 0

    @property
    def max_elevation(self) -> float:
        if not self.has_data:
            return 0
        return max(point.elevation for point in self._points)

    @property
    def min_elevation(self) -> float:
        if not self.has_data:
            return 0
        return min(point.elevation for point in self._points)

    @property
    def elevation_difference(self) -> float:
        """Elevation of the last point minus elevation of the first, in metres."""
        if not self.has_data:
            return 0
        return self._points[-1].elevation - self._points[0].elevation

    @property
    def total_ascent(self) -> float:
        total = 0.0
        for previous, current in self._elevation_pairs():
            total += max(current - previous, 0)
        return total

    @property
    def total_descent(self) -> float:
        total = 0.0
        for previous, current in self._elevation_pairs():
            total -= min(current - previous, 0)
        return abs(total)

    @property
    def slope_distance(self) -> float:
        """Sum of slope (ground) distances between consecutive points, in metres."""
        if not self.has_data:
            return 0
        total = 0.0
        for previous, current in zip(self._points, self._points[1:]):
            elevation_delta = current.elevation - previous.elevation
            distance_delta = current.dist - previous.dist
            total += math.sqrt(elevation_delta**2 + distance_delta**2)
        return total

    @property
    def coordinates(self) -> list[tuple[float, float]]:
        return [point.coordinate for point in self._points]

    @property
    def line_string(self) -> LineString:
        from shapely.geometry import LineString

        return LineString(self.coordinates)

    @property
    def hiking_time(self) -> int:
        """Estimated hiking time in minutes.

        Swiss hiking formula (wandern.ch) with the SchweizMobil
        modifications: slope in tenths instead of percent, polynomial
        range widened to +-40%. The segment ending on the last point is
        not counted.
        """
        if not self.has_data:
            return 0

        minutes = 0.0
        for index in range(len(self._points) - 2):
            current = self._points[index]
            following = self._points[index + 1]
            distance_delta = following.dist - current.dist
            if not distance_delta:
                continue
            elevation_delta = following.elevation - current.elevation
            slope = elevation_delta * 10.0 / distance_delta
            minutes += distance_delta * _minutes_per_kilometre(slope) / METRES_PER_KILOMETRE

        # rounds half up
        return math.floor(minutes + 0.5)

    def _elevation_pairs(self) -> zip[tuple[float, float]]:
        elevations = [point.elevation for point in self._points]
        return zip(elevations, elevations[1:])


def _minutes_per_kilometre(slope: float) -> float:
    """Walking pace for a slope expressed in tenths."""
    if -HIKING_POLYNOMIAL_SLOPE_LIMIT < slope < HIKING_POLYNOMIAL_SLOPE_LIMIT:
        pace = 0.0
        for power, coefficient in enumerate(HIKING_TIME_COEFFICIENTS):
            pace += coefficient * math.pow(slope, power)
        return pace
    if slope > 0:
        return STEEP_ASCENT_MINUTES_FACTOR * slope
    return STEEP_DESCENT_MINUTES_FACTOR * slope

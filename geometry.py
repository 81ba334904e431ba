from __future__ import annotations

import math
from collections.abc import Sequence

from interpolation import clamp, lerp
from models import ArcPoint, Location

EARTH_RADIUS_KM = 6371.0

EARTH_A = 6_378_137.0
EARTH_F = 1.0 / 298.257223563
EARTH_E2 = 2.0 * EARTH_F - EARTH_F * EARTH_F

# Fraction of the ground distance used as the peak height of a drawn arc.
LINE_ARC_HEIGHT_FACTOR = 0.15
TRAIL_ARC_HEIGHT_FACTOR = 0.12


def haversine_km(start: Location, end: Location) -> float:
    lat1_r, lat2_r = math.radians(start.lat), math.radians(end.lat)
    dlat = math.radians(end.lat - start.lat)
    dlng = math.radians(end.lon - start.lon)
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def bearing_deg(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlng = math.radians(lng2 - lng1)
    y = math.sin(dlng) * math.cos(lat2_r)
    x = math.cos(lat1_r) * math.sin(lat2_r) - math.sin(lat1_r) * math.cos(lat2_r) * math.cos(dlng)
    return (math.degrees(math.atan2(y, x)) + 360.0) % 360.0


def geodetic_to_ecef(lat_deg: float, lng_deg: float, alt_m: float) -> tuple[float, float, float]:
    lat = math.radians(lat_deg)
    lng = math.radians(lng_deg)
    sin_lat = math.sin(lat)
    cos_lat = math.cos(lat)
    n = EARTH_A / math.sqrt(1.0 - EARTH_E2 * sin_lat * sin_lat)
    x = (n + alt_m) * cos_lat * math.cos(lng)
    y = (n + alt_m) * cos_lat * math.sin(lng)
    z = (n * (1.0 - EARTH_E2) + alt_m) * sin_lat
    return x, y, z


def arc_max_height_m(
    start: Location,
    end: Location,
    arc_height: float,
    height_factor: float = LINE_ARC_HEIGHT_FACTOR,
) -> float:
    """Peak altitude of the parabolic arc, proportional to ground distance."""
    return haversine_km(start, end) * height_factor * arc_height * 1000.0


def arc_point(start: Location, end: Location, t: float, max_height_m: float) -> ArcPoint:
    return ArcPoint(
        lon=lerp(start.lon, end.lon, t),
        lat=lerp(start.lat, end.lat, t),
        alt=4.0 * t * (1.0 - t) * max_height_m,
    )


class ArcPoints(Sequence):
    """Samples along a parabolic arc, computed on access.

    Only the first ``floor(num_points * progress) + 1`` samples are exposed, so
    the sequence grows with progress. Iterating twice yields the same points.
    """

    def __init__(
        self,
        start: Location,
        end: Location,
        progress: float,
        arc_height: float,
        num_points: int = 100,
        height_factor: float = LINE_ARC_HEIGHT_FACTOR,
    ):
        if num_points < 1:
            raise ValueError("num_points must be at least 1")
        self.start = start
        self.end = end
        self.progress = clamp(progress, 0.0, 1.0)
        self.num_points = num_points
        self.max_height_m = arc_max_height_m(start, end, arc_height, height_factor)
        self._count = math.floor(num_points * self.progress) + 1

    def __len__(self) -> int:
        return self._count

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("arc point index out of range")
        return arc_point(self.start, self.end, index / self.num_points, self.max_height_m)

    def __repr__(self) -> str:
        return (
            f"ArcPoints({self.start.name!r} -> {self.end.name!r}, "
            f"progress={self.progress:.3f}, samples={self._count})"
        )


def generate_arc_points(
    start: Location,
    end: Location,
    progress: float,
    arc_height: float,
    num_points: int = 100,
    height_factor: float = LINE_ARC_HEIGHT_FACTOR,
) -> ArcPoints:
    return ArcPoints(start, end, progress, arc_height, num_points, height_factor)

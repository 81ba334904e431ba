"""Animated trail line and airplane marker from one location to another.

The full arc is sampled once at construction; every query slices it for the
requested progress, so rewinding or skipping frames needs no bookkeeping.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field

from geometry import TRAIL_ARC_HEIGHT_FACTOR, arc_max_height_m, arc_point, bearing_deg, geodetic_to_ecef
from interpolation import clamp, lerp
from models import ArcPoint, Location

DEFAULT_HEADING = 0.0
UNIT_Z = (0.0, 0.0, 1.0)
_MIN_DIRECTION_M = 0.001


@dataclass(frozen=True)
class TrailConfig:
    start: Location = field(default_factory=lambda: Location(lat=51.5214, lon=-0.1448, name="London"))
    end: Location = field(default_factory=lambda: Location(lat=22.6815, lon=113.839, name="Shenzhen"))
    arc_height: float = 1.0
    num_points: int = 200
    line_color: str = "#ffffff"
    line_width: float = 2.0
    glow_color: str = "#C1272D"
    glow_width: float = 8.0
    airplane_scale: float = 1.2
    airplane_image: str = "airplane.svg"

    def style(self) -> dict:
        return {
            "lineColor": self.line_color,
            "lineWidth": self.line_width,
            "glowColor": self.glow_color,
            "glowWidth": self.glow_width,
            "airplaneScale": self.airplane_scale,
            "airplaneImage": self.airplane_image,
        }


def _lerp_point(a: ArcPoint, b: ArcPoint, t: float) -> ArcPoint:
    return ArcPoint(lon=lerp(a.lon, b.lon, t), lat=lerp(a.lat, b.lat, t), alt=lerp(a.alt, b.alt, t))


class FlightTrail:
    def __init__(self, config: TrailConfig | None = None):
        self.config = config or TrailConfig()
        if self.config.num_points < 1:
            raise ValueError("num_points must be at least 1")
        max_height = arc_max_height_m(
            self.config.start, self.config.end, self.config.arc_height, TRAIL_ARC_HEIGHT_FACTOR
        )
        n = self.config.num_points
        self.arc: tuple[ArcPoint, ...] = tuple(
            arc_point(self.config.start, self.config.end, i / n, max_height) for i in range(n + 1)
        )
        self._ecef = tuple(geodetic_to_ecef(p.lat, p.lon, p.alt) for p in self.arc)

    @property
    def origin_label(self) -> str:
        name = self.config.start.name.upper()
        if self.config.start.name_zh:
            return f"{name}\n{self.config.start.name_zh}"
        return name

    def positions(self, progress: float) -> list[ArcPoint]:
        """Polyline drawn so far: whole samples up to progress plus an interpolated tip."""
        progress = clamp(progress, 0.0, 1.0)
        if progress <= 0:
            return []

        total_seg = len(self.arc) - 1
        exact = progress * total_seg
        floor_idx = math.floor(exact)
        points = list(self.arc[: floor_idx + 1])
        if floor_idx < total_seg:
            points.append(_lerp_point(self.arc[floor_idx], self.arc[floor_idx + 1], exact - floor_idx))
        return points

    def airplane_position(self, progress: float) -> ArcPoint:
        points = self.positions(progress)
        return points[-1] if points else self.arc[0]

    def _straddling(self, progress: float) -> tuple[int, int]:
        total_seg = len(self.arc) - 1
        p = clamp(progress, 0.0, 1.0)
        idx = min(math.floor(p * total_seg), total_seg - 1)
        return idx, min(idx + 1, total_seg)

    def direction(self, progress: float) -> tuple[float, float, float]:
        """Unit ECEF vector of travel, UNIT_Z when the two samples coincide."""
        i, j = self._straddling(progress)
        (x1, y1, z1), (x2, y2, z2) = self._ecef[i], self._ecef[j]
        dx, dy, dz = x2 - x1, y2 - y1, z2 - z1
        length = math.sqrt(dx * dx + dy * dy + dz * dz)
        if length < _MIN_DIRECTION_M:
            return UNIT_Z
        return dx / length, dy / length, dz / length

    def heading(self, progress: float) -> float:
        i, j = self._straddling(progress)
        a, b = self.arc[i], self.arc[j]
        if a.lon == b.lon and a.lat == b.lat:
            return DEFAULT_HEADING
        return bearing_deg(a.lat, a.lon, b.lat, b.lon)

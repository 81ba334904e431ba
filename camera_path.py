"""Camera path animation: keyframed flight paths sampled per frame.

Two interpolation policies are available and chosen when the animator is built:

``catmull-rom``
    Smoothstep easing on the first and last 8% of the timeline, straight lines
    on the takeoff segment, the two landing segments and any vertical segment,
    Catmull-Rom splines everywhere else (altitude included).

``hermite``
    Cubic Hermite splines through every keyframe with tangents estimated by
    central differences in time. Lon/lat tangents are zeroed next to vertical
    segments so climbs and dives do not wobble sideways. Altitude is blended
    logarithmically so zoom speed looks uniform across orders of magnitude.
"""
from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Iterator, Sequence

from clock import AnimationClock
from interpolation import catmull_rom, hermite, lerp, log_lerp, smoothstep
from models import CameraPose, FlightConfig, FramePose

# Progress within this distance of either end snaps to the exact keyframe.
BOUNDARY_EPSILON = 0.001

EASE_WINDOW = 0.08

END_SEGMENT = "end"


def cloud_opacity(alt: float) -> float:
    """Opacity of the cloud layer for a camera altitude in meters."""
    if alt < 1_000 or alt > 15_000:
        return 0.0
    if alt < 3_000:
        return (alt - 1_000) / 2_000
    if alt <= 6_000:
        return 1.0
    return 1.0 - (alt - 6_000) / 9_000


def lerp_pose(a: CameraPose, b: CameraPose, t: float) -> CameraPose:
    return CameraPose(
        lon=lerp(a.lon, b.lon, t),
        lat=lerp(a.lat, b.lat, t),
        alt=lerp(a.alt, b.alt, t),
        heading=lerp(a.heading, b.heading, t),
        pitch=lerp(a.pitch, b.pitch, t),
    )


def catmull_rom_pose(
    p0: CameraPose, p1: CameraPose, p2: CameraPose, p3: CameraPose, t: float
) -> CameraPose:
    return CameraPose(
        lon=catmull_rom(p0.lon, p1.lon, p2.lon, p3.lon, t),
        lat=catmull_rom(p0.lat, p1.lat, p2.lat, p3.lat, t),
        alt=catmull_rom(p0.alt, p1.alt, p2.alt, p3.alt, t),
        heading=catmull_rom(p0.heading, p1.heading, p2.heading, p3.heading, t),
        pitch=catmull_rom(p0.pitch, p1.pitch, p2.pitch, p3.pitch, t),
    )


def is_vertical(a: CameraPose, b: CameraPose) -> bool:
    return a.lon == b.lon and a.lat == b.lat


def _locate(bounds: Sequence[float], value: float) -> int:
    """Index of the span [bounds[i], bounds[i + 1]] containing value."""
    idx = bisect_right(bounds, value) - 1
    return max(0, min(idx, len(bounds) - 2))


def _local_t(value: float, start: float, end: float) -> float:
    if end <= start:
        return 0.0
    return (value - start) / (end - start)


@dataclass(frozen=True)
class Tangent:
    lon: float = 0.0
    lat: float = 0.0
    heading: float = 0.0
    pitch: float = 0.0

    def scaled(self, factor: float) -> "Tangent":
        return Tangent(
            lon=self.lon * factor,
            lat=self.lat * factor,
            heading=self.heading * factor,
            pitch=self.pitch * factor,
        )


class InterpolationPolicy:
    """Turns global progress into a pose. Built once per animator from its keyframe table."""

    name = ""

    def __init__(self, keyframes: Sequence[CameraPose], times: Sequence[float]):
        if len(keyframes) < 2 or len(keyframes) != len(times):
            raise ValueError("A policy needs at least two keyframes with one time each.")
        self.keyframes = tuple(keyframes)
        self.times = tuple(times)

    @property
    def segment_count(self) -> int:
        return len(self.keyframes) - 1

    def pose_at(self, progress: float) -> tuple[CameraPose, int]:
        raise NotImplementedError


class CatmullRomPolicy(InterpolationPolicy):
    name = "catmull-rom"

    def __init__(self, keyframes: Sequence[CameraPose], times: Sequence[float]):
        super().__init__(keyframes, times)
        total = self.times[-1]
        self.ratios = tuple(t / total for t in self.times) if total > 0 else tuple(
            0.0 for _ in self.times
        )
        last = self.segment_count - 1
        self.linear_segments = frozenset(
            i
            for i in range(self.segment_count)
            if i == 0
            or i >= last - 1
            or is_vertical(self.keyframes[i], self.keyframes[i + 1])
        )

    @staticmethod
    def ease(progress: float) -> float:
        if progress < EASE_WINDOW:
            return smoothstep(progress / EASE_WINDOW) * EASE_WINDOW
        if progress > 1.0 - EASE_WINDOW:
            edge = 1.0 - EASE_WINDOW
            return edge + smoothstep((progress - edge) / EASE_WINDOW) * EASE_WINDOW
        return progress

    def pose_at(self, progress: float) -> tuple[CameraPose, int]:
        eased = self.ease(progress)
        idx = _locate(self.ratios, eased)
        t = _local_t(eased, self.ratios[idx], self.ratios[idx + 1])

        p1 = self.keyframes[idx]
        p2 = self.keyframes[idx + 1]
        if idx in self.linear_segments:
            return lerp_pose(p1, p2, t), idx

        p0 = self.keyframes[max(0, idx - 1)]
        p3 = self.keyframes[min(len(self.keyframes) - 1, idx + 2)]
        return catmull_rom_pose(p0, p1, p2, p3, t), idx


class HermitePolicy(InterpolationPolicy):
    name = "hermite"

    def __init__(self, keyframes: Sequence[CameraPose], times: Sequence[float]):
        super().__init__(keyframes, times)
        self.tangents = self._compute_tangents()

    def _compute_tangents(self) -> tuple[Tangent, ...]:
        n = len(self.keyframes)
        tangents: list[Tangent] = []
        for i, here in enumerate(self.keyframes):
            prev = self.keyframes[i - 1] if i > 0 else here
            nxt = self.keyframes[i + 1] if i < n - 1 else here
            dt = self.times[min(n - 1, i + 1)] - self.times[max(0, i - 1)]

            if dt > 0:
                tangent = Tangent(
                    lon=(nxt.lon - prev.lon) / dt,
                    lat=(nxt.lat - prev.lat) / dt,
                    heading=(nxt.heading - prev.heading) / dt,
                    pitch=(nxt.pitch - prev.pitch) / dt,
                )
            else:
                tangent = Tangent()

            vertical_in = i > 0 and is_vertical(here, prev)
            vertical_out = i < n - 1 and is_vertical(here, nxt)
            if vertical_in or vertical_out:
                tangent = Tangent(lon=0.0, lat=0.0, heading=tangent.heading, pitch=tangent.pitch)

            tangents.append(tangent)
        return tuple(tangents)

    def pose_at(self, progress: float) -> tuple[CameraPose, int]:
        time = progress * self.times[-1]
        idx = _locate(self.times, time)
        span = self.times[idx + 1] - self.times[idx]
        t = _local_t(time, self.times[idx], self.times[idx + 1])

        p0 = self.keyframes[idx]
        p1 = self.keyframes[idx + 1]
        # Tangents are per-second velocities; the curve runs over t in [0, 1].
        m0 = self.tangents[idx].scaled(span)
        m1 = self.tangents[idx + 1].scaled(span)

        pose = CameraPose(
            lon=hermite(p0.lon, p1.lon, m0.lon, m1.lon, t),
            lat=hermite(p0.lat, p1.lat, m0.lat, m1.lat, t),
            alt=log_lerp(p0.alt, p1.alt, t),
            heading=hermite(p0.heading, p1.heading, m0.heading, m1.heading, t),
            pitch=hermite(p0.pitch, p1.pitch, m0.pitch, m1.pitch, t),
        )
        return pose, idx


POLICIES: dict[str, type[InterpolationPolicy]] = {
    CatmullRomPolicy.name: CatmullRomPolicy,
    HermitePolicy.name: HermitePolicy,
}


def resolve_policy(policy: str | type[InterpolationPolicy]) -> type[InterpolationPolicy]:
    if isinstance(policy, type) and issubclass(policy, InterpolationPolicy):
        return policy
    try:
        return POLICIES[str(policy).lower()]
    except KeyError:
        raise ValueError(
            f"Unknown interpolation policy: {policy!r}. Choose one of: {', '.join(POLICIES)}"
        ) from None


class FlightAnimator:
    """Samples a FlightConfig at any frame. Stateless between queries, so seeking is free."""

    def __init__(
        self,
        config: FlightConfig,
        policy: str | type[InterpolationPolicy] = HermitePolicy.name,
    ):
        self.config = config
        self.clock = AnimationClock(config.fps, config.total_duration)
        self.keyframes = tuple(config.keyframes)

        times = [0.0]
        for seg in config.segments:
            times.append(times[-1] + seg.duration)
        self.segment_times = tuple(times)

        self.policy = resolve_policy(policy)(self.keyframes, self.segment_times)

    @property
    def total_frames(self) -> int:
        return self.clock.total_frames

    @property
    def total_duration(self) -> float:
        return self.clock.total_duration

    @property
    def start_position(self) -> CameraPose:
        return self.config.start_position

    def position_at_frame(self, frame: int) -> FramePose:
        progress = self.clock.global_progress(frame)
        segments = self.config.segments

        if progress <= BOUNDARY_EPSILON:
            return FramePose(self.keyframes[0], segments[0].name)
        # Short paths never get within the epsilon, so the last frame snaps too.
        if progress >= 1.0 - BOUNDARY_EPSILON or frame >= self.total_frames - 1:
            return FramePose(self.keyframes[-1], END_SEGMENT)

        pose, idx = self.policy.pose_at(progress)
        return FramePose(pose, segments[idx].name)

    def iter_frames(self) -> Iterator[tuple[int, FramePose]]:
        for frame in range(self.total_frames):
            yield frame, self.position_at_frame(frame)

    @staticmethod
    def cloud_opacity(alt: float) -> float:
        return cloud_opacity(alt)

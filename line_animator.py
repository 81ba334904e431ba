from __future__ import annotations

from clock import AnimationClock
from geometry import LINE_ARC_HEIGHT_FACTOR, ArcPoints, generate_arc_points
from interpolation import clamp, lerp, linear
from models import CameraPose, FlightLine, GlobeLineConfig, LineState, Location

DEFAULT_FOLLOW_ALT_M = 5_000_000.0
DEFAULT_FOLLOW_PITCH_DEG = -60.0
TOP_DOWN_PITCH_DEG = -90.0


def line_progress(line: FlightLine, elapsed: float) -> float:
    """Constant-speed draw progress of one line, 0 before its delay and 1 once done."""
    return linear(clamp((elapsed - line.delay) / line.duration, 0.0, 1.0))


class GlobeLineAnimator:
    """Globe view with flight lines drawing in over time.

    Every configured line is reported on every frame; lines whose delay has
    not elapsed yet come back with ``progress == 0``.
    """

    def __init__(self, config: GlobeLineConfig, num_points: int = 100):
        self.config = config
        self.clock = AnimationClock(config.fps, config.total_duration)
        self.num_points = num_points

    @property
    def total_frames(self) -> int:
        return self.clock.total_frames

    @property
    def total_duration(self) -> float:
        return self.config.total_duration

    @property
    def markers(self) -> tuple[Location, ...]:
        return self.config.markers

    @property
    def follows_line(self) -> bool:
        return self.config.camera.follow_line and bool(self.config.lines)

    @property
    def start_position(self) -> CameraPose:
        return self.camera_at_frame(0)

    def _follow_pose(self, lon: float, lat: float) -> CameraPose:
        cam = self.config.camera
        return CameraPose(
            lon=lon,
            lat=lat,
            alt=cam.follow_alt if cam.follow_alt is not None else DEFAULT_FOLLOW_ALT_M,
            heading=0.0,
            pitch=cam.follow_pitch if cam.follow_pitch is not None else DEFAULT_FOLLOW_PITCH_DEG,
        )

    def camera_at_frame(self, frame: int) -> CameraPose:
        elapsed = self.clock.elapsed_seconds(frame)
        cam = self.config.camera

        if self.follows_line:
            line = self.config.lines[0]
            progress = line_progress(line, elapsed)
            return self._follow_pose(
                lerp(line.start.lon, line.end.lon, progress),
                lerp(line.start.lat, line.end.lat, progress),
            )

        return CameraPose(
            lon=cam.lon + elapsed * cam.rotation_speed,
            lat=cam.lat,
            alt=cam.alt,
            heading=0.0,
            pitch=TOP_DOWN_PITCH_DEG,
        )

    def line_states_at_frame(self, frame: int) -> list[LineState]:
        elapsed = self.clock.elapsed_seconds(frame)
        return [
            LineState(
                start=line.start,
                end=line.end,
                progress=line_progress(line, elapsed),
                color=line.color,
                arc_height=line.arc_height,
            )
            for line in self.config.lines
        ]

    def arcs_at_frame(self, frame: int) -> list[ArcPoints]:
        return [
            generate_arc_points(
                state.start,
                state.end,
                state.progress,
                state.arc_height,
                num_points=self.num_points,
                height_factor=LINE_ARC_HEIGHT_FACTOR,
            )
            for state in self.line_states_at_frame(frame)
        ]

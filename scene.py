"""What the render loop asks for each frame: camera pose plus derived visual state."""
from __future__ import annotations

from dataclasses import dataclass, field

from camera_path import FlightAnimator, cloud_opacity
from line_animator import GlobeLineAnimator
from models import AnimationProject, ArcPoint, CameraPose, FlightConfig, GlobeLineConfig, Location
from trail_overlay import FlightTrail, TrailConfig


@dataclass(frozen=True)
class Polyline:
    points: list[ArcPoint]
    color: str
    progress: float
    width: float = 3.0

    def to_dict(self) -> dict:
        return {
            "points": [p.to_dict() for p in self.points],
            "color": self.color,
            "progress": self.progress,
            "width": self.width,
        }


@dataclass(frozen=True)
class FrameState:
    frame: int
    elapsed: float
    progress: float
    pose: CameraPose
    segment: str | None
    cloud_opacity: float
    lines: list[Polyline] = field(default_factory=list)
    airplane: dict | None = None

    def to_dict(self, include_points: bool = True) -> dict:
        data = {
            "frame": self.frame,
            "elapsed": round(self.elapsed, 6),
            "progress": round(self.progress, 6),
            "pose": self.pose.to_dict(),
            "segment": self.segment,
            "cloud_opacity": self.cloud_opacity,
            "airplane": self.airplane,
        }
        if include_points:
            data["lines"] = [line.to_dict() for line in self.lines]
        else:
            data["lines"] = [{"color": line.color, "progress": line.progress} for line in self.lines]
        return data


class FlightScene:
    def __init__(self, config: FlightConfig, policy: str = "hermite", trail: FlightTrail | None = None):
        self.animator = FlightAnimator(config, policy=policy)
        self.trail = trail
        self.markers: tuple[Location, ...] = ()
        if trail is not None:
            self.markers = (trail.config.start, trail.config.end)

    @property
    def fps(self) -> int:
        return self.animator.config.fps

    @property
    def total_frames(self) -> int:
        return self.animator.total_frames

    @property
    def start_position(self) -> CameraPose:
        return self.animator.start_position

    @property
    def keyframes(self) -> tuple[CameraPose, ...]:
        return self.animator.keyframes

    def frame_state(self, frame: int) -> FrameState:
        clock = self.animator.clock
        progress = clock.global_progress(frame)
        framed = self.animator.position_at_frame(frame)

        lines: list[Polyline] = []
        airplane = None
        if self.trail is not None:
            cfg = self.trail.config
            lines.append(
                Polyline(self.trail.positions(progress), cfg.line_color, progress, cfg.line_width)
            )
            airplane = {
                "position": self.trail.airplane_position(progress).to_dict(),
                "direction": list(self.trail.direction(progress)),
                "heading": self.trail.heading(progress),
                "label": self.trail.origin_label,
            }

        return FrameState(
            frame=frame,
            elapsed=clock.elapsed_seconds(frame),
            progress=progress,
            pose=framed.pose,
            segment=framed.segment,
            cloud_opacity=cloud_opacity(framed.alt),
            lines=lines,
            airplane=airplane,
        )


class GlobeLineScene:
    def __init__(self, config: GlobeLineConfig, num_points: int = 100):
        self.animator = GlobeLineAnimator(config, num_points=num_points)

    @property
    def fps(self) -> int:
        return self.animator.config.fps

    @property
    def total_frames(self) -> int:
        return self.animator.total_frames

    @property
    def start_position(self) -> CameraPose:
        return self.animator.start_position

    @property
    def markers(self) -> tuple[Location, ...]:
        return self.animator.markers

    @property
    def keyframes(self) -> tuple[CameraPose, ...]:
        last = max(self.total_frames - 1, 0)
        return (self.animator.camera_at_frame(0), self.animator.camera_at_frame(last))

    def frame_state(self, frame: int) -> FrameState:
        clock = self.animator.clock
        pose = self.animator.camera_at_frame(frame)
        states = self.animator.line_states_at_frame(frame)
        arcs = self.animator.arcs_at_frame(frame)
        lines = [
            Polyline(list(arc), state.color, state.progress)
            for state, arc in zip(states, arcs)
        ]
        return FrameState(
            frame=frame,
            elapsed=clock.elapsed_seconds(frame),
            progress=clock.global_progress(frame),
            pose=pose,
            segment=None,
            cloud_opacity=cloud_opacity(pose.alt),
            lines=lines,
        )


def build_scene(
    project: AnimationProject,
    policy: str = "hermite",
    trail: bool = False,
) -> FlightScene | GlobeLineScene:
    """Scene for a project. ``trail`` adds a start-to-end trail to flight projects."""
    config = project.config
    if isinstance(config, FlightConfig):
        flight_trail = None
        if trail:
            first, last = config.keyframes[0], config.keyframes[-1]
            flight_trail = FlightTrail(
                TrailConfig(
                    start=Location(lat=first.lat, lon=first.lon, name="Origin"),
                    end=Location(lat=last.lat, lon=last.lon, name="Destination"),
                )
            )
        return FlightScene(config, policy=policy, trail=flight_trail)
    if isinstance(config, GlobeLineConfig):
        return GlobeLineScene(config)
    raise ValueError(f"Unsupported animation type for project {project.id}: {project.type}")

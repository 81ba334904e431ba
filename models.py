from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class CameraPose:
    lon: float
    lat: float
    alt: float
    heading: float
    pitch: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FramePose:
    """Interpolated pose plus the name of the segment playing at that frame."""

    pose: CameraPose
    segment: str

    @property
    def lon(self) -> float:
        return self.pose.lon

    @property
    def lat(self) -> float:
        return self.pose.lat

    @property
    def alt(self) -> float:
        return self.pose.alt

    @property
    def heading(self) -> float:
        return self.pose.heading

    @property
    def pitch(self) -> float:
        return self.pose.pitch

    def to_dict(self) -> dict:
        return {**self.pose.to_dict(), "segment": self.segment}


@dataclass(frozen=True)
class FlightSegment:
    name: str
    duration: float
    to: CameraPose

    def to_dict(self) -> dict:
        return {"name": self.name, "duration": self.duration, "to": self.to.to_dict()}


@dataclass(frozen=True)
class FlightConfig:
    fps: int
    start_position: CameraPose
    segments: tuple[FlightSegment, ...]

    def __post_init__(self) -> None:
        # Stored as a tuple so the path cannot change after construction.
        object.__setattr__(self, "segments", tuple(self.segments))
        if not isinstance(self.fps, (int, float)) or int(self.fps) != self.fps or self.fps <= 0:
            raise ValueError(f"fps must be a positive integer, got {self.fps!r}")
        if not self.segments:
            raise ValueError("A flight path needs at least one segment (start + destination).")
        for seg in self.segments:
            if not seg.duration > 0:
                raise ValueError(
                    f"Segment '{seg.name}' has non-positive duration {seg.duration!r}."
                )

    @property
    def keyframes(self) -> list[CameraPose]:
        return [self.start_position, *(s.to for s in self.segments)]

    @property
    def total_duration(self) -> float:
        return sum(s.duration for s in self.segments)

    def to_dict(self) -> dict:
        return {
            "fps": self.fps,
            "start_position": self.start_position.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
        }


@dataclass(frozen=True)
class Location:
    lat: float
    lon: float
    name: str
    name_zh: str | None = None
    coords: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FlightLine:
    start: Location
    end: Location
    duration: float
    color: str
    arc_height: float = 1.0
    delay: float = 0.0

    def to_dict(self) -> dict:
        return {
            "from": self.start.to_dict(),
            "to": self.end.to_dict(),
            "duration": self.duration,
            "color": self.color,
            "arc_height": self.arc_height,
            "delay": self.delay,
        }


@dataclass(frozen=True)
class GlobeCamera:
    lon: float
    lat: float
    alt: float
    rotation_speed: float = 0.0
    follow_line: bool = False
    follow_alt: float | None = None
    follow_pitch: float | None = None


@dataclass(frozen=True)
class GlobeLineConfig:
    fps: int
    camera: GlobeCamera
    total_duration: float
    lines: tuple[FlightLine, ...] = ()
    markers: tuple[Location, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "lines", tuple(self.lines))
        object.__setattr__(self, "markers", tuple(self.markers))
        if not isinstance(self.fps, (int, float)) or int(self.fps) != self.fps or self.fps <= 0:
            raise ValueError(f"fps must be a positive integer, got {self.fps!r}")
        if not self.total_duration > 0:
            raise ValueError(f"total_duration must be positive, got {self.total_duration!r}")
        for line in self.lines:
            if not line.duration > 0:
                raise ValueError(
                    f"Line {line.start.name} -> {line.end.name} has non-positive duration."
                )
            if line.delay < 0:
                raise ValueError(
                    f"Line {line.start.name} -> {line.end.name} has negative delay."
                )


@dataclass(frozen=True)
class LineState:
    start: Location
    end: Location
    progress: float
    color: str
    arc_height: float

    def to_dict(self) -> dict:
        return {
            "from": self.start.name,
            "to": self.end.name,
            "progress": self.progress,
            "color": self.color,
            "arc_height": self.arc_height,
        }


@dataclass(frozen=True)
class ArcPoint:
    lon: float
    lat: float
    alt: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AnimationProject:
    id: str
    name: str
    description: str
    type: str
    config: FlightConfig | GlobeLineConfig
    name_zh: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "name_zh": self.name_zh,
            "description": self.description,
            "type": self.type,
        }

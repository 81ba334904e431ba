from __future__ import annotations

from dataclasses import dataclass

from interpolation import clamp


@dataclass(frozen=True)
class AnimationClock:
    """Maps frame indices to animation time. Holds no position; every query recomputes."""

    fps: int
    total_duration: float

    @property
    def total_frames(self) -> int:
        return int(round(self.total_duration * self.fps))

    def elapsed_seconds(self, frame: int) -> float:
        return max(frame, 0) / self.fps

    def global_progress(self, frame: int) -> float:
        if self.total_duration <= 0:
            return 1.0
        return clamp(self.elapsed_seconds(frame) / self.total_duration, 0.0, 1.0)

    def frame_at(self, seconds: float) -> int:
        frame = int(seconds * self.fps)
        return int(clamp(frame, 0, max(self.total_frames - 1, 0)))

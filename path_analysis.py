from __future__ import annotations

import math
from statistics import mean

from camera_path import is_vertical
from geometry import haversine_km
from models import AnimationProject, CameraPose, FlightConfig, Location
from scene import FlightScene, GlobeLineScene


def _as_location(pose: CameraPose) -> Location:
    return Location(lat=pose.lat, lon=pose.lon, name="")


def segment_metrics(config: FlightConfig) -> list[dict]:
    segments: list[dict] = []
    keyframes = config.keyframes
    t = 0.0
    for i, seg in enumerate(config.segments):
        a = keyframes[i]
        b = keyframes[i + 1]
        ground_dist = haversine_km(_as_location(a), _as_location(b)) * 1000.0
        vertical_dist = abs(b.alt - a.alt)
        dist_3d = math.sqrt(ground_dist**2 + vertical_dist**2)
        segments.append(
            {
                "segment_index": i,
                "name": seg.name,
                "t_start": t,
                "t_end": t + seg.duration,
                "vertical": is_vertical(a, b),
                "ground_distance_m": ground_dist,
                "vertical_distance_m": vertical_dist,
                "distance_3d_m": dist_3d,
                "speed_mps": dist_3d / seg.duration,
                "zoom_ratio": (b.alt / a.alt) if a.alt > 0 else None,
            }
        )
        t += seg.duration
    return segments


def summarize_motion(scene: FlightScene | GlobeLineScene) -> dict:
    """Sample every frame of a scene and summarize altitude and cloud exposure."""
    altitudes: list[float] = []
    cloud_frames = 0
    for frame in range(scene.total_frames):
        state = scene.frame_state(frame)
        altitudes.append(state.pose.alt)
        if state.cloud_opacity > 0:
            cloud_frames += 1

    altitudes = altitudes or [scene.start_position.alt]
    return {
        "fps": scene.fps,
        "total_frames": scene.total_frames,
        "duration_sec": scene.total_frames / scene.fps,
        "avg_altitude_m": mean(altitudes),
        "min_altitude_m": min(altitudes),
        "max_altitude_m": max(altitudes),
        "cloud_frames": cloud_frames,
    }


def build_path_analysis(project: AnimationProject, scene: FlightScene | GlobeLineScene) -> dict:
    analysis = {
        "project": project.to_dict(),
        "motion": summarize_motion(scene),
    }
    if isinstance(project.config, FlightConfig):
        analysis["policy"] = scene.animator.policy.name
        analysis["segments"] = segment_metrics(project.config)
    else:
        analysis["lines"] = [
            {
                "from": line.start.name,
                "to": line.end.name,
                "delay": line.delay,
                "duration": line.duration,
                "distance_km": haversine_km(line.start, line.end),
            }
            for line in project.config.lines
        ]
    return analysis

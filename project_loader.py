"""Load animation projects from JSON files.

Keys may be written in camelCase (``startPosition``, ``arcHeight``) or
snake_case. A location can be given inline or as a key of ``LOCATIONS``.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from animations import LOCATIONS
from models import (
    AnimationProject,
    CameraPose,
    FlightConfig,
    FlightLine,
    FlightSegment,
    GlobeCamera,
    GlobeLineConfig,
    Location,
)

PROJECT_TYPES = ("flight", "globe-lines")


def _get(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _require(data: dict, *keys: str) -> Any:
    value = _get(data, *keys)
    if value is None:
        raise ValueError(f"Missing field: {keys[0]}")
    return value


def _pose(data: dict) -> CameraPose:
    if not isinstance(data, dict):
        raise ValueError("Camera positions must be mappings with lon/lat/alt/heading/pitch.")
    try:
        return CameraPose(
            lon=float(_require(data, "lon", "longitude")),
            lat=float(_require(data, "lat", "latitude")),
            alt=float(_require(data, "alt", "altitude")),
            heading=float(_get(data, "heading", default=0.0)),
            pitch=float(_get(data, "pitch", default=-90.0)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid camera position {data!r}: {exc}") from exc


def _location(data: Any) -> Location:
    if isinstance(data, str):
        try:
            return LOCATIONS[data]
        except KeyError:
            raise ValueError(f"Unknown location key: {data}") from None
    if not isinstance(data, dict):
        raise ValueError(f"Invalid location: {data!r}")
    try:
        return Location(
            lat=float(_require(data, "lat", "latitude")),
            lon=float(_require(data, "lon", "longitude")),
            name=str(_get(data, "name", default="")),
            name_zh=_get(data, "nameZh", "name_zh"),
            coords=_get(data, "coords"),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid location {data!r}: {exc}") from exc


def _fps(data: dict) -> Any:
    # Whole floats (30.0) are accepted; anything else reaches the config check as-is.
    value = _get(data, "fps", default=60)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def flight_config_from_mapping(data: dict) -> FlightConfig:
    segments_data = _get(data, "segments", default=[])
    if not isinstance(segments_data, list):
        raise ValueError("segments must be a list.")

    segments = []
    for item in segments_data:
        if not isinstance(item, dict):
            raise ValueError(f"Invalid segment {item!r}: segments must be mappings with name/duration/to.")
        segments.append(
            FlightSegment(
                name=str(_require(item, "name")),
                duration=float(_require(item, "duration")),
                to=_pose(_require(item, "to")),
            )
        )
    return FlightConfig(
        fps=_fps(data),
        start_position=_pose(_require(data, "startPosition", "start_position")),
        segments=tuple(segments),
    )


def globe_line_config_from_mapping(data: dict) -> GlobeLineConfig:
    cam = _require(data, "camera")
    follow_alt = _get(cam, "followAlt", "follow_alt")
    follow_pitch = _get(cam, "followPitch", "follow_pitch")
    camera = GlobeCamera(
        lon=float(_require(cam, "lon", "longitude")),
        lat=float(_require(cam, "lat", "latitude")),
        alt=float(_require(cam, "alt", "altitude")),
        rotation_speed=float(_get(cam, "rotationSpeed", "rotation_speed", default=0.0)),
        follow_line=bool(_get(cam, "followLine", "follow_line", default=False)),
        follow_alt=float(follow_alt) if follow_alt is not None else None,
        follow_pitch=float(follow_pitch) if follow_pitch is not None else None,
    )

    lines = []
    for item in _get(data, "lines", default=[]):
        if not isinstance(item, dict):
            raise ValueError(f"Invalid line {item!r}: lines must be mappings with from/to/duration.")
        lines.append(
            FlightLine(
                start=_location(_require(item, "from", "start")),
                end=_location(_require(item, "to", "end")),
                duration=float(_require(item, "duration")),
                color=str(_get(item, "color", default="#fbbf24")),
                arc_height=float(_get(item, "arcHeight", "arc_height", default=1.0)),
                delay=float(_get(item, "delay", default=0.0)),
            )
        )
    markers = [_location(m) for m in _get(data, "markers", default=[])]

    return GlobeLineConfig(
        fps=_fps(data),
        camera=camera,
        total_duration=float(_require(data, "totalDuration", "total_duration")),
        lines=tuple(lines),
        markers=tuple(markers),
    )


def project_from_mapping(data: dict) -> AnimationProject:
    if not isinstance(data, dict):
        raise ValueError("Project file must contain a mapping at the top level.")

    project_type = str(_get(data, "type", default="flight"))
    if project_type not in PROJECT_TYPES:
        raise ValueError(f"Unknown animation type: {project_type} (expected one of {PROJECT_TYPES})")

    config_data = _require(data, "config")
    if project_type == "flight":
        config = flight_config_from_mapping(config_data)
    else:
        config = globe_line_config_from_mapping(config_data)

    return AnimationProject(
        id=str(_require(data, "id")),
        name=str(_get(data, "name", default=data["id"])),
        name_zh=_get(data, "nameZh", "name_zh"),
        description=str(_get(data, "description", default="")),
        type=project_type,
        config=config,
    )


def load_project(path: str | Path) -> AnimationProject:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Project file is not valid JSON: {path} ({exc})") from exc
    return project_from_mapping(raw)

from __future__ import annotations

import argparse
import csv
import json
import os
import shutil
from datetime import datetime
from pathlib import Path

from animations import get_animation, get_default_animation, list_animations
from camera_path import POLICIES
from encoder import encode_frames, output_suffix
from kml_exporter import export_kml
from path_analysis import build_path_analysis
from project_loader import load_project
from scene import build_scene
from themes import THEMES, get_theme


RESOLUTION_PRESETS = {
    "270p": (480, 270),
    "480p": (854, 480),
    "720p": (1280, 720),
    "1080p": (1920, 1080),
    "4k": (3840, 2160),
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Render keyframed camera flights and globe flight lines over Cesium as video."
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--animation", default=None, help="Built-in animation id (see --list)")
    source.add_argument("--project", default=None, help="JSON project file path")
    parser.add_argument(
        "--policy",
        choices=list(POLICIES),
        default="hermite",
        help="Camera interpolation policy for flight animations",
    )
    parser.add_argument("--theme", choices=list(THEMES), default="dark", help="Visual theme")
    parser.add_argument("--trail", action="store_true", help="Draw a growing trail from start to end (flight only)")
    parser.add_argument(
        "--resolution",
        choices=list(RESOLUTION_PRESETS),
        default="720p",
        help="Render resolution",
    )
    parser.add_argument("--codec", choices=["h264", "h265"], default="h264", help="Output codec")
    parser.add_argument("--transparent", action="store_true", help="Transparent background (ProRes 4444 .mov)")
    parser.add_argument(
        "--cesium-token",
        default=os.getenv("CESIUM_TOKEN", ""),
        help="Cesium ion access token (uses CESIUM_TOKEN env var if not provided)",
    )
    parser.add_argument("--output-dir", default="output", help="Output root directory")
    parser.add_argument("--dry-run", action="store_true", help="Write track/analysis/KML only, skip rendering")
    parser.add_argument("--max-frames", type=int, default=None, help="Max frame limit for testing")
    parser.add_argument("--list", action="store_true", help="List built-in animations and exit")

    ns = parser.parse_args(argv)
    if ns.max_frames is not None and ns.max_frames < 1:
        parser.error("--max-frames must be at least 1.")
    return ns


def _safe_write_json(path: Path, payload) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _print_animations() -> None:
    for project in list_animations():
        config = project.config
        print(f"{project.id:<28} {project.type:<12} {project.name}")
        if project.type == "flight":
            print(f"{'':<28} {len(config.segments)} segments, {config.total_duration:g}s @ {config.fps}fps")
        else:
            print(f"{'':<28} {len(config.lines)} lines, {config.total_duration:g}s @ {config.fps}fps")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list:
        _print_animations()
        return

    if args.project:
        print(f"[INFO] Loading project file: {args.project}")
        project = load_project(args.project)
    elif args.animation:
        project = get_animation(args.animation)
    else:
        project = get_default_animation()

    theme = get_theme(args.theme)
    scene = build_scene(project, policy=args.policy, trail=args.trail)

    width, height = RESOLUTION_PRESETS[args.resolution]
    run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = Path(args.output_dir) / f"run_{run_id}"
    frames_root = run_dir / "frames"
    videos_root = run_dir / "videos"
    metadata_root = run_dir / "metadata"
    kml_root = run_dir / "kml"
    run_dir.mkdir(parents=True, exist_ok=True)

    total_frames = scene.total_frames
    if args.max_frames is not None:
        total_frames = min(total_frames, args.max_frames)

    print(f"[INFO] run_dir: {run_dir}")
    print(
        f"[INFO] animation: {project.id} ({project.type}) / frames: {total_frames} @ {scene.fps}fps"
        f" / resolution: {args.resolution} / theme: {theme.id}"
    )
    if project.type == "flight":
        print(f"[INFO] policy: {args.policy}")

    print(f"[1/3] Analyzing {project.id}...")
    analysis = build_path_analysis(project, scene)
    _safe_write_json(metadata_root / "analysis.json", analysis)

    track = [scene.frame_state(i).to_dict(include_points=False) for i in range(total_frames)]
    _safe_write_json(metadata_root / "track.json", track)

    kml_path = kml_root / f"{project.id}.kml"
    fly_tos = export_kml(project, scene, kml_path, fps=2)
    print(f"  - KML: {kml_path} ({fly_tos} FlyTo)")

    video_path = videos_root / f"{project.id}{output_suffix(args.transparent)}"
    rendered_frames = 0

    if args.dry_run:
        print(f"[2/3] dry-run: skipping render ({project.id})")
    else:
        from renderer import GlobeRenderer, RenderOptions

        frame_dir = frames_root / project.id
        print("[2/3] Starting frame rendering...")
        options = RenderOptions(
            width=width,
            height=height,
            cesium_token=args.cesium_token,
            max_frames=args.max_frames,
            headless=True,
            transparent=args.transparent,
        )

        def _progress(i: int, total: int) -> None:
            if (i + 1) % scene.fps == 0 or i + 1 == total:
                print(f"  - frame {i + 1}/{total}")

        with GlobeRenderer(options, theme=theme) as renderer:
            renderer.boot(scene)
            rendered_frames = renderer.render(scene, frame_dir, on_frame=_progress)

        print(f"[3/3] Starting encoding... ({rendered_frames} frames)")
        encode_frames(
            frame_dir,
            video_path,
            fps=scene.fps,
            codec=args.codec,
            transparent=args.transparent,
        )
        print(f"  - Done: {video_path}")
        shutil.rmtree(frame_dir, ignore_errors=True)

    motion = analysis["motion"]
    summary_rows = [
        {
            "animation_id": project.id,
            "name": project.name,
            "type": project.type,
            "policy": args.policy if project.type == "flight" else "",
            "theme": theme.id,
            "fps": scene.fps,
            "total_frames": scene.total_frames,
            "duration_sec": round(motion["duration_sec"], 3),
            "avg_altitude_m": round(motion["avg_altitude_m"], 2),
            "max_altitude_m": round(motion["max_altitude_m"], 2),
            "cloud_frames": motion["cloud_frames"],
            "video_path": str(video_path) if not args.dry_run else "",
            "rendered_frames": rendered_frames,
        }
    ]

    summary_json = {
        "run_id": run_id,
        "input": {
            "animation": project.id,
            "project_file": args.project,
            "policy": args.policy,
            "theme": theme.id,
            "resolution": args.resolution,
            "codec": args.codec,
            "transparent": args.transparent,
            "dry_run": args.dry_run,
        },
        "results": summary_rows,
    }
    _safe_write_json(metadata_root / "summary.json", summary_json)

    csv_path = metadata_root / "summary.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as fp:
        writer = csv.DictWriter(fp, fieldnames=list(summary_rows[0].keys()))
        writer.writeheader()
        writer.writerows(summary_rows)

    print("[DONE] Generation complete")
    print(f"  - track: {metadata_root / 'track.json'}")
    print(f"  - analysis: {metadata_root / 'analysis.json'}")
    print(f"  - summary_csv: {csv_path}")
    print(f"  - kml: {kml_root}")
    if not args.dry_run:
        print(f"  - videos: {videos_root}")


if __name__ == "__main__":
    main()

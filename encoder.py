from __future__ import annotations

import shutil
import subprocess
from pathlib import Path

FRAME_PATTERN = "frame_%06d.png"

CODECS = {"h264": "libx264", "h265": "libx265"}


def get_ffmpeg() -> str:
    """Resolve the ffmpeg binary: system ffmpeg first, then the imageio-ffmpeg bundle."""
    path = shutil.which("ffmpeg")
    if path:
        return path

    try:
        import imageio_ffmpeg
    except ImportError as exc:
        raise RuntimeError(
            "ffmpeg not found. Install it via:\n"
            "  pip install imageio-ffmpeg\n"
            "or install FFmpeg on your system."
        ) from exc
    return imageio_ffmpeg.get_ffmpeg_exe()


def build_command(
    ffmpeg: str,
    frame_dir: Path,
    output_file: Path,
    *,
    fps: int,
    codec: str = "h264",
    transparent: bool = False,
) -> list[str]:
    input_pattern = str(frame_dir / FRAME_PATTERN)
    if transparent:
        # ProRes 4444 keeps the alpha channel for compositing.
        return [
            ffmpeg, "-y",
            "-framerate", str(fps),
            "-i", input_pattern,
            "-c:v", "prores_ks",
            "-profile:v", "4444",
            "-pix_fmt", "yuva444p10le",
            str(output_file),
        ]

    if codec not in CODECS:
        raise ValueError("codec must be h264 or h265.")
    return [
        ffmpeg, "-y",
        "-framerate", str(fps),
        "-i", input_pattern,
        "-c:v", CODECS[codec],
        "-crf", "18",
        "-preset", "slow",
        "-pix_fmt", "yuv420p",
        str(output_file),
    ]


def output_suffix(transparent: bool) -> str:
    return ".mov" if transparent else ".mp4"


def encode_frames(
    frame_dir: Path,
    output_file: Path,
    *,
    fps: int,
    codec: str = "h264",
    transparent: bool = False,
) -> Path:
    command = build_command(
        get_ffmpeg(), frame_dir, output_file, fps=fps, codec=codec, transparent=transparent
    )
    output_file.parent.mkdir(parents=True, exist_ok=True)

    result = subprocess.run(command, capture_output=True, text=True)
    if result.returncode != 0:
        raise RuntimeError(
            "ffmpeg encoding failed.\n"
            f"command: {' '.join(command)}\n"
            f"stderr:\n{result.stderr[-2000:]}"
        )
    return output_file

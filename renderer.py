from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from models import CameraPose
from overlay import process_frame
from scene import FlightScene, FrameState, GlobeLineScene
from themes import DARK_THEME, ThemeConfig

_GPU_ARGS = [
    "--enable-gpu",
    "--enable-webgl",
    "--ignore-gpu-blocklist",
    "--enable-gpu-rasterization",
    "--disable-software-rasterizer",
]

DEFAULT_VIEWER = Path(__file__).resolve().parent / "web" / "viewer.html"


@dataclass
class RenderOptions:
    width: int
    height: int
    cesium_token: str
    max_frames: int | None = None
    headless: bool = True
    transparent: bool = False


def camera_payload(pose: CameraPose) -> dict:
    return {
        "lon": pose.lon,
        "lat": pose.lat,
        "alt": pose.alt,
        "heading": pose.heading,
        "pitch": pose.pitch,
    }


def frame_payload(state: FrameState) -> dict:
    """What the viewer page needs for one frame: a camera pose and the polylines to draw."""
    return {
        "camera": camera_payload(state.pose),
        "lines": [
            {
                "color": line.color,
                "width": line.width,
                "positions": [[p.lon, p.lat, p.alt] for p in line.points],
            }
            for line in state.lines
            if len(line.points) >= 2
        ],
        "airplane": state.airplane,
    }


class GlobeRenderer:
    """Headless Chromium session running the Cesium viewer page.

    The page only exposes pose/polyline setters; every animation decision is
    made in Python by the scene before each capture.
    """

    def __init__(
        self,
        options: RenderOptions,
        viewer_html_path: Path | None = None,
        theme: ThemeConfig = DARK_THEME,
    ):
        self._options = options
        self._vpath = viewer_html_path or DEFAULT_VIEWER
        self._theme = theme
        self._loop: asyncio.AbstractEventLoop | None = None
        self._pw = None
        self._browser = None
        self._page = None
        self._console_messages: list[str] = []

    # ── context manager ──

    def __enter__(self):
        if not self._options.cesium_token:
            raise ValueError("Cesium ion token is required. Set --cesium-token or CESIUM_TOKEN.")
        if not self._vpath.exists():
            raise FileNotFoundError(f"Viewer HTML not found: {self._vpath}")

        self._loop = asyncio.new_event_loop()
        try:
            self._pw = self._loop.run_until_complete(async_playwright().start())
            self._browser = self._loop.run_until_complete(
                self._pw.chromium.launch(headless=self._options.headless, args=_GPU_ARGS)
            )
            self._page = self._loop.run_until_complete(
                self._browser.new_page(
                    viewport={"width": self._options.width, "height": self._options.height}
                )
            )
            self._page.on("console", self._on_console)
            self._loop.run_until_complete(
                self._page.goto(self._vpath.as_uri(), wait_until="networkidle")
            )
        except BaseException:
            self.__exit__(None, None, None)
            raise
        return self

    def __exit__(self, *exc_info):
        try:
            if self._browser:
                self._loop.run_until_complete(self._browser.close())
            if self._pw:
                self._loop.run_until_complete(self._pw.stop())
        finally:
            if self._loop:
                self._loop.close()
            self._browser = self._pw = self._page = self._loop = None

    def _on_console(self, msg) -> None:
        text = msg.text.strip()
        if text:
            self._console_messages.append(f"[{msg.type}] {text}")

    # ── public API ──

    def boot(self, scene: FlightScene | GlobeLineScene) -> None:
        """Initialize Cesium with the theme, markers and the scene's first pose."""
        cfg = {
            "cesiumToken": self._options.cesium_token,
            "initialCamera": camera_payload(scene.start_position),
            "theme": self._theme.to_dict(),
            "transparent": self._options.transparent,
            "markers": [
                {"lon": m.lon, "lat": m.lat, "name": m.name, "nameZh": m.name_zh}
                for m in scene.markers
            ],
        }
        try:
            self._loop.run_until_complete(
                self._page.evaluate("async (cfg) => { await window.bootRenderer(cfg); }", cfg)
            )
        except PlaywrightError as exc:
            console_tail = "\n".join(self._console_messages[-8:])
            extra = f"\nBrowser console:\n{console_tail}" if console_tail else ""
            raise RuntimeError(
                "Cesium initialization failed. Check the Cesium ion token and network access.\n"
                f"Playwright error: {exc}{extra}"
            ) from exc

        self._loop.run_until_complete(self._page.wait_for_timeout(1_000))

    def render(
        self,
        scene: FlightScene | GlobeLineScene,
        frame_dir: Path,
        on_frame: Callable[[int, int], None] | None = None,
    ) -> int:
        """Capture every frame of the scene into frame_dir. Returns the frame count."""
        return self._loop.run_until_complete(self._capture(scene, frame_dir, on_frame))

    # ── internals ──

    async def _preload(self, scene: FlightScene | GlobeLineScene) -> None:
        positions = [camera_payload(k) for k in scene.keyframes]
        await self._page.evaluate(
            "async (pos) => { await window.preloadPositions(pos); }",
            positions,
        )

    async def _shoot(self, state: FrameState, path: Path) -> None:
        await self._page.evaluate("(s) => window.applyFrame(s);", frame_payload(state))
        await self._page.evaluate("async () => { await window.renderOnce(); }")
        await self._page.screenshot(
            path=str(path), type="png", omit_background=self._options.transparent,
        )
        process_frame(
            path,
            cloud_opacity=state.cloud_opacity,
            theme=self._theme,
            transparent=self._options.transparent,
        )

    async def _capture(
        self,
        scene: FlightScene | GlobeLineScene,
        frame_dir: Path,
        on_frame: Callable[[int, int], None] | None,
    ) -> int:
        frame_dir.mkdir(parents=True, exist_ok=True)
        for p in frame_dir.glob("frame_*.png"):
            p.unlink()

        total_frames = scene.total_frames
        if self._options.max_frames is not None:
            total_frames = min(total_frames, self._options.max_frames)

        await self._preload(scene)

        for i in range(total_frames):
            await self._shoot(scene.frame_state(i), frame_dir / f"frame_{i:06d}.png")
            if on_frame is not None:
                on_frame(i, total_frames)

        return total_frames

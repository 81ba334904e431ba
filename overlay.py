"""Post-capture frame effects: the cloud fly-through layer and the vignette."""
from __future__ import annotations

import random
from functools import lru_cache
from pathlib import Path

from PIL import Image

from themes import ThemeConfig

CLOUD_MAX_ALPHA = 235
VIGNETTE_STRENGTH = 0.55
_CLOUD_GRID = (16, 9)


@lru_cache(maxsize=4)
def cloud_texture(size: tuple[int, int], seed: int = 7) -> Image.Image:
    """Soft cloud-density mask ("L" mode) built from an upscaled random grid; same seed, same clouds."""
    rng = random.Random(seed)
    grid = Image.new("L", _CLOUD_GRID)
    grid.putdata([rng.randint(40, 255) for _ in range(_CLOUD_GRID[0] * _CLOUD_GRID[1])])
    return grid.resize(size, Image.BICUBIC)


@lru_cache(maxsize=4)
def vignette_mask(size: tuple[int, int], strength: float = VIGNETTE_STRENGTH) -> Image.Image:
    gradient = Image.radial_gradient("L").resize(size, Image.BILINEAR)
    return gradient.point(lambda v: int(v * strength))


def apply_cloud_layer(frame: Image.Image, opacity: float, seed: int = 7) -> Image.Image:
    base = frame.convert("RGBA")
    if opacity <= 0:
        return base
    opacity = min(opacity, 1.0)
    density = cloud_texture(base.size, seed)
    haze = Image.new("RGBA", base.size, (255, 255, 255, 0))
    haze.putalpha(density.point(lambda v: int(v * opacity * CLOUD_MAX_ALPHA / 255)))
    return Image.alpha_composite(base, haze)


def apply_vignette(frame: Image.Image, strength: float = VIGNETTE_STRENGTH) -> Image.Image:
    base = frame.convert("RGBA")
    shade = Image.new("RGBA", base.size, (0, 0, 0, 0))
    shade.putalpha(vignette_mask(base.size, strength))
    return Image.alpha_composite(base, shade)


def process_frame(
    path: Path,
    *,
    cloud_opacity: float,
    theme: ThemeConfig,
    transparent: bool = False,
) -> None:
    """Apply the theme's overlays to a captured PNG in place."""
    with Image.open(path) as img:
        frame = img.convert("RGBA")

    if theme.show_clouds and cloud_opacity > 0:
        frame = apply_cloud_layer(frame, cloud_opacity)
    if theme.show_vignette and not transparent:
        frame = apply_vignette(frame)

    if not transparent:
        frame = frame.convert("RGB")
    frame.save(path, format="PNG")

"""Visual themes. Plain data handed to the renderer and frame overlay; animators never read them."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class LineStyle:
    show_glow: bool = True
    glow_color: str = "#ffffff"
    glow_alpha: float = 0.6
    glow_width: float = 24.0
    core_color: str = "#dc2626"
    core_width: float = 3.0


@dataclass(frozen=True)
class LabelStyle:
    color: str = "#fbbf24"
    outline_color: str = "#000000"
    outline_width: float = 3.0


@dataclass(frozen=True)
class BorderStyle:
    color: str = "#ffffff"
    alpha: float = 0.5
    width: float = 1.5


@dataclass(frozen=True)
class MarkerStyle:
    color: str = "#fbbf24"
    outline_color: str = "#f59e0b"


@dataclass(frozen=True)
class ThemeConfig:
    id: str
    name: str
    name_zh: str
    background: str
    show_sky_box: bool = True
    show_nebula: bool = True
    show_vignette: bool = True
    show_night_lights: bool = True
    show_clouds: bool = True
    show_atmosphere: bool = True
    globe_base_color: str | None = None
    show_globe_glow: bool = False
    globe_glow_color: str | None = None
    line: LineStyle = field(default_factory=LineStyle)
    label: LabelStyle = field(default_factory=LabelStyle)
    border: BorderStyle = field(default_factory=BorderStyle)
    marker: MarkerStyle = field(default_factory=MarkerStyle)

    def to_dict(self) -> dict:
        return asdict(self)


DARK_THEME = ThemeConfig(
    id="dark",
    name="Dark Space",
    name_zh="深空主题",
    background="#030712",
)

# Minimal white style for compositing
LIGHT_THEME = ThemeConfig(
    id="light",
    name="Minimal Light",
    name_zh="极简浅色",
    background="#f5f0eb",
    show_sky_box=False,
    show_nebula=False,
    show_vignette=False,
    show_night_lights=False,
    show_clouds=False,
    show_atmosphere=False,
    globe_base_color="#ffffff",
    show_globe_glow=True,
    globe_glow_color="#3b82f6",
    line=LineStyle(show_glow=False, glow_alpha=0.0, glow_width=0.0, core_color="#dc2626", core_width=2.0),
    label=LabelStyle(color="#374151", outline_color="#ffffff", outline_width=0.0),
    border=BorderStyle(color="#6b7280", alpha=0.6, width=1.5),
    marker=MarkerStyle(color="#dc2626", outline_color="#b91c1c"),
)

THEMES: dict[str, ThemeConfig] = {t.id: t for t in (DARK_THEME, LIGHT_THEME)}


def get_theme(theme_id: str | None) -> ThemeConfig:
    """Theme by id; unknown ids fall back to the dark theme."""
    return THEMES.get(theme_id or "", DARK_THEME)

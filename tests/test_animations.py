import pytest

from animations import LOCATIONS, get_animation, get_default_animation, list_animations
from themes import DARK_THEME, LIGHT_THEME, THEMES, get_theme


class TestRegistry:
    def test_ids(self):
        assert [p.id for p in list_animations()] == ["01-london-to-shenzhen", "02-globe-flight-lines"]

    def test_get_animation(self):
        project = get_animation("02-globe-flight-lines")
        assert project.type == "globe-lines"
        assert project.config.lines[0].start == LOCATIONS["shenzhen"]
        assert project.config.lines[0].delay == 2

    def test_unknown_animation(self):
        with pytest.raises(ValueError, match="Unknown animation id"):
            get_animation("99-missing")

    def test_default_is_london_to_shenzhen(self):
        project = get_default_animation()
        assert project.id == "01-london-to-shenzhen"
        assert [s.name for s in project.config.segments] == [
            "pullout-london",
            "rotate-to-china",
            "approach-china",
            "approach-shenzhen",
            "dive-shenzhen",
        ]

    def test_project_to_dict(self):
        data = get_default_animation().to_dict()
        assert data["type"] == "flight"
        assert data["name_zh"] == "伦敦飞深圳"


class TestThemes:
    def test_registry(self):
        assert set(THEMES) == {"dark", "light"}

    def test_unknown_theme_falls_back_to_dark(self):
        assert get_theme("neon") is DARK_THEME
        assert get_theme(None) is DARK_THEME

    def test_light_theme_disables_effects(self):
        assert get_theme("light") is LIGHT_THEME
        assert not LIGHT_THEME.show_clouds
        assert not LIGHT_THEME.show_vignette
        assert LIGHT_THEME.line.core_width == 2.0

    def test_to_dict_nests_styles(self):
        data = DARK_THEME.to_dict()
        assert data["background"] == "#030712"
        assert data["line"]["core_color"] == "#dc2626"
        assert data["marker"]["outline_color"] == "#f59e0b"

"""Tests for painter themes."""

from __future__ import annotations

import random

from review_studio.ui.theme import THEMES, build_theme_css, get_theme, random_theme


class TestThemes:
    """Tests for the palette table."""

    def test_unique_ids(self) -> None:
        ids = [theme.id for theme in THEMES]
        assert len(ids) == len(set(ids)) == 8

    def test_get_theme(self) -> None:
        assert get_theme("hokusai").name == "Great Wave"

    def test_unknown_theme_falls_back(self) -> None:
        assert get_theme("banksy") is THEMES[0]


class TestRandomTheme:
    """Tests for the Jackpot Style pick."""

    def test_excludes_current(self) -> None:
        rng = random.Random(7)
        picks = {random_theme(exclude="monet", rng=rng).id for _ in range(50)}

        assert "monet" not in picks

    def test_deterministic_with_seed(self) -> None:
        first = random_theme(rng=random.Random(3))
        second = random_theme(rng=random.Random(3))

        assert first == second


class TestBuildThemeCss:
    """Tests for stylesheet generation."""

    def test_palette_variables(self) -> None:
        theme = get_theme("vangogh")

        css = build_theme_css(theme)

        assert css.startswith("<style>")
        assert f"--color-primary: {theme.colors.primary};" in css
        assert f"--color-bg: {theme.colors.bg};" in css
        assert ".hud-gauge" in css

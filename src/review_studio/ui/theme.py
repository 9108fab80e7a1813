"""Review Studio Theme - Painter Palettes.

Each theme borrows a palette from a well-known painting. The active
palette is injected as CSS variables; the rest of the stylesheet only
refers to those variables, so switching themes is a single re-render.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import streamlit as st


# =============================================================================
# Painter Palettes
# =============================================================================


@dataclass(frozen=True)
class ThemeColors:
    """CSS colors for one palette."""

    primary: str
    secondary: str
    accent: str
    bg: str
    surface: str
    text: str


@dataclass(frozen=True)
class PainterTheme:
    """A named palette inspired by a painting.

    Attributes:
        id: Stable identifier persisted in preferences.
        name: Painting name.
        painter: Painter name shown in the selector.
        colors: Palette.
    """

    id: str
    name: str
    painter: str
    colors: ThemeColors


THEMES: tuple[PainterTheme, ...] = (
    PainterTheme(
        id="monet",
        name="Water Lilies",
        painter="Claude Monet",
        colors=ThemeColors("#6B8E23", "#ADD8E6", "#FFB6C1", "#F0F8FF", "rgba(255, 255, 255, 0.8)", "#2F4F4F"),
    ),
    PainterTheme(
        id="vangogh",
        name="Starry Night",
        painter="Vincent van Gogh",
        colors=ThemeColors("#191970", "#FFD700", "#FFA500", "#0B1026", "rgba(25, 25, 112, 0.4)", "#FFFACD"),
    ),
    PainterTheme(
        id="hokusai",
        name="Great Wave",
        painter="Hokusai",
        colors=ThemeColors("#006994", "#F5F5DC", "#DC143C", "#F0F8FF", "rgba(240, 248, 255, 0.9)", "#000080"),
    ),
    PainterTheme(
        id="munch",
        name="The Scream",
        painter="Edvard Munch",
        colors=ThemeColors("#FF4500", "#483D8B", "#8B4513", "#2F2F2F", "rgba(50, 50, 50, 0.8)", "#FFE4B5"),
    ),
    PainterTheme(
        id="dali",
        name="Persistence of Memory",
        painter="Salvador Dalí",
        colors=ThemeColors("#DAA520", "#8B4513", "#00CED1", "#F5DEB3", "rgba(255, 235, 205, 0.6)", "#3E2723"),
    ),
    PainterTheme(
        id="picasso",
        name="Cubism Blue",
        painter="Pablo Picasso",
        colors=ThemeColors("#4682B4", "#708090", "#B0C4DE", "#E6E6FA", "rgba(255, 255, 255, 0.9)", "#1C1C1C"),
    ),
    PainterTheme(
        id="kahlo",
        name="Viva la Vida",
        painter="Frida Kahlo",
        colors=ThemeColors("#C71585", "#228B22", "#FFD700", "#FFF0F5", "rgba(255, 255, 255, 0.8)", "#2E2E2E"),
    ),
    PainterTheme(
        id="matisse",
        name="The Dance",
        painter="Henri Matisse",
        colors=ThemeColors("#0000CD", "#FF4500", "#32CD32", "#FFFAF0", "rgba(255, 255, 255, 0.85)", "#000000"),
    ),
)

CORAL = "#FF7F50"
"""Highlight color for regulatory keywords in model output."""


def get_theme(theme_id: str) -> PainterTheme:
    """Look up a theme, falling back to the first palette for unknown ids."""
    return next((theme for theme in THEMES if theme.id == theme_id), THEMES[0])


def random_theme(
    *,
    exclude: str | None = None,
    rng: random.Random | None = None,
) -> PainterTheme:
    """Pick a random palette for the "Jackpot Style" button.

    Args:
        exclude: Theme id to avoid, usually the current one.
        rng: Random source; the module RNG when omitted.

    Returns:
        A palette different from ``exclude`` whenever another exists.
    """
    rng = rng or random.Random()
    candidates = [theme for theme in THEMES if theme.id != exclude] or list(THEMES)
    return rng.choice(candidates)


# =============================================================================
# CSS
# =============================================================================


BASE_CSS = """
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    .stDeployButton {display: none;}

    .stApp {
        background: var(--color-bg);
        color: var(--color-text);
    }

    h1, h2, h3 {
        color: var(--color-text) !important;
    }

    .stButton > button {
        background: var(--color-primary);
        color: #FFFFFF;
        border: none;
        border-radius: 999px;
    }

    .stButton > button:hover {
        filter: brightness(1.1);
    }

    .stTabs [aria-selected="true"] {
        border-bottom: 2px solid var(--color-primary) !important;
        color: var(--color-primary) !important;
    }

    .studio-card {
        background: var(--color-surface);
        border: 1px solid rgba(255, 255, 255, 0.2);
        border-radius: 12px;
        padding: 1rem 1.25rem;
    }

    .hud-gauge {
        height: 10px;
        border-radius: 5px;
        background: rgba(0, 0, 0, 0.15);
        overflow: hidden;
    }

    .hud-fill {
        height: 100%;
        transition: width 0.4s ease;
    }

    .text-coral {
        color: #FF7F50;
        font-weight: 700;
    }
"""


def build_theme_css(theme: PainterTheme) -> str:
    """Build the stylesheet for a palette.

    Args:
        theme: The palette to apply.

    Returns:
        A <style> block defining the palette variables and base rules.
    """
    colors = theme.colors
    variables = f"""
    :root {{
        --color-primary: {colors.primary};
        --color-secondary: {colors.secondary};
        --color-accent: {colors.accent};
        --color-bg: {colors.bg};
        --color-surface: {colors.surface};
        --color-text: {colors.text};
    }}
"""
    return f"<style>{variables}{BASE_CSS}</style>"


def apply_theme(theme: PainterTheme) -> None:
    """Apply the palette to the Streamlit app."""
    st.markdown(build_theme_css(theme), unsafe_allow_html=True)


__all__ = [
    "ThemeColors",
    "PainterTheme",
    "THEMES",
    "CORAL",
    "get_theme",
    "random_theme",
    "build_theme_css",
    "apply_theme",
]

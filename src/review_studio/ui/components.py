"""Reusable UI components for the Streamlit interface.

This module renders the status HUD, the usage dashboard and model output
panels. The pure helpers (gauge rows, chart data) are kept apart from the
Streamlit calls so they can be tested without a running app.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import streamlit as st

from review_studio.core.exceptions import UIError
from review_studio.core.logging import get_logger
from review_studio.ui.theme import CORAL


if TYPE_CHECKING:
    from review_studio.models.session import ResourceState, UsageMetrics

logger = get_logger(__name__)

MASTER_BADGE = "FDA Master"
"""Badge shown once the reviewer passes level 1."""


@dataclass(frozen=True)
class Gauge:
    """One HUD bar."""

    label: str
    icon: str
    percent: int
    color: str
    caption: str = ""


def hud_gauges(resources: ResourceState, *, xp_per_level: int = 100) -> list[Gauge]:
    """Compute the HUD bars for a resource snapshot.

    The XP bar shows progress within the current level.

    Args:
        resources: Current gauges.
        xp_per_level: XP needed per level.

    Returns:
        Health, mana, level/XP and stress bars in display order.
    """
    xp_progress = (resources.xp % xp_per_level) * 100 // xp_per_level
    return [
        Gauge("Health", "❤️", resources.health, "#EF4444"),
        Gauge("Mana", "⚡", resources.mana, "#3B82F6", caption=f"{resources.mana} / 100"),
        Gauge(f"Level {resources.level}", "🏆", xp_progress, "#FACC15", caption=f"{resources.xp} XP"),
        Gauge("Stress", "📈", resources.stress, "#A855F7"),
    ]


def provider_usage(metrics: UsageMetrics) -> dict[str, int]:
    """Provider call counts in a stable order for charting."""
    return dict(sorted(metrics.provider_calls.items()))


def render_status_hud(resources: ResourceState, *, xp_per_level: int = 100) -> None:
    """Render the gamification HUD."""
    gauges = hud_gauges(resources, xp_per_level=xp_per_level)
    columns = st.columns(len(gauges) + 1)

    for column, gauge in zip(columns, gauges):
        with column:
            st.markdown(f"""
            <div style="font-size: 0.75rem; font-weight: 700; text-transform: uppercase; opacity: 0.8;">
                {gauge.icon} {gauge.label}
            </div>
            <div class="hud-gauge">
                <div class="hud-fill" style="width: {gauge.percent}%; background: {gauge.color};"></div>
            </div>
            <div style="font-size: 0.65rem; text-align: right;">{gauge.caption}</div>
            """, unsafe_allow_html=True)

    with columns[-1]:
        if resources.level > 1:
            st.markdown(f"🏅 **{MASTER_BADGE}**")


def render_dashboard(metrics: UsageMetrics, run_history: list[float] | None = None) -> None:
    """Render usage metrics and charts.

    Args:
        metrics: Accumulated usage metrics.
        run_history: Durations of successful runs in this session, oldest first.

    Raises:
        UIError: If rendering fails.
    """
    try:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.metric("Total Runs", metrics.total_runs)
        with col2:
            st.metric("Tokens Used (approx.)", metrics.tokens_used)
        with col3:
            st.metric("Last Latency", f"{metrics.last_run_duration_seconds:.2f}s")

        chart_col, activity_col = st.columns(2)
        with chart_col:
            st.markdown("#### Provider Usage")
            st.bar_chart({"calls": provider_usage(metrics)})
        with activity_col:
            st.markdown("#### Review Activity")
            if run_history:
                st.line_chart({"latency (s)": run_history})
            else:
                st.caption("No runs yet this session.")
    except Exception as exc:
        logger.error("Dashboard render failed", error=str(exc))
        raise UIError(f"Failed to render dashboard: {exc}") from exc


def render_output(text: str, *, placeholder: str = "Results will appear here.") -> None:
    """Render model output markdown inside a themed card.

    Bold text and coral spans from the model are shown in the coral
    highlight color.
    """
    if not text:
        st.caption(placeholder)
        return
    highlighted = text.replace('class="text-coral"', f'style="color: {CORAL}; font-weight: 700;"')
    with st.container(border=True):
        st.markdown(highlighted, unsafe_allow_html=True)


__all__ = [
    "Gauge",
    "MASTER_BADGE",
    "hud_gauges",
    "provider_usage",
    "render_status_hud",
    "render_dashboard",
    "render_output",
]

"""Application-wide constants for Review Studio.

This module defines constants used throughout the application,
including gauge bounds, invocation defaults, and persisted preference keys.
"""

from __future__ import annotations

# =============================================================================
# Resource Gauges
# =============================================================================

GAUGE_MIN = 0
"""Lower bound of the health, mana and stress gauges."""

GAUGE_MAX = 100
"""Upper bound of the health, mana and stress gauges."""

INITIAL_HEALTH = 100
INITIAL_MANA = 100
INITIAL_XP = 0
INITIAL_LEVEL = 1
INITIAL_STRESS = 0

# =============================================================================
# Invocation Defaults
# =============================================================================

PLACEHOLDER_TEXT = "No response generated."
"""Returned instead of an empty string when the endpoint yields no text."""

DEFAULT_TEMPERATURE = 0.5
"""Sampling temperature used by every preset action."""

DEFAULT_MAX_OUTPUT_TOKENS = 4000
"""Output token ceiling when a request does not set one."""

DEFAULT_MODEL = "gemini-2.5-flash"

# =============================================================================
# Persisted Preferences
# =============================================================================

PREF_GEMINI_API_KEY = "gemini_api_key"
PREF_OPENAI_API_KEY = "openai_api_key"
PREF_SELECTED_MODEL = "selected_model"
PREF_THEME_ID = "theme_id"

PREFERENCE_KEYS = (
    PREF_GEMINI_API_KEY,
    PREF_OPENAI_API_KEY,
    PREF_SELECTED_MODEL,
    PREF_THEME_ID,
)
"""The only keys the preference store accepts."""

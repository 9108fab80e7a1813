"""Session state wiring for the Streamlit app.

Streamlit re-runs the script on every interaction, so everything that must
survive a re-run (the SessionContext, its ActionGate, generated outputs,
the agent list) lives in st.session_state and is created once here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import streamlit as st

from review_studio.core.config import get_settings
from review_studio.core.constants import (
    PREF_GEMINI_API_KEY,
    PREF_OPENAI_API_KEY,
    PREF_SELECTED_MODEL,
    PREF_THEME_ID,
)
from review_studio.core.exceptions import PreferencesError
from review_studio.core.logging import get_logger, log_context
from review_studio.engine.gate import ActionGate, ActionOutcome
from review_studio.engine.provider import user_key_for_request
from review_studio.ingestion.document_loader import load_document_text
from review_studio.models.agents import DEFAULT_AGENTS, INITIAL_AGENTS_YAML, INITIAL_SKILL_MD
from review_studio.models.enums import Provider
from review_studio.models.session import SessionContext
from review_studio.storage.preferences import get_preference_store


if TYPE_CHECKING:
    from review_studio.engine.provider import InvocationRequest

logger = get_logger(__name__)

_KEY_PREFERENCES: dict[Provider, str] = {
    Provider.GEMINI: PREF_GEMINI_API_KEY,
    Provider.OPENAI: PREF_OPENAI_API_KEY,
}


# =============================================================================
# Initialization
# =============================================================================


def init_preferences() -> None:
    """Load persisted preferences into session state once per session."""
    if "preferences" in st.session_state:
        return

    settings = get_settings()
    try:
        preferences = get_preference_store().load_all()
    except PreferencesError as exc:
        logger.warning("Preferences unavailable, using defaults", error=exc.message)
        preferences = {}

    st.session_state.preferences = {
        PREF_GEMINI_API_KEY: preferences.get(PREF_GEMINI_API_KEY, ""),
        PREF_OPENAI_API_KEY: preferences.get(PREF_OPENAI_API_KEY, ""),
        PREF_SELECTED_MODEL: preferences.get(PREF_SELECTED_MODEL) or settings.ai.default_model,
        PREF_THEME_ID: preferences.get(PREF_THEME_ID) or settings.ui.default_theme,
    }


def init_session_state() -> None:
    """Initialize all session state variables."""
    init_preferences()

    if "review_context" not in st.session_state:
        st.session_state.review_context = SessionContext()

    # The gate owns the context; both must survive re-runs together
    if "gate" not in st.session_state:
        st.session_state.gate = ActionGate(st.session_state.review_context)

    if "outputs" not in st.session_state:
        st.session_state.outputs = {}

    if "run_history" not in st.session_state:
        st.session_state.run_history = []

    if "agents" not in st.session_state:
        st.session_state.agents = list(DEFAULT_AGENTS)

    if "agents_yaml" not in st.session_state:
        st.session_state.agents_yaml = INITIAL_AGENTS_YAML

    if "skill_md" not in st.session_state:
        st.session_state.skill_md = INITIAL_SKILL_MD


# =============================================================================
# Preferences
# =============================================================================


def get_preference(key: str) -> str:
    return st.session_state.preferences.get(key, "")


def save_preference(key: str, value: str) -> None:
    """Update a preference in session state and persist it if it changed."""
    if st.session_state.preferences.get(key) == value:
        return

    st.session_state.preferences[key] = value
    try:
        get_preference_store().set(key, value)
    except PreferencesError as exc:
        logger.warning("Failed to persist preference", key=key, error=exc.message)
        st.toast("Preference could not be saved; it applies to this session only.")


def api_key_for(provider: Provider) -> str | None:
    """Explicit key to send for a provider family, if any."""
    preference_key = _KEY_PREFERENCES.get(provider)
    if preference_key is None:
        return None
    return user_key_for_request(provider, get_preference(preference_key))


# =============================================================================
# Documents
# =============================================================================


@st.cache_data(show_spinner=False, max_entries=32)
def cached_document_text(filename: str, data: bytes, max_pages: int) -> str:
    """Extract upload text once per distinct file; reruns reuse the result.

    Errors are not cached, so a rejected upload is re-checked on the next
    rerun.
    """
    return load_document_text(filename, data, max_pages=max_pages)


# =============================================================================
# Gated Actions
# =============================================================================


def get_gate() -> ActionGate:
    return st.session_state.gate


def get_context() -> SessionContext:
    return st.session_state.review_context


def get_output(output_key: str) -> str:
    return st.session_state.outputs.get(output_key, "")


def run_action(request: InvocationRequest, output_key: str) -> ActionOutcome:
    """Run one gated invocation and surface its outcome.

    The generated text is stored under ``output_key`` before the gauges
    move. Rejections are shown as warnings, failures as errors.

    Args:
        request: The invocation request.
        output_key: Key in st.session_state.outputs receiving the text.

    Returns:
        The gate outcome.
    """

    def store_output(text: str) -> None:
        st.session_state.outputs[output_key] = text

    with (
        st.spinner("Consulting the regulatory oracle..."),
        log_context(action=output_key, model=request.model),
    ):
        outcome = get_gate().run_sync(request, on_success=store_output)

    if outcome.succeeded:
        st.session_state.run_history.append(round(outcome.duration_seconds, 3))
        # The HUD was drawn before the action ran
        st.rerun()
    elif outcome.status.is_rejection:
        st.warning(outcome.message)
    else:
        st.error(f"Generation failed: {outcome.message}")

    return outcome


__all__ = [
    "init_preferences",
    "init_session_state",
    "get_preference",
    "save_preference",
    "api_key_for",
    "cached_document_text",
    "get_gate",
    "get_context",
    "get_output",
    "run_action",
]

"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the Review Studio test suite.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


CREDENTIAL_ENV_VARS = (
    "REVIEW_STUDIO_GEMINI_API_KEY",
    "GEMINI_API_KEY",
    "API_KEY",
    "REVIEW_STUDIO_OPENAI_API_KEY",
    "OPENAI_API_KEY",
)


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from review_studio.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test without ambient credentials, .env files or user preferences.

    Returns:
        The temporary working directory.
    """
    for name in CREDENTIAL_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("REVIEW_STUDIO_PREFERENCES_PATH", str(tmp_path / "prefs" / "preferences.db"))
    monkeypatch.chdir(tmp_path)

    from review_studio.storage import preferences

    monkeypatch.setattr(preferences, "_store_instance", None)
    return tmp_path


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "REVIEW_STUDIO_GEMINI_API_KEY": "test-gemini-key",
        "REVIEW_STUDIO_OPENAI_API_KEY": "test-openai-key",
        "REVIEW_STUDIO_DEBUG": "true",
        "REVIEW_STUDIO_LOG_LEVEL": "DEBUG",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Engine Fixtures
# =============================================================================


class FakeClient:
    """Async stand-in for generate_text that records every request."""

    def __init__(
        self,
        text: str = "Generated review.",
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.text = text
        self.error = error
        self.delay = delay
        self.calls: list[Any] = []
        self.on_call: Callable[[Any], None] | None = None

    async def __call__(self, request: Any) -> str:
        self.calls.append(request)
        if self.on_call is not None:
            self.on_call(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def fake_client() -> FakeClient:
    """Create a FakeClient returning a fixed text.

    Returns:
        FakeClient instance.
    """
    return FakeClient()


@pytest.fixture
def make_fake_client() -> type[FakeClient]:
    """Provide the FakeClient class for tests needing custom behavior."""
    return FakeClient


@pytest.fixture
def sample_request() -> Any:
    """Create a summary request with an explicit key.

    Returns:
        InvocationRequest instance.
    """
    from review_studio.engine.provider import InvocationRequest

    return InvocationRequest(
        instruction_prompt="Summarize this 510(k).",
        user_content="Device: Pulse oximeter. Predicate: K123456.",
        model="gemini-2.5-flash",
        api_key="test-key",
    )


@pytest.fixture
def session_context() -> Any:
    """Create a fresh SessionContext.

    Returns:
        SessionContext instance.
    """
    from review_studio.models.session import SessionContext

    return SessionContext()


@pytest.fixture
def test_settings() -> Any:
    """Create Settings from the isolated environment.

    Returns:
        Settings instance.
    """
    from review_studio.core.config import Settings

    return Settings()


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def recording_backend() -> Any:
    """Create a Gemini-family backend that records calls instead of hitting the network.

    Returns:
        Backend instance with ``calls`` and a settable ``text``.
    """
    from review_studio.engine.provider import ProviderBackend
    from review_studio.models.enums import Provider

    class RecordingBackend(ProviderBackend):
        provider = Provider.GEMINI

        def __init__(self) -> None:
            self.calls: list[tuple[Any, str]] = []
            self.text: str | None = "Backend text."

        async def generate(self, request: Any, api_key: str) -> str | None:
            self.calls.append((request, api_key))
            return self.text

    return RecordingBackend()

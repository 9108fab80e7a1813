"""Integration tests for the review flow.

Drives preset tasks and agents through the gate, the real provider
client and a recording backend in place of the network.
"""

from __future__ import annotations

from typing import Any

import pytest

from review_studio.core.constants import PLACEHOLDER_TEXT, PREF_GEMINI_API_KEY
from review_studio.core.exceptions import MissingCredentialError
from review_studio.engine import provider as provider_module
from review_studio.engine.gate import ActionGate
from review_studio.engine.prompts import SUMMARY_TASK, TASKS, build_agent_request, build_task_request
from review_studio.engine.provider import ProviderBackend, user_key_for_request
from review_studio.models.agents import INITIAL_AGENTS_YAML, load_agents_yaml
from review_studio.models.enums import ActionStatus, Provider
from review_studio.models.session import SessionContext
from review_studio.storage.preferences import get_preference_store


class RecordingGemini(ProviderBackend):
    """Backend that answers every call with a canned review."""

    provider = Provider.GEMINI
    calls: list[tuple[Any, str]] = []
    reply: str | None = "**Predicate**: K123456"

    async def generate(self, request: Any, api_key: str) -> str | None:
        RecordingGemini.calls.append((request, api_key))
        return RecordingGemini.reply


@pytest.fixture
def gemini_backend(monkeypatch: pytest.MonkeyPatch) -> type[RecordingGemini]:
    RecordingGemini.calls = []
    RecordingGemini.reply = "**Predicate**: K123456"
    monkeypatch.setitem(provider_module._BACKENDS, Provider.GEMINI, RecordingGemini)
    return RecordingGemini


class TestSummaryFlow:
    """Test preset tasks end to end."""

    def test_summary_with_env_key(
        self,
        gemini_backend: type[RecordingGemini],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Analyze a summary using the environment key."""
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        context = SessionContext()
        gate = ActionGate(context)
        outputs: dict[str, str] = {}

        outcome = gate.run_sync(
            build_task_request(SUMMARY_TASK, "510(k) summary text"),
            on_success=lambda text: outputs.update(summary=text),
        )

        assert outcome.status is ActionStatus.SUCCEEDED
        assert outputs["summary"] == "**Predicate**: K123456"
        assert gemini_backend.calls[0][1] == "env-key"
        assert context.resources.mana == 95
        assert context.metrics.provider_calls["gemini"] == 1

    def test_empty_reply_shows_placeholder(
        self,
        gemini_backend: type[RecordingGemini],
    ) -> None:
        gemini_backend.reply = None
        gate = ActionGate(SessionContext())

        outcome = gate.run_sync(
            build_task_request(TASKS["notes_polish"], "notes", api_key="k"),
            on_success=lambda text: None,
        )

        assert outcome.text == PLACEHOLDER_TEXT

    def test_missing_key_fails_without_spending(
        self,
        gemini_backend: type[RecordingGemini],
    ) -> None:
        """A missing credential fails before the backend and costs nothing."""
        context = SessionContext()
        gate = ActionGate(context)

        outcome = gate.run_sync(
            build_task_request(SUMMARY_TASK, "text"),
            on_success=lambda text: None,
        )

        assert outcome.status is ActionStatus.FAILED
        assert isinstance(outcome.error, MissingCredentialError)
        assert gemini_backend.calls == []
        assert context.resources.mana == 100
        assert context.metrics.total_runs == 0

    def test_mana_drains_then_rejects(self, gemini_backend: type[RecordingGemini]) -> None:
        """Twenty successes spend all mana; the next action is refused."""
        context = SessionContext()
        gate = ActionGate(context)
        request = build_task_request(TASKS["notes_action_items"], "notes", api_key="k")

        for _ in range(20):
            assert gate.run_sync(request, on_success=lambda text: None).succeeded

        outcome = gate.run_sync(request, on_success=lambda text: None)

        assert outcome.status is ActionStatus.REJECTED_INSUFFICIENT_RESOURCE
        assert len(gemini_backend.calls) == 20
        assert context.resources.mana == 0
        assert context.resources.xp == 300
        assert context.resources.level == 4
        assert context.resources.stress == 40
        assert context.metrics.total_runs == 20


class TestAgentFlow:
    """Test agent runs configured from agents.yaml."""

    def test_agent_run(self, gemini_backend: type[RecordingGemini]) -> None:
        agents = load_agents_yaml(INITIAL_AGENTS_YAML)
        context = SessionContext()
        gate = ActionGate(context)

        outcome = gate.run_sync(
            build_agent_request(agents[1], "Risk section", api_key="k"),
            on_success=lambda text: None,
        )

        assert outcome.succeeded
        request, _ = gemini_backend.calls[0]
        assert request.model == "gemini-3-flash-preview"
        assert request.user_content == "Risk section"


class TestStoredKeyFlow:
    """Test keys typed into the UI reach the provider."""

    def test_stored_key_sent_without_env(self, gemini_backend: type[RecordingGemini]) -> None:
        store = get_preference_store()
        store.set(PREF_GEMINI_API_KEY, "typed-key")
        api_key = user_key_for_request(Provider.GEMINI, store.get(PREF_GEMINI_API_KEY))
        gate = ActionGate(SessionContext())

        gate.run_sync(
            build_task_request(SUMMARY_TASK, "text", api_key=api_key),
            on_success=lambda text: None,
        )

        assert gemini_backend.calls[0][1] == "typed-key"

    def test_env_key_preferred_over_stored(
        self,
        gemini_backend: type[RecordingGemini],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("REVIEW_STUDIO_GEMINI_API_KEY", "env-key")
        api_key = user_key_for_request(Provider.GEMINI, "typed-key")
        gate = ActionGate(SessionContext())

        gate.run_sync(
            build_task_request(SUMMARY_TASK, "text", api_key=api_key),
            on_success=lambda text: None,
        )

        assert gemini_backend.calls[0][1] == "env-key"

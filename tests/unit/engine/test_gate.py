"""Tests for the Action Gate."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from review_studio.core.config import AIProviderSettings, GateSettings, Settings
from review_studio.core.exceptions import (
    GateBusyError,
    InsufficientResourceError,
    InvalidGateTransitionError,
    MissingCredentialError,
    ProviderError,
    ProviderTimeoutError,
)
from review_studio.engine.gate import TRANSITIONS, ActionGate, ActionOutcome
from review_studio.models.enums import ActionStatus, GateEvent, GatePhase
from review_studio.models.session import ResourceState, SessionContext, UsageMetrics, estimate_tokens


def run(coro: Any) -> Any:
    return asyncio.run(coro)


class TestTransitions:
    """Tests for the gate state machine table."""

    def test_happy_path(self) -> None:
        """Test dispatch, resolve and settle lead back to idle."""
        phase = GatePhase.IDLE
        for event in (GateEvent.DISPATCH, GateEvent.RESOLVE_SUCCESS, GateEvent.SETTLED):
            phase = TRANSITIONS[(phase, event)]
        assert phase is GatePhase.IDLE

    def test_abort_from_busy_phases(self) -> None:
        assert TRANSITIONS[(GatePhase.IN_FLIGHT, GateEvent.ABORT)] is GatePhase.IDLE
        assert TRANSITIONS[(GatePhase.SETTLING, GateEvent.ABORT)] is GatePhase.IDLE

    def test_no_dispatch_while_busy(self) -> None:
        assert (GatePhase.IN_FLIGHT, GateEvent.DISPATCH) not in TRANSITIONS
        assert (GatePhase.SETTLING, GateEvent.DISPATCH) not in TRANSITIONS

    def test_illegal_event_raises(self, session_context: SessionContext, fake_client: Any) -> None:
        gate = ActionGate(session_context, client=fake_client)

        with pytest.raises(InvalidGateTransitionError) as exc_info:
            gate._transition(GateEvent.SETTLED)

        assert exc_info.value.current_phase == "idle"
        assert session_context.phase is GatePhase.IDLE


class TestActionOutcome:
    """Tests for ActionOutcome."""

    def test_success_has_no_message(self) -> None:
        outcome = ActionOutcome(status=ActionStatus.SUCCEEDED, text="ok")
        assert outcome.succeeded
        assert outcome.message == ""

    def test_message_from_error(self) -> None:
        outcome = ActionOutcome(
            status=ActionStatus.REJECTED_BUSY,
            error=GateBusyError("Please wait."),
        )
        assert not outcome.succeeded
        assert outcome.message == "Please wait."


class TestRejections:
    """Tests for actions refused before any network call."""

    def test_insufficient_mana(self, sample_request: Any, fake_client: Any) -> None:
        """Test mana below the cost is rejected with no call and no change."""
        context = SessionContext(resources=ResourceState(mana=3))
        gate = ActionGate(context, client=fake_client)
        delivered: list[str] = []

        outcome = gate.run_sync(sample_request, on_success=delivered.append)

        assert outcome.status is ActionStatus.REJECTED_INSUFFICIENT_RESOURCE
        assert outcome.message == "Not enough Mana! Wait for recharge."
        assert isinstance(outcome.error, InsufficientResourceError)
        assert outcome.error.required == 5
        assert outcome.error.available == 3
        assert fake_client.calls == []
        assert delivered == []
        assert context.resources.mana == 3
        assert context.metrics == UsageMetrics()
        assert context.phase is GatePhase.IDLE

    def test_exact_mana_is_enough(self, sample_request: Any, fake_client: Any) -> None:
        context = SessionContext(resources=ResourceState(mana=5))
        gate = ActionGate(context, client=fake_client)

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)

        assert outcome.succeeded
        assert context.resources.mana == 0

    def test_mana_checked_before_busy(self, sample_request: Any, fake_client: Any) -> None:
        """Test low mana is reported even while another action is in flight."""
        context = SessionContext(resources=ResourceState(mana=3))
        context.phase = GatePhase.IN_FLIGHT
        gate = ActionGate(context, client=fake_client)

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)

        assert outcome.status is ActionStatus.REJECTED_INSUFFICIENT_RESOURCE
        assert fake_client.calls == []
        assert context.phase is GatePhase.IN_FLIGHT

    def test_busy_rejects_second_action(
        self,
        sample_request: Any,
        make_fake_client: Any,
    ) -> None:
        """Test a concurrent action is rejected while the first is in flight."""
        client = make_fake_client(delay=0.05)
        context = SessionContext()
        gate = ActionGate(context, client=client)

        async def both() -> list[ActionOutcome]:
            return await asyncio.gather(
                gate.run(sample_request, on_success=lambda text: None),
                gate.run(sample_request, on_success=lambda text: None),
            )

        first, second = run(both())

        assert first.status is ActionStatus.SUCCEEDED
        assert second.status is ActionStatus.REJECTED_BUSY
        assert isinstance(second.error, GateBusyError)
        assert len(client.calls) == 1
        assert context.metrics.total_runs == 1
        assert context.resources.mana == 95


class TestSuccess:
    """Tests for successful actions."""

    def test_counters_after_success(self, sample_request: Any, fake_client: Any) -> None:
        """Test one success spends mana, grants XP and levels up."""
        context = SessionContext(resources=ResourceState(xp=90))
        gate = ActionGate(context, client=fake_client)
        delivered: list[str] = []

        outcome = gate.run_sync(sample_request, on_success=delivered.append)

        assert outcome.status is ActionStatus.SUCCEEDED
        assert outcome.text == "Generated review."
        assert delivered == ["Generated review."]
        assert context.resources.mana == 95
        assert context.resources.xp == 105
        assert context.resources.level == 2
        assert context.resources.stress == 2
        assert context.phase is GatePhase.IDLE

    def test_level_recomputed_from_xp(self, sample_request: Any, fake_client: Any) -> None:
        context = SessionContext(resources=ResourceState(xp=0, level=4))
        gate = ActionGate(context, client=fake_client)

        gate.run_sync(sample_request, on_success=lambda text: None)

        assert context.resources.xp == 15
        assert context.resources.level == 1

    def test_metrics_after_success(self, sample_request: Any, fake_client: Any) -> None:
        context = SessionContext()
        gate = ActionGate(context, client=fake_client)

        gate.run_sync(sample_request, on_success=lambda text: None)

        expected_tokens = estimate_tokens(
            sample_request.instruction_prompt,
            sample_request.user_content,
            "Generated review.",
        )
        assert context.metrics.total_runs == 1
        assert context.metrics.provider_calls["gemini"] == 1
        assert context.metrics.tokens_used == expected_tokens
        assert context.metrics.last_run_duration_seconds >= 0.0

    def test_back_to_back_calls_count_once_each(
        self,
        sample_request: Any,
        fake_client: Any,
    ) -> None:
        """Test each completed call is counted exactly once before the next."""
        context = SessionContext()
        gate = ActionGate(context, client=fake_client)

        gate.run_sync(sample_request, on_success=lambda text: None)
        assert context.metrics.provider_calls["gemini"] == 1

        gate.run_sync(sample_request, on_success=lambda text: None)
        assert context.metrics.provider_calls["gemini"] == 2
        assert context.metrics.total_runs == 2
        assert context.resources.mana == 90

    def test_on_success_sees_counters_before_update(
        self,
        sample_request: Any,
        fake_client: Any,
    ) -> None:
        """Test the text is delivered before metrics and gauges change."""
        context = SessionContext()
        gate = ActionGate(context, client=fake_client)
        seen: dict[str, Any] = {}

        def handler(text: str) -> None:
            seen["mana"] = context.resources.mana
            seen["runs"] = context.metrics.total_runs
            seen["phase"] = context.phase

        gate.run_sync(sample_request, on_success=handler)

        assert seen == {"mana": 100, "runs": 0, "phase": GatePhase.SETTLING}
        assert context.resources.mana == 95

    def test_busy_during_call(self, sample_request: Any, fake_client: Any) -> None:
        """Test the busy flag is raised for the duration of the call."""
        context = SessionContext()
        gate = ActionGate(context, client=fake_client)
        observed: list[bool] = []
        fake_client.on_call = lambda request: observed.append(gate.busy)

        assert gate.busy is False
        gate.run_sync(sample_request, on_success=lambda text: None)

        assert observed == [True]
        assert gate.busy is False

    def test_openai_request_counted_per_provider(self, fake_client: Any) -> None:
        from review_studio.engine.provider import InvocationRequest

        context = SessionContext()
        gate = ActionGate(context, client=fake_client)
        request = InvocationRequest(
            instruction_prompt="Polish.",
            user_content="notes",
            model="gpt-4o-mini",
        )

        gate.run_sync(request, on_success=lambda text: None)

        assert context.metrics.provider_calls["openai"] == 1
        assert context.metrics.provider_calls["gemini"] == 0


class TestFailures:
    """Tests for failed actions."""

    def test_provider_failure_leaves_counters(
        self,
        sample_request: Any,
        make_fake_client: Any,
    ) -> None:
        """Test a failed call reports the error and changes nothing."""
        client = make_fake_client(error=ProviderError("Quota exceeded", provider="gemini", status_code=429))
        context = SessionContext()
        gate = ActionGate(context, client=client)
        delivered: list[str] = []

        outcome = gate.run_sync(sample_request, on_success=delivered.append)

        assert outcome.status is ActionStatus.FAILED
        assert outcome.message == "Quota exceeded"
        assert delivered == []
        assert context.resources == ResourceState()
        assert context.metrics == UsageMetrics()
        assert context.phase is GatePhase.IDLE

    def test_missing_credential_is_failure(
        self,
        sample_request: Any,
        make_fake_client: Any,
    ) -> None:
        client = make_fake_client(error=MissingCredentialError("No key", provider="gemini"))
        gate = ActionGate(SessionContext(), client=client)

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)

        assert outcome.status is ActionStatus.FAILED
        assert isinstance(outcome.error, MissingCredentialError)

    def test_penalizing_policy(self, sample_request: Any, make_fake_client: Any) -> None:
        """Test failures spend mana and add stress when penalties are enabled."""
        settings = Settings(gate=GateSettings(penalize_failures=True))
        client = make_fake_client(error=ProviderError("boom"))
        context = SessionContext()
        gate = ActionGate(context, client=client, settings=settings)

        gate.run_sync(sample_request, on_success=lambda text: None)

        assert context.resources.mana == 95
        assert context.resources.stress == 2
        assert context.resources.xp == 0
        assert context.metrics.total_runs == 0

    def test_timeout(self, sample_request: Any, make_fake_client: Any) -> None:
        """Test a hung call is bounded by the timeout and releases the gate."""
        settings = Settings(ai=AIProviderSettings(timeout_seconds=0.01))
        client = make_fake_client(delay=1.0)
        context = SessionContext()
        gate = ActionGate(context, client=client, settings=settings)

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)

        assert outcome.status is ActionStatus.FAILED
        assert isinstance(outcome.error, ProviderTimeoutError)
        assert outcome.error.timeout_seconds == 0.01
        assert gate.busy is False
        assert context.metrics.total_runs == 0

    def test_handler_error_propagates_and_releases(
        self,
        sample_request: Any,
        fake_client: Any,
    ) -> None:
        """Test an exception from on_success propagates and the gate is reusable."""
        context = SessionContext()
        gate = ActionGate(context, client=fake_client)

        def broken(text: str) -> None:
            raise RuntimeError("render failed")

        with pytest.raises(RuntimeError, match="render failed"):
            gate.run_sync(sample_request, on_success=broken)

        assert context.phase is GatePhase.IDLE
        assert context.metrics.total_runs == 0

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)
        assert outcome.succeeded

    def test_unexpected_client_error_propagates(
        self,
        sample_request: Any,
        make_fake_client: Any,
    ) -> None:
        client = make_fake_client(error=KeyError("bug"))
        context = SessionContext()
        gate = ActionGate(context, client=client)

        with pytest.raises(KeyError):
            gate.run_sync(sample_request, on_success=lambda text: None)

        assert gate.busy is False


class TestDefaultClient:
    """Tests for the gate's default provider client."""

    def test_uses_generate_text(
        self,
        sample_request: Any,
        test_settings: Settings,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        from review_studio.engine import gate as gate_module

        received: list[Any] = []

        async def fake_generate_text(request: Any, *, settings: Any = None) -> str:
            received.append((request, settings))
            return "From the provider."

        monkeypatch.setattr(gate_module, "generate_text", fake_generate_text)
        gate = ActionGate(SessionContext(), settings=test_settings)

        outcome = gate.run_sync(sample_request, on_success=lambda text: None)

        assert outcome.text == "From the provider."
        assert received == [(sample_request, test_settings)]

"""Action Gate: the single-flight, resource-checked wrapper around invocations.

Every AI action in the UI goes through ActionGate.run(). The gate is an
explicit state machine over the SessionContext it owns:

    IDLE --dispatch--> IN_FLIGHT --resolve_success--> SETTLING --settled--> IDLE
                                 --resolve_failure--> SETTLING
                       IN_FLIGHT / SETTLING --abort--> IDLE

The busy flag is true in every phase but IDLE. Counters for invocation N
are written while SETTLING, so they are in place before the gate accepts
invocation N+1.

Ordering on success: the caller's on_success handler receives the text
first; usage metrics and resource gauges are updated afterwards.

Example:
    >>> gate = ActionGate(SessionContext())
    >>> outcome = gate.run_sync(request, on_success=lambda text: print(text))
    >>> outcome.status
    <ActionStatus.SUCCEEDED: 'succeeded'>
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable

from review_studio.core.config import get_settings
from review_studio.core.exceptions import (
    AIError,
    GateBusyError,
    InsufficientResourceError,
    InvalidGateTransitionError,
    ProviderTimeoutError,
    ReviewStudioError,
)
from review_studio.core.logging import get_logger
from review_studio.engine.provider import generate_text
from review_studio.models.catalog import provider_for_model
from review_studio.models.enums import ActionStatus, GateEvent, GatePhase
from review_studio.models.session import SessionContext, estimate_tokens


if TYPE_CHECKING:
    from review_studio.core.config import Settings
    from review_studio.engine.provider import InvocationRequest

logger = get_logger(__name__)

TextClient = Callable[["InvocationRequest"], Awaitable[str]]
"""Async callable performing one invocation, e.g. generate_text."""

SuccessHandler = Callable[[str], None]


TRANSITIONS: dict[tuple[GatePhase, GateEvent], GatePhase] = {
    (GatePhase.IDLE, GateEvent.DISPATCH): GatePhase.IN_FLIGHT,
    (GatePhase.IN_FLIGHT, GateEvent.RESOLVE_SUCCESS): GatePhase.SETTLING,
    (GatePhase.IN_FLIGHT, GateEvent.RESOLVE_FAILURE): GatePhase.SETTLING,
    (GatePhase.SETTLING, GateEvent.SETTLED): GatePhase.IDLE,
    (GatePhase.IN_FLIGHT, GateEvent.ABORT): GatePhase.IDLE,
    (GatePhase.SETTLING, GateEvent.ABORT): GatePhase.IDLE,
}
"""Every legal (phase, event) pair and the phase it leads to."""


@dataclass(frozen=True)
class ActionOutcome:
    """Result of one gated action.

    Attributes:
        status: What happened.
        text: Generated text on success, empty otherwise.
        error: The failure or rejection signal, if any.
        duration_seconds: Wall-clock time spent in the provider call.
    """

    status: ActionStatus
    text: str = ""
    error: ReviewStudioError | None = None
    duration_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status is ActionStatus.SUCCEEDED

    @property
    def message(self) -> str:
        """User-facing message for rejections and failures."""
        if self.error is None:
            return ""
        return self.error.message


class ActionGate:
    """Mediates every AI invocation for one session.

    Attributes:
        context: The session state this gate owns.
    """

    def __init__(
        self,
        context: SessionContext,
        *,
        client: TextClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the gate.

        Args:
            context: Session state to guard and update.
            client: Provider call; defaults to generate_text.
            settings: Settings for costs, rewards and the timeout.
        """
        self.context = context
        self._settings = settings or get_settings()
        self._client = client or self._default_client

    async def _default_client(self, request: InvocationRequest) -> str:
        return await generate_text(request, settings=self._settings)

    @property
    def busy(self) -> bool:
        return self.context.busy

    def _transition(self, event: GateEvent) -> GatePhase:
        """Apply an event to the current phase.

        Raises:
            InvalidGateTransitionError: If the event is illegal in this phase.
        """
        current = self.context.phase
        next_phase = TRANSITIONS.get((current, event))
        if next_phase is None:
            raise InvalidGateTransitionError(
                f"Event {event.value!r} is not valid while {current.value!r}",
                current_phase=current.value,
                event=event.value,
            )
        self.context.phase = next_phase
        return next_phase

    async def run(
        self,
        request: InvocationRequest,
        on_success: SuccessHandler,
    ) -> ActionOutcome:
        """Run one gated invocation.

        Rejections (busy, insufficient mana) return without a network call
        and without touching counters. Provider failures and timeouts
        return a FAILED outcome. Exceptions raised by on_success propagate
        after the gate has returned to IDLE.

        Args:
            request: The invocation request.
            on_success: Receives the generated text before counters change.

        Returns:
            The outcome of the action.
        """
        gate_cfg = self._settings.gate

        if not self.context.resources.can_afford(gate_cfg.mana_cost):
            logger.info(
                "Insufficient mana, action rejected",
                mana=self.context.resources.mana,
                required=gate_cfg.mana_cost,
            )
            return ActionOutcome(
                status=ActionStatus.REJECTED_INSUFFICIENT_RESOURCE,
                error=InsufficientResourceError(
                    required=gate_cfg.mana_cost,
                    available=self.context.resources.mana,
                ),
            )

        if self.context.busy:
            logger.warning("Gate busy, action rejected", phase=self.context.phase.value)
            return ActionOutcome(
                status=ActionStatus.REJECTED_BUSY,
                error=GateBusyError("Another request is still running. Please wait."),
            )

        self._transition(GateEvent.DISPATCH)
        start = time.perf_counter()
        try:
            try:
                text = await asyncio.wait_for(
                    self._client(request),
                    timeout=self._settings.ai.timeout_seconds,
                )
            except asyncio.TimeoutError:
                error: AIError = ProviderTimeoutError(
                    f"No response within {self._settings.ai.timeout_seconds:g} seconds",
                    timeout_seconds=self._settings.ai.timeout_seconds,
                    model=request.model,
                )
            except AIError as exc:
                error = exc
            else:
                duration = time.perf_counter() - start
                self._transition(GateEvent.RESOLVE_SUCCESS)
                on_success(text)
                self._settle_success(request, text, duration)
                self._transition(GateEvent.SETTLED)
                return ActionOutcome(
                    status=ActionStatus.SUCCEEDED,
                    text=text,
                    duration_seconds=duration,
                )

            duration = time.perf_counter() - start
            self._transition(GateEvent.RESOLVE_FAILURE)
            self._settle_failure(error)
            self._transition(GateEvent.SETTLED)
            return ActionOutcome(
                status=ActionStatus.FAILED,
                error=error,
                duration_seconds=duration,
            )
        finally:
            if self.context.phase is not GatePhase.IDLE:
                logger.error("Gated action aborted", phase=self.context.phase.value)
                self._transition(GateEvent.ABORT)

    def run_sync(
        self,
        request: InvocationRequest,
        on_success: SuccessHandler,
    ) -> ActionOutcome:
        """Run a gated invocation from synchronous code (the Streamlit script thread)."""
        return asyncio.run(self.run(request, on_success))

    def _settle_success(self, request: InvocationRequest, text: str, duration: float) -> None:
        gate_cfg = self._settings.gate
        provider = provider_for_model(request.model)
        tokens = estimate_tokens(
            request.instruction_prompt,
            request.user_content,
            text,
            chars_per_token=gate_cfg.chars_per_token,
        )

        self.context.metrics = self.context.metrics.record_run(
            provider.value,
            tokens=tokens,
            duration_seconds=duration,
        )
        self.context.resources = self.context.resources.after_success(
            mana_cost=gate_cfg.mana_cost,
            xp_reward=gate_cfg.xp_reward,
            xp_per_level=gate_cfg.xp_per_level,
            stress_increment=gate_cfg.stress_increment,
        )

        logger.info(
            "Gated action succeeded",
            provider=provider.value,
            model=request.model,
            duration_seconds=round(duration, 3),
            tokens=tokens,
            mana=self.context.resources.mana,
            level=self.context.resources.level,
        )

    def _settle_failure(self, error: AIError) -> None:
        gate_cfg = self._settings.gate
        if gate_cfg.penalize_failures:
            self.context.resources = self.context.resources.after_failure(
                mana_cost=gate_cfg.mana_cost,
                stress_increment=gate_cfg.stress_increment,
            )

        logger.error(
            "Gated action failed",
            error_type=type(error).__name__,
            error=error.message,
            provider=error.provider,
            model=error.model,
        )


__all__ = [
    "TRANSITIONS",
    "ActionOutcome",
    "ActionGate",
]

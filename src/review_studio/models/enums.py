"""Enumeration types for Review Studio.

This module defines the provider families, the Action Gate state machine
vocabulary, and the outcome statuses reported back to the UI.
"""

from __future__ import annotations

from enum import StrEnum


class Provider(StrEnum):
    """Text-generation provider families.

    Every family is declared so that metrics and agent configs can name
    it, but only families with a backend can serve an invocation.
    """

    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    XAI = "xai"

    @property
    def is_implemented(self) -> bool:
        """Whether an invocation backend exists for this family."""
        return self in (Provider.GEMINI, Provider.OPENAI)

    @property
    def display_name(self) -> str:
        """Get the human readable provider name.

        Returns:
            Display name (e.g. 'Gemini' for GEMINI).
        """
        names = {
            Provider.GEMINI: "Gemini",
            Provider.OPENAI: "OpenAI",
            Provider.ANTHROPIC: "Anthropic",
            Provider.XAI: "xAI",
        }
        return names[self]


class GatePhase(StrEnum):
    """Phases of the Action Gate state machine."""

    IDLE = "idle"
    """No invocation in flight; a new one may be dispatched."""

    IN_FLIGHT = "in_flight"
    """The provider call is awaited."""

    SETTLING = "settling"
    """The call resolved; result delivery and counter updates are running."""


class GateEvent(StrEnum):
    """Events that drive Action Gate transitions."""

    DISPATCH = "dispatch"
    RESOLVE_SUCCESS = "resolve_success"
    RESOLVE_FAILURE = "resolve_failure"
    SETTLED = "settled"
    ABORT = "abort"


class ActionStatus(StrEnum):
    """Outcome of one gated action."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED_INSUFFICIENT_RESOURCE = "rejected_insufficient_resource"
    REJECTED_BUSY = "rejected_busy"

    @property
    def is_rejection(self) -> bool:
        """Whether the action was refused before any network call."""
        return self in (
            ActionStatus.REJECTED_INSUFFICIENT_RESOURCE,
            ActionStatus.REJECTED_BUSY,
        )


__all__ = [
    "Provider",
    "GatePhase",
    "GateEvent",
    "ActionStatus",
]

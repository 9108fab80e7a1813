"""Session state owned by the Action Gate.

The three pieces of per-session state (resource gauges, usage metrics,
and the gate phase that backs the busy flag) live together in a single
SessionContext. The UI creates one context per browser session and
injects it into the gate; nothing else writes to it.

Example:
    >>> context = SessionContext()
    >>> context.resources.mana
    100
    >>> context.busy
    False
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field, computed_field

from review_studio.core.constants import (
    GAUGE_MAX,
    GAUGE_MIN,
    INITIAL_HEALTH,
    INITIAL_LEVEL,
    INITIAL_MANA,
    INITIAL_STRESS,
    INITIAL_XP,
)
from review_studio.models.enums import GatePhase, Provider


def clamp_gauge(value: int) -> int:
    """Clamp a gauge value into [GAUGE_MIN, GAUGE_MAX]."""
    return max(GAUGE_MIN, min(GAUGE_MAX, value))


def level_for_xp(xp: int, xp_per_level: int = 100) -> int:
    """Compute the level reached with a given amount of XP.

    Args:
        xp: Accumulated experience points.
        xp_per_level: XP needed per level.

    Returns:
        floor(xp / xp_per_level) + 1

    Example:
        >>> level_for_xp(105)
        2
    """
    return math.floor(xp / xp_per_level) + 1


def estimate_tokens(*texts: str, chars_per_token: int = 4) -> int:
    """Approximate the token count of an exchange from its character length.

    This is a local estimate; provider-reported usage is not consulted.

    Args:
        *texts: Prompt, content and response strings.
        chars_per_token: Average characters per token.

    Returns:
        Estimated token count, at least 1.
    """
    total_chars = sum(len(text) for text in texts)
    return max(1, math.ceil(total_chars / chars_per_token))


# =============================================================================
# Resource Gauges
# =============================================================================


class ResourceState(BaseModel):
    """Gamification gauges shown in the status HUD.

    Health, mana and stress are clamped to [0, 100]. XP and level never
    decrease within a session.

    Attributes:
        health: Health gauge.
        mana: Remaining invocation budget.
        xp: Accumulated experience.
        level: Level derived from XP.
        stress: Stress gauge.
    """

    model_config = ConfigDict(frozen=True)

    health: int = Field(default=INITIAL_HEALTH, ge=GAUGE_MIN, le=GAUGE_MAX)
    mana: int = Field(default=INITIAL_MANA, ge=GAUGE_MIN, le=GAUGE_MAX)
    xp: int = Field(default=INITIAL_XP, ge=0)
    level: int = Field(default=INITIAL_LEVEL, ge=1)
    stress: int = Field(default=INITIAL_STRESS, ge=GAUGE_MIN, le=GAUGE_MAX)

    def can_afford(self, cost: int) -> bool:
        """Check whether enough mana remains for one invocation."""
        return self.mana >= cost

    def after_success(
        self,
        *,
        mana_cost: int = 5,
        xp_reward: int = 15,
        xp_per_level: int = 100,
        stress_increment: int = 2,
    ) -> ResourceState:
        """Return the gauges after a successful invocation.

        Args:
            mana_cost: Mana spent.
            xp_reward: XP granted.
            xp_per_level: XP needed per level.
            stress_increment: Stress added.

        Returns:
            A new ResourceState; the receiver is unchanged.
        """
        xp = self.xp + xp_reward
        return self.model_copy(
            update={
                "mana": clamp_gauge(self.mana - mana_cost),
                "xp": xp,
                "level": level_for_xp(xp, xp_per_level),
                "stress": clamp_gauge(self.stress + stress_increment),
            }
        )

    def after_failure(self, *, mana_cost: int = 5, stress_increment: int = 2) -> ResourceState:
        """Return the gauges after a failed invocation under a penalizing policy."""
        return self.model_copy(
            update={
                "mana": clamp_gauge(self.mana - mana_cost),
                "stress": clamp_gauge(self.stress + stress_increment),
            }
        )


# =============================================================================
# Usage Metrics
# =============================================================================


def _initial_provider_calls() -> dict[str, int]:
    return {provider.value: 0 for provider in Provider}


class UsageMetrics(BaseModel):
    """Accumulated usage counters for the dashboard.

    Attributes:
        total_runs: Number of successful invocations.
        provider_calls: Successful invocations per provider family.
        tokens_used: Approximate tokens across all successful invocations.
        last_run_duration_seconds: Wall-clock duration of the latest success.
    """

    model_config = ConfigDict(frozen=True)

    total_runs: int = Field(default=0, ge=0)
    provider_calls: dict[str, int] = Field(default_factory=_initial_provider_calls)
    tokens_used: int = Field(default=0, ge=0)
    last_run_duration_seconds: float = Field(default=0.0, ge=0.0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def average_tokens_per_run(self) -> float:
        """Mean approximate tokens per successful run."""
        if self.total_runs == 0:
            return 0.0
        return self.tokens_used / self.total_runs

    def record_run(self, provider: str, *, tokens: int, duration_seconds: float) -> UsageMetrics:
        """Return the metrics after one more successful run.

        Args:
            provider: Provider family name.
            tokens: Approximate tokens for the run.
            duration_seconds: Wall-clock duration of the run.

        Returns:
            A new UsageMetrics; the receiver is unchanged.
        """
        calls = dict(self.provider_calls)
        calls[provider] = calls.get(provider, 0) + 1
        return self.model_copy(
            update={
                "total_runs": self.total_runs + 1,
                "provider_calls": calls,
                "tokens_used": self.tokens_used + tokens,
                "last_run_duration_seconds": max(0.0, duration_seconds),
            }
        )


# =============================================================================
# Session Context
# =============================================================================


@dataclass
class SessionContext:
    """Per-session state mutated only by the Action Gate.

    Attributes:
        resources: Current gamification gauges.
        metrics: Current usage metrics.
        phase: Current gate phase; the busy flag is derived from it.
    """

    resources: ResourceState = field(default_factory=ResourceState)
    metrics: UsageMetrics = field(default_factory=UsageMetrics)
    phase: GatePhase = GatePhase.IDLE

    @property
    def busy(self) -> bool:
        """True exactly while an invocation is dispatched and not yet settled."""
        return self.phase is not GatePhase.IDLE


__all__ = [
    "clamp_gauge",
    "level_for_xp",
    "estimate_tokens",
    "ResourceState",
    "UsageMetrics",
    "SessionContext",
]

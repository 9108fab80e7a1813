"""FDA 510(k) Review Studio - AI-assisted premarket submission review.

A Streamlit workspace where every AI action passes through a single
gate that guards a small session economy.

GATED INVOCATION:
- The gate owns the session state (mana, XP, level, stress, usage metrics)
- One request in flight at a time; a second action while busy is rejected
- Each successful action costs mana and earns XP; failures leave counters alone

Example:
    >>> from review_studio import ActionGate, SessionContext, SUMMARY_TASK, build_task_request
    >>>
    >>> gate = ActionGate(SessionContext())
    >>> request = build_task_request(SUMMARY_TASK, summary_text)
    >>> outcome = gate.run_sync(request, on_success=print)
    >>> gate.context.resources.mana
    95

Modules:
    core: Configuration, logging, and base exceptions.
    models: Session gauges, usage metrics, agents and the model catalog.
    engine: Provider client, action gate and preset review tasks.
    ingestion: Text and PDF document loading.
    storage: SQLite preference store.
    ui: Streamlit interface.
"""

from __future__ import annotations

# Core
from review_studio.core.config import Settings, get_settings
from review_studio.core.exceptions import ReviewStudioError
from review_studio.core.logging import configure_logging, get_logger

# Engine
from review_studio.engine.gate import ActionGate, ActionOutcome
from review_studio.engine.prompts import (
    GUIDANCE_TASK,
    NOTE_TASKS,
    SUMMARY_TASK,
    build_agent_request,
    build_task_request,
)
from review_studio.engine.provider import InvocationRequest, generate_text

# Models
from review_studio.models.agents import AgentConfig, load_agents_yaml
from review_studio.models.enums import ActionStatus, Provider
from review_studio.models.session import ResourceState, SessionContext, UsageMetrics


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "ReviewStudioError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "ActionGate",
    "ActionOutcome",
    "InvocationRequest",
    "generate_text",
    "SUMMARY_TASK",
    "GUIDANCE_TASK",
    "NOTE_TASKS",
    "build_task_request",
    "build_agent_request",
    # Models
    "AgentConfig",
    "load_agents_yaml",
    "ActionStatus",
    "Provider",
    "ResourceState",
    "SessionContext",
    "UsageMetrics",
]

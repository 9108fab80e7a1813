"""Data models for Review Studio.

Submodules:
    enums: Provider families and Action Gate vocabulary.
    catalog: Model identifier to provider resolution.
    session: ResourceState, UsageMetrics and the owning SessionContext.
    agents: Review agent configurations and agents.yaml handling.
"""

from __future__ import annotations

from review_studio.models.agents import (
    DEFAULT_AGENTS,
    INITIAL_AGENTS_YAML,
    INITIAL_SKILL_MD,
    AgentConfig,
    dump_agents_yaml,
    find_agent,
    load_agents_yaml,
)
from review_studio.models.catalog import (
    AVAILABLE_MODELS,
    implemented_models,
    provider_for_model,
)
from review_studio.models.enums import ActionStatus, GateEvent, GatePhase, Provider
from review_studio.models.session import (
    ResourceState,
    SessionContext,
    UsageMetrics,
    clamp_gauge,
    estimate_tokens,
    level_for_xp,
)


__all__ = [
    # Enumerations
    "Provider",
    "GatePhase",
    "GateEvent",
    "ActionStatus",
    # Catalog
    "AVAILABLE_MODELS",
    "provider_for_model",
    "implemented_models",
    # Session state
    "ResourceState",
    "UsageMetrics",
    "SessionContext",
    "clamp_gauge",
    "level_for_xp",
    "estimate_tokens",
    # Agents
    "AgentConfig",
    "DEFAULT_AGENTS",
    "INITIAL_AGENTS_YAML",
    "INITIAL_SKILL_MD",
    "load_agents_yaml",
    "dump_agents_yaml",
    "find_agent",
]

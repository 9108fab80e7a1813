"""Review agent configurations and agents.yaml handling.

An agent bundles a system prompt with a model and sampling settings.
The Submission Review tab runs the selected agent over uploaded text;
the Configuration tab edits the agent list as YAML.

Example:
    >>> agents = load_agents_yaml(INITIAL_AGENTS_YAML)
    >>> agents[0].id
    'summary_agent'
"""

from __future__ import annotations

from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from review_studio.core.constants import DEFAULT_MAX_OUTPUT_TOKENS
from review_studio.core.exceptions import AgentConfigError, ReviewStudioError
from review_studio.core.logging import get_logger
from review_studio.models.catalog import provider_for_model
from review_studio.models.enums import Provider


logger = get_logger(__name__)


class AgentConfig(BaseModel):
    """A named system prompt bound to a model.

    Attributes:
        id: Unique identifier.
        name: Display name (defaults to the id).
        description: One-line description shown in the UI.
        model: Model identifier.
        temperature: Sampling temperature.
        max_tokens: Output token ceiling.
        system_prompt: Instruction sent with every invocation.
        provider: Provider family (inferred from the model when omitted).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""
    model: str = Field(min_length=1)
    temperature: float = Field(default=0.2, ge=0.0, le=1.0)
    max_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    system_prompt: str = ""
    provider: Provider | None = None

    @model_validator(mode="after")
    def fill_defaults(self) -> "AgentConfig":
        """Default the display name and infer the provider from the model."""
        if not self.name:
            object.__setattr__(self, "name", self.id)
        if self.provider is None:
            object.__setattr__(self, "provider", provider_for_model(self.model))
        return self

    @property
    def label(self) -> str:
        """Selector label, e.g. 'Summarizer (gemini-2.5-flash)'."""
        return f"{self.name} ({self.model})"


DEFAULT_AGENTS: tuple[AgentConfig, ...] = (
    AgentConfig(
        id="summary_agent",
        name="Summarizer",
        description="Extracts key information from 510(k) summaries.",
        model="gemini-2.5-flash",
        max_tokens=4000,
        temperature=0.2,
        system_prompt=(
            "You are an expert FDA reviewer. Summarize the provided 510(k) summary "
            "document. Highlight key regulatory information."
        ),
        provider=Provider.GEMINI,
    ),
    AgentConfig(
        id="risk_agent",
        name="Risk Analyst",
        description="Analyzes risk factors in submission materials.",
        model="gemini-3-flash-preview",
        max_tokens=5000,
        temperature=0.3,
        system_prompt=(
            "Identify and list all risk factors and mitigations mentioned in the text. "
            "Format as a table."
        ),
        provider=Provider.GEMINI,
    ),
    AgentConfig(
        id="clinical_agent",
        name="Clinical Reviewer",
        description="Reviews clinical data and conclusions.",
        model="gemini-3-pro-preview",
        max_tokens=8000,
        temperature=0.1,
        system_prompt=(
            "Critically review the clinical data provided. Are the conclusions supported "
            "by the data? Identify gaps."
        ),
        provider=Provider.GEMINI,
    ),
)

INITIAL_AGENTS_YAML = """agents:
  - id: summary_agent
    name: Summarizer
    model: gemini-2.5-flash
    system_prompt: "You are an expert FDA reviewer."
  - id: risk_agent
    name: Risk Analyst
    model: gemini-3-flash-preview
"""

INITIAL_SKILL_MD = """# Regulatory Skills
- **Predicate Comparison**: Ability to identify substantial equivalence.
- **Biocompatibility**: ISO 10993 analysis.
- **Software**: IEC 62304 compliance check.
"""


def load_agents_yaml(text: str) -> list[AgentConfig]:
    """Parse an agents.yaml document.

    The document is a mapping with an ``agents`` list. Each entry needs
    ``id`` and ``model``; the other fields take AgentConfig defaults.

    Args:
        text: YAML source.

    Returns:
        Parsed agents in document order.

    Raises:
        AgentConfigError: If the YAML is malformed, an entry is invalid,
            or two entries share an id.
    """
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise AgentConfigError(f"agents.yaml is not valid YAML: {exc}") from exc

    if not isinstance(document, dict) or not isinstance(document.get("agents"), list):
        raise AgentConfigError("agents.yaml must contain an 'agents' list")

    agents: list[AgentConfig] = []
    seen: set[str] = set()
    for index, entry in enumerate(document["agents"]):
        if not isinstance(entry, dict):
            raise AgentConfigError(
                "Each agent must be a mapping",
                details={"index": index},
            )
        try:
            agent = AgentConfig(**entry)
        except (pydantic.ValidationError, ReviewStudioError) as exc:
            raise AgentConfigError(
                f"Invalid agent definition: {exc}",
                details={"index": index},
            ) from exc
        if agent.id in seen:
            raise AgentConfigError(
                f"Duplicate agent id: {agent.id}",
                details={"index": index},
            )
        seen.add(agent.id)
        agents.append(agent)

    logger.debug("Loaded agents.yaml", agent_count=len(agents))
    return agents


def dump_agents_yaml(agents: list[AgentConfig] | tuple[AgentConfig, ...]) -> str:
    """Serialize agents to an agents.yaml document.

    Args:
        agents: Agents to serialize.

    Returns:
        YAML text accepted by load_agents_yaml.
    """
    entries: list[dict[str, Any]] = [
        agent.model_dump(mode="json", exclude_none=True) for agent in agents
    ]
    return yaml.safe_dump({"agents": entries}, sort_keys=False, allow_unicode=True)


def find_agent(agents: list[AgentConfig] | tuple[AgentConfig, ...], agent_id: str) -> AgentConfig | None:
    """Find an agent by id."""
    return next((agent for agent in agents if agent.id == agent_id), None)


__all__ = [
    "AgentConfig",
    "DEFAULT_AGENTS",
    "INITIAL_AGENTS_YAML",
    "INITIAL_SKILL_MD",
    "load_agents_yaml",
    "dump_agents_yaml",
    "find_agent",
]

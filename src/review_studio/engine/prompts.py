"""Preset review tasks and request construction.

Each tab in the UI triggers one of the tasks below. A task pairs an
instruction prompt with the model it runs on; agents from agents.yaml
are turned into requests the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from review_studio.core.constants import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE
from review_studio.engine.provider import InvocationRequest


if TYPE_CHECKING:
    from review_studio.models.agents import AgentConfig


@dataclass(frozen=True)
class ReviewTask:
    """A preset instruction bound to a model.

    Attributes:
        id: Task identifier.
        label: Button label.
        instruction: System instruction; may contain a {keywords} slot.
        model: Model identifier the task runs on.
    """

    id: str
    label: str
    instruction: str
    model: str

    def render_instruction(self, *, keywords: str = "") -> str:
        """Fill the keyword slot, if the instruction has one."""
        if "{keywords}" not in self.instruction:
            return self.instruction
        return self.instruction.format(keywords=normalize_keywords(keywords))


SUMMARY_TASK = ReviewTask(
    id="summary",
    label="Analyze",
    instruction=(
        "Create a comprehensive summary of this 510(k) document in markdown. "
        "Highlight key regulatory terms (like 'Predicate', 'Indication', 'SE') by "
        "wrapping them in spans with class 'text-coral' or simply ensure they stand out."
    ),
    model="gemini-2.5-flash",
)

GUIDANCE_TASK = ReviewTask(
    id="guidance",
    label="Generate Checklist",
    instruction="Create a comprehensive review guideline with a checklist based on the provided text.",
    model="gemini-3-flash-preview",
)

NOTE_TASKS: tuple[ReviewTask, ...] = (
    ReviewTask(
        id="notes_organize",
        label="Organize & Highlight",
        instruction=(
            "Organize these notes into structured markdown. Highlight these keywords "
            "in coral color using HTML span style: {keywords}"
        ),
        model="gemini-2.5-flash",
    ),
    ReviewTask(
        id="notes_action_items",
        label="Action Items",
        instruction="Extract action items and format as a checklist.",
        model="gemini-2.5-flash",
    ),
    ReviewTask(
        id="notes_glossary",
        label="Glossary",
        instruction="Explain technical terms found in the notes in a glossary format.",
        model="gemini-3-flash-preview",
    ),
    ReviewTask(
        id="notes_polish",
        label="Polish",
        instruction="Rewrite these notes to be more professional and concise for an FDA report.",
        model="gemini-2.5-flash-lite",
    ),
)

TASKS: dict[str, ReviewTask] = {
    task.id: task for task in (SUMMARY_TASK, GUIDANCE_TASK, *NOTE_TASKS)
}


def normalize_keywords(keywords: str) -> str:
    """Normalize a comma separated keyword list.

    Example:
        >>> normalize_keywords(" predicate,, SE ,Indication ")
        'predicate, SE, Indication'
    """
    parts = [part.strip() for part in keywords.split(",")]
    return ", ".join(part for part in parts if part)


def build_task_request(
    task: ReviewTask,
    content: str,
    *,
    keywords: str = "",
    model: str | None = None,
    api_key: str | None = None,
) -> InvocationRequest:
    """Build the request for a preset task.

    Args:
        task: The preset task.
        content: User text the task runs over.
        keywords: Keywords for tasks with a keyword slot.
        model: Model override; the task's own model when omitted.
        api_key: Explicit per-call key.

    Returns:
        A fresh InvocationRequest with the fixed preset temperature.
    """
    return InvocationRequest(
        instruction_prompt=task.render_instruction(keywords=keywords),
        user_content=content,
        model=model or task.model,
        temperature=DEFAULT_TEMPERATURE,
        max_output_tokens=DEFAULT_MAX_OUTPUT_TOKENS,
        api_key=api_key,
    )


def build_agent_request(
    agent: AgentConfig,
    content: str,
    *,
    api_key: str | None = None,
) -> InvocationRequest:
    """Build the request for an agent run.

    The agent's max_tokens applies; temperature stays at the preset value
    used by every action in the studio.
    """
    return InvocationRequest(
        instruction_prompt=agent.system_prompt,
        user_content=content,
        model=agent.model,
        temperature=DEFAULT_TEMPERATURE,
        max_output_tokens=agent.max_tokens,
        api_key=api_key,
    )


__all__ = [
    "ReviewTask",
    "SUMMARY_TASK",
    "GUIDANCE_TASK",
    "NOTE_TASKS",
    "TASKS",
    "normalize_keywords",
    "build_task_request",
    "build_agent_request",
]

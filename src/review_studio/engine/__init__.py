"""Invocation engine: Provider Client, Action Gate and preset tasks.

Example:
    >>> from review_studio.engine import ActionGate, SUMMARY_TASK, build_task_request
    >>> from review_studio.models import SessionContext
    >>> gate = ActionGate(SessionContext())
    >>> request = build_task_request(SUMMARY_TASK, document_text)
    >>> outcome = gate.run_sync(request, on_success=print)
"""

from __future__ import annotations

from review_studio.engine.gate import TRANSITIONS, ActionGate, ActionOutcome
from review_studio.engine.prompts import (
    GUIDANCE_TASK,
    NOTE_TASKS,
    SUMMARY_TASK,
    TASKS,
    ReviewTask,
    build_agent_request,
    build_task_request,
    normalize_keywords,
)
from review_studio.engine.provider import (
    GeminiBackend,
    InvocationRequest,
    OpenAIBackend,
    ProviderBackend,
    generate_text,
    get_backend,
    resolve_api_key,
    user_key_for_request,
)


__all__ = [
    # Provider Client
    "InvocationRequest",
    "ProviderBackend",
    "GeminiBackend",
    "OpenAIBackend",
    "get_backend",
    "resolve_api_key",
    "user_key_for_request",
    "generate_text",
    # Action Gate
    "TRANSITIONS",
    "ActionOutcome",
    "ActionGate",
    # Tasks
    "ReviewTask",
    "SUMMARY_TASK",
    "GUIDANCE_TASK",
    "NOTE_TASKS",
    "TASKS",
    "normalize_keywords",
    "build_task_request",
    "build_agent_request",
]

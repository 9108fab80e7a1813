"""Model catalog mapping model identifiers to provider families."""

from __future__ import annotations

from review_studio.core.exceptions import UnsupportedModelError
from review_studio.models.enums import Provider


AVAILABLE_MODELS: dict[str, Provider] = {
    "gemini-2.5-flash": Provider.GEMINI,
    "gemini-2.5-flash-lite": Provider.GEMINI,
    "gemini-3-flash-preview": Provider.GEMINI,
    "gemini-3-pro-preview": Provider.GEMINI,
    "gpt-4o-mini": Provider.OPENAI,
    "gpt-4.1-mini": Provider.OPENAI,
    "claude-3-5-sonnet": Provider.ANTHROPIC,
    "grok-4-fast-reasoning": Provider.XAI,
    "grok-4-1-fast-non-reasoning": Provider.XAI,
}
"""Models offered in the UI, in display order."""

_PREFIXES: tuple[tuple[str, Provider], ...] = (
    ("gemini-", Provider.GEMINI),
    ("gpt-", Provider.OPENAI),
    ("o1", Provider.OPENAI),
    ("o3", Provider.OPENAI),
    ("o4", Provider.OPENAI),
    ("claude-", Provider.ANTHROPIC),
    ("grok-", Provider.XAI),
)


def provider_for_model(model: str) -> Provider:
    """Resolve the provider family serving a model identifier.

    Catalog entries win; otherwise the family is inferred from the
    identifier prefix so newer model versions work without a catalog edit.

    Args:
        model: Model identifier, e.g. 'gemini-2.5-flash'.

    Returns:
        The provider family.

    Raises:
        UnsupportedModelError: If the identifier is blank or unrecognized.
    """
    normalized = model.strip().lower()
    if not normalized:
        raise UnsupportedModelError("Model identifier must not be empty", model=model)

    if normalized in AVAILABLE_MODELS:
        return AVAILABLE_MODELS[normalized]

    for prefix, provider in _PREFIXES:
        if normalized.startswith(prefix):
            return provider

    raise UnsupportedModelError(f"Unknown model: {model}", model=model)


def implemented_models() -> list[str]:
    """List catalog models whose provider has a backend."""
    return [name for name, family in AVAILABLE_MODELS.items() if family.is_implemented]


__all__ = [
    "AVAILABLE_MODELS",
    "provider_for_model",
    "implemented_models",
]

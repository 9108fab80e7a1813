"""Provider Client for hosted text-generation endpoints.

generate_text() turns one InvocationRequest into exactly one network
round trip and normalizes the result. It holds no state between calls
and builds a fresh SDK client per invocation, so concurrent callers do
not interfere with each other.

Failure modes, all raised before or instead of returning text:

- UnsupportedModelError: unknown model, or a provider family without a backend.
- MissingCredentialError: no explicit key and no environment key.
- ProviderError: transport failure or error response from the endpoint.

Example:
    >>> request = InvocationRequest(
    ...     instruction_prompt="Summarize this 510(k).",
    ...     user_content=document_text,
    ...     model="gemini-2.5-flash",
    ... )
    >>> text = await generate_text(request)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
from openai import APIConnectionError, APIStatusError, AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

from review_studio.core.config import get_settings
from review_studio.core.constants import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_TEMPERATURE,
    PLACEHOLDER_TEXT,
)
from review_studio.core.exceptions import (
    MissingCredentialError,
    ProviderError,
    UnsupportedModelError,
)
from review_studio.core.logging import get_logger
from review_studio.models.catalog import provider_for_model
from review_studio.models.enums import Provider


if TYPE_CHECKING:
    from review_studio.core.config import Settings

logger = get_logger(__name__)


# =============================================================================
# Request
# =============================================================================


class InvocationRequest(BaseModel):
    """Immutable description of one invocation.

    Attributes:
        instruction_prompt: System instruction.
        user_content: Text the instruction applies to.
        model: Model identifier.
        temperature: Sampling temperature in [0, 1].
        max_output_tokens: Output token ceiling.
        api_key: Explicit per-call key; wins over the environment key.
    """

    model_config = ConfigDict(frozen=True)

    instruction_prompt: str
    user_content: str
    model: str
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    api_key: SecretStr | None = Field(default=None, repr=False)

    @field_validator("model")
    @classmethod
    def validate_model(cls, value: str) -> str:
        """Require a non-empty model identifier."""
        value = value.strip()
        if not value:
            raise ValueError("model must be a non-empty identifier")
        return value

    @field_validator("api_key")
    @classmethod
    def drop_blank_key(cls, value: SecretStr | None) -> SecretStr | None:
        """Treat a blank key as no key."""
        if value is not None and not value.get_secret_value().strip():
            return None
        return value

    @property
    def provider(self) -> Provider:
        """Provider family serving this request's model."""
        return provider_for_model(self.model)


def resolve_api_key(
    request: InvocationRequest,
    provider: Provider,
    settings: Settings | None = None,
) -> str:
    """Pick the API key for an invocation.

    Precedence: the explicit per-call key, then the environment key for
    the provider family.

    Args:
        request: The invocation request.
        provider: Provider family being called.
        settings: Settings to read environment keys from.

    Returns:
        The plain API key.

    Raises:
        MissingCredentialError: If neither key is present.
    """
    if request.api_key is not None:
        return request.api_key.get_secret_value()

    settings = settings or get_settings()
    env_key = settings.ai.key_for(provider.value)
    if env_key:
        return env_key

    raise MissingCredentialError(
        f"No API key configured for {provider.display_name}. "
        "Set one in the sidebar or via the environment.",
        provider=provider.value,
        model=request.model,
    )


def user_key_for_request(
    provider: Provider,
    stored_key: str,
    settings: Settings | None = None,
) -> str | None:
    """Decide whether a key typed into the UI travels with a request.

    An environment key takes precedence, so the stored user key is only
    passed as the explicit per-call key when the environment has none.

    Args:
        provider: Provider family of the request.
        stored_key: Key persisted from the masked sidebar input.
        settings: Settings to read environment keys from.

    Returns:
        The key to send explicitly, or None to let the client use the
        environment key.
    """
    settings = settings or get_settings()
    if settings.ai.key_for(provider.value):
        return None
    return stored_key.strip() or None


# =============================================================================
# Backends
# =============================================================================


class ProviderBackend(ABC):
    """One provider family's way of performing a single round trip.

    Implementations return the raw generated text (None or empty when the
    endpoint produced none) and raise ProviderError for every failure.
    """

    provider: ClassVar[Provider]

    @property
    def fallback_message(self) -> str:
        """Message used when the endpoint error carries no text."""
        return f"Failed to call {self.provider.display_name} API"

    @abstractmethod
    async def generate(self, request: InvocationRequest, api_key: str) -> str | None:
        """Perform one round trip.

        Args:
            request: The invocation request.
            api_key: Resolved API key.

        Returns:
            Generated text, or None if the response had no text.

        Raises:
            ProviderError: On transport failure or an error response.
        """
        raise NotImplementedError("Subclasses must implement generate")


class GeminiBackend(ProviderBackend):
    """Google Gemini via the google-genai async client."""

    provider = Provider.GEMINI

    async def generate(self, request: InvocationRequest, api_key: str) -> str | None:
        config = genai_types.GenerateContentConfig(
            system_instruction=request.instruction_prompt,
            temperature=request.temperature,
            max_output_tokens=request.max_output_tokens,
        )
        try:
            async with genai.Client(api_key=api_key).aio as client:
                response = await client.models.generate_content(
                    model=request.model,
                    contents=request.user_content,
                    config=config,
                )
        except genai_errors.APIError as exc:
            raise ProviderError(
                exc.message or self.fallback_message,
                provider=self.provider.value,
                model=request.model,
                status_code=exc.code,
            ) from exc
        except Exception as exc:
            raise ProviderError(
                str(exc) or self.fallback_message,
                provider=self.provider.value,
                model=request.model,
                details={"error_type": type(exc).__name__},
            ) from exc

        return response.text


class OpenAIBackend(ProviderBackend):
    """OpenAI chat completions via the async SDK client."""

    provider = Provider.OPENAI

    async def generate(self, request: InvocationRequest, api_key: str) -> str | None:
        try:
            async with AsyncOpenAI(api_key=api_key) as client:
                response = await client.chat.completions.create(
                    model=request.model,
                    messages=[
                        {"role": "system", "content": request.instruction_prompt},
                        {"role": "user", "content": request.user_content},
                    ],
                    temperature=request.temperature,
                    max_tokens=request.max_output_tokens,
                )
        except APIConnectionError as exc:
            raise ProviderError(
                f"Failed to connect to OpenAI: {exc}",
                provider=self.provider.value,
                model=request.model,
            ) from exc
        except APIStatusError as exc:
            raise ProviderError(
                exc.message or self.fallback_message,
                provider=self.provider.value,
                model=request.model,
                status_code=exc.status_code,
            ) from exc
        except Exception as exc:
            raise ProviderError(
                str(exc) or self.fallback_message,
                provider=self.provider.value,
                model=request.model,
                details={"error_type": type(exc).__name__},
            ) from exc

        if not response.choices:
            return None
        return response.choices[0].message.content


_BACKENDS: dict[Provider, type[ProviderBackend]] = {
    Provider.GEMINI: GeminiBackend,
    Provider.OPENAI: OpenAIBackend,
}


def get_backend(provider: Provider) -> ProviderBackend:
    """Get the backend for a provider family.

    Args:
        provider: Provider family.

    Returns:
        A backend instance.

    Raises:
        UnsupportedModelError: If the family is declared but not implemented.
    """
    backend_cls = _BACKENDS.get(provider)
    if backend_cls is None or not provider.is_implemented:
        raise UnsupportedModelError(
            f"{provider.display_name} models are not supported yet",
            provider=provider.value,
        )
    return backend_cls()


# =============================================================================
# Client Entry Point
# =============================================================================


async def generate_text(
    request: InvocationRequest,
    *,
    settings: Settings | None = None,
    backend: ProviderBackend | None = None,
) -> str:
    """Send one request to the hosted endpoint and return the generated text.

    Args:
        request: The invocation request.
        settings: Settings to read environment keys from.
        backend: Backend override; resolved from the model when omitted.

    Returns:
        The generated text, or PLACEHOLDER_TEXT if the endpoint returned none.

    Raises:
        UnsupportedModelError: If the model cannot be served.
        MissingCredentialError: If no API key is available.
        ProviderError: On transport failure or an error response.
    """
    provider = provider_for_model(request.model)
    if backend is None:
        backend = get_backend(provider)
    api_key = resolve_api_key(request, provider, settings)

    logger.debug(
        "Dispatching invocation",
        provider=provider.value,
        model=request.model,
        content_chars=len(request.user_content),
        max_output_tokens=request.max_output_tokens,
    )

    text = await backend.generate(request, api_key)
    if not text:
        logger.info("Endpoint returned no text", provider=provider.value, model=request.model)
        return PLACEHOLDER_TEXT
    return text


__all__ = [
    "InvocationRequest",
    "resolve_api_key",
    "user_key_for_request",
    "ProviderBackend",
    "GeminiBackend",
    "OpenAIBackend",
    "get_backend",
    "generate_text",
]

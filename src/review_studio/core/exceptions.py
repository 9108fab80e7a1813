"""Custom exception hierarchy for Review Studio.

This module defines the exception hierarchy used across the application.
All exceptions inherit from ReviewStudioError, enabling unified error
handling at the UI boundary while preserving domain-specific context.

Example:
    >>> from review_studio.core.exceptions import MissingCredentialError
    >>> raise MissingCredentialError("No Gemini API key", provider="gemini")
"""

from __future__ import annotations

from typing import Any


class ReviewStudioError(Exception):
    """Base exception for all Review Studio errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        """Return a detailed string representation of the exception."""
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(ReviewStudioError):
    """Raised when application configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# AI Provider Exceptions
# =============================================================================


class AIError(ReviewStudioError):
    """Base exception for failures of a text-generation invocation.

    Every AIError terminates the current invocation. The gate reports it
    to the caller as a failed outcome; nothing is retried.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize AI error with provider context.

        Args:
            message: Human-readable error description.
            provider: Provider family involved (e.g. 'gemini').
            model: Model identifier involved.
            details: Optional dictionary containing additional error context.
        """
        self.provider = provider
        self.model = model
        combined_details = details or {}
        if provider:
            combined_details["provider"] = provider
        if model:
            combined_details["model"] = model
        super().__init__(message, details=combined_details)


class MissingCredentialError(AIError):
    """Raised when no usable API key exists for the selected provider.

    Always raised before any network attempt.
    """


class UnsupportedModelError(AIError):
    """Raised when a model cannot be served by an implemented provider.

    Covers unknown model identifiers and provider families that are
    declared but have no backend yet.
    """


class ProviderError(AIError):
    """Raised on transport failure or a non-success endpoint response."""

    def __init__(
        self,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize provider error with HTTP status context.

        Args:
            message: Endpoint message text or a generic fallback.
            provider: Provider family involved.
            model: Model identifier involved.
            status_code: HTTP status code if the endpoint returned one.
            details: Optional dictionary containing additional error context.
        """
        self.status_code = status_code
        combined_details = details or {}
        if status_code is not None:
            combined_details["status_code"] = status_code
        super().__init__(message, provider=provider, model=model, details=combined_details)


class ProviderTimeoutError(ProviderError):
    """Raised when an invocation does not settle within the configured timeout."""

    def __init__(
        self,
        message: str,
        *,
        timeout_seconds: float,
        provider: str | None = None,
        model: str | None = None,
    ) -> None:
        """Initialize timeout error.

        Args:
            message: Human-readable error description.
            timeout_seconds: The timeout that expired.
            provider: Provider family involved.
            model: Model identifier involved.
        """
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message,
            provider=provider,
            model=model,
            details={"timeout_seconds": timeout_seconds},
        )


# =============================================================================
# Action Gate Exceptions
# =============================================================================


class GateError(ReviewStudioError):
    """Base exception for Action Gate errors."""


class InsufficientResourceError(GateError):
    """Signals that mana is below the invocation cost.

    The gate returns this inside a rejected outcome instead of raising it.
    """

    def __init__(
        self,
        message: str = "Not enough Mana! Wait for recharge.",
        *,
        required: int,
        available: int,
    ) -> None:
        """Initialize insufficient resource signal.

        Args:
            message: Human-readable error description.
            required: Mana needed for one invocation.
            available: Mana currently available.
        """
        self.required = required
        self.available = available
        super().__init__(message, details={"required": required, "available": available})


class GateBusyError(GateError):
    """Signals that another invocation is already in flight."""


class InvalidGateTransitionError(GateError):
    """Raised when an event is not valid for the current gate phase."""

    def __init__(
        self,
        message: str,
        *,
        current_phase: str,
        event: str,
    ) -> None:
        """Initialize transition error with state machine context.

        Args:
            message: Human-readable error description.
            current_phase: Phase the gate was in.
            event: Event that was rejected.
        """
        self.current_phase = current_phase
        self.event = event
        super().__init__(message, details={"current_phase": current_phase, "event": event})


# =============================================================================
# Document & Storage Exceptions
# =============================================================================


class DocumentError(ReviewStudioError):
    """Base exception for uploaded document handling."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize document error with source file context.

        Args:
            message: Human-readable error description.
            source_file: Name of the uploaded file.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if source_file:
            combined_details["source_file"] = source_file
        super().__init__(message, details=combined_details)


class UnsupportedDocumentError(DocumentError):
    """Raised when an uploaded file type cannot be converted to text."""


class PDFParseError(DocumentError):
    """Raised when a PDF document cannot be parsed."""


class AgentConfigError(ReviewStudioError):
    """Raised when an agents.yaml document is malformed."""


class PreferencesError(ReviewStudioError):
    """Raised when reading or writing persisted preferences fails."""


class UIError(ReviewStudioError):
    """Raised when a UI component fails to render."""


__all__ = [
    "ReviewStudioError",
    "ConfigurationError",
    "AIError",
    "MissingCredentialError",
    "UnsupportedModelError",
    "ProviderError",
    "ProviderTimeoutError",
    "GateError",
    "InsufficientResourceError",
    "GateBusyError",
    "InvalidGateTransitionError",
    "DocumentError",
    "UnsupportedDocumentError",
    "PDFParseError",
    "AgentConfigError",
    "PreferencesError",
    "UIError",
]

"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        ReviewStudioError: Base exception for all application errors.
        AIError and subclasses: Invocation failures.
        GateError and subclasses: Action Gate signals.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        log_context: Bind fields to log entries inside a block.
"""

from __future__ import annotations

from review_studio.core.config import (
    AIProviderSettings,
    GateSettings,
    IngestionSettings,
    Settings,
    StorageSettings,
    UISettings,
    clear_settings_cache,
    get_settings,
)
from review_studio.core.exceptions import (
    AgentConfigError,
    AIError,
    ConfigurationError,
    DocumentError,
    GateBusyError,
    GateError,
    InsufficientResourceError,
    InvalidGateTransitionError,
    MissingCredentialError,
    PDFParseError,
    PreferencesError,
    ProviderError,
    ProviderTimeoutError,
    ReviewStudioError,
    UIError,
    UnsupportedDocumentError,
    UnsupportedModelError,
)
from review_studio.core.logging import (
    configure_logging,
    get_logger,
    log_context,
)


__all__ = [
    # Exceptions
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
    # Configuration
    "AIProviderSettings",
    "GateSettings",
    "StorageSettings",
    "IngestionSettings",
    "UISettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "log_context",
]

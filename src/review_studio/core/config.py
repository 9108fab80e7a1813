"""Configuration management for Review Studio.

Settings are grouped per concern (providers, gate economy, storage,
ingestion, UI) and read from REVIEW_STUDIO_* environment variables or a
.env file. Provider keys are kept as SecretStr so they never show up in
reprs or logs.

Example:
    >>> from review_studio.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.app_name)
    'FDA 510(k) Review Studio'

Environment Variables:
    REVIEW_STUDIO_GEMINI_API_KEY: Google Gemini API key (also GEMINI_API_KEY, API_KEY)
    REVIEW_STUDIO_OPENAI_API_KEY: OpenAI API key (also OPENAI_API_KEY)
    REVIEW_STUDIO_DEFAULT_MODEL: Model preselected in the UI
    REVIEW_STUDIO_TIMEOUT_SECONDS: Upper bound on a single invocation
    REVIEW_STUDIO_GATE_MANA_COST: Mana spent per successful invocation
    REVIEW_STUDIO_PREFERENCES_PATH: SQLite file holding user preferences
    REVIEW_STUDIO_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from review_studio.core.constants import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
)
from review_studio.core.exceptions import ConfigurationError


class AIProviderSettings(BaseSettings):
    """Configuration for AI provider connections.

    Attributes:
        gemini_api_key: Google Gemini API key read from the environment.
        openai_api_key: OpenAI API key read from the environment.
        default_model: Model identifier preselected in the UI.
        temperature: Sampling temperature used by preset actions.
        max_output_tokens: Default output token ceiling.
        timeout_seconds: Upper bound on a single invocation.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    gemini_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("REVIEW_STUDIO_GEMINI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
        description="Google Gemini API key",
    )
    openai_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("REVIEW_STUDIO_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="OpenAI API key",
    )
    default_model: str = Field(
        default=DEFAULT_MODEL,
        description="Model preselected in the UI",
    )
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE,
        ge=0.0,
        le=1.0,
        description="Sampling temperature for preset actions",
    )
    max_output_tokens: int = Field(
        default=DEFAULT_MAX_OUTPUT_TOKENS,
        gt=0,
        description="Default output token ceiling",
    )
    timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        le=600,
        description="Invocation timeout",
    )

    @field_validator("default_model", mode="after")
    @classmethod
    def validate_default_model(cls, value: str) -> str:
        """Reject blank model identifiers.

        Args:
            value: The configured model identifier.

        Returns:
            The stripped identifier.

        Raises:
            ConfigurationError: If the identifier is blank.
        """
        value = value.strip()
        if not value:
            raise ConfigurationError(
                "default_model must be a non-empty model identifier",
                config_key="default_model",
            )
        return value

    def key_for(self, provider: str) -> str | None:
        """Return the environment API key for a provider family.

        Args:
            provider: Provider family name ('gemini', 'openai', ...).

        Returns:
            The plain key, or None if not configured.
        """
        secret = {
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
        }.get(provider)
        if secret is None:
            return None
        return secret.get_secret_value() or None


class GateSettings(BaseSettings):
    """Configuration for the Action Gate counters.

    Attributes:
        mana_cost: Mana required for, and spent by, one invocation.
        xp_reward: XP granted per successful invocation.
        xp_per_level: XP needed per level.
        stress_increment: Stress added per successful invocation.
        chars_per_token: Characters per token for usage estimates.
        penalize_failures: Charge mana and stress on failed invocations.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_GATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    mana_cost: int = Field(default=5, ge=0, le=100, description="Mana per invocation")
    xp_reward: int = Field(default=15, ge=0, description="XP per success")
    xp_per_level: int = Field(default=100, gt=0, description="XP per level")
    stress_increment: int = Field(default=2, ge=0, le=100, description="Stress per success")
    chars_per_token: int = Field(default=4, gt=0, description="Token estimate divisor")
    penalize_failures: bool = Field(
        default=False,
        description="Charge mana and stress when an invocation fails",
    )


class StorageSettings(BaseSettings):
    """Configuration for local persistence.

    Attributes:
        preferences_path: SQLite file holding user preferences.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    preferences_path: Path = Field(
        default_factory=lambda: Path.home() / ".review_studio" / "preferences.db",
        description="Path to the preference database",
    )


class IngestionSettings(BaseSettings):
    """Configuration for uploaded document handling.

    Attributes:
        max_pdf_pages: Number of leading PDF pages converted to text.
        max_upload_mb: Largest accepted upload.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_INGEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_pdf_pages: int = Field(default=5, ge=1, le=500, description="PDF pages to extract")
    max_upload_mb: int = Field(default=20, ge=1, le=200, description="Upload size limit")


class UISettings(BaseSettings):
    """Configuration for the Streamlit UI.

    Attributes:
        default_theme: Painter theme id used before a preference is saved.
        page_title: Browser page title.
        language: Interface language.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_UI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    default_theme: str = Field(default="monet", description="Initial painter theme")
    page_title: str = Field(default="FDA 510(k) Review Studio", description="Page title")
    language: Literal["en", "zh"] = Field(default="en", description="Interface language")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        ai: AI provider settings.
        gate: Action Gate settings.
        storage: Persistence settings.
        ingestion: Document handling settings.
        ui: UI settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVIEW_STUDIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="FDA 510(k) Review Studio", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    ai: AIProviderSettings = Field(default_factory=AIProviderSettings)
    gate: GateSettings = Field(default_factory=GateSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    ui: UISettings = Field(default_factory=UISettings)

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "AIProviderSettings",
    "GateSettings",
    "StorageSettings",
    "IngestionSettings",
    "UISettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]

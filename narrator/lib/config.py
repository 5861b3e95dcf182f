"""Configuration management via environment variables and pydantic-settings."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class NarratorConfig(BaseSettings):
    """Configuration for the Camb.ai narrator client.

    Priority (highest to lowest):
    1. CLI arguments (handled separately)
    2. Environment variables
    3. .env file
    4. Defaults defined here
    """

    api_key: str = Field(
        default="",
        alias="CAMB_API_KEY",
        description="Camb.ai API key sent as the x-api-key header",
    )

    base_url: str = Field(
        default="https://client.camb.ai/apis",
        alias="CAMB_BASE_URL",
        description="Base URL of the Camb.ai API",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        alias="NARRATOR_REQUEST_TIMEOUT",
        description="Timeout for each provider request in seconds",
    )

    validation_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        alias="NARRATOR_VALIDATION_TIMEOUT",
        description="Timeout for the credential validation request in seconds",
    )

    poll_max_attempts: int = Field(
        default=15,
        ge=1,
        alias="NARRATOR_POLL_MAX_ATTEMPTS",
        description="Maximum number of job status requests before giving up",
    )

    poll_base_delay_seconds: float = Field(
        default=1.5,
        ge=0,
        alias="NARRATOR_POLL_BASE_DELAY",
        description="Backoff step between status polls (multiplied by attempt number)",
    )

    poll_max_delay_seconds: float = Field(
        default=5.0,
        ge=0,
        alias="NARRATOR_POLL_MAX_DELAY",
        description="Upper bound for the delay between status polls",
    )

    poll_error_delay_seconds: float = Field(
        default=2.0,
        ge=0,
        alias="NARRATOR_POLL_ERROR_DELAY",
        description="Fixed penalty wait after a failed status request",
    )

    default_language: int = Field(
        default=1,
        alias="NARRATOR_DEFAULT_LANGUAGE",
        description="Provider language code used when none is given (1 = English)",
    )

    default_gender: int = Field(
        default=1,
        alias="NARRATOR_DEFAULT_GENDER",
        description="Provider gender code used when none is given (1 = male)",
    )

    voice_id: int | None = Field(
        default=None,
        alias="NARRATOR_VOICE_ID",
        description="Preferred voice id; the first catalog voice is used when unset",
    )

    recovery_voice_policy: Literal["first", "preferred"] = Field(
        default="first",
        alias="NARRATOR_RECOVERY_VOICE_POLICY",
        description=(
            "Voice used when the provider rejects the voice selector: "
            "'first' catalog voice, or the 'preferred' voice if still listed"
        ),
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key and self.api_key.strip())

    def validate_credentials(self) -> None:
        """
        Validate that the API key is configured.

        Raises:
            ConfigError: If the API key is missing
        """
        from narrator.lib.exceptions import ConfigError

        if not self.is_configured():
            raise ConfigError(
                "Missing Camb.ai API key. Set the CAMB_API_KEY environment variable."
            )


# Global config instance (lazy loaded)
_narrator_config: NarratorConfig | None = None


def get_narrator_config() -> NarratorConfig:
    """Get the global narrator configuration instance."""
    global _narrator_config
    if _narrator_config is None:
        _narrator_config = NarratorConfig()
    return _narrator_config


def reset_all_configs() -> None:
    """Reset all configuration instances (useful for testing)."""
    global _narrator_config
    _narrator_config = None

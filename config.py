"""
Configuration management for the Digital DGP backend.

Centralizes all configuration using Pydantic settings with environment variable support.
"""

from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8000,
        description="API server port"
    )

    # LLM Configuration
    llm_provider: Literal["google", "openai"] = Field(
        default="google",
        description="Provider used for sentence generation and grading"
    )
    gemini_api_key: str = Field(
        default="",
        description="Google Gemini API key (required when llm_provider=google, and for audio)"
    )
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (required when llm_provider=openai)"
    )
    sentence_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used to generate practice sentences"
    )
    grader_model: str = Field(
        default="gemini-3-pro-preview",
        description="Model used to grade stage work"
    )
    audio_model: str = Field(
        default="gemini-2.5-flash-preview-tts",
        description="Speech model used for ambient tracks and sound effects"
    )
    audio_voice: str = Field(
        default="Kore",
        description="Prebuilt voice for generated audio"
    )
    sentence_temperature: float = Field(
        default=1.0,
        description="Sampling temperature for sentence generation"
    )
    llm_timeout: int = Field(
        default=60,
        description="Per-call LLM timeout in seconds"
    )
    llm_max_retries: int = Field(
        default=3,
        description="Retries on rate limit / timeout errors"
    )

    # Practice Settings
    default_difficulty: Literal["Easy", "Medium", "Hard"] = Field(
        default="Easy",
        description="Difficulty used for new sessions"
    )
    pool_batch_size: int = Field(
        default=5,
        ge=1,
        description="Sentences requested per pool refill"
    )
    pool_low_water_mark: int = Field(
        default=2,
        ge=0,
        description="Refill the pool once fewer sentences than this remain"
    )
    advance_delay_seconds: float = Field(
        default=2.5,
        ge=0,
        description="Pause after a correct Friday so the feedback stays visible"
    )

    # Application Settings
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get or create the global settings instance.

    Returns:
        Settings: Application settings
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings():
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None


def validate_required_settings(settings: Optional[Settings] = None):
    """
    Validate that all required settings are present at runtime.

    Checks *settings* when given, otherwise the global instance.
    Raises ValueError if required settings are missing.
    """
    settings = settings or get_settings()

    if settings.llm_provider == "google" and not settings.gemini_api_key:
        raise ValueError(
            "GEMINI_API_KEY environment variable is required but not set. "
            "Set it in your environment or .env file."
        )

    if settings.llm_provider == "openai" and not settings.openai_api_key:
        raise ValueError(
            "OPENAI_API_KEY environment variable is required when LLM_PROVIDER=openai."
        )

    return True

"""Configuration settings for the application."""

from pathlib import Path

from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
)

CONFIG_DIR = Path.home() / ".config" / "git-flash"
"""Per-user directory holding the persisted ``.env`` with API keys."""

ENV_FILE = CONFIG_DIR / ".env"


class Settings(BaseSettings):
    """Pydantic settings class for the application."""

    # Loaded from environment variables, then ./.env, then ~/.config/git-flash/.env
    model_config = SettingsConfigDict(
        env_file=(str(ENV_FILE), ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "warning"  # Options: debug, info, warning, error, critical

    # LLM Configuration
    PLANNER: str = "gemini"  # Options: gemini, openai, anthropic
    GEMINI_API_KEY: str | None = None
    OPENAI_API_KEY: str | None = None
    ANTHROPIC_API_KEY: str | None = None

    GEMINI_MODEL: str = "gemini-2.0-flash"
    OPENAI_MODEL: str = "gpt-4o-mini"
    ANTHROPIC_MODEL: str = "claude-3-5-haiku-latest"
    GEMINI_ENDPOINT: str = "https://generativelanguage.googleapis.com/v1beta"
    REQUEST_TIMEOUT: float = 60.0

    # Agent loop hardening; None keeps the loop running until the model stops calling tools
    MAX_TURNS: int | None = None


settings = Settings()

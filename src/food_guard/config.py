"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

INGREDIENT_ANALYZER_MODES = {"rules", "openai"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    ingredient_analyzer: str = "rules"
    openai_api_key: str | None = None
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    alert_webhook_url: str | None = None
    alert_webhook_secret: str = ""
    history_timeout_seconds: float = 3.0
    isolate_detector_failures: bool = True
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_analyzer_mode(settings: Settings) -> str:
    """Return the ingredient analyzer mode, falling back to rules."""
    mode = settings.ingredient_analyzer.strip().lower()
    if mode not in INGREDIENT_ANALYZER_MODES:
        raise ValueError(f"Unknown ingredient analyzer mode: {settings.ingredient_analyzer}")
    if mode == "openai" and not settings.openai_api_key:
        return "rules"
    return mode

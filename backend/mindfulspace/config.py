"""Application configuration using pydantic-settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

# Request headers browsers may send to the API
CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "MindfulSpace"
    environment: str = "development"
    log_level: str = "info"
    debug: bool = False

    # LLM gateway (OpenAI-compatible chat completions)
    gateway_api_key: str = ""
    gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    gateway_model: str = "google/gemini-2.5-flash"
    gateway_timeout_seconds: float = 60.0

    # MongoDB
    mongodb_uri: str = "mongodb://mongodb:27017"
    mongodb_database: str = "mindfulspace"

    # Safety
    persist_crisis_replies: bool = False

    # Persona
    persona_path: Optional[Path] = None

    # CORS
    cors_allow_origins: list[str] = ["*"]

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def gateway_configured(self) -> bool:
        return bool(self.gateway_api_key.strip())


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency for injecting settings."""
    return settings

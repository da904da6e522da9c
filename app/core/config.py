# python
# app/core/config.py
"""Configuration settings for the Sarthi voice chat application.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Sarthi Voice Chat", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== AI Service (Gemini) =====
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "AI_INTEGRATIONS_GEMINI_API_KEY"),
        description="Google Gemini API key",
    )
    gemini_base_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_BASE_URL", "AI_INTEGRATIONS_GEMINI_BASE_URL"),
        description="Override for the Gemini API endpoint (proxies, AI integrations)",
    )
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model to use")
    ai_request_timeout: float | None = Field(
        default=None, description="AI request timeout in seconds, unset waits indefinitely"
    )

    # ===== Conversation Behaviour =====
    default_system_prompt: str = Field(
        default="You are a helpful Hindi AI assistant. Answer in Hindi.",
        description="System prompt used when the client sends an empty one",
    )
    conversation_style_suffix: str = Field(
        default=(
            "Use casual, conversational Hindi (Hinglish if natural). Avoid formal phrases like "
            "'Main Google dwara train kiya gaya ek bada bhasha model hu'. "
            "Be friendly and talk like a real person."
        ),
        description="Tone instruction appended to every system prompt",
    )
    empty_response_message: str = Field(
        default="माफ़ कीजिये, मैं समझ नहीं पाया।",
        description="Reply sent when the model returns no text",
    )
    generation_failure_message: str = Field(
        default="तकनीकी खराबी के कारण मैं जवाब नहीं दे पा रहा हूँ।",
        description="Reply sent when the model call fails",
    )
    speech_language: str = Field(default="hi-IN", description="Speech recognition/synthesis language")

    # ===== Relay (WebSocket) =====
    relay_path: str = Field(default="/ws", description="WebSocket path of the message relay")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(self.allowed_origins, str):
            return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return self.allowed_origins if isinstance(self.allowed_origins, list) else []

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=5000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def has_ai_enabled(self) -> bool:
        return bool(self.gemini_api_key)

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("relay_path")
    @classmethod
    def validate_relay_path(cls, v):
        if not v.startswith("/"):
            raise ValueError("Relay path must start with '/'")
        return v

    @field_validator("ai_request_timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError("AI request timeout must be positive")
        return v


settings = Settings()


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "ai_enabled": settings.has_ai_enabled,
        "ai_model": settings.gemini_model,
        "ai_base_url_overridden": bool(settings.gemini_base_url),
        "database_configured": bool(settings.database_url),
        "relay_path": settings.relay_path,
    }


__all__ = [
    "settings",
    "Settings",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
]

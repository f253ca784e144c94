"""
Configuration settings for the Fitness Tracker backend.
Uses pydantic-settings for type-safe environment variable management.
"""
from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App Info
    app_name: str = "Fitness Tracker API"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database
    database_url: str

    # Security - no fallback secret, startup fails when it is missing
    secret_key: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("SECRET_KEY", "JWT_SECRET"),
    )
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # CORS - comma-separated list in environment variable
    # Example: CORS_ORIGINS="http://localhost:8081,http://192.168.1.20:8081"
    cors_origins_str: str = Field(
        default="*",
        validation_alias="CORS_ORIGINS"
    )

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # OpenAI
    openai_api_key: Optional[str] = None
    # Optional model id from env (e.g., model_id=gpt-4o)
    model_id: Optional[str] = None

    # Logging
    log_level: str = "INFO"
    log_request_body: bool = True

    # Pydantic v2 settings config
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars so unexpected keys don't crash
    )


# Global settings instance
settings = Settings()

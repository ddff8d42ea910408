"""Configuration management using pydantic-settings."""
import os
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    environment: str = Field(
        default_factory=lambda: os.getenv("ENVIRONMENT", "development"),
        description="Environment: development, staging, production"
    )
    debug: bool = Field(False, description="Debug mode")
    log_level: str = Field("INFO", description="Logging level")

    # Database
    database_url: str | None = Field(None, description="Async SQLAlchemy connection URL")
    database_pool_size: int = Field(10, description="Connection pool size")
    database_max_overflow: int = Field(20, description="Max overflow connections")

    # Web server
    web_host: str = Field("0.0.0.0", description="HTTP bind host")
    web_port: int = Field(8080, description="HTTP bind port")

    # Reminder runner
    reminder_runner_key: str | None = Field(None, description="Shared secret for the trigger endpoint")
    reminder_timezone: str = Field("Atlantic/Canary", description="Studio reference timezone")
    reminder_lead_hours: float = Field(48, description="Hours before start when a reminder is due")
    reminder_provider: str = Field("simulated", description="Provider: simulated or whatsapp")
    reminder_scheduler_enabled: bool = Field(True, description="Run the hourly in-process job")
    studio_name: str = Field("Ink Masters", description="Studio name used in messages")

    # WhatsApp Cloud API
    whatsapp_phone_number_id: str | None = Field(None, description="Sender phone number ID")
    whatsapp_access_token: str | None = Field(None, description="Graph API access token")
    whatsapp_template_name: str = Field("appointment_reminder_24h", description="Approved template name")
    whatsapp_api_version: str = Field("v20.0", description="Graph API version")
    whatsapp_language_code: str = Field("es", description="Template language code")
    whatsapp_api_base_url: str = Field("https://graph.facebook.com", description="Graph API base URL")
    whatsapp_timeout_seconds: float = Field(10.0, description="Request timeout for a single send")

    @field_validator("reminder_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v):
        """Lowercase provider name from env."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


# Global settings instance
settings = Settings()

"""Run configuration for the reminder engine and provider selection."""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

from app.config import Settings
from core.exceptions import InvalidLeadTimeError, UnknownProviderError
from services.reminder_window import resolve_timezone
from services.whatsapp import (
    ChannelProvider,
    SimulatedProvider,
    WhatsAppCloudProvider,
    SIMULATED_PROVIDER_ID,
    WHATSAPP_PROVIDER_ID,
)

PROVIDERS = (SIMULATED_PROVIDER_ID, WHATSAPP_PROVIDER_ID)


@dataclass(frozen=True)
class WhatsAppConfig:
    phone_number_id: Optional[str] = None
    access_token: Optional[str] = None
    template_name: Optional[str] = "appointment_reminder_24h"
    api_version: str = "v20.0"
    language_code: str = "es"
    base_url: str = "https://graph.facebook.com"
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class ReminderRunConfig:
    """Validated, immutable settings for one reminder run."""
    timezone: str = "Atlantic/Canary"
    lead_time: timedelta = timedelta(hours=48)
    provider: str = SIMULATED_PROVIDER_ID
    studio_name: Optional[str] = None
    whatsapp: WhatsAppConfig = field(default_factory=WhatsAppConfig)

    def __post_init__(self):
        if self.lead_time < timedelta(0):
            raise InvalidLeadTimeError(self.lead_time.total_seconds() / 3600)
        resolve_timezone(self.timezone)
        if self.provider not in PROVIDERS:
            raise UnknownProviderError(self.provider)

    @classmethod
    def from_settings(cls, settings: Settings, provider: Optional[str] = None) -> "ReminderRunConfig":
        """
        Build run config from application settings.

        Args:
            settings: Application settings
            provider: Optional override of the configured provider name

        Raises:
            ConfigurationError: If any value is invalid
        """
        hours = settings.reminder_lead_hours
        if not math.isfinite(hours):
            raise InvalidLeadTimeError(hours)
        try:
            lead_time = timedelta(hours=hours)
        except OverflowError:
            raise InvalidLeadTimeError(hours)

        return cls(
            timezone=settings.reminder_timezone,
            lead_time=lead_time,
            provider=(provider or settings.reminder_provider).strip().lower(),
            studio_name=settings.studio_name,
            whatsapp=WhatsAppConfig(
                phone_number_id=settings.whatsapp_phone_number_id,
                access_token=settings.whatsapp_access_token,
                template_name=settings.whatsapp_template_name,
                api_version=settings.whatsapp_api_version,
                language_code=settings.whatsapp_language_code,
                base_url=settings.whatsapp_api_base_url,
                timeout_seconds=settings.whatsapp_timeout_seconds,
            ),
        )


def build_provider(config: ReminderRunConfig) -> ChannelProvider:
    """Create the provider selected by configuration."""
    if config.provider == WHATSAPP_PROVIDER_ID:
        wa = config.whatsapp
        return WhatsAppCloudProvider(
            phone_number_id=wa.phone_number_id,
            access_token=wa.access_token,
            template_name=wa.template_name,
            api_version=wa.api_version,
            language_code=wa.language_code,
            base_url=wa.base_url,
            timeout_seconds=wa.timeout_seconds,
        )
    return SimulatedProvider()

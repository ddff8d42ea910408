"""
WhatsApp reminder delivery.

Two providers share one interface:
- SimulatedProvider: always succeeds, no network I/O (dev/demo).
- WhatsAppCloudProvider: sends an approved template through the
  WhatsApp Cloud (Graph) API.

Providers never raise for delivery problems; they return a SendFailure
with a reason that ends up in the appointment's reminder_error.
"""
from __future__ import annotations
import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

import aiohttp

from services.reminder_window import resolve_timezone

logger = logging.getLogger(__name__)

SIMULATED_PROVIDER_ID = "simulated"
WHATSAPP_PROVIDER_ID = "whatsapp"

MISSING_CONFIGURATION = "missing_configuration"
SEND_FAILED = "send_failed"
TIMEOUT = "timeout"

DEFAULT_CLIENT_NAME = "cliente"
DEFAULT_STUDIO_NAME = "tu estudio"

_PREFIX_RE = re.compile(r"^whatsapp:", re.IGNORECASE)


@dataclass(frozen=True)
class MessageContext:
    """Data the reminder template is filled with."""
    client_name: Optional[str]
    start_time: datetime
    studio_name: Optional[str]
    zone: str = "UTC"

    def local_start(self) -> str:
        tz = resolve_timezone(self.zone)
        return self.start_time.astimezone(tz).strftime("%d/%m/%Y %H:%M")


@dataclass(frozen=True)
class SendSuccess:
    provider_id: str
    message_id: Optional[str] = None
    ok: bool = True


@dataclass(frozen=True)
class SendFailure:
    provider_id: str
    reason: str
    ok: bool = False


SendOutcome = Union[SendSuccess, SendFailure]


def normalize_phone(phone: str) -> str:
    """Strip the channel prefix and all whitespace from a phone number."""
    return re.sub(r"\s", "", _PREFIX_RE.sub("", phone.strip()))


class ChannelProvider(ABC):
    """Rich channel delivery backend."""

    provider_id: str

    @abstractmethod
    async def send(self, to: str, context: MessageContext) -> SendOutcome:
        """Deliver one reminder. Must not raise for delivery failures."""


class SimulatedProvider(ChannelProvider):
    """Pretends every message was delivered."""

    provider_id = SIMULATED_PROVIDER_ID

    async def send(self, to: str, context: MessageContext) -> SendOutcome:
        logger.info(f"[simulated] reminder to {normalize_phone(to)} for {context.local_start()}")
        return SendSuccess(provider_id=self.provider_id, message_id=SIMULATED_PROVIDER_ID)


class WhatsAppCloudProvider(ChannelProvider):
    """Template sender for the WhatsApp Cloud API."""

    provider_id = WHATSAPP_PROVIDER_ID

    def __init__(
        self,
        phone_number_id: Optional[str],
        access_token: Optional[str],
        template_name: Optional[str],
        api_version: str = "v20.0",
        language_code: str = "es",
        base_url: str = "https://graph.facebook.com",
        timeout_seconds: float = 10.0,
    ):
        self.phone_number_id = phone_number_id
        self.access_token = access_token
        self.template_name = template_name
        self.api_version = api_version
        self.language_code = language_code
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    @property
    def configured(self) -> bool:
        return bool(self.phone_number_id and self.access_token and self.template_name)

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/{self.api_version}/{self.phone_number_id}/messages"

    def build_payload(self, to: str, context: MessageContext) -> dict:
        """Build the template message body."""
        return {
            "messaging_product": "whatsapp",
            "to": normalize_phone(to),
            "type": "template",
            "template": {
                "name": self.template_name,
                "language": {"code": self.language_code},
                "components": [
                    {
                        "type": "body",
                        "parameters": [
                            {"type": "text", "text": context.client_name or DEFAULT_CLIENT_NAME},
                            {"type": "text", "text": context.local_start()},
                            {"type": "text", "text": context.studio_name or DEFAULT_STUDIO_NAME},
                        ],
                    }
                ],
            },
        }

    async def send(self, to: str, context: MessageContext) -> SendOutcome:
        if not self.configured:
            logger.warning("WhatsApp provider selected but not configured")
            return SendFailure(provider_id=self.provider_id, reason=MISSING_CONFIGURATION)

        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }
        payload = self.build_payload(to, context)

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as http:
                async with http.post(self.messages_url, json=payload, headers=headers) as resp:
                    try:
                        body = await resp.json(content_type=None)
                    except ValueError:
                        body = None
                    status = resp.status
        except asyncio.TimeoutError:
            logger.warning(f"WhatsApp send timed out after {self.timeout.total}s")
            return SendFailure(provider_id=self.provider_id, reason=TIMEOUT)
        except aiohttp.ClientError as e:
            logger.error(f"WhatsApp transport error: {e}")
            return SendFailure(provider_id=self.provider_id, reason=SEND_FAILED)

        return self._parse_response(status, body)

    def _parse_response(self, status: int, body: object) -> SendOutcome:
        if not isinstance(body, dict):
            logger.warning(f"WhatsApp returned malformed response (HTTP {status})")
            return SendFailure(provider_id=self.provider_id, reason=SEND_FAILED)

        if status >= 400:
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            logger.warning(f"WhatsApp send rejected (HTTP {status}): {message}")
            return SendFailure(provider_id=self.provider_id, reason=message or SEND_FAILED)

        message_id = None
        messages = body.get("messages")
        if isinstance(messages, list) and messages and isinstance(messages[0], dict):
            message_id = messages[0].get("id")
        return SendSuccess(provider_id=self.provider_id, message_id=message_id)

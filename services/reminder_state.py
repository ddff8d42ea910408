"""Reminder state transitions.

pending --(ineligible)---------> skipped
pending --(eligible, sent)-----> sent
pending --(eligible, failed)---> pending (retried by the next run)

Nothing leaves `sent` unless the appointment is edited and reset.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from database.models import ReminderStatus, ReminderChannel
from services.eligibility import EligibilityReason
from services.whatsapp import SendFailure, SendSuccess

_UNSET = object()


@dataclass(frozen=True)
class ReminderUpdate:
    """Reminder columns to write for one appointment."""
    status: ReminderStatus
    channel: ReminderChannel
    error: Optional[str]
    sent_at: Any = _UNSET
    provider: Any = _UNSET
    message_id: Any = _UNSET

    def to_values(self) -> dict[str, Any]:
        """Column values; untouched fields are left out."""
        values: dict[str, Any] = {
            "reminder_status": self.status.value,
            "reminder_channel": self.channel.value,
            "reminder_error": self.error,
        }
        if self.sent_at is not _UNSET:
            values["reminder_sent_at"] = self.sent_at
        if self.provider is not _UNSET:
            values["reminder_provider"] = self.provider
        if self.message_id is not _UNSET:
            values["reminder_message_id"] = self.message_id
        return values


def skip(reason: EligibilityReason) -> ReminderUpdate:
    """Client cannot get WhatsApp: fall back to calendar only."""
    return ReminderUpdate(
        status=ReminderStatus.SKIPPED,
        channel=ReminderChannel.CALENDAR_ONLY,
        error=reason.value,
        sent_at=None,
    )


def mark_sent(outcome: SendSuccess, now: datetime) -> ReminderUpdate:
    return ReminderUpdate(
        status=ReminderStatus.SENT,
        channel=ReminderChannel.WHATSAPP,
        error=None,
        sent_at=now,
        provider=outcome.provider_id,
        message_id=outcome.message_id,
    )


def keep_pending(outcome: SendFailure) -> ReminderUpdate:
    """Failed send stays pending so the next run retries it."""
    return ReminderUpdate(
        status=ReminderStatus.PENDING,
        channel=ReminderChannel.WHATSAPP,
        error=outcome.reason,
        provider=outcome.provider_id,
        message_id=None,
    )

"""Reminder run report DTOs."""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReminderAction(str, Enum):
    """Action labels used in the run report."""
    SIMULATED_SEND = "SIMULATED_SEND"
    SEND = "SEND"
    SKIPPED = "SKIPPED"


class ReminderWindowDTO(BaseModel):
    """Window bounds, absolute and in the studio zone."""

    model_config = ConfigDict(populate_by_name=True)

    start_iso: datetime = Field(..., alias="startISO", description="Window start (UTC, inclusive)")
    end_iso: datetime = Field(..., alias="endISO", description="Window end (UTC, exclusive)")
    window_start_local: datetime = Field(..., alias="windowStartLocal")
    window_end_local: datetime = Field(..., alias="windowEndLocal")


class ReminderOutcomeDTO(BaseModel):
    """What happened to one appointment in a run."""

    appointment_id: int
    start_time: datetime
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    consent_whatsapp: bool = False
    action: ReminderAction
    channel: str
    reason: Optional[str] = Field(None, description="Skip reason or already_claimed")
    ok: bool
    error: Optional[str] = Field(None, description="Send or write failure detail")


class ReminderRunReportDTO(BaseModel):
    """Aggregate result of one reminder run."""

    ok: bool = True
    tz: str
    now: datetime
    window: ReminderWindowDTO
    count: int
    results: List[ReminderOutcomeDTO]

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

"""Appointment model - represents a client booking and its reminder state."""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, CheckConstraint, String, DateTime, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base, BigIntPK

if TYPE_CHECKING:
    from database.models.client import Client


class ReminderStatus(str, Enum):
    """Reminder status enum."""
    PENDING = "pending"  # Waiting for the next run
    SENT = "sent"  # Delivered through the rich channel
    SKIPPED = "skipped"  # Client not eligible, calendar only


class ReminderChannel(str, Enum):
    """Reminder channel enum."""
    NONE = "none"
    WHATSAPP = "whatsapp"  # Rich channel
    CALENDAR_ONLY = "calendar_only"  # Fallback channel


class Appointment(Base):
    """Appointment model."""

    __tablename__ = "appointments"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_appointments_end_after_start"),
    )

    # Primary key
    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    # Relationships
    client_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # Appointment details
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Reminder state, mutated by the reminder runner
    reminder_status: Mapped[str] = mapped_column(
        String(20),
        default=ReminderStatus.PENDING.value,
        server_default=ReminderStatus.PENDING.value,
        nullable=False,
        index=True
    )
    reminder_channel: Mapped[str] = mapped_column(
        String(20),
        default=ReminderChannel.NONE.value,
        server_default=ReminderChannel.NONE.value,
        nullable=False
    )
    reminder_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    reminder_error: Mapped[str | None] = mapped_column(String(500), nullable=True)
    reminder_provider: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reminder_message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

    # Relationships
    client: Mapped["Client"] = relationship("Client", back_populates="appointments")

    def __repr__(self) -> str:
        return (
            f"<Appointment(id={self.id}, client_id={self.client_id}, "
            f"start_time={self.start_time}, reminder_status='{self.reminder_status}')>"
        )

"""Appointment repository for database operations."""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, List

from sqlalchemy import select, update, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import (
    AppointmentNotFoundError,
    InvalidAppointmentTimeError,
    RepositoryReadError,
)
from database.models import Appointment, Client, ReminderStatus, ReminderChannel

logger = logging.getLogger(__name__)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive values coming back from the store as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CandidateClient:
    """Client contact data embedded in a reminder candidate."""
    id: Optional[int]
    name: Optional[str]
    phone: Optional[str]
    consent_whatsapp: bool


@dataclass(frozen=True)
class ReminderCandidate:
    """Pending appointment inside the reminder window, detached from the session."""
    id: int
    start_time: datetime
    end_time: datetime
    client: CandidateClient

    @classmethod
    def from_model(cls, appointment: Appointment) -> "ReminderCandidate":
        """Build a candidate with exactly one embedded client."""
        client = appointment.client
        if client is None:
            embedded = CandidateClient(id=None, name=None, phone=None, consent_whatsapp=False)
        else:
            embedded = CandidateClient(
                id=client.id,
                name=client.name,
                phone=client.phone,
                consent_whatsapp=client.consent_whatsapp is True,
            )
        return cls(
            id=appointment.id,
            start_time=_as_utc(appointment.start_time),
            end_time=_as_utc(appointment.end_time),
            client=embedded,
        )


@dataclass(frozen=True)
class ReminderWriteResult:
    """Outcome of a conditional reminder update."""
    ok: bool
    claimed: bool = True
    error: Optional[str] = None


class AppointmentRepository:
    """Repository for Appointment model operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(
        self,
        appointment_id: int,
        with_relations: bool = False
    ) -> Optional[Appointment]:
        """Get appointment by ID."""
        query = select(Appointment).where(Appointment.id == appointment_id)

        if with_relations:
            query = query.options(selectinload(Appointment.client))

        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def create(
        self,
        client_id: int,
        start_time: datetime,
        end_time: datetime,
        notes: Optional[str] = None,
    ) -> Appointment:
        """Create new appointment with a pending reminder."""
        if end_time <= start_time:
            raise InvalidAppointmentTimeError()

        appointment = Appointment(
            client_id=client_id,
            start_time=start_time,
            end_time=end_time,
            notes=notes,
            reminder_status=ReminderStatus.PENDING.value,
            reminder_channel=ReminderChannel.NONE.value,
        )

        self.session.add(appointment)
        await self.session.flush()
        return appointment

    def _reset_reminder(self, appointment: Appointment) -> None:
        appointment.reminder_status = ReminderStatus.PENDING.value
        appointment.reminder_channel = ReminderChannel.NONE.value
        appointment.reminder_sent_at = None
        appointment.reminder_error = None
        appointment.reminder_provider = None
        appointment.reminder_message_id = None

    async def reschedule(
        self,
        appointment_id: int,
        new_start_time: datetime,
        new_end_time: datetime
    ) -> Appointment:
        """Move appointment and make it a reminder candidate again."""
        if new_end_time <= new_start_time:
            raise InvalidAppointmentTimeError()

        appointment = await self.get_by_id(appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)

        appointment.start_time = new_start_time
        appointment.end_time = new_end_time
        self._reset_reminder(appointment)
        await self.session.flush()
        return appointment

    async def update_details(
        self,
        appointment_id: int,
        client_id: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        """Edit appointment details. Any edit resets the reminder to pending."""
        appointment = await self.get_by_id(appointment_id)
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)

        if client_id is not None:
            appointment.client_id = client_id
        if notes is not None:
            appointment.notes = notes
        self._reset_reminder(appointment)
        await self.session.flush()
        return appointment

    async def get_pending_in_window(
        self,
        start: datetime,
        end: datetime
    ) -> List[ReminderCandidate]:
        """
        Get pending appointments whose start time is in [start, end).

        Args:
            start: Window start (inclusive, UTC)
            end: Window end (exclusive, UTC)

        Returns:
            Candidates ordered by start time

        Raises:
            RepositoryReadError: If the query fails
        """
        query = (
            select(Appointment)
            .where(
                and_(
                    Appointment.reminder_status == ReminderStatus.PENDING.value,
                    Appointment.start_time >= start,
                    Appointment.start_time < end,
                )
            )
            .options(selectinload(Appointment.client))
            .order_by(Appointment.start_time, Appointment.id)
        )

        try:
            result = await self.session.execute(query)
            appointments = list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Candidate query failed: {e}", exc_info=True)
            raise RepositoryReadError(str(e)) from e

        return [ReminderCandidate.from_model(a) for a in appointments]

    async def apply_reminder_update(
        self,
        appointment_id: int,
        values: dict[str, Any]
    ) -> ReminderWriteResult:
        """
        Write reminder fields only if the appointment is still pending.

        Each call is committed on its own so that a failed write does not
        affect writes for other appointments.

        Args:
            appointment_id: Appointment to update
            values: Column values to set

        Returns:
            ReminderWriteResult; claimed=False when another run already
            moved the appointment out of pending
        """
        stmt = (
            update(Appointment)
            .where(
                Appointment.id == appointment_id,
                Appointment.reminder_status == ReminderStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(
                f"Reminder update failed for appointment {appointment_id}: {e}",
                extra={"appointment_id": appointment_id},
            )
            return ReminderWriteResult(ok=False, error=str(e))

        if result.rowcount == 0:
            return ReminderWriteResult(ok=True, claimed=False)
        return ReminderWriteResult(ok=True)

"""
Reminder run use case.

One run computes the due window, fetches pending appointments inside it and
processes them one by one: resolve eligibility, send through the configured
provider when allowed, and persist the resulting reminder state. Failures of
a single appointment are recorded in the report and never stop the run.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from core.dto.reminders import (
    ReminderAction,
    ReminderOutcomeDTO,
    ReminderRunReportDTO,
    ReminderWindowDTO,
)
from database.models import ReminderChannel
from database.repositories import AppointmentRepository, ReminderCandidate, ReminderWriteResult
from services.eligibility import resolve_eligibility
from services.reminder_config import ReminderRunConfig
from services.reminder_state import keep_pending, mark_sent, skip
from services.reminder_window import ReminderWindow, compute_window, resolve_timezone
from services.use_cases.base import BaseUseCase
from services.whatsapp import ChannelProvider, MessageContext, SIMULATED_PROVIDER_ID

logger = logging.getLogger(__name__)

ALREADY_CLAIMED = "already_claimed"


class CandidateStore(Protocol):
    async def get_pending_in_window(self, start: datetime, end: datetime) -> List[ReminderCandidate]: ...

    async def apply_reminder_update(self, appointment_id: int, values: dict[str, Any]) -> ReminderWriteResult: ...


class RunRemindersUseCase(BaseUseCase[ReminderRunReportDTO]):
    """
    Send reminders for appointments starting inside the current window.

    The provider is chosen once by the caller and injected here; the use
    case never looks at global configuration.
    """

    def __init__(
        self,
        session: Optional[AsyncSession],
        provider: ChannelProvider,
        config: ReminderRunConfig,
        repository: Optional[CandidateStore] = None,
    ):
        super().__init__(session)
        self.provider = provider
        self.config = config
        self.repository = repository or AppointmentRepository(session)

    async def execute(self, now: Optional[datetime] = None) -> ReminderRunReportDTO:
        """
        Run one reminder pass.

        Args:
            now: Current instant (defaults to the wall clock)

        Returns:
            Report with the window and one outcome per candidate

        Raises:
            ConfigurationError: If window inputs are invalid
            RepositoryReadError: If candidates cannot be fetched
        """
        now = now or datetime.now(timezone.utc)
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        now = now.astimezone(timezone.utc)

        window = compute_window(now, self.config.lead_time, self.config.timezone)
        logger.info(
            f"Reminder run: window {window.start.isoformat()} - {window.end.isoformat()} "
            f"({self.config.timezone}), provider={self.provider.provider_id}",
            extra={"window_start": window.start.isoformat(), "provider": self.provider.provider_id},
        )

        candidates = await self.repository.get_pending_in_window(window.start, window.end)
        logger.info(f"Found {len(candidates)} reminder candidates")

        results: List[ReminderOutcomeDTO] = []
        for candidate in candidates:
            results.append(await self._process(candidate, now))

        sent = sum(1 for r in results if r.ok and r.action != ReminderAction.SKIPPED)
        failed = sum(1 for r in results if not r.ok)
        logger.info(f"Reminder run finished: {len(results)} processed, {sent} sent, {failed} failed")

        return self._build_report(now, window, results)

    async def _process(self, candidate: ReminderCandidate, now: datetime) -> ReminderOutcomeDTO:
        eligibility = resolve_eligibility(candidate.client)
        if eligibility.eligible:
            action = (
                ReminderAction.SIMULATED_SEND
                if self.provider.provider_id == SIMULATED_PROVIDER_ID
                else ReminderAction.SEND
            )
            channel = ReminderChannel.WHATSAPP.value
        else:
            action = ReminderAction.SKIPPED
            channel = ReminderChannel.CALENDAR_ONLY.value

        outcome = ReminderOutcomeDTO(
            appointment_id=candidate.id,
            start_time=candidate.start_time,
            client_name=candidate.client.name,
            client_phone=candidate.client.phone,
            consent_whatsapp=candidate.client.consent_whatsapp,
            action=action,
            channel=channel,
            ok=False,
        )

        try:
            if not eligibility.eligible:
                update = skip(eligibility.reason)
                write = await self.repository.apply_reminder_update(candidate.id, update.to_values())
                outcome.reason = eligibility.reason.value
                self._apply_write(outcome, write)
            else:
                await self._send(candidate, now, outcome)
        except Exception as e:
            logger.error(
                f"Unexpected error processing appointment {candidate.id}: {e}",
                exc_info=True,
                extra={"appointment_id": candidate.id},
            )
            outcome.ok = False
            outcome.error = str(e) or type(e).__name__

        logger.info(
            f"Appointment {candidate.id}: {outcome.action.value} ok={outcome.ok}"
            + (f" error={outcome.error}" if outcome.error else ""),
            extra={"appointment_id": candidate.id, "action": outcome.action.value},
        )
        return outcome

    async def _send(self, candidate: ReminderCandidate, now: datetime, outcome: ReminderOutcomeDTO) -> None:
        context = MessageContext(
            client_name=candidate.client.name,
            start_time=candidate.start_time,
            studio_name=self.config.studio_name,
            zone=self.config.timezone,
        )
        result = await self.provider.send(candidate.client.phone, context)

        if result.ok:
            write = await self.repository.apply_reminder_update(
                candidate.id, mark_sent(result, now).to_values()
            )
            self._apply_write(outcome, write)
            return

        logger.warning(
            f"Send failed for appointment {candidate.id}: {result.reason}",
            extra={"appointment_id": candidate.id, "provider": result.provider_id},
        )
        write = await self.repository.apply_reminder_update(candidate.id, keep_pending(result).to_values())
        if not write.ok:
            logger.error(f"Could not record send failure for appointment {candidate.id}: {write.error}")
        outcome.ok = False
        outcome.error = result.reason

    @staticmethod
    def _apply_write(outcome: ReminderOutcomeDTO, write: ReminderWriteResult) -> None:
        outcome.ok = write.ok
        outcome.error = write.error
        if write.ok and not write.claimed:
            outcome.reason = ALREADY_CLAIMED

    def _build_report(
        self,
        now: datetime,
        window: ReminderWindow,
        results: List[ReminderOutcomeDTO],
    ) -> ReminderRunReportDTO:
        return ReminderRunReportDTO(
            tz=self.config.timezone,
            now=now.astimezone(resolve_timezone(self.config.timezone)),
            window=ReminderWindowDTO(
                start_iso=window.start,
                end_iso=window.end,
                window_start_local=window.start_local,
                window_end_local=window.end_local,
            ),
            count=len(results),
            results=results,
        )

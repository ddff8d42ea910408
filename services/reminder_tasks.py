"""
Background reminder dispatch.

One cron job fires at minute 0 of every hour and runs a reminder pass with
the provider and window settings from the environment.
"""
import logging
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from app.config import settings
from core.dto.reminders import ReminderRunReportDTO
from database.base import async_session_maker
from services.reminder_config import ReminderRunConfig, build_provider
from services.use_cases.reminders import RunRemindersUseCase

logger = logging.getLogger(__name__)

# Global scheduler instance
reminder_scheduler = AsyncIOScheduler(timezone="UTC")


async def run_reminder_pass(
    now: Optional[datetime] = None,
    provider: Optional[str] = None,
) -> ReminderRunReportDTO:
    """
    Run one reminder pass against the configured database.

    Args:
        now: Run instant override (defaults to the wall clock)
        provider: Provider name override (defaults to REMINDER_PROVIDER)

    Raises:
        ConfigurationError: If settings are missing or invalid
        RepositoryReadError: If candidates cannot be fetched
    """
    config = ReminderRunConfig.from_settings(settings, provider=provider)
    channel = build_provider(config)

    async with async_session_maker() as session:
        use_case = RunRemindersUseCase(session, channel, config)
        return await use_case.execute(now)


async def run_reminders_job():
    """Scheduled task: run a pass and log the counts."""
    try:
        report = await run_reminder_pass()
        failed = sum(1 for r in report.results if not r.ok)
        if report.count > 0:
            logger.info(f"Scheduled reminder run processed {report.count} appointments ({failed} failed)")
    except Exception as e:
        logger.error(f"Error running scheduled reminders: {e}", exc_info=True)


def start_reminder_scheduler():
    """Start the reminder scheduler. Runs at the top of every hour."""
    reminder_scheduler.add_job(
        run_reminders_job,
        'cron',
        minute=0,
        id='reminder_runner',
        replace_existing=True
    )

    reminder_scheduler.start()
    logger.info("Reminder scheduler started (hourly at minute 0)")


def stop_reminder_scheduler():
    """Stop the reminder scheduler."""
    if reminder_scheduler.running:
        reminder_scheduler.shutdown()
        logger.info("Reminder scheduler stopped")

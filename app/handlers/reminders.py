"""Reminder trigger endpoints."""
import logging
from datetime import datetime, timezone

from aiohttp import web

from core.exceptions import ConfigurationError, RepositoryReadError, ReminderEngineError
from services import reminder_tasks

logger = logging.getLogger(__name__)


def setup_routes(app: web.Application):
    """Setup reminder and health routes."""
    app.router.add_get('/health', health_check)
    app.router.add_post('/api/reminders/run', run_reminders)
    app.router.add_get('/api/reminders/run', run_reminders)


async def health_check(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "time": datetime.now(timezone.utc).isoformat()})


async def run_reminders(request: web.Request) -> web.Response:
    """Run one reminder pass and return the report."""
    try:
        report = await reminder_tasks.run_reminder_pass()
    except ConfigurationError as e:
        logger.error(f"Reminder run aborted, configuration error: {e.message}")
        return web.json_response(e.to_dict(), status=500)
    except RepositoryReadError as e:
        logger.error(f"Reminder run aborted, repository error: {e.message}")
        return web.json_response(e.to_dict(), status=502)
    except ReminderEngineError as e:
        logger.error(f"Reminder run failed: {e.message}", exc_info=True)
        return web.json_response(e.to_dict(), status=500)
    except Exception as e:
        logger.error(f"Unexpected error in reminder run: {e}", exc_info=True)
        return web.json_response({"error": str(e) or type(e).__name__, "category": "internal"}, status=500)

    return web.json_response(report.to_json_dict())

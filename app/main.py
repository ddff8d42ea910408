"""Service entrypoint: reminder trigger API (aiohttp) + hourly scheduler."""
import asyncio
import logging

from aiohttp import web

from app.config import settings
from app.handlers import setup_routes
from app.logging_config import setup_logging
from app.middlewares import reminder_auth_middleware
from database import close_db
from services.reminder_tasks import start_reminder_scheduler, stop_reminder_scheduler

logger = logging.getLogger(__name__)


def build_app() -> web.Application:
    app = web.Application(middlewares=[reminder_auth_middleware])
    setup_routes(app)
    return app


async def main():
    setup_logging()
    app = build_app()
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, settings.web_host, settings.web_port)
    await site.start()
    logger.info(f"Reminder API listening on {settings.web_host}:{settings.web_port} ({settings.environment})")

    if settings.reminder_scheduler_enabled:
        start_reminder_scheduler()

    try:
        await asyncio.Event().wait()
    finally:
        stop_reminder_scheduler()
        await runner.cleanup()
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

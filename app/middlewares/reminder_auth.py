"""Shared-secret protection for the reminder trigger endpoints."""
import hmac
import logging
from typing import Callable

from aiohttp import web

from app.config import settings
from core.exceptions import AuthorizationError, MissingSettingError

logger = logging.getLogger(__name__)

REMINDER_KEY_HEADER = 'X-Reminder-Key'
PROTECTED_PREFIX = '/api/reminders/'


def verify_runner_key(provided: str | None, expected: str) -> bool:
    """Constant-time comparison of the presented key with the configured one."""
    if not provided:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())


@web.middleware
async def reminder_auth_middleware(request: web.Request, handler: Callable):
    """Middleware to protect /api/reminders/* endpoints.

    Requests must carry the configured runner key in the X-Reminder-Key header.
    Without a configured key every trigger request is refused.
    """
    if not request.path.startswith(PROTECTED_PREFIX):
        return await handler(request)

    expected = settings.reminder_runner_key
    if not expected:
        logger.error(f"Reminder trigger called but no runner key is configured: {request.path}")
        return web.json_response(MissingSettingError("reminder_runner_key").to_dict(), status=500)

    if not verify_runner_key(request.headers.get(REMINDER_KEY_HEADER), expected):
        logger.warning(f"Rejected reminder trigger without valid key: {request.path} from {request.remote}")
        return web.json_response(AuthorizationError().to_dict(), status=401)

    return await handler(request)

"""aiohttp middlewares."""
from app.middlewares.reminder_auth import reminder_auth_middleware, REMINDER_KEY_HEADER

__all__ = ['reminder_auth_middleware', 'REMINDER_KEY_HEADER']

"""HTTP handlers."""
from app.handlers.reminders import setup_routes

__all__ = ['setup_routes']

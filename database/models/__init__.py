"""Database models package."""
from database.models.client import Client
from database.models.appointment import Appointment, ReminderStatus, ReminderChannel

__all__ = [
    "Client",
    "Appointment",
    "ReminderStatus",
    "ReminderChannel",
]

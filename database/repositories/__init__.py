"""Database repositories package."""
from database.repositories.client import ClientRepository
from database.repositories.appointment import (
    AppointmentRepository,
    CandidateClient,
    ReminderCandidate,
    ReminderWriteResult,
)

__all__ = [
    "ClientRepository",
    "AppointmentRepository",
    "CandidateClient",
    "ReminderCandidate",
    "ReminderWriteResult",
]

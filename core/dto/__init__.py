"""
Data Transfer Objects (DTOs).

This package contains Pydantic models for the reminder run report.
"""

from core.dto.reminders import (
    ReminderAction,
    ReminderWindowDTO,
    ReminderOutcomeDTO,
    ReminderRunReportDTO,
)

__all__ = [
    'ReminderAction',
    'ReminderWindowDTO',
    'ReminderOutcomeDTO',
    'ReminderRunReportDTO',
]

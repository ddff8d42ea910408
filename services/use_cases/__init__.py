"""
Use Cases package for business logic encapsulation.

This package contains use case classes that encapsulate business logic
and orchestrate interactions between repositories and services.
"""

from services.use_cases.reminders import RunRemindersUseCase

__all__ = [
    'RunRemindersUseCase',
]

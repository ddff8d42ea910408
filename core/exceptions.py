"""
Custom application exceptions.

Only run-level failures are modelled as exceptions. Per-appointment problems
(ineligible client, provider failure, failed write) are recorded in the run
report instead of being raised.
"""
from typing import Optional


class ReminderEngineError(Exception):
    """Base exception for all reminder engine errors."""

    message: str = "Reminder run failed"
    category: str = "internal"

    def __init__(self, message: Optional[str] = None, **kwargs):
        self.message = message or self.message
        self.details = kwargs
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serialize error for JSON responses."""
        return {"error": self.message, "category": self.category}


# ============== Configuration ==============

class ConfigurationError(ReminderEngineError):
    """Missing or invalid configuration. Aborts the run before any work."""
    message = "Invalid reminder configuration"
    category = "configuration"


class MissingSettingError(ConfigurationError):
    """A required setting is not configured."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"Missing required setting: {setting.upper()}")


class InvalidTimezoneError(ConfigurationError):
    """Configured time zone is not known."""

    def __init__(self, zone: str):
        self.zone = zone
        super().__init__(f"Unknown time zone: {zone}")


class InvalidLeadTimeError(ConfigurationError):
    """Lead time must be a finite, non-negative number of hours."""

    def __init__(self, hours: float):
        self.hours = hours
        super().__init__(f"Lead time must be a finite number of hours >= 0, got {hours}")


class UnknownProviderError(ConfigurationError):
    """Configured provider name is not supported."""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unknown reminder provider: {provider}")


# ============== Authorization ==============

class AuthorizationError(ReminderEngineError):
    """Trigger token does not match the configured secret."""
    message = "Unauthorized"
    category = "authorization"


# ============== Repository ==============

class RepositoryReadError(ReminderEngineError):
    """Candidate query against the appointment store failed."""
    message = "Failed to fetch reminder candidates"
    category = "repository"


# ============== Appointments ==============

class AppointmentError(ReminderEngineError):
    """Base appointment error."""
    message = "Appointment error"
    category = "validation"


class AppointmentNotFoundError(AppointmentError):
    """Appointment not found."""
    message = "Appointment not found"

    def __init__(self, appointment_id: Optional[int] = None):
        self.appointment_id = appointment_id
        super().__init__(f"Appointment #{appointment_id} not found" if appointment_id else self.message)


class InvalidAppointmentTimeError(AppointmentError):
    """End time must be after start time."""
    message = "end_must_be_after_start"

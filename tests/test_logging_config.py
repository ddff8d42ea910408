"""Tests for structured logging setup."""
import json
import logging

import pytest

from app.logging_config import JSONFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_json_formatter_lifts_reminder_fields():
    record = logging.LogRecord("services.use_cases.reminders", logging.INFO, __file__, 10,
                               "Appointment 7: SEND ok=True", None, None)
    record.appointment_id = 7
    record.provider = "whatsapp"

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "INFO"
    assert data["message"] == "Appointment 7: SEND ok=True"
    assert data["appointment_id"] == 7
    assert data["provider"] == "whatsapp"
    assert "action" not in data


def test_setup_logging_writes_json_files(tmp_path, restore_root_logger):
    setup_logging(tmp_path)

    logging.getLogger("services.reminder_tasks").error("boom", extra={"appointment_id": 3})
    for handler in logging.getLogger().handlers:
        handler.flush()

    errors = (tmp_path / "errors.log").read_text(encoding="utf-8").strip().splitlines()
    assert json.loads(errors[-1])["appointment_id"] == 3
    assert (tmp_path / "reminders.log").exists()
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

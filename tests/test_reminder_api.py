"""Tests for the reminder trigger API and its key middleware."""
import pytest
import pytest_asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from aiohttp.test_utils import TestClient, TestServer

from app.config import settings
from app.main import build_app
from core.dto.reminders import ReminderRunReportDTO, ReminderWindowDTO
from core.exceptions import InvalidTimezoneError, RepositoryReadError
from services import reminder_tasks

RUNNER_KEY = "s3cret-runner-key"


def empty_report() -> ReminderRunReportDTO:
    start = datetime(2025, 6, 3, 10, 0, tzinfo=timezone.utc)
    end = datetime(2025, 6, 3, 11, 0, tzinfo=timezone.utc)
    return ReminderRunReportDTO(
        tz="UTC",
        now=datetime(2025, 6, 1, 10, 15, tzinfo=timezone.utc),
        window=ReminderWindowDTO(start_iso=start, end_iso=end, window_start_local=start, window_end_local=end),
        count=0,
        results=[],
    )


@pytest_asyncio.fixture
async def api_client():
    client = TestClient(TestServer(build_app()))
    await client.start_server()
    yield client
    await client.close()


@pytest.fixture
def runner():
    mock = AsyncMock(return_value=empty_report())
    with patch.object(settings, "reminder_runner_key", RUNNER_KEY), \
            patch.object(reminder_tasks, "run_reminder_pass", mock):
        yield mock


@pytest.mark.asyncio
async def test_health_needs_no_key(api_client):
    resp = await api_client.get('/health')

    assert resp.status == 200
    assert (await resp.json())["status"] == "ok"


@pytest.mark.asyncio
async def test_missing_key_is_rejected(api_client, runner):
    resp = await api_client.post('/api/reminders/run')

    assert resp.status == 401
    assert await resp.json() == {"error": "Unauthorized", "category": "authorization"}
    runner.assert_not_awaited()


@pytest.mark.asyncio
async def test_wrong_key_is_rejected(api_client, runner):
    resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": "guess"})

    assert resp.status == 401
    runner.assert_not_awaited()


@pytest.mark.asyncio
async def test_no_configured_key_fails_closed(api_client, runner):
    with patch.object(settings, "reminder_runner_key", None):
        resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 500
    data = await resp.json()
    assert data["category"] == "configuration"
    assert "REMINDER_RUNNER_KEY" in data["error"]
    runner.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_returns_report(api_client, runner):
    resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 200
    data = await resp.json()
    assert data["ok"] is True
    assert data["count"] == 0
    assert data["window"]["startISO"] == "2025-06-03T10:00:00Z"
    runner.assert_awaited_once_with()


@pytest.mark.asyncio
async def test_run_via_get(api_client, runner):
    resp = await api_client.get('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 200


@pytest.mark.asyncio
async def test_configuration_error_is_500(api_client, runner):
    runner.side_effect = InvalidTimezoneError("Nowhere/Land")

    resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 500
    assert await resp.json() == {"error": "Unknown time zone: Nowhere/Land", "category": "configuration"}


@pytest.mark.asyncio
async def test_repository_error_is_502(api_client, runner):
    runner.side_effect = RepositoryReadError()

    resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 502
    assert await resp.json() == {"error": "Failed to fetch reminder candidates", "category": "repository"}


@pytest.mark.asyncio
async def test_unexpected_error_is_json_500(api_client, runner):
    runner.side_effect = RuntimeError("event loop is closed")

    resp = await api_client.post('/api/reminders/run', headers={"X-Reminder-Key": RUNNER_KEY})

    assert resp.status == 500
    assert resp.content_type == "application/json"
    assert await resp.json() == {"error": "event loop is closed", "category": "internal"}

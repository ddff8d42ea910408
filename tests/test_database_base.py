"""Tests for engine URL handling and teardown."""
import pytest
from unittest.mock import patch

import database
from app.config import settings
from core.exceptions import MissingSettingError
from database import base


def test_postgres_url_uses_asyncpg():
    with patch.object(settings, "database_url", "postgres://u:p@db:5432/studio"):
        assert base._build_url() == "postgresql+asyncpg://u:p@db:5432/studio"

    with patch.object(settings, "database_url", "postgresql://u:p@db:5432/studio"):
        assert base._build_url() == "postgresql+asyncpg://u:p@db:5432/studio"


def test_missing_database_url():
    with patch.object(settings, "database_url", None):
        with pytest.raises(MissingSettingError) as exc:
            base._build_url()

    assert exc.value.category == "configuration"


def test_package_exports_runtime_helpers_only():
    assert database.__all__ == ["Base", "async_session_maker", "get_engine", "close_db"]


@pytest.mark.asyncio
async def test_close_db_resets_engine():
    with patch.object(settings, "database_url", "sqlite+aiosqlite:///:memory:"):
        engine = base.get_engine()
        assert base.get_engine() is engine

        await base.close_db()

        assert base._engine is None
        assert base.get_engine() is not engine
        await base.close_db()

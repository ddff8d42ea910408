import sys
import os
from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Ensure project root is on sys.path so `import app` works
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from database.base import Base
from database.models import Client, Appointment


# In-memory SQLite, one shared connection per test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """Create async engine for tests."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def sample_client(db_session: AsyncSession) -> Client:
    """Client with phone and WhatsApp consent."""
    client = Client(
        name="Lucia Perez",
        phone="+34600111222",
        consent_whatsapp=True,
    )
    db_session.add(client)
    await db_session.commit()
    await db_session.refresh(client)
    return client


@pytest.fixture
def make_appointment(db_session: AsyncSession):
    """Factory adding a committed appointment for a client."""

    async def _make(client_id: int, start_time: datetime, **fields) -> Appointment:
        appointment = Appointment(
            client_id=client_id,
            start_time=start_time,
            end_time=fields.pop("end_time", start_time + timedelta(hours=1)),
            **fields,
        )
        db_session.add(appointment)
        await db_session.commit()
        await db_session.refresh(appointment)
        return appointment

    return _make

"""Unit tests for database session providers."""

import pytest
from unittest.mock import patch

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from infrastructure.database import dependencies
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_engine,
    get_read_session,
    get_write_engine,
    get_write_session,
)


@pytest.fixture(autouse=True)
async def reset_engines():
    """Dispose cached engines after each test."""
    yield
    await close_database_connections()


@pytest.mark.asyncio
async def test_get_write_engine():
    engine = get_write_engine()

    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "postgresql+asyncpg"


@pytest.mark.asyncio
async def test_engines_are_singletons():
    """Engines are cached; write and read use different instances."""
    assert get_write_engine() is get_write_engine()
    assert get_read_engine() is get_read_engine()
    assert get_write_engine() is not get_read_engine()


@pytest.mark.asyncio
async def test_write_session_uses_write_engine():
    write_engine = get_write_engine()
    session_count = 0

    async for session in get_write_session():
        session_count += 1
        assert isinstance(session, AsyncSession)
        assert session.bind.sync_engine is write_engine.sync_engine

    assert session_count == 1


@pytest.mark.asyncio
async def test_read_session_uses_read_engine():
    read_engine = get_read_engine()

    async for session in get_read_session():
        assert session.bind.sync_engine is read_engine.sync_engine


@pytest.mark.asyncio
async def test_close_database_connections_allows_reinitialization():
    write_engine = get_write_engine()
    read_engine = get_read_engine()

    await close_database_connections()

    assert get_write_engine() is not write_engine
    assert get_read_engine() is not read_engine


@pytest.mark.asyncio
async def test_engine_lifecycle_is_probed():
    with patch.object(dependencies, "_probe") as mock_probe:
        get_write_engine()
        await close_database_connections()

    mock_probe.engine_created.assert_called_once()
    assert mock_probe.engine_created.call_args.kwargs["role"] == "write"
    mock_probe.engine_disposed.assert_called_once_with(role="write")

"""Database session providers for the user store.

Two engine roles exist: "write" for aggregate mutations and "read" for
lookups and disclosure reads. Each role gets a lazily created engine and
sessionmaker, shared process-wide until close_database_connections().
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator, Callable, Literal

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultDatabaseProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

EngineRole = Literal["write", "read"]

_ENGINE_FACTORIES: dict[EngineRole, Callable[[DatabaseSettings], AsyncEngine]] = {
    "write": create_write_engine,
    "read": create_read_engine,
}

_probe = DefaultDatabaseProbe()

_engines: dict[EngineRole, AsyncEngine] = {}
_sessionmakers: dict[EngineRole, async_sessionmaker[AsyncSession]] = {}

_engine_lock = threading.Lock()


def _get_engine(role: EngineRole) -> AsyncEngine:
    """Return the engine for a role, creating it and its sessionmaker once."""
    engine = _engines.get(role)
    if engine is None:
        with _engine_lock:
            engine = _engines.get(role)
            if engine is None:
                settings = get_database_settings()
                engine = _ENGINE_FACTORIES[role](settings)
                _sessionmakers[role] = async_sessionmaker(
                    engine, expire_on_commit=False, class_=AsyncSession
                )
                _engines[role] = engine
                _probe.engine_created(
                    role=role, host=settings.host, database=settings.database
                )
    return engine


def get_write_engine() -> AsyncEngine:
    """Get the write database engine (singleton)."""
    return _get_engine("write")


def get_read_engine() -> AsyncEngine:
    """Get the read database engine (singleton)."""
    return _get_engine("read")


def _get_sessionmaker(role: EngineRole) -> async_sessionmaker[AsyncSession]:
    _get_engine(role)
    return _sessionmakers[role]


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for aggregate mutations.

    The session does NOT auto-commit. The application services open the
    transaction themselves with `async with session.begin()`, so one
    service call maps to exactly one load-mutate-save unit of work.

    Consumed by `identity.dependencies.write_services`, which builds the
    identity services over the yielded session.

    Yields:
        AsyncSession for database operations
    """
    async with _get_sessionmaker("write")() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a session for lookups and disclosure reads.

    Transactions on this session run READ ONLY, so only the lookup and
    disclosure operations of the services may use it.

    Yields:
        AsyncSession for read-only database operations
    """
    async with _get_sessionmaker("read")() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose every engine and forget its sessionmaker.

    Call on shutdown. A later session request creates fresh engines.
    """
    with _engine_lock:
        engines = list(_engines.items())
        _engines.clear()
        _sessionmakers.clear()

    for role, engine in engines:
        await engine.dispose()
        _probe.engine_disposed(role=role)

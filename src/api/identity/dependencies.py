"""Composition of the identity bounded context.

Wires the application services to the SQLAlchemy user store. Every unit
of work gets one session, shared by the repository and all services, so
a service call's `session.begin()` covers the repository's writes.
Mutations go through the write engine; lookups and disclosure reads go
through the read engine.

Usage:
    async with identity_lifespan():
        async with write_services() as services:
            await services.consents.record_consent(user_id, "client-1", ...)

        async with read_services(actor="client-1") as services:
            await services.consents.get_consented_attributes(user_id, "client-1")
"""

from __future__ import annotations

from contextlib import aclosing, asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.observability import (
    DefaultAttributeServiceProbe,
    DefaultConnectionServiceProbe,
    DefaultConsentServiceProbe,
    DefaultContextServiceProbe,
    DefaultUserServiceProbe,
)
from identity.application.services import (
    AttributeService,
    ConnectionService,
    ConsentService,
    ContextService,
    UserService,
)
from identity.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import (
    close_database_connections,
    get_read_session,
    get_write_session,
)
from infrastructure.logging import configure_logging
from shared_kernel.observability_context import ObservationContext


@dataclass(frozen=True)
class IdentityServices:
    """The identity services of one unit of work."""

    contexts: ContextService
    attributes: AttributeService
    connections: ConnectionService
    consents: ConsentService
    users: UserService


def get_user_repository(session: AsyncSession) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session

    Returns:
        UserRepository instance
    """
    return UserRepository(session=session)


def build_identity_services(
    session: AsyncSession,
    context: ObservationContext | None = None,
    actor: str | None = None,
) -> IdentityServices:
    """Build every identity service over one session.

    Args:
        session: Session shared by the repository and the services
        context: Observation context bound to every service probe
        actor: Who drives this unit of work; overrides the context's actor

    Returns:
        IdentityServices sharing a single UserRepository
    """
    context = context or ObservationContext()
    if actor is not None:
        context = context.with_actor(actor)

    user_repository = get_user_repository(session)

    return IdentityServices(
        contexts=ContextService(
            session=session,
            user_repository=user_repository,
            probe=DefaultContextServiceProbe().with_context(context),
        ),
        attributes=AttributeService(
            session=session,
            user_repository=user_repository,
            probe=DefaultAttributeServiceProbe().with_context(context),
        ),
        connections=ConnectionService(
            session=session,
            user_repository=user_repository,
            probe=DefaultConnectionServiceProbe().with_context(context),
        ),
        consents=ConsentService(
            session=session,
            user_repository=user_repository,
            probe=DefaultConsentServiceProbe().with_context(context),
        ),
        users=UserService(
            session=session,
            user_repository=user_repository,
            probe=DefaultUserServiceProbe().with_context(context),
        ),
    )


@asynccontextmanager
async def write_services(
    context: ObservationContext | None = None, actor: str | None = None
) -> AsyncIterator[IdentityServices]:
    """Open a write session and yield the services bound to it."""
    async with aclosing(get_write_session()) as sessions:
        async for session in sessions:
            yield build_identity_services(session, context=context, actor=actor)


@asynccontextmanager
async def read_services(
    context: ObservationContext | None = None, actor: str | None = None
) -> AsyncIterator[IdentityServices]:
    """Open a read session and yield the services bound to it.

    Only the lookup and disclosure operations may be called; the read
    engine opens READ ONLY transactions.
    """
    async with aclosing(get_read_session()) as sessions:
        async for session in sessions:
            yield build_identity_services(session, context=context, actor=actor)


@asynccontextmanager
async def identity_lifespan(log_level: str | None = None) -> AsyncIterator[None]:
    """Process lifespan for the identity context.

    Configures structured logging on entry. Engines are created lazily by
    the first session and disposed on exit.
    """
    configure_logging(log_level)
    try:
        yield
    finally:
        await close_database_connections()

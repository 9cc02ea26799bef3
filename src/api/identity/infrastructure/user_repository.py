"""PostgreSQL implementation of IUserRepository.

Persists the whole User aggregate as a single row. Transactions are
owned by the application services, so this repository never commits.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from identity.domain.aggregates import User
from identity.domain.exceptions import PreconditionViolationError
from identity.domain.value_objects import UserId
from identity.infrastructure import serialization
from identity.infrastructure.models import UserModel
from identity.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from identity.ports.repositories import IUserRepository


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession whose transaction is managed by the caller
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Persist a user aggregate, replacing every stored child collection.

        Creates a new row or updates the existing one.

        Raises:
            PreconditionViolationError: If the user has no id
        """
        if user.id is None:
            raise PreconditionViolationError("Cannot persist a user without an id.")

        stmt = select(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            model = UserModel(id=user.id.value)
            self._session.add(model)

        model.username = user.username
        model.credential_hash = user.credential_hash
        model.email = user.email
        model.roles = list(user.roles)
        model.contexts = [serialization.context_to_document(c) for c in user.contexts]
        model.attributes = [
            serialization.attribute_to_document(a) for a in user.attributes
        ]
        model.consents = [serialization.consent_to_document(c) for c in user.consents]
        model.connections = [
            serialization.connection_to_document(c) for c in user.connections
        ]

        await self._session.flush()
        self._probe.user_saved(user.id.value, user.username)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return self._to_aggregate(model)

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by their username.

        Returns:
            The User aggregate, or None if not found
        """
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.username_not_found(username)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_aggregate(model)

    async def exists_by_id(self, user_id: UserId) -> bool:
        stmt = select(UserModel.id).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete_by_id(self, user_id: UserId) -> bool:
        """Delete the user row and everything stored in it.

        Returns:
            True if a row was deleted, False if none existed
        """
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return False

        await self._session.delete(model)
        await self._session.flush()
        self._probe.user_deleted(user_id.value)
        return True

    def _to_aggregate(self, model: UserModel) -> User:
        user_id = UserId(value=model.id)
        return User(
            id=user_id,
            username=model.username,
            credential_hash=model.credential_hash or "",
            email=model.email or "",
            roles=list(model.roles or []),
            contexts=[
                serialization.context_from_document(d) for d in model.contexts or []
            ],
            attributes=[
                serialization.attribute_from_document(d, user_id)
                for d in model.attributes or []
            ],
            consents=[
                serialization.consent_from_document(d) for d in model.consents or []
            ],
            connections=[
                serialization.connection_from_document(d)
                for d in model.connections or []
            ],
        )

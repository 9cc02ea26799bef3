"""Context application service for the identity bounded context.

Manages a user's contexts. Deleting a context cascades into the user's
attributes, which lose the reference but are never deleted.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.locking import UserLocks, get_user_locks
from identity.application.observability import (
    ContextServiceProbe,
    DefaultContextServiceProbe,
)
from identity.domain.entities import Context
from identity.domain.value_objects import ContextId, UserId
from identity.ports.repositories import IUserRepository


class ContextService:
    """Application service for context management.

    Every mutation loads the whole User aggregate, changes it, and saves
    it back inside one transaction while holding the user's write lock.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: ContextServiceProbe | None = None,
        user_locks: UserLocks | None = None,
    ):
        """Initialize ContextService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user aggregate persistence
            probe: Optional domain probe for observability
            user_locks: Optional per-user lock registry (process-wide by default)
        """
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultContextServiceProbe()
        self._user_locks = (
            user_locks if user_locks is not None else get_user_locks()
        )

    async def create_context(
        self, user_id: UserId, name: str, description: str = ""
    ) -> Context | None:
        """Create a new context with a generated id.

        Returns:
            The created Context, or None if the user does not exist
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                context = user.add_context(name=name, description=description)
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.context_operation_failed(
                user_id=user_id.value, operation="create_context", error=str(e)
            )
            raise

        self._probe.context_created(user_id=user_id.value, context_id=context.id.value)
        return context

    async def update_context(
        self,
        user_id: UserId,
        context_id: ContextId,
        name: str,
        description: str = "",
    ) -> Context | None:
        """Replace an existing context's name and description, keeping its id.

        Returns:
            The updated Context, or None if the user or context was not found
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                context = user.replace_context(
                    context_id, name=name, description=description
                )
                if context is None:
                    self._probe.context_not_found(
                        user_id=user_id.value, context_id=context_id.value
                    )
                    return None

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.context_operation_failed(
                user_id=user_id.value, operation="update_context", error=str(e)
            )
            raise

        self._probe.context_updated(user_id=user_id.value, context_id=context_id.value)
        return context

    async def delete_context(self, user_id: UserId, context_id: ContextId) -> bool:
        """Delete a context and detach it from every attribute.

        Returns:
            True if the context was deleted, False if the user or context was not found
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                detached = sum(1 for a in user.attributes if a.is_in_context(context_id))
                if not user.remove_context(context_id):
                    self._probe.context_not_found(
                        user_id=user_id.value, context_id=context_id.value
                    )
                    return False

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.context_operation_failed(
                user_id=user_id.value, operation="delete_context", error=str(e)
            )
            raise

        self._probe.context_deleted(
            user_id=user_id.value,
            context_id=context_id.value,
            detached_attribute_count=detached,
        )
        return True

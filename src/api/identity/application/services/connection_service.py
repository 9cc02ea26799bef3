"""Connection application service for the identity bounded context.

Links and unlinks external provider accounts. The OAuth exchange happens
upstream; this service only records its result.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.locking import UserLocks, get_user_locks
from identity.application.observability import (
    ConnectionServiceProbe,
    DefaultConnectionServiceProbe,
)
from identity.domain.entities import Connection
from identity.domain.value_objects import ConnectionId, UserId
from identity.ports.repositories import IUserRepository


class ConnectionService:
    """Application service for provider account connections.

    A user may link several accounts of the same provider; a connection
    is identified by (provider_id, provider_user_id) when saving, and by
    its own id when deleting.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: ConnectionServiceProbe | None = None,
        user_locks: UserLocks | None = None,
    ):
        """Initialize ConnectionService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user aggregate persistence
            probe: Optional domain probe for observability
            user_locks: Optional per-user lock registry (process-wide by default)
        """
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultConnectionServiceProbe()
        self._user_locks = (
            user_locks if user_locks is not None else get_user_locks()
        )

    async def save_connection(
        self,
        user_id: UserId,
        provider_id: str,
        provider_user_id: str,
        provider_access_token: str,
    ) -> Connection | None:
        """Link a provider account, or refresh the token of one already linked.

        When the (provider_id, provider_user_id) pair is already linked,
        only its access token changes; id and connected_at are kept.

        Returns:
            The stored Connection, or None if the user does not exist
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                count_before = len(user.connections)
                connection = user.link_connection(
                    provider_id=provider_id,
                    provider_user_id=provider_user_id,
                    provider_access_token=provider_access_token,
                )
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.connection_operation_failed(
                user_id=user_id.value, operation="save_connection", error=str(e)
            )
            raise

        self._probe.connection_linked(
            user_id=user_id.value,
            connection_id=connection.id.value,
            provider_id=provider_id,
            was_created=len(user.connections) > count_before,
        )
        return connection

    async def delete_connection(
        self, user_id: UserId, connection_id: ConnectionId
    ) -> bool:
        """Unlink one specific provider account by its connection id.

        Returns:
            True if a connection was removed, False otherwise
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                if not user.unlink_connection(connection_id):
                    self._probe.connection_not_found(
                        user_id=user_id.value, connection_id=connection_id.value
                    )
                    return False

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.connection_operation_failed(
                user_id=user_id.value, operation="delete_connection", error=str(e)
            )
            raise

        self._probe.connection_unlinked(
            user_id=user_id.value, connection_id=connection_id.value
        )
        return True

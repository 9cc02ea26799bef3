"""User application service for the identity bounded context.

Handles user lookup, registration with default data provisioning, and
deletion of the whole aggregate.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.locking import UserLocks, get_user_locks
from identity.application.observability import DefaultUserServiceProbe, UserServiceProbe
from identity.domain.aggregates import User
from identity.domain.exceptions import PreconditionViolationError, UsernameTakenError
from identity.domain.value_objects import UserId
from identity.ports.repositories import IUserRepository


class UserService:
    """Application service for user lifecycle management."""

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: UserServiceProbe | None = None,
        user_locks: UserLocks | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user aggregate persistence
            probe: Optional domain probe for observability
            user_locks: Optional per-user lock registry (process-wide by default)
        """
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultUserServiceProbe()
        self._user_locks = (
            user_locks if user_locks is not None else get_user_locks()
        )

    async def find_user_by_id(self, user_id: UserId) -> User | None:
        return await self._user_repository.get_by_id(user_id)

    async def find_user_by_username(self, username: str) -> User | None:
        return await self._user_repository.get_by_username(username)

    async def register_user(
        self,
        username: str,
        email: str = "",
        credential_hash: str = "",
        roles: list[str] | None = None,
    ) -> User:
        """Register a new user and provision their default data.

        The credential hash is produced upstream; it is stored as given.

        Returns:
            The new User aggregate with default contexts and attributes

        Raises:
            UsernameTakenError: If the username already belongs to a user
        """
        try:
            async with self._session.begin():
                if await self._user_repository.get_by_username(username) is not None:
                    raise UsernameTakenError(username)

                user = User.register(
                    username=username,
                    email=email,
                    credential_hash=credential_hash,
                    roles=roles,
                )
                user.provision_defaults()
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.registration_failed(username=username, error=str(e))
            raise

        # provision_defaults() succeeded, so the id is set
        assert user.id is not None
        self._probe.user_registered(user_id=user.id.value, username=username)
        self._probe.default_data_provisioned(
            user_id=user.id.value,
            username=username,
            context_count=len(user.contexts),
        )
        return user

    async def provision_default_user_data(self, user: User) -> User:
        """Give an existing user the out-of-the-box contexts and Username attribute.

        Replaces the user's contexts and attributes, then saves.

        Raises:
            PreconditionViolationError: If the user has no id; nothing is written
        """
        if user.id is None:
            self._probe.provisioning_rejected(
                username=user.username, reason="user id is missing"
            )
            raise PreconditionViolationError(
                "User ID cannot be None for provisioning default data."
            )

        async with self._user_locks.hold(user.id), self._session.begin():
            user.provision_defaults()
            await self._user_repository.save(user)

        self._probe.default_data_provisioned(
            user_id=user.id.value,
            username=user.username,
            context_count=len(user.contexts),
        )
        return user

    async def delete_user(self, user_id: UserId) -> bool:
        """Delete a user together with everything the aggregate owns.

        Returns:
            True if the user existed and was deleted, False otherwise
        """
        async with self._user_locks.hold(user_id), self._session.begin():
            if not await self._user_repository.exists_by_id(user_id):
                self._probe.user_not_found(user_id.value)
                return False

            await self._user_repository.delete_by_id(user_id)

        self._probe.user_deleted(user_id.value)
        return True

"""Repository protocols (ports) for the identity bounded context.

The User aggregate is the unit of persistence: contexts, attributes,
consents and connections are always loaded and saved together with
their owning user.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import User
from identity.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence.

    Implementations store the full aggregate. Callers own the transaction
    boundary; the repository never commits on its own.
    """

    async def save(self, user: User) -> None:
        """Persist a user aggregate (full upsert).

        Creates a new user or replaces every field and child collection
        of an existing one.

        Args:
            user: The User aggregate to persist
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_username(self, username: str) -> User | None:
        """Retrieve a user by their username.

        Args:
            username: The username to search for

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def exists_by_id(self, user_id: UserId) -> bool:
        """Check whether a user with the given ID exists."""
        ...

    async def delete_by_id(self, user_id: UserId) -> bool:
        """Delete a user and everything the aggregate owns.

        Args:
            user_id: The unique identifier of the user

        Returns:
            True if the user existed and was deleted
        """
        ...

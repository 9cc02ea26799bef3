"""Domain probe for identity repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to user aggregate persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserRepositoryProbe(Protocol):
    """Domain probe for user repository operations.

    Records domain events during user persistence operations.
    """

    def user_saved(self, user_id: str, username: str) -> None:
        """Record that a user was successfully saved."""
        ...

    def user_retrieved(self, user_id: str) -> None:
        """Record that a user was retrieved."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user was not found."""
        ...

    def username_not_found(self, username: str) -> None:
        """Record that a username was not found."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user row was deleted."""
        ...

    def with_context(self, context: ObservationContext) -> UserRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserRepositoryProbe:
    """Default implementation of UserRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserRepositoryProbe(logger=self._logger, context=context)

    def user_saved(self, user_id: str, username: str) -> None:
        self._logger.info(
            "user_saved",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def user_retrieved(self, user_id: str) -> None:
        self._logger.debug(
            "user_retrieved",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def username_not_found(self, username: str) -> None:
        self._logger.debug(
            "username_not_found",
            username=username,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user lifecycle operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_registered(self, user_id: str, username: str) -> None:
        """Record that a new user was registered."""
        ...

    def registration_failed(self, username: str, error: str) -> None:
        """Record that registering a user failed."""
        ...

    def default_data_provisioned(
        self, user_id: str, username: str, context_count: int
    ) -> None:
        """Record that default contexts and attributes were provisioned."""
        ...

    def provisioning_rejected(self, username: str, reason: str) -> None:
        """Record that provisioning was refused before any write."""
        ...

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was deleted."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that a user did not exist."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_registered(self, user_id: str, username: str) -> None:
        """Record that a new user was registered."""
        self._logger.info(
            "user_registered",
            user_id=user_id,
            username=username,
            **self._get_context_kwargs(),
        )

    def registration_failed(self, username: str, error: str) -> None:
        """Record that registering a user failed."""
        self._logger.error(
            "user_registration_failed",
            username=username,
            error=error,
            **self._get_context_kwargs(),
        )

    def default_data_provisioned(
        self, user_id: str, username: str, context_count: int
    ) -> None:
        """Record that default contexts and attributes were provisioned."""
        self._logger.info(
            "default_data_provisioned",
            user_id=user_id,
            username=username,
            context_count=context_count,
            **self._get_context_kwargs(),
        )

    def provisioning_rejected(self, username: str, reason: str) -> None:
        """Record that provisioning was refused before any write."""
        self._logger.error(
            "provisioning_rejected",
            username=username,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: str) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that a user did not exist."""
        self._logger.debug(
            "user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

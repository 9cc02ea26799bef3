"""Protocol for connection application service observability.

Access tokens are never passed to the probe.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionServiceProbe(Protocol):
    """Domain probe for provider connection operations."""

    def connection_linked(
        self, user_id: str, connection_id: str, provider_id: str, was_created: bool
    ) -> None:
        """Record that a provider account was linked or its token refreshed."""
        ...

    def connection_unlinked(self, user_id: str, connection_id: str) -> None:
        """Record that a provider account was unlinked."""
        ...

    def connection_not_found(self, user_id: str, connection_id: str) -> None:
        """Record that a connection did not exist."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        ...

    def connection_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a connection operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionServiceProbe:
    """Default implementation of ConnectionServiceProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultConnectionServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionServiceProbe(logger=self._logger, context=context)

    def connection_linked(
        self, user_id: str, connection_id: str, provider_id: str, was_created: bool
    ) -> None:
        """Record that a provider account was linked or its token refreshed."""
        self._logger.info(
            "connection_linked",
            user_id=user_id,
            connection_id=connection_id,
            provider_id=provider_id,
            was_created=was_created,
            **self._get_context_kwargs(),
        )

    def connection_unlinked(self, user_id: str, connection_id: str) -> None:
        """Record that a provider account was unlinked."""
        self._logger.info(
            "connection_unlinked",
            user_id=user_id,
            connection_id=connection_id,
            **self._get_context_kwargs(),
        )

    def connection_not_found(self, user_id: str, connection_id: str) -> None:
        """Record that a connection did not exist."""
        self._logger.debug(
            "connection_not_found",
            user_id=user_id,
            connection_id=connection_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        self._logger.debug(
            "connection_owner_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def connection_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a connection operation failed unexpectedly."""
        self._logger.error(
            "connection_operation_failed",
            user_id=user_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

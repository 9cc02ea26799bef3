"""Protocol for context application service observability.

Defines the interface for domain probes that capture application-level
domain events for context management operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ContextServiceProbe(Protocol):
    """Domain probe for context application service operations."""

    def context_created(self, user_id: str, context_id: str) -> None:
        """Record that a context was created."""
        ...

    def context_updated(self, user_id: str, context_id: str) -> None:
        """Record that a context was replaced in place."""
        ...

    def context_deleted(
        self, user_id: str, context_id: str, detached_attribute_count: int
    ) -> None:
        """Record that a context was deleted and attributes were detached."""
        ...

    def context_not_found(self, user_id: str, context_id: str) -> None:
        """Record that a context did not exist."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        ...

    def context_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a context operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> ContextServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultContextServiceProbe:
    """Default implementation of ContextServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultContextServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultContextServiceProbe(logger=self._logger, context=context)

    def context_created(self, user_id: str, context_id: str) -> None:
        """Record that a context was created."""
        self._logger.info(
            "context_created",
            user_id=user_id,
            context_id=context_id,
            **self._get_context_kwargs(),
        )

    def context_updated(self, user_id: str, context_id: str) -> None:
        """Record that a context was replaced in place."""
        self._logger.info(
            "context_updated",
            user_id=user_id,
            context_id=context_id,
            **self._get_context_kwargs(),
        )

    def context_deleted(
        self, user_id: str, context_id: str, detached_attribute_count: int
    ) -> None:
        """Record that a context was deleted and attributes were detached."""
        self._logger.info(
            "context_deleted",
            user_id=user_id,
            context_id=context_id,
            detached_attribute_count=detached_attribute_count,
            **self._get_context_kwargs(),
        )

    def context_not_found(self, user_id: str, context_id: str) -> None:
        """Record that a context did not exist."""
        self._logger.debug(
            "context_not_found",
            user_id=user_id,
            context_id=context_id,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        self._logger.debug(
            "context_owner_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def context_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a context operation failed unexpectedly."""
        self._logger.error(
            "context_operation_failed",
            user_id=user_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

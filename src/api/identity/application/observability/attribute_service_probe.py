"""Protocol for attribute application service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AttributeServiceProbe(Protocol):
    """Domain probe for attribute application service operations."""

    def attribute_created(self, user_id: str, attribute_id: str) -> None:
        """Record that an attribute was created."""
        ...

    def attribute_updated(self, user_id: str, attribute_id: str) -> None:
        """Record that an attribute was replaced in place."""
        ...

    def attribute_deleted(self, user_id: str, attribute_id: str) -> None:
        """Record that an attribute was deleted."""
        ...

    def attribute_not_found(self, user_id: str, attribute_id: str) -> None:
        """Record that an attribute did not exist."""
        ...

    def attribute_name_conflict(self, user_id: str, name: str) -> None:
        """Record that a create/rename collided with an existing name."""
        ...

    def attributes_imported(
        self, user_id: str, imported_count: int, renamed_count: int
    ) -> None:
        """Record that a provider batch was merged into the user's attributes."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        ...

    def attribute_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that an attribute operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> AttributeServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAttributeServiceProbe:
    """Default implementation of AttributeServiceProbe using structlog."""

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
    ) -> DefaultAttributeServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultAttributeServiceProbe(logger=self._logger, context=context)

    def attribute_created(self, user_id: str, attribute_id: str) -> None:
        self._logger.info(
            "attribute_created",
            user_id=user_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def attribute_updated(self, user_id: str, attribute_id: str) -> None:
        self._logger.info(
            "attribute_updated",
            user_id=user_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def attribute_deleted(self, user_id: str, attribute_id: str) -> None:
        self._logger.info(
            "attribute_deleted",
            user_id=user_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def attribute_not_found(self, user_id: str, attribute_id: str) -> None:
        self._logger.debug(
            "attribute_not_found",
            user_id=user_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def attribute_name_conflict(self, user_id: str, name: str) -> None:
        self._logger.warning(
            "attribute_name_conflict",
            user_id=user_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def attributes_imported(
        self, user_id: str, imported_count: int, renamed_count: int
    ) -> None:
        self._logger.info(
            "attributes_imported",
            user_id=user_id,
            imported_count=imported_count,
            renamed_count=renamed_count,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        self._logger.debug(
            "attribute_owner_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def attribute_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        self._logger.error(
            "attribute_operation_failed",
            user_id=user_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

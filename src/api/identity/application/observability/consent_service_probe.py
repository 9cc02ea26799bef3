"""Protocol for consent application service observability.

Defines the interface for domain probes that capture consent lifecycle
and attribute disclosure events. Disclosure events carry counts only,
never attribute values.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConsentServiceProbe(Protocol):
    """Domain probe for consent and disclosure operations."""

    def consent_recorded(
        self, user_id: str, consent_id: str, client_id: str, was_created: bool
    ) -> None:
        """Record that a consent was granted or updated."""
        ...

    def consent_revoked(self, user_id: str, consent_id: str) -> None:
        """Record that a consent was revoked."""
        ...

    def consent_not_found(self, user_id: str, consent_id: str) -> None:
        """Record that a consent id did not resolve."""
        ...

    def consented_attribute_removed(
        self, user_id: str, consent_id: str, attribute_id: str
    ) -> None:
        """Record that one attribute was withdrawn from a consent."""
        ...

    def consented_attribute_not_found(
        self, user_id: str, consent_id: str, attribute_id: str
    ) -> None:
        """Record that a consent did not list the attribute to withdraw."""
        ...

    def attributes_disclosed(
        self, user_id: str, client_id: str, attribute_count: int
    ) -> None:
        """Record that consented attributes were handed to a client."""
        ...

    def disclosure_without_consent(self, user_id: str, client_id: str) -> None:
        """Record that a client asked for attributes without holding a consent."""
        ...

    def access_audited(self, user_id: str, consent_id: str, access_count: int) -> None:
        """Record that a consent's access trail was extended."""
        ...

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        ...

    def consent_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a consent operation failed unexpectedly."""
        ...

    def with_context(self, context: ObservationContext) -> ConsentServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConsentServiceProbe:
    """Default implementation of ConsentServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultConsentServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultConsentServiceProbe(logger=self._logger, context=context)

    def consent_recorded(
        self, user_id: str, consent_id: str, client_id: str, was_created: bool
    ) -> None:
        """Record that a consent was granted or updated."""
        self._logger.info(
            "consent_recorded",
            user_id=user_id,
            consent_id=consent_id,
            client_id=client_id,
            was_created=was_created,
            **self._get_context_kwargs(),
        )

    def consent_revoked(self, user_id: str, consent_id: str) -> None:
        """Record that a consent was revoked."""
        self._logger.info(
            "consent_revoked",
            user_id=user_id,
            consent_id=consent_id,
            **self._get_context_kwargs(),
        )

    def consent_not_found(self, user_id: str, consent_id: str) -> None:
        """Record that a consent id did not resolve."""
        self._logger.debug(
            "consent_not_found",
            user_id=user_id,
            consent_id=consent_id,
            **self._get_context_kwargs(),
        )

    def consented_attribute_removed(
        self, user_id: str, consent_id: str, attribute_id: str
    ) -> None:
        """Record that one attribute was withdrawn from a consent."""
        self._logger.info(
            "consented_attribute_removed",
            user_id=user_id,
            consent_id=consent_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def consented_attribute_not_found(
        self, user_id: str, consent_id: str, attribute_id: str
    ) -> None:
        """Record that a consent did not list the attribute to withdraw."""
        self._logger.debug(
            "consented_attribute_not_found",
            user_id=user_id,
            consent_id=consent_id,
            attribute_id=attribute_id,
            **self._get_context_kwargs(),
        )

    def attributes_disclosed(
        self, user_id: str, client_id: str, attribute_count: int
    ) -> None:
        """Record that consented attributes were handed to a client."""
        self._logger.info(
            "attributes_disclosed",
            user_id=user_id,
            client_id=client_id,
            attribute_count=attribute_count,
            **self._get_context_kwargs(),
        )

    def disclosure_without_consent(self, user_id: str, client_id: str) -> None:
        """Record that a client asked for attributes without holding a consent."""
        self._logger.warning(
            "disclosure_without_consent",
            user_id=user_id,
            client_id=client_id,
            **self._get_context_kwargs(),
        )

    def access_audited(self, user_id: str, consent_id: str, access_count: int) -> None:
        """Record that a consent's access trail was extended."""
        self._logger.info(
            "access_audited",
            user_id=user_id,
            consent_id=consent_id,
            access_count=access_count,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: str) -> None:
        """Record that the owning user did not exist."""
        self._logger.debug(
            "consent_owner_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def consent_operation_failed(
        self, user_id: str, operation: str, error: str
    ) -> None:
        """Record that a consent operation failed unexpectedly."""
        self._logger.error(
            "consent_operation_failed",
            user_id=user_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events. Keys must not clash with probe event fields
    (user_id, client_id, ...), which the probes always pass explicitly.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        actor: Who triggered the operation ("user", or a relying party
            name when a client application acts on a consent).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", actor="user")
        probe = DefaultConsentServiceProbe().with_context(context)
    """

    request_id: str | None = None
    actor: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.actor is not None:
            result["actor"] = self.actor
        result.update(self.extra)
        return result

    def with_actor(self, actor: str) -> ObservationContext:
        """Create a new context with the actor set."""
        return ObservationContext(
            request_id=self.request_id,
            actor=actor,
            extra=self.extra,
        )


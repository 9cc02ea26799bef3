"""Child entities owned by the User aggregate.

Entities here are never persisted or shared on their own. They live in
flat lists on the User aggregate and reference each other by id only
(attribute -> context ids, consent -> attribute ids), so removing one
never leaves a dangling object reference behind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from identity.domain.value_objects import (
    AttributeId,
    ConnectionId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)


def unique_context_ids(context_ids: list[ContextId] | None) -> list[ContextId]:
    """Normalize a context id collection: None becomes empty, duplicates drop."""
    if not context_ids:
        return []
    return list(dict.fromkeys(context_ids))


@dataclass
class Context:
    """A named grouping (e.g. Personal) that scopes which attributes belong together.

    Context names are not required to be unique.
    """

    id: ContextId
    name: str
    description: str = ""


@dataclass
class IdentityAttribute:
    """A single named fact about a user (e.g. Email: a@b.com).

    ``context_ids`` behaves as a set: duplicates are suppressed and order
    carries no meaning. References are not validated on write; ids of
    deleted contexts are pruned by the aggregate.
    """

    id: AttributeId
    user_id: UserId | None
    name: str
    value: str
    visible: bool = False
    context_ids: list[ContextId] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.context_ids = unique_context_ids(self.context_ids)

    def has_name(self, name: str) -> bool:
        """Case-insensitive name comparison."""
        return self.name.lower() == name.lower()

    def is_in_context(self, context_id: ContextId) -> bool:
        return context_id in self.context_ids

    def detach_context(self, context_id: ContextId) -> bool:
        """Drop a context reference. Returns True if it was present."""
        if context_id not in self.context_ids:
            return False
        self.context_ids = [c for c in self.context_ids if c != context_id]
        return True


@dataclass
class Consent:
    """A per-client grant of which attributes may be disclosed, and for how long.

    ``shared_attributes`` keeps the order the user chose. ``accessed_at``
    is an append-only audit trail of every attribute handoff.
    """

    id: ConsentId
    client_id: str
    context_id: ContextId | None
    shared_attributes: list[AttributeId]
    token_validity: TokenValidity
    created_at: datetime
    last_updated_at: datetime
    accessed_at: list[datetime] = field(default_factory=list)

    def shares(self, attribute_id: AttributeId) -> bool:
        return attribute_id in self.shared_attributes

    def touch(self, now: datetime) -> None:
        """Advance last_updated_at, keeping it strictly increasing."""
        if now <= self.last_updated_at:
            now = self.last_updated_at + timedelta(microseconds=1)
        self.last_updated_at = now

    def record_access(self, now: datetime) -> None:
        self.accessed_at.append(now)

    def expires_at(self, issued_at: datetime) -> datetime:
        """Expiry of a token issued at ``issued_at`` under this consent."""
        return issued_at + self.token_validity.duration


@dataclass
class Connection:
    """A link to one external provider account.

    Identity is the (provider_id, provider_user_id) pair, so one provider
    may be linked several times with different accounts.
    """

    id: ConnectionId
    provider_id: str
    provider_user_id: str
    provider_access_token: str
    connected_at: datetime

    def matches(self, provider_id: str, provider_user_id: str) -> bool:
        return (
            self.provider_id == provider_id
            and self.provider_user_id == provider_user_id
        )

    def __repr__(self) -> str:
        """Return representation without the access token."""
        return (
            f"Connection(id={self.id.value!r}, provider_id={self.provider_id!r}, "
            f"provider_user_id={self.provider_user_id!r})"
        )

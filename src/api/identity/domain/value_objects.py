"""Value objects for the identity domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import ClassVar, Self

from ulid import ULID


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: ULID string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class _PrefixedId:
    """Base for child-entity identifiers of the form ``<prefix><8 hex>``.

    The format is shared with previously stored documents, so generation
    keeps the first eight characters of a random UUID.
    """

    prefix: ClassVar[str] = ""
    _pattern: ClassVar[re.Pattern[str]]

    value: str

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._pattern = re.compile(rf"^{re.escape(cls.prefix)}[0-9a-f]{{8}}$")

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a fresh identifier with the class prefix."""
        return cls(value=f"{cls.prefix}{uuid.uuid4().hex[:8]}")

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create an identifier from its string form.

        Raises:
            ValueError: If value does not match ``<prefix><8 lowercase hex>``
        """
        if not cls._pattern.match(value):
            raise ValueError(f"Invalid {cls.__name__}: {value}")
        return cls(value=value)


@dataclass(frozen=True)
class ContextId(_PrefixedId):
    """Identifier for a Context (``ctx-XXXXXXXX``)."""

    prefix: ClassVar[str] = "ctx-"


@dataclass(frozen=True)
class AttributeId(_PrefixedId):
    """Identifier for an IdentityAttribute (``attr-XXXXXXXX``)."""

    prefix: ClassVar[str] = "attr-"


@dataclass(frozen=True)
class ConsentId(_PrefixedId):
    """Identifier for a Consent (``cons-XXXXXXXX``)."""

    prefix: ClassVar[str] = "cons-"


@dataclass(frozen=True)
class ConnectionId(_PrefixedId):
    """Identifier for a Connection (``conn-XXXXXXXX``)."""

    prefix: ClassVar[str] = "conn-"


class TokenValidity(StrEnum):
    """How long a token issued under a consent stays valid."""

    ONE_MINUTE = "ONE_MINUTE"
    ONE_HOUR = "ONE_HOUR"
    ONE_DAY = "ONE_DAY"
    ONE_MONTH = "ONE_MONTH"
    ONE_YEAR = "ONE_YEAR"

    @property
    def duration(self) -> timedelta:
        """Lifetime of a token issued with this validity."""
        return _TOKEN_VALIDITY_DURATIONS[self]


_TOKEN_VALIDITY_DURATIONS: dict[TokenValidity, timedelta] = {
    TokenValidity.ONE_MINUTE: timedelta(minutes=1),
    TokenValidity.ONE_HOUR: timedelta(hours=1),
    TokenValidity.ONE_DAY: timedelta(days=1),
    TokenValidity.ONE_MONTH: timedelta(days=30),
    TokenValidity.ONE_YEAR: timedelta(days=365),
}


@dataclass(frozen=True)
class AttributeDraft:
    """Incoming attribute payload before the aggregate assigns an identity.

    Used for attribute creation, full replacement on update, and bulk
    import from external providers. ``context_ids=None`` is accepted and
    normalized to an empty list by the aggregate.
    """

    name: str
    value: str
    visible: bool = False
    context_ids: list[ContextId] | None = None

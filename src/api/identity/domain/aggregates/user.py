"""User aggregate for the identity context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from identity.domain.attribute_naming import disambiguate_names, provider_tag
from identity.domain.entities import (
    Connection,
    Consent,
    Context,
    IdentityAttribute,
    unique_context_ids,
)
from identity.domain.exceptions import (
    AttributeNameConflictError,
    PreconditionViolationError,
)
from identity.domain.value_objects import (
    AttributeDraft,
    AttributeId,
    ConnectionId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)

DEFAULT_CONTEXTS: tuple[tuple[str, str], ...] = (
    ("Personal", "Your personal identity details for everyday use."),
    (
        "Professional",
        "Identity details relevant to your professional life and career.",
    ),
    (
        "Academic",
        "Identity details for educational institutions and academic pursuits.",
    ),
)

USERNAME_ATTRIBUTE_NAME = "Username"


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class User:
    """User aggregate owning every piece of a person's identity data.

    Contexts, attributes, consents and connections are stored as flat
    lists keyed by their own ids. Nothing is shared between users and
    nothing is persisted on its own: the whole aggregate is saved at once.

    Business rules:
    - Attribute names are unique per user, case-insensitively
    - Deleting a context strips its id from every attribute, deleting none
    - At most one consent per client_id; a second grant updates the first
    - At most one connection per (provider_id, provider_user_id)

    Mutators that find nothing to act on return None or False and leave
    the aggregate untouched, so callers can skip the save.
    """

    id: UserId | None
    username: str
    credential_hash: str = ""
    email: str = ""
    roles: list[str] = field(default_factory=list)
    contexts: list[Context] = field(default_factory=list)
    attributes: list[IdentityAttribute] = field(default_factory=list)
    consents: list[Consent] = field(default_factory=list)
    connections: list[Connection] = field(default_factory=list)

    @classmethod
    def register(
        cls,
        username: str,
        email: str = "",
        credential_hash: str = "",
        roles: list[str] | None = None,
    ) -> User:
        """Factory method for a brand new user with a generated id."""
        return cls(
            id=UserId.generate(),
            username=username,
            email=email,
            credential_hash=credential_hash,
            roles=list(roles) if roles else ["USER"],
        )

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.username})"

    def __repr__(self) -> str:
        """Return representation without the credential hash."""
        return f"User(id={self.id!s}, username={self.username!r})"

    # Provisioning

    def provision_defaults(self) -> None:
        """Replace contexts and attributes with the out-of-the-box set.

        Creates the Personal, Professional and Academic contexts and one
        visible Username attribute linked to all three.

        Raises:
            PreconditionViolationError: If the user has no id yet
        """
        if self.id is None:
            raise PreconditionViolationError(
                "User ID cannot be None for provisioning default data."
            )

        self.contexts = [
            Context(id=ContextId.generate(), name=name, description=description)
            for name, description in DEFAULT_CONTEXTS
        ]
        self.attributes = [
            IdentityAttribute(
                id=AttributeId.generate(),
                user_id=self.id,
                name=USERNAME_ATTRIBUTE_NAME,
                value=self.username,
                visible=True,
                context_ids=[ctx.id for ctx in self.contexts],
            )
        ]

    # Contexts

    def get_context(self, context_id: ContextId) -> Context | None:
        return next((c for c in self.contexts if c.id == context_id), None)

    def add_context(self, name: str, description: str = "") -> Context:
        context = Context(id=ContextId.generate(), name=name, description=description)
        self.contexts.append(context)
        return context

    def replace_context(
        self, context_id: ContextId, name: str, description: str = ""
    ) -> Context | None:
        """Replace a context's content in place, keeping its id and position."""
        for index, existing in enumerate(self.contexts):
            if existing.id == context_id:
                replacement = Context(id=context_id, name=name, description=description)
                self.contexts[index] = replacement
                return replacement
        return None

    def remove_context(self, context_id: ContextId) -> bool:
        """Remove a context and prune its id from every attribute.

        No attribute is ever deleted by this cascade.
        """
        if self.get_context(context_id) is None:
            return False

        self.contexts = [c for c in self.contexts if c.id != context_id]
        for attribute in self.attributes:
            attribute.detach_context(context_id)
        return True

    # Attributes

    def get_attribute(self, attribute_id: AttributeId) -> IdentityAttribute | None:
        return next((a for a in self.attributes if a.id == attribute_id), None)

    def _ensure_name_available(
        self, name: str, ignore: AttributeId | None = None
    ) -> None:
        if any(a.has_name(name) and a.id != ignore for a in self.attributes):
            raise AttributeNameConflictError(name)

    def _new_attribute(self, draft: AttributeDraft, name: str) -> IdentityAttribute:
        return IdentityAttribute(
            id=AttributeId.generate(),
            user_id=self.id,
            name=name,
            value=draft.value,
            visible=draft.visible,
            context_ids=unique_context_ids(draft.context_ids),
        )

    def add_attribute(self, draft: AttributeDraft) -> IdentityAttribute:
        """Add a new attribute.

        Raises:
            AttributeNameConflictError: If the name is already in use
        """
        self._ensure_name_available(draft.name)
        attribute = self._new_attribute(draft, draft.name)
        self.attributes.append(attribute)
        return attribute

    def replace_attribute(
        self, attribute_id: AttributeId, draft: AttributeDraft
    ) -> IdentityAttribute | None:
        """Replace an attribute's content in place, keeping its id.

        Raises:
            AttributeNameConflictError: If another attribute already has the name
        """
        self._ensure_name_available(draft.name, ignore=attribute_id)

        for index, existing in enumerate(self.attributes):
            if existing.id == attribute_id:
                replacement = IdentityAttribute(
                    id=attribute_id,
                    user_id=self.id,
                    name=draft.name,
                    value=draft.value,
                    visible=draft.visible,
                    context_ids=unique_context_ids(draft.context_ids),
                )
                self.attributes[index] = replacement
                return replacement
        return None

    def remove_attribute(self, attribute_id: AttributeId) -> bool:
        if self.get_attribute(attribute_id) is None:
            return False
        self.attributes = [a for a in self.attributes if a.id != attribute_id]
        return True

    def import_attributes(
        self, drafts: list[AttributeDraft], provider_user_id: str
    ) -> list[IdentityAttribute]:
        """Append externally sourced attributes, renaming colliding names.

        Every draft becomes a new attribute; existing attributes are never
        updated, so importing the same data twice grows the list again.

        Returns:
            The newly created attributes, in import order
        """
        names = disambiguate_names(
            taken=(a.name for a in self.attributes),
            names=(d.name for d in drafts),
            tag=provider_tag(provider_user_id),
        )
        imported = [
            self._new_attribute(draft, name) for draft, name in zip(drafts, names)
        ]
        self.attributes.extend(imported)
        return imported

    def disclosable_attributes(self, context_id: ContextId) -> list[IdentityAttribute]:
        """Visible attributes associated with a context."""
        return [
            a for a in self.attributes if a.visible and a.is_in_context(context_id)
        ]

    # Connections

    def link_connection(
        self,
        provider_id: str,
        provider_user_id: str,
        provider_access_token: str,
        now: datetime | None = None,
    ) -> Connection:
        """Link a provider account, or refresh the token of an already linked one."""
        for connection in self.connections:
            if connection.matches(provider_id, provider_user_id):
                connection.provider_access_token = provider_access_token
                return connection

        connection = Connection(
            id=ConnectionId.generate(),
            provider_id=provider_id,
            provider_user_id=provider_user_id,
            provider_access_token=provider_access_token,
            connected_at=now or _utc_now(),
        )
        self.connections.append(connection)
        return connection

    def unlink_connection(self, connection_id: ConnectionId) -> bool:
        if not any(c.id == connection_id for c in self.connections):
            return False
        self.connections = [c for c in self.connections if c.id != connection_id]
        return True

    # Consents

    def get_consent(self, consent_id: ConsentId) -> Consent | None:
        return next((c for c in self.consents if c.id == consent_id), None)

    def consent_for_client(self, client_id: str) -> Consent | None:
        return next((c for c in self.consents if c.client_id == client_id), None)

    def record_consent(
        self,
        client_id: str,
        context_id: ContextId | None,
        shared_attributes: list[AttributeId],
        token_validity: TokenValidity | None = None,
        now: datetime | None = None,
        default_validity: TokenValidity = TokenValidity.ONE_HOUR,
    ) -> Consent:
        """Grant a client access, or update the grant it already has.

        An existing consent keeps its id, created_at and access trail;
        only the context, shared attributes, validity and last_updated_at
        change.
        """
        now = now or _utc_now()
        existing = self.consent_for_client(client_id)

        if existing is not None:
            existing.context_id = context_id
            existing.shared_attributes = list(shared_attributes)
            if token_validity is not None:
                existing.token_validity = token_validity
            existing.touch(now)
            return existing

        consent = Consent(
            id=ConsentId.generate(),
            client_id=client_id,
            context_id=context_id,
            shared_attributes=list(shared_attributes),
            token_validity=token_validity or default_validity,
            created_at=now,
            last_updated_at=now,
        )
        self.consents.append(consent)
        return consent

    def revoke_consent(self, consent_id: ConsentId) -> bool:
        if self.get_consent(consent_id) is None:
            return False
        self.consents = [c for c in self.consents if c.id != consent_id]
        return True

    def remove_consented_attribute(
        self, consent_id: ConsentId, attribute_id: AttributeId
    ) -> bool:
        """Withdraw one attribute from a consent; the consent itself stays active."""
        consent = self.get_consent(consent_id)
        if consent is None or not consent.shares(attribute_id):
            return False
        consent.shared_attributes.remove(attribute_id)
        return True

    def consented_attributes(self, client_id: str) -> list[IdentityAttribute] | None:
        """Selective disclosure: owned attributes explicitly listed in the client's consent.

        Returns:
            Matching attributes in the user's attribute order, or None if
            the client has no consent (distinct from an empty disclosure)
        """
        consent = self.consent_for_client(client_id)
        if consent is None:
            return None
        shared = set(consent.shared_attributes)
        return [a for a in self.attributes if a.id in shared]

    def audit_access(self, consent_id: ConsentId, now: datetime | None = None) -> bool:
        consent = self.get_consent(consent_id)
        if consent is None:
            return False
        consent.record_access(now or _utc_now())
        return True

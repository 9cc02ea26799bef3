"""Consent application service for the identity bounded context.

Records, updates and revokes the consents users grant to client
applications, and performs selective disclosure: a client only ever
receives attributes that the user owns and that its consent lists.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.locking import UserLocks, get_user_locks
from identity.application.observability import (
    ConsentServiceProbe,
    DefaultConsentServiceProbe,
)
from identity.domain.entities import Consent, IdentityAttribute
from identity.domain.value_objects import (
    AttributeId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)
from identity.ports.repositories import IUserRepository
from infrastructure.settings import IdentitySettings, get_identity_settings


class ConsentService:
    """Application service for consents and attribute disclosure.

    Consent lifecycle: absent -> active (first grant) -> active (later
    grants update in place) -> revoked (removed). Withdrawing single
    attributes never revokes the consent, even when none are left.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: ConsentServiceProbe | None = None,
        user_locks: UserLocks | None = None,
        settings: IdentitySettings | None = None,
    ):
        """Initialize ConsentService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user aggregate persistence
            probe: Optional domain probe for observability
            user_locks: Optional per-user lock registry (process-wide by default)
            settings: Optional identity settings (token validity defaults)
        """
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultConsentServiceProbe()
        self._user_locks = (
            user_locks if user_locks is not None else get_user_locks()
        )
        self._settings = settings or get_identity_settings()

    async def record_consent(
        self,
        user_id: UserId,
        client_id: str,
        context_id: ContextId | None,
        shared_attributes: list[AttributeId],
        token_validity: TokenValidity | None = None,
    ) -> Consent | None:
        """Grant a client access to attributes, or update its existing grant.

        A client holds at most one consent per user. A repeated grant
        overwrites the context, shared attributes and validity and bumps
        last_updated_at; created_at and the access trail are kept.

        Returns:
            The stored Consent, or None if the user does not exist
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                was_created = user.consent_for_client(client_id) is None
                consent = user.record_consent(
                    client_id=client_id,
                    context_id=context_id,
                    shared_attributes=shared_attributes,
                    token_validity=token_validity,
                    default_validity=self._settings.default_token_validity,
                )
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.consent_operation_failed(
                user_id=user_id.value, operation="record_consent", error=str(e)
            )
            raise

        self._probe.consent_recorded(
            user_id=user_id.value,
            consent_id=consent.id.value,
            client_id=client_id,
            was_created=was_created,
        )
        return consent

    async def revoke_consent(self, user_id: UserId, consent_id: ConsentId) -> bool:
        """Revoke (remove) a consent.

        Returns:
            True if the consent was removed, False if the user or consent was not found
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                if not user.revoke_consent(consent_id):
                    self._probe.consent_not_found(
                        user_id=user_id.value, consent_id=consent_id.value
                    )
                    return False

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.consent_operation_failed(
                user_id=user_id.value, operation="revoke_consent", error=str(e)
            )
            raise

        self._probe.consent_revoked(user_id=user_id.value, consent_id=consent_id.value)
        return True

    async def remove_consented_attribute(
        self, user_id: UserId, consent_id: ConsentId, attribute_id: AttributeId
    ) -> bool:
        """Withdraw a single attribute from a consent.

        Saves only when the attribute was actually listed in the consent.

        Returns:
            True if the attribute was withdrawn, False if the user, the
            consent, or the attribute within the consent was missing
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                if user.get_consent(consent_id) is None:
                    self._probe.consent_not_found(
                        user_id=user_id.value, consent_id=consent_id.value
                    )
                    return False

                if not user.remove_consented_attribute(consent_id, attribute_id):
                    self._probe.consented_attribute_not_found(
                        user_id=user_id.value,
                        consent_id=consent_id.value,
                        attribute_id=attribute_id.value,
                    )
                    return False

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.consent_operation_failed(
                user_id=user_id.value,
                operation="remove_consented_attribute",
                error=str(e),
            )
            raise

        self._probe.consented_attribute_removed(
            user_id=user_id.value,
            consent_id=consent_id.value,
            attribute_id=attribute_id.value,
        )
        return True

    async def find_consent_by_id(self, user_id: UserId, client_id: str) -> Consent | None:
        """Look up a user's consent by the client application identifier.

        The lookup key is the external client id, not the internal
        consent id, despite the method name.

        Returns:
            The Consent, or None if the user or the consent does not exist
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            self._probe.user_not_found(user_id.value)
            return None
        return user.consent_for_client(client_id)

    async def get_consented_attributes(
        self, user_id: UserId, client_id: str
    ) -> list[IdentityAttribute] | None:
        """Selective disclosure for a relying party.

        Returns exactly the user's attributes whose ids appear in the
        client's consent. None means there is nothing to disclose at all
        (no such user or no consent), which is different from a consent
        whose list happens to be empty.

        Returns:
            Consented attributes in the user's attribute order, or None
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            self._probe.user_not_found(user_id.value)
            return None

        attributes = user.consented_attributes(client_id)
        if attributes is None:
            self._probe.disclosure_without_consent(
                user_id=user_id.value, client_id=client_id
            )
            return None

        self._probe.attributes_disclosed(
            user_id=user_id.value,
            client_id=client_id,
            attribute_count=len(attributes),
        )
        return attributes

    async def audit_access(self, user_id: UserId, consent_id: ConsentId) -> bool:
        """Append the current time to a consent's access trail.

        Invoked by the relying-party-facing API after every successful
        attribute handoff. A missing consent is a silent no-op.

        Returns:
            True if an access was recorded, False otherwise
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                if not user.audit_access(consent_id):
                    self._probe.consent_not_found(
                        user_id=user_id.value, consent_id=consent_id.value
                    )
                    return False

                await self._user_repository.save(user)
                consent = user.get_consent(consent_id)
                access_count = len(consent.accessed_at) if consent else 0
        except Exception as e:
            self._probe.consent_operation_failed(
                user_id=user_id.value, operation="audit_access", error=str(e)
            )
            raise

        self._probe.access_audited(
            user_id=user_id.value,
            consent_id=consent_id.value,
            access_count=access_count,
        )
        return True

    async def token_validity_for_client(
        self, user_id: UserId, client_id: str
    ) -> TokenValidity | None:
        """Validity a token issued to this client should carry.

        Falls back to the configured fallback validity when the client
        has no consent yet.

        Returns:
            The TokenValidity, or None if the user does not exist
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            self._probe.user_not_found(user_id.value)
            return None

        consent = user.consent_for_client(client_id)
        if consent is None:
            return self._settings.fallback_token_validity
        return consent.token_validity

    async def list_disclosable_attributes(
        self, user_id: UserId, context_id: ContextId
    ) -> list[IdentityAttribute] | None:
        """Visible attributes of a context, i.e. what a client may ask consent for.

        Returns:
            Visible attributes linked to the context, or None if the user
            does not exist
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            self._probe.user_not_found(user_id.value)
            return None
        return user.disclosable_attributes(context_id)

"""Attribute application service for the identity bounded context.

Handles single-attribute CRUD with case-insensitive name uniqueness, and
bulk import of attributes obtained from external providers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from identity.application.locking import UserLocks, get_user_locks
from identity.application.observability import (
    AttributeServiceProbe,
    DefaultAttributeServiceProbe,
)
from identity.domain.entities import IdentityAttribute
from identity.domain.exceptions import AttributeNameConflictError
from identity.domain.provider_profile import attributes_from_provider_profile
from identity.domain.value_objects import AttributeDraft, AttributeId, UserId
from identity.ports.repositories import IUserRepository


class AttributeService:
    """Application service for identity attribute management.

    Every mutation loads the whole User aggregate, changes it, and saves
    it back inside one transaction while holding the user's write lock.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: IUserRepository,
        probe: AttributeServiceProbe | None = None,
        user_locks: UserLocks | None = None,
    ):
        """Initialize AttributeService with dependencies.

        Args:
            session: Database session for transaction management
            user_repository: Repository for user aggregate persistence
            probe: Optional domain probe for observability
            user_locks: Optional per-user lock registry (process-wide by default)
        """
        self._session = session
        self._user_repository = user_repository
        self._probe = probe or DefaultAttributeServiceProbe()
        self._user_locks = (
            user_locks if user_locks is not None else get_user_locks()
        )

    async def create_attribute(
        self, user_id: UserId, draft: AttributeDraft
    ) -> IdentityAttribute | None:
        """Create a new attribute after checking its name is free.

        Args:
            user_id: Owner of the attribute
            draft: Name, value, visibility and context ids

        Returns:
            The created IdentityAttribute, or None if the user does not exist

        Raises:
            AttributeNameConflictError: If the user already has an attribute
                with that name (case-insensitive)
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                attribute = user.add_attribute(draft)
                await self._user_repository.save(user)
        except AttributeNameConflictError as e:
            self._probe.attribute_name_conflict(user_id=user_id.value, name=e.name)
            raise
        except Exception as e:
            self._probe.attribute_operation_failed(
                user_id=user_id.value, operation="create_attribute", error=str(e)
            )
            raise

        self._probe.attribute_created(
            user_id=user_id.value, attribute_id=attribute.id.value
        )
        return attribute

    async def update_attribute(
        self, user_id: UserId, attribute_id: AttributeId, draft: AttributeDraft
    ) -> IdentityAttribute | None:
        """Replace an attribute's content in place, keeping its id.

        Returns:
            The updated IdentityAttribute, or None if the user or attribute
            was not found

        Raises:
            AttributeNameConflictError: If a different attribute already
                uses the new name (case-insensitive)
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                attribute = user.replace_attribute(attribute_id, draft)
                if attribute is None:
                    self._probe.attribute_not_found(
                        user_id=user_id.value, attribute_id=attribute_id.value
                    )
                    return None

                await self._user_repository.save(user)
        except AttributeNameConflictError as e:
            self._probe.attribute_name_conflict(user_id=user_id.value, name=e.name)
            raise
        except Exception as e:
            self._probe.attribute_operation_failed(
                user_id=user_id.value, operation="update_attribute", error=str(e)
            )
            raise

        self._probe.attribute_updated(
            user_id=user_id.value, attribute_id=attribute_id.value
        )
        return attribute

    async def delete_attribute(self, user_id: UserId, attribute_id: AttributeId) -> bool:
        """Delete an attribute. Consents that list it are left untouched.

        Returns:
            True if the attribute was deleted, False if the user or attribute
            was not found
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return False

                if not user.remove_attribute(attribute_id):
                    self._probe.attribute_not_found(
                        user_id=user_id.value, attribute_id=attribute_id.value
                    )
                    return False

                await self._user_repository.save(user)
        except Exception as e:
            self._probe.attribute_operation_failed(
                user_id=user_id.value, operation="delete_attribute", error=str(e)
            )
            raise

        self._probe.attribute_deleted(
            user_id=user_id.value, attribute_id=attribute_id.value
        )
        return True

    async def save_attributes_bulk(
        self,
        user_id: UserId,
        drafts: list[AttributeDraft],
        provider_user_id: str,
    ) -> list[IdentityAttribute] | None:
        """Merge a batch of provider attributes into the user's attributes.

        Every draft is added as a new attribute. Names that collide with
        an existing name, or with an earlier name in the same batch, get
        the provider account tag appended (``Email (jdoe)``). Importing the
        same data twice therefore adds a second, renamed copy.

        Args:
            user_id: Owner of the attributes
            drafts: Attributes from the provider, in order
            provider_user_id: Provider account id, used to derive the tag

        Returns:
            The user's full attribute list after the import, or None if the
            user does not exist
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                imported = user.import_attributes(drafts, provider_user_id)
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.attribute_operation_failed(
                user_id=user_id.value, operation="save_attributes_bulk", error=str(e)
            )
            raise

        renamed = sum(
            1 for draft, attr in zip(drafts, imported) if draft.name != attr.name
        )
        self._probe.attributes_imported(
            user_id=user_id.value,
            imported_count=len(imported),
            renamed_count=renamed,
        )
        return list(user.attributes)

    async def import_provider_profile(
        self,
        user_id: UserId,
        provider_user_id: str,
        profile: Mapping[str, Any],
    ) -> list[IdentityAttribute] | None:
        """Map a provider profile payload to attributes and bulk-import them.

        Every profile field becomes a visible attribute in the user's
        Personal context.

        Returns:
            The user's full attribute list after the import, or None if the
            user does not exist

        Raises:
            MissingPersonalContextError: If the user has no Personal context
        """
        try:
            async with self._user_locks.hold(user_id), self._session.begin():
                user = await self._user_repository.get_by_id(user_id)
                if user is None:
                    self._probe.user_not_found(user_id.value)
                    return None

                drafts = attributes_from_provider_profile(profile, user.contexts)
                imported = user.import_attributes(drafts, provider_user_id)
                await self._user_repository.save(user)
        except Exception as e:
            self._probe.attribute_operation_failed(
                user_id=user_id.value,
                operation="import_provider_profile",
                error=str(e),
            )
            raise

        renamed = sum(
            1 for draft, attr in zip(drafts, imported) if draft.name != attr.name
        )
        self._probe.attributes_imported(
            user_id=user_id.value,
            imported_count=len(imported),
            renamed_count=renamed,
        )
        return list(user.attributes)

"""Unit tests for ContextService."""

import pytest
from unittest.mock import create_autospec

from identity.application.observability import ContextServiceProbe
from identity.application.services import ContextService
from identity.domain.value_objects import AttributeDraft, ContextId, UserId


@pytest.fixture
def mock_probe():
    return create_autospec(ContextServiceProbe, instance=True)


@pytest.fixture
def context_service(mock_session, mock_user_repository, mock_probe, user_locks):
    return ContextService(
        session=mock_session,
        user_repository=mock_user_repository,
        probe=mock_probe,
        user_locks=user_locks,
    )


class TestContextServiceInit:
    """Tests for ContextService initialization."""

    def test_uses_default_probe_when_not_provided(
        self, mock_session, mock_user_repository, user_locks
    ):
        service = ContextService(
            session=mock_session,
            user_repository=mock_user_repository,
            user_locks=user_locks,
        )
        assert service._probe is not None

    def test_keeps_given_lock_registry(self, context_service, user_locks):
        assert context_service._user_locks is user_locks


class TestCreateContext:
    """Tests for create_context."""

    @pytest.mark.asyncio
    async def test_appends_context_and_saves(
        self, context_service, mock_user_repository, mock_session, mock_probe, user
    ):
        mock_user_repository.get_by_id.return_value = user

        context = await context_service.create_context(user.id, "Gaming", "Handles")

        assert context is not None
        assert context.name == "Gaming"
        assert user.contexts[-1] is context
        mock_user_repository.save.assert_awaited_once_with(user)
        mock_session.begin.assert_called_once()
        mock_probe.context_created.assert_called_once_with(
            user_id=user.id.value, context_id=context.id.value
        )

    @pytest.mark.asyncio
    async def test_returns_none_for_unknown_user(
        self, context_service, mock_user_repository, mock_probe
    ):
        mock_user_repository.get_by_id.return_value = None
        user_id = UserId.generate()

        result = await context_service.create_context(user_id, "Gaming")

        assert result is None
        mock_user_repository.save.assert_not_called()
        mock_probe.user_not_found.assert_called_once_with(user_id.value)

    @pytest.mark.asyncio
    async def test_probes_and_reraises_repository_failure(
        self, context_service, mock_user_repository, mock_probe, user
    ):
        mock_user_repository.get_by_id.return_value = user
        mock_user_repository.save.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError, match="connection lost"):
            await context_service.create_context(user.id, "Gaming")

        mock_probe.context_operation_failed.assert_called_once_with(
            user_id=user.id.value, operation="create_context", error="connection lost"
        )
        mock_probe.context_created.assert_not_called()


class TestUpdateContext:
    """Tests for update_context."""

    @pytest.mark.asyncio
    async def test_replaces_context_keeping_id(
        self, context_service, mock_user_repository, user
    ):
        mock_user_repository.get_by_id.return_value = user
        target = user.contexts[0]

        updated = await context_service.update_context(
            user.id, target.id, "Private", "Just me"
        )

        assert updated.id == target.id
        assert user.contexts[0].name == "Private"
        mock_user_repository.save.assert_awaited_once_with(user)

    @pytest.mark.asyncio
    async def test_unknown_context_is_not_saved(
        self, context_service, mock_user_repository, mock_probe, user
    ):
        mock_user_repository.get_by_id.return_value = user
        missing = ContextId.generate()

        result = await context_service.update_context(user.id, missing, "Private")

        assert result is None
        mock_user_repository.save.assert_not_called()
        mock_probe.context_not_found.assert_called_once_with(
            user_id=user.id.value, context_id=missing.value
        )


class TestDeleteContext:
    """Tests for delete_context."""

    @pytest.mark.asyncio
    async def test_cascades_to_attributes_without_deleting_them(
        self, context_service, mock_user_repository, mock_probe, user
    ):
        mock_user_repository.get_by_id.return_value = user
        personal = user.contexts[0].id
        user.add_attribute(
            AttributeDraft(name="Email", value="a@b.com", context_ids=[personal])
        )
        user.add_attribute(AttributeDraft(name="Phone", value="123"))

        result = await context_service.delete_context(user.id, personal)

        assert result is True
        assert len(user.attributes) == 3
        assert all(personal not in a.context_ids for a in user.attributes)
        mock_user_repository.save.assert_awaited_once_with(user)
        mock_probe.context_deleted.assert_called_once_with(
            user_id=user.id.value,
            context_id=personal.value,
            detached_attribute_count=2,
        )

    @pytest.mark.asyncio
    async def test_unknown_context_returns_false(
        self, context_service, mock_user_repository, user
    ):
        mock_user_repository.get_by_id.return_value = user

        result = await context_service.delete_context(user.id, ContextId.generate())

        assert result is False
        mock_user_repository.save.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_user_returns_false(
        self, context_service, mock_user_repository
    ):
        mock_user_repository.get_by_id.return_value = None

        result = await context_service.delete_context(
            UserId.generate(), ContextId.generate()
        )

        assert result is False
        mock_user_repository.save.assert_not_called()

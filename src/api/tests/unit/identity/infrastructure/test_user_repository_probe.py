"""Unit tests for the identity repository domain probe."""

from unittest.mock import Mock

from identity.infrastructure.observability import DefaultUserRepositoryProbe
from shared_kernel.observability_context import ObservationContext


class TestDefaultUserRepositoryProbe:
    """Tests for DefaultUserRepositoryProbe."""

    def test_creates_with_default_logger(self):
        probe = DefaultUserRepositoryProbe()
        assert probe._logger is not None

    def test_accepts_custom_logger(self):
        custom_logger = Mock()
        probe = DefaultUserRepositoryProbe(logger=custom_logger)
        assert probe._logger is custom_logger


class TestUserSaved:
    """Tests for user_saved probe method."""

    def test_logs_with_correct_parameters(self):
        mock_logger = Mock()
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.user_saved(user_id="01ABC123", username="alice")

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "user_saved"
        assert call_args[1]["user_id"] == "01ABC123"
        assert call_args[1]["username"] == "alice"


class TestLookupEvents:
    """Tests for lookup probe methods."""

    def test_user_retrieved_is_debug(self):
        mock_logger = Mock()
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.user_retrieved(user_id="01ABC123")

        mock_logger.debug.assert_called_once()
        assert mock_logger.debug.call_args[0][0] == "user_retrieved"

    def test_username_not_found(self):
        mock_logger = Mock()
        probe = DefaultUserRepositoryProbe(logger=mock_logger)

        probe.username_not_found(username="ghost")

        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "username_not_found"
        assert call_args[1]["username"] == "ghost"


class TestUserDeleted:
    """Tests for user_deleted probe method."""

    def test_logs_with_context(self):
        mock_logger = Mock()
        context = ObservationContext(request_id="req-9")
        probe = DefaultUserRepositoryProbe(logger=mock_logger).with_context(context)

        probe.user_deleted(user_id="01ABC123")

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "user_deleted"
        assert call_args[1]["request_id"] == "req-9"

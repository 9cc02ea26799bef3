"""Unit tests for identity application service probes."""

from unittest.mock import Mock

import pytest

from identity.application.observability import (
    DefaultAttributeServiceProbe,
    DefaultConnectionServiceProbe,
    DefaultConsentServiceProbe,
    DefaultContextServiceProbe,
    DefaultUserServiceProbe,
)
from shared_kernel.observability_context import ObservationContext


@pytest.mark.parametrize(
    "probe_class",
    [
        DefaultAttributeServiceProbe,
        DefaultConnectionServiceProbe,
        DefaultConsentServiceProbe,
        DefaultContextServiceProbe,
        DefaultUserServiceProbe,
    ],
)
class TestProbeConstruction:
    """Tests shared by every default service probe."""

    def test_creates_with_default_logger(self, probe_class):
        probe = probe_class()
        assert probe._logger is not None

    def test_accepts_custom_logger(self, probe_class):
        custom_logger = Mock()
        probe = probe_class(logger=custom_logger)
        assert probe._logger is custom_logger

    def test_with_context_returns_new_probe_sharing_logger(self, probe_class):
        custom_logger = Mock()
        probe = probe_class(logger=custom_logger)
        context = ObservationContext(request_id="req-1")

        bound = probe.with_context(context)

        assert bound is not probe
        assert bound._logger is custom_logger
        assert bound._context is context


class TestContextServiceProbe:
    """Tests for DefaultContextServiceProbe."""

    def test_context_deleted_logs_detached_count(self):
        mock_logger = Mock()
        probe = DefaultContextServiceProbe(logger=mock_logger)

        probe.context_deleted(
            user_id="01ABC", context_id="ctx-00000001", detached_attribute_count=2
        )

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "context_deleted"
        assert call_args[1]["detached_attribute_count"] == 2


class TestAttributeServiceProbe:
    """Tests for DefaultAttributeServiceProbe."""

    def test_name_conflict_is_a_warning(self):
        mock_logger = Mock()
        probe = DefaultAttributeServiceProbe(logger=mock_logger)

        probe.attribute_name_conflict(user_id="01ABC", name="Email")

        mock_logger.warning.assert_called_once()
        call_args = mock_logger.warning.call_args
        assert call_args[0][0] == "attribute_name_conflict"
        assert call_args[1]["name"] == "Email"

    def test_attributes_imported_logs_counts(self):
        mock_logger = Mock()
        probe = DefaultAttributeServiceProbe(logger=mock_logger)

        probe.attributes_imported(user_id="01ABC", imported_count=3, renamed_count=1)

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "attributes_imported"
        assert call_args[1]["imported_count"] == 3
        assert call_args[1]["renamed_count"] == 1


class TestConnectionServiceProbe:
    """Tests for DefaultConnectionServiceProbe."""

    def test_connection_linked(self):
        mock_logger = Mock()
        probe = DefaultConnectionServiceProbe(logger=mock_logger)

        probe.connection_linked(
            user_id="01ABC",
            connection_id="conn-00000001",
            provider_id="google",
            was_created=True,
        )

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "connection_linked"
        assert call_args[1]["provider_id"] == "google"
        assert "provider_access_token" not in call_args[1]


class TestConsentServiceProbe:
    """Tests for DefaultConsentServiceProbe."""

    def test_consent_recorded(self):
        mock_logger = Mock()
        probe = DefaultConsentServiceProbe(logger=mock_logger)

        probe.consent_recorded(
            user_id="01ABC",
            consent_id="cons-00000001",
            client_id="client-1",
            was_created=False,
        )

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "consent_recorded"
        assert call_args[1]["client_id"] == "client-1"
        assert call_args[1]["was_created"] is False

    def test_disclosure_without_consent_is_a_warning(self):
        mock_logger = Mock()
        probe = DefaultConsentServiceProbe(logger=mock_logger)

        probe.disclosure_without_consent(user_id="01ABC", client_id="client-1")

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args[0][0] == "disclosure_without_consent"

    def test_consented_attribute_not_found_names_the_attribute(self):
        mock_logger = Mock()
        probe = DefaultConsentServiceProbe(logger=mock_logger)

        probe.consented_attribute_not_found(
            user_id="01ABC", consent_id="cons-00000001", attribute_id="attr-00000001"
        )

        mock_logger.debug.assert_called_once()
        call_args = mock_logger.debug.call_args
        assert call_args[0][0] == "consented_attribute_not_found"
        assert call_args[1]["attribute_id"] == "attr-00000001"

    def test_operation_failed_is_an_error(self):
        mock_logger = Mock()
        probe = DefaultConsentServiceProbe(logger=mock_logger)

        probe.consent_operation_failed(
            user_id="01ABC", operation="record_consent", error="boom"
        )

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert call_args[1]["operation"] == "record_consent"
        assert call_args[1]["error"] == "boom"

    def test_includes_context_metadata(self):
        mock_logger = Mock()
        context = ObservationContext(request_id="req-1", actor="relying-party")
        probe = DefaultConsentServiceProbe(logger=mock_logger).with_context(context)

        probe.attributes_disclosed(
            user_id="01ABC", client_id="client-1", attribute_count=2
        )

        call_kwargs = mock_logger.info.call_args[1]
        assert call_kwargs["request_id"] == "req-1"
        assert call_kwargs["actor"] == "relying-party"
        assert call_kwargs["attribute_count"] == 2


class TestUserServiceProbe:
    """Tests for DefaultUserServiceProbe."""

    def test_registration_failed_is_an_error(self):
        mock_logger = Mock()
        probe = DefaultUserServiceProbe(logger=mock_logger)

        probe.registration_failed(username="alice", error="taken")

        mock_logger.error.assert_called_once()
        call_args = mock_logger.error.call_args
        assert call_args[0][0] == "user_registration_failed"
        assert call_args[1]["username"] == "alice"

    def test_default_data_provisioned(self):
        mock_logger = Mock()
        probe = DefaultUserServiceProbe(logger=mock_logger)

        probe.default_data_provisioned(
            user_id="01ABC", username="alice", context_count=3
        )

        call_args = mock_logger.info.call_args
        assert call_args[0][0] == "default_data_provisioned"
        assert call_args[1]["context_count"] == 3

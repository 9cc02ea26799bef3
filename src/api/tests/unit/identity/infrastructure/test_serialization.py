"""Unit tests for aggregate document serialization."""

from datetime import UTC, datetime

import pytest

from identity.domain.entities import Connection, Consent, IdentityAttribute
from identity.domain.value_objects import (
    AttributeId,
    ConnectionId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)
from identity.infrastructure import serialization


class TestAttributeDocument:
    """Tests for attribute documents."""

    def test_document_shape(self):
        attribute = IdentityAttribute(
            id=AttributeId(value="attr-00000001"),
            user_id=UserId.generate(),
            name="Email",
            value="a@b.com",
            visible=True,
            context_ids=[ContextId(value="ctx-00000001")],
        )

        assert serialization.attribute_to_document(attribute) == {
            "id": "attr-00000001",
            "name": "Email",
            "value": "a@b.com",
            "visible": True,
            "contextIds": ["ctx-00000001"],
        }

    def test_owner_comes_from_the_row(self):
        user_id = UserId.generate()

        attribute = serialization.attribute_from_document(
            {"id": "attr-00000001", "name": "Email"}, user_id
        )

        assert attribute.user_id == user_id
        assert attribute.value == ""
        assert attribute.visible is False
        assert attribute.context_ids == []

    def test_duplicate_stored_context_ids_collapse(self):
        attribute = serialization.attribute_from_document(
            {
                "id": "attr-00000001",
                "name": "Email",
                "contextIds": ["ctx-00000001", "ctx-00000001"],
            },
            UserId.generate(),
        )

        assert attribute.context_ids == [ContextId(value="ctx-00000001")]


class TestConsentDocument:
    """Tests for consent documents."""

    def test_datetimes_and_enum_are_stored_as_strings(self):
        now = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
        consent = Consent(
            id=ConsentId(value="cons-00000001"),
            client_id="client-1",
            context_id=None,
            shared_attributes=[AttributeId(value="attr-00000001")],
            token_validity=TokenValidity.ONE_MONTH,
            created_at=now,
            last_updated_at=now,
            accessed_at=[now],
        )

        doc = serialization.consent_to_document(consent)

        assert doc["contextId"] is None
        assert doc["tokenValidity"] == "ONE_MONTH"
        assert doc["createdAt"] == "2024-03-01T12:00:00+00:00"
        assert doc["accessedAt"] == ["2024-03-01T12:00:00+00:00"]
        assert serialization.consent_from_document(doc) == consent

    def test_unknown_token_validity_is_rejected(self):
        with pytest.raises(ValueError):
            serialization.consent_from_document(
                {
                    "id": "cons-00000001",
                    "clientId": "client-1",
                    "tokenValidity": "FOREVER",
                    "createdAt": "2024-03-01T12:00:00+00:00",
                    "lastUpdatedAt": "2024-03-01T12:00:00+00:00",
                }
            )


class TestConnectionDocument:
    """Tests for connection documents."""

    def test_keeps_access_token(self):
        connection = Connection(
            id=ConnectionId(value="conn-00000001"),
            provider_id="google",
            provider_user_id="jdoe",
            provider_access_token="token-1",
            connected_at=datetime(2024, 3, 1, tzinfo=UTC),
        )

        doc = serialization.connection_to_document(connection)

        assert doc["providerAccessToken"] == "token-1"
        assert serialization.connection_from_document(doc) == connection

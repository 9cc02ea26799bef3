"""Conversion between the User aggregate and its stored JSON documents.

Child entities are kept as plain dicts with camelCase keys, datetimes as
ISO 8601 strings and enums by value, so the stored shape stays readable
outside of Python.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from identity.domain.entities import Connection, Consent, Context, IdentityAttribute
from identity.domain.value_objects import (
    AttributeId,
    ConnectionId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)

Document = dict[str, Any]


def context_to_document(context: Context) -> Document:
    return {
        "id": context.id.value,
        "name": context.name,
        "description": context.description,
    }


def context_from_document(doc: Document) -> Context:
    return Context(
        id=ContextId(value=doc["id"]),
        name=doc["name"],
        description=doc.get("description", ""),
    )


def attribute_to_document(attribute: IdentityAttribute) -> Document:
    return {
        "id": attribute.id.value,
        "name": attribute.name,
        "value": attribute.value,
        "visible": attribute.visible,
        "contextIds": [c.value for c in attribute.context_ids],
    }


def attribute_from_document(doc: Document, user_id: UserId) -> IdentityAttribute:
    return IdentityAttribute(
        id=AttributeId(value=doc["id"]),
        user_id=user_id,
        name=doc["name"],
        value=doc.get("value", ""),
        visible=bool(doc.get("visible", False)),
        context_ids=[ContextId(value=c) for c in doc.get("contextIds") or []],
    )


def consent_to_document(consent: Consent) -> Document:
    return {
        "id": consent.id.value,
        "clientId": consent.client_id,
        "contextId": consent.context_id.value if consent.context_id else None,
        "sharedAttributes": [a.value for a in consent.shared_attributes],
        "tokenValidity": consent.token_validity.value,
        "createdAt": consent.created_at.isoformat(),
        "lastUpdatedAt": consent.last_updated_at.isoformat(),
        "accessedAt": [ts.isoformat() for ts in consent.accessed_at],
    }


def consent_from_document(doc: Document) -> Consent:
    context_id = doc.get("contextId")
    return Consent(
        id=ConsentId(value=doc["id"]),
        client_id=doc["clientId"],
        context_id=ContextId(value=context_id) if context_id else None,
        shared_attributes=[AttributeId(value=a) for a in doc.get("sharedAttributes") or []],
        token_validity=TokenValidity(doc["tokenValidity"]),
        created_at=datetime.fromisoformat(doc["createdAt"]),
        last_updated_at=datetime.fromisoformat(doc["lastUpdatedAt"]),
        accessed_at=[datetime.fromisoformat(ts) for ts in doc.get("accessedAt") or []],
    )


def connection_to_document(connection: Connection) -> Document:
    return {
        "id": connection.id.value,
        "providerId": connection.provider_id,
        "providerUserId": connection.provider_user_id,
        "providerAccessToken": connection.provider_access_token,
        "connectedAt": connection.connected_at.isoformat(),
    }


def connection_from_document(doc: Document) -> Connection:
    return Connection(
        id=ConnectionId(value=doc["id"]),
        provider_id=doc["providerId"],
        provider_user_id=doc["providerUserId"],
        provider_access_token=doc.get("providerAccessToken", ""),
        connected_at=datetime.fromisoformat(doc["connectedAt"]),
    )

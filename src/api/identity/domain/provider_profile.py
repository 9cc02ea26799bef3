"""Mapping of external provider profiles to identity attributes.

The OAuth exchange itself happens elsewhere; this module only turns the
profile payload a provider returned (e.g. an OpenID userinfo document)
into attribute drafts ready for bulk import.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from identity.domain.entities import Context
from identity.domain.exceptions import MissingPersonalContextError
from identity.domain.value_objects import AttributeDraft

PERSONAL_CONTEXT_NAME = "Personal"


def format_field_name(field_name: str) -> str:
    """Turn a provider field key into a display name (``family_name`` -> ``Family name``)."""
    formatted = field_name.replace("_", " ")
    if not formatted:
        return formatted
    return formatted[0].upper() + formatted[1:]


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def attributes_from_provider_profile(
    profile: Mapping[str, Any], contexts: list[Context]
) -> list[AttributeDraft]:
    """Map every top-level profile field to a visible attribute draft.

    All drafts are associated with the user's Personal context.

    Args:
        profile: Decoded provider profile payload
        contexts: The user's contexts

    Returns:
        One draft per profile field, in payload order

    Raises:
        MissingPersonalContextError: If the user has no Personal context
    """
    personal = next(
        (ctx for ctx in contexts if ctx.name == PERSONAL_CONTEXT_NAME), None
    )
    if personal is None:
        raise MissingPersonalContextError("Personal context not found for user.")

    return [
        AttributeDraft(
            name=format_field_name(key),
            value=_format_value(value),
            visible=True,
            context_ids=[personal.id],
        )
        for key, value in profile.items()
    ]

"""Name disambiguation for attributes imported from external providers.

Kept as pure functions so the "taken names" bookkeeping is a local value
threaded through one import, never state on a long-lived object.
"""

from __future__ import annotations

from collections.abc import Iterable


def provider_tag(provider_user_id: str) -> str:
    """Derive the short tag appended to colliding names.

    The tag is the local part of an email-like provider user id
    (``jdoe`` for ``jdoe@example.com``). Ids without a usable local part
    are used whole.
    """
    local, sep, _ = provider_user_id.partition("@")
    if sep and local:
        return local
    return provider_user_id


def disambiguate_names(
    taken: Iterable[str], names: Iterable[str], tag: str
) -> list[str]:
    """Rename incoming attribute names so none collides, case-insensitively.

    The first collision of ``Email`` becomes ``Email (tag)``; if that is
    taken too, ``Email (tag 2)``, ``Email (tag 3)`` and so on. Every
    returned name is reserved before the next one is processed, so
    duplicates inside the incoming batch are also separated.

    Args:
        taken: Names already used by the user (any case)
        names: Incoming names, in import order
        tag: Disambiguation tag, see provider_tag()

    Returns:
        Final names, same length and order as ``names``
    """
    reserved = {name.lower() for name in taken}
    result: list[str] = []

    for name in names:
        final = name
        if final.lower() in reserved:
            final = f"{name} ({tag})"
            suffix = 2
            while final.lower() in reserved:
                final = f"{name} ({tag} {suffix})"
                suffix += 1
        reserved.add(final.lower())
        result.append(final)

    return result

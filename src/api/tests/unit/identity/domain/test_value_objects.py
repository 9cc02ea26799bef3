"""Unit tests for identity value objects."""

from datetime import timedelta

import pytest

from identity.domain.value_objects import (
    AttributeDraft,
    AttributeId,
    ConnectionId,
    ConsentId,
    ContextId,
    TokenValidity,
    UserId,
)


class TestUserId:
    """Tests for UserId value object."""

    def test_generates_unique_ids(self):
        assert UserId.generate() != UserId.generate()

    def test_from_string_accepts_valid_ulid(self):
        generated = UserId.generate()
        assert UserId.from_string(generated.value) == generated

    def test_from_string_rejects_invalid_value(self):
        with pytest.raises(ValueError, match="Invalid UserId"):
            UserId.from_string("not-a-ulid")

    def test_str_returns_value(self):
        user_id = UserId.generate()
        assert str(user_id) == user_id.value


class TestPrefixedIds:
    """Tests for child-entity identifiers."""

    @pytest.mark.parametrize(
        ("id_class", "prefix"),
        [
            (ContextId, "ctx-"),
            (AttributeId, "attr-"),
            (ConsentId, "cons-"),
            (ConnectionId, "conn-"),
        ],
    )
    def test_generated_id_has_prefix_and_eight_hex_chars(self, id_class, prefix):
        generated = id_class.generate()

        assert generated.value.startswith(prefix)
        suffix = generated.value[len(prefix) :]
        assert len(suffix) == 8
        int(suffix, 16)

    def test_from_string_round_trips_generated_value(self):
        generated = ContextId.generate()
        assert ContextId.from_string(generated.value) == generated

    def test_from_string_rejects_wrong_prefix(self):
        with pytest.raises(ValueError, match="Invalid ContextId"):
            ContextId.from_string("attr-0123abcd")

    def test_from_string_rejects_uppercase_hex(self):
        with pytest.raises(ValueError):
            AttributeId.from_string("attr-0123ABCD")

    def test_ids_of_different_kinds_are_not_equal(self):
        assert ContextId(value="x") != AttributeId(value="x")

    def test_ids_are_hashable(self):
        ids = {ContextId(value="ctx-00000001"), ContextId(value="ctx-00000001")}
        assert len(ids) == 1


class TestTokenValidity:
    """Tests for TokenValidity enum."""

    def test_durations(self):
        assert TokenValidity.ONE_MINUTE.duration == timedelta(minutes=1)
        assert TokenValidity.ONE_HOUR.duration == timedelta(hours=1)
        assert TokenValidity.ONE_DAY.duration == timedelta(days=1)
        assert TokenValidity.ONE_MONTH.duration == timedelta(days=30)
        assert TokenValidity.ONE_YEAR.duration == timedelta(days=365)

    def test_parses_from_stored_value(self):
        assert TokenValidity("ONE_DAY") is TokenValidity.ONE_DAY

    def test_rejects_unknown_value(self):
        with pytest.raises(ValueError):
            TokenValidity("ONE_WEEK")


class TestAttributeDraft:
    """Tests for AttributeDraft."""

    def test_defaults(self):
        draft = AttributeDraft(name="Email", value="a@b.com")
        assert draft.visible is False
        assert draft.context_ids is None

    def test_is_immutable(self):
        draft = AttributeDraft(name="Email", value="a@b.com")
        with pytest.raises(AttributeError):
            draft.name = "Phone"  # type: ignore[misc]

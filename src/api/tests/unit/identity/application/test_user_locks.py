"""Unit tests for per-user write serialization."""

import asyncio

import pytest

from identity.application.locking import UserLocks
from identity.domain.value_objects import UserId


class TestUserLocks:
    """Tests for UserLocks."""

    @pytest.mark.asyncio
    async def test_serializes_blocks_for_the_same_user(self):
        locks = UserLocks()
        user_id = UserId.generate()
        events: list[str] = []

        async def critical(name: str) -> None:
            async with locks.hold(user_id):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(critical("a"), critical("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    @pytest.mark.asyncio
    async def test_different_users_do_not_block_each_other(self):
        locks = UserLocks()
        first, second = UserId.generate(), UserId.generate()
        events: list[str] = []

        async def critical(user_id: UserId, name: str) -> None:
            async with locks.hold(user_id):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(critical(first, "a"), critical(second, "b"))

        assert events[:2] == ["a-start", "b-start"]

    @pytest.mark.asyncio
    async def test_disabled_registry_does_not_serialize(self):
        locks = UserLocks(enabled=False)
        user_id = UserId.generate()
        events: list[str] = []

        async def critical(name: str) -> None:
            async with locks.hold(user_id):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(critical("a"), critical("b"))

        assert locks.enabled is False
        assert events[:2] == ["a-start", "b-start"]

    @pytest.mark.asyncio
    async def test_lock_is_released_on_error(self):
        locks = UserLocks()
        user_id = UserId.generate()

        with pytest.raises(RuntimeError):
            async with locks.hold(user_id):
                raise RuntimeError("boom")

        async with asyncio.timeout(1):
            async with locks.hold(user_id):
                pass

    @pytest.mark.asyncio
    async def test_unused_locks_are_dropped(self):
        locks = UserLocks()

        async with locks.hold(UserId.generate()):
            assert len(locks) == 1

        assert len(locks) == 0

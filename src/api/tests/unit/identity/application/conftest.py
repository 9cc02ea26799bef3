"""Shared fixtures for identity application service tests."""

import pytest
from unittest.mock import AsyncMock, MagicMock, create_autospec

from identity.application.locking import UserLocks
from identity.domain.aggregates import User
from identity.domain.value_objects import UserId
from identity.ports.repositories import IUserRepository


@pytest.fixture
def mock_session():
    """Create mock async session with transaction support."""
    session = AsyncMock()
    mock_transaction = MagicMock()
    mock_transaction.__aenter__ = AsyncMock(return_value=None)
    mock_transaction.__aexit__ = AsyncMock(return_value=None)
    session.begin = MagicMock(return_value=mock_transaction)
    return session


@pytest.fixture
def mock_user_repository():
    """Create mock user repository."""
    return create_autospec(IUserRepository, instance=True)


@pytest.fixture
def user_locks() -> UserLocks:
    return UserLocks()


@pytest.fixture
def user() -> User:
    """A persisted user with default contexts and the Username attribute."""
    user = User(id=UserId.generate(), username="alice", email="alice@example.com")
    user.provision_defaults()
    return user


@pytest.fixture
def user_id(user) -> UserId:
    return user.id

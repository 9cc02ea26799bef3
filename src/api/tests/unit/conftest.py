"""Unit test fixtures with mocked dependencies."""

import pytest

from identity.application.locking import get_user_locks
from infrastructure.settings import (
    get_database_settings,
    get_identity_settings,
    get_logging_settings,
    get_settings,
)


@pytest.fixture(autouse=True)
def clear_cached_settings():
    """Drop cached settings so environment changes in one test never leak."""
    yield
    for getter in (
        get_settings,
        get_database_settings,
        get_identity_settings,
        get_logging_settings,
        get_user_locks,
    ):
        getter.cache_clear()


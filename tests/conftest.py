"""
Pytest Configuration and Shared Fixtures
=========================================

Common fixtures used across all test modules.

For Developers:
    - Import fixtures by name in test files (pytest auto-discovers conftest.py)
    - The process-wide permission table is rebuilt for every test, so tests
      may set PERMISSION_TABLE_PATH freely
    - Add new shared fixtures here, test-specific fixtures in test files
"""

import json
import logging
import os

import pytest

from src.access.auth.enums import Permission, Role
from src.access.config import get_permission_table
from src.access.models.user import UserRecord

# Make sure a developer's shell never leaks an override into unit tests
os.environ.pop("PERMISSION_TABLE_PATH", None)
os.environ.pop("PERMISSION_TABLE_STRICT", None)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    Ensures tests don't pollute each other's environment.
    """
    original_env = os.environ.copy()

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_permission_table():
    """Drop the cached process-wide permission table around each test."""
    get_permission_table.cache_clear()
    yield
    get_permission_table.cache_clear()


@pytest.fixture
def canonical_user() -> UserRecord:
    """User carrying an explicit roles list."""
    return UserRecord(
        user_id="user-123",
        name="Maria Silva",
        email="maria@example.com",
        roles=[Role.BUYER, Role.ADVERTISER],
    )


@pytest.fixture
def legacy_user() -> UserRecord:
    """User carrying only legacy boolean flags."""
    return UserRecord.model_validate(
        {
            "_id": "user-456",
            "name": "João Souza",
            "email": "joao@example.com",
            "isProvider": True,
            "isAdmin": False,
        }
    )


@pytest.fixture
def small_table_data() -> dict[str, list[str]]:
    """Two-role configuration used by scenario tests."""
    return {
        Role.BUYER.value: [Permission.SEARCH_OFFERS.value],
        Role.ADVERTISER.value: [Permission.CREATE_OFFERS.value],
    }


@pytest.fixture
def permission_table_file(tmp_path, small_table_data):
    """Write a permission table JSON file and return its path."""

    def _write(data=None, name="permissions.json"):
        path = tmp_path / name
        path.write_text(json.dumps(small_table_data if data is None else data))
        return path

    return _write


# =============================================================================
# Log Validation Helpers
# =============================================================================


def assert_debug_logged(caplog, pattern: str):
    """
    Helper to assert a DEBUG log was captured.

    Expected warnings are downgraded to DEBUG while running under pytest,
    so this is how tests check them.

    Raises:
        AssertionError: If no DEBUG log matches the pattern
    """
    assert any(
        pattern in record.message
        for record in caplog.records
        if record.levelno == logging.DEBUG
    ), f"Expected DEBUG log matching '{pattern}' not found"

"""Pytest configuration and fixtures."""

import pytest

from pyresourcex import create_resource_actions, resource_reducer


@pytest.fixture
def users_reducer():
    return resource_reducer("users")


@pytest.fixture
def users():
    return create_resource_actions("users")


@pytest.fixture
def loaded_state(users_reducer, users):
    """USERS slice after a fetch returning two users."""
    state = users_reducer(None, users.fetch_start({}))
    return users_reducer(
        state,
        users.fetch_success([{"id": 1, "name": "A"}, {"id": 2, "name": "B"}]),
    )

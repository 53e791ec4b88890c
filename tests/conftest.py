"""
tests/conftest.py -- Shared test fixtures for the registry test suite.

This module provides:
  - _make_test_stores(): isolated in-memory DBs for the user and employee stores
  - _patch_lifespan(): wires test stores and a TokenService into app.state,
    bypassing the real startup
  - api_client: TestClient plus a signed-in user's token for integration tests
  - user_store / employee_store / token_service: direct fixtures for unit tests

Design: Named shared-memory SQLite URIs (not plain :memory:) are required for
the TestClient fixtures because route handlers run in a thread pool. Plain
:memory: DBs are per-connection and would present a blank schema to each
worker thread.

The DEBUG env var must be set before the app is imported so any
get_settings() call auto-generates SECRET_KEY instead of raising ValueError.
"""

from __future__ import annotations

import os
import secrets
import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

# Set DEBUG before any core/api import so get_settings() can auto-generate
# SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService, hash_password
from employees.store import EmployeeStore

TEST_EMAIL = "owner@example.com"
TEST_PASSWORD = "testpass123"

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, EmployeeStore]:
    """Create isolated named shared-memory SQLite stores.

    A random component in the name keeps modules from seeing each other's
    rows even when pytest reuses the process.
    """
    tag = f"{db_suffix}_{uuid.uuid4().hex[:8]}"
    users_url = f"sqlite:///file:test_users_{tag}?mode=memory&cache=shared&uri=true"
    employees_url = f"sqlite:///file:test_employees_{tag}?mode=memory&cache=shared&uri=true"
    return UserStore(users_url), EmployeeStore(employees_url)


def _patch_lifespan(user_store: UserStore, employee_store: EmployeeStore, tokens: TokenService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.employee_store = employee_store
        app.state.token_service = tokens
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(secrets.token_hex(32), expire_seconds=3600)


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture
def employee_store() -> Generator[EmployeeStore, None, None]:
    store = EmployeeStore("sqlite:///:memory:")
    yield store
    store.close()


# ---------------------------------------------------------------------------
# Module-scoped fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_stack() -> Generator[tuple[TestClient, UserStore, EmployeeStore, TokenService], None, None]:
    """Yield (client, user_store, employee_store, tokens) wired into the real app.

    Tests hit the real route handlers, dependencies and exception handlers
    but use isolated in-memory stores and a throwaway signing secret.
    """
    user_store, employee_store = _make_test_stores("api")
    tokens = TokenService(secrets.token_hex(32), expire_seconds=3600)

    app.router.lifespan_context = _patch_lifespan(user_store, employee_store, tokens)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, user_store, employee_store, tokens

    employee_store.close()
    user_store.close()


@pytest.fixture(scope="module")
def api_client(api_stack) -> tuple[TestClient, str, str]:
    """Yield (client, token, user_id) for a pre-registered user.

    The user is created directly in the store (email TEST_EMAIL, password
    TEST_PASSWORD) and the token is signed with the app's TokenService.
    """
    client, user_store, _employee_store, tokens = api_stack
    existing = user_store.get_by_email(TEST_EMAIL)
    if existing is None:
        uid = user_store.create_user(
            User(username="owner", email=TEST_EMAIL, hashed_password=hash_password(TEST_PASSWORD))
        )
    else:
        uid = existing.id
    token = tokens.issue_token(uid, TEST_EMAIL)
    return client, token, uid

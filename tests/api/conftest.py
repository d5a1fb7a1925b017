"""App fixtures: a fresh app per test with the store and auth dependencies mocked."""

from dataclasses import replace
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from mortgage_tracker.api.app import create_app
from mortgage_tracker.api.deps import get_current_user, get_repository
from mortgage_tracker.config import Settings
from mortgage_tracker.data.auth import AuthClient, AuthUser
from mortgage_tracker.data.repository import MortgageRepository
from mortgage_tracker.models.mortgage import MortgageBundle

USER = AuthUser(id="user-1", email="ana@example.com")


@pytest.fixture
def app():
    return create_app(Settings(database_url="sqlite+aiosqlite://", supabase_anon_key="anon"))


@pytest.fixture
def repo():
    return AsyncMock(spec=MortgageRepository)


@pytest.fixture
def client(app, repo):
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_current_user] = lambda: USER
    return TestClient(app)


@pytest.fixture
def stored_bundle(canonical_mortgage, split_shares):
    mortgage_id = uuid4()
    return MortgageBundle(
        mortgage=replace(canonical_mortgage, id=mortgage_id, user_id=USER.id),
        conditions=[],
        bonifications=[],
        shares=[replace(s, id=uuid4(), mortgage_id=mortgage_id) for s in split_shares],
        payments=[],
    )


@pytest.fixture
def user():
    return USER


@pytest.fixture
def auth_client():
    return AsyncMock(spec=AuthClient)

"""Shared test fixtures."""

from __future__ import annotations

import os

# The app refuses to import without a signing secret.
os.environ.setdefault("PDFDESK_SECRET_KEY", "test-secret-for-pdfdesk")

import pytest
from fastapi.testclient import TestClient

from pdfdesk.accounts import AccountService, InMemoryUserStore, get_account_service
from pdfdesk.main import app


@pytest.fixture
def accounts() -> AccountService:
    return AccountService(InMemoryUserStore())


@pytest.fixture
def client(accounts: AccountService):
    app.dependency_overrides[get_account_service] = lambda: accounts
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    response = client.post(
        "/signup",
        data={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
        follow_redirects=False,
    )
    assert response.status_code == 302
    return client

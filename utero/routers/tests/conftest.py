"""Fixtures for API tests: a fresh app with in-memory storage per test."""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from utero.main import create_app

TODAY = "2024-01-20"


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def logged_client(client: TestClient) -> TestClient:
    """Client with one period logged on 2024-01-01 … 2024-01-05."""
    response = client.post(
        "/api/v1/cycles", json={"start_date": "2024-01-01", "end_date": "2024-01-05"}
    )
    assert response.status_code == 201
    return client

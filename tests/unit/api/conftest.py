"""
API Tests Fixtures

Shared fixtures for API unit tests.
"""
from typing import Generator
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from post_translator.api.dependencies import get_poll_scheduler, get_provider_client
from post_translator.main import app


# ==================== Test Client Override ====================


@pytest.fixture
def poll_scheduler() -> Mock:
    """Scheduler stand-in; records schedule() calls without starting threads"""
    return Mock()


@pytest.fixture(autouse=True)
def override_dependencies(fake_provider, poll_scheduler):
    """Automatically swap the provider client and scheduler for all API tests"""
    app.dependency_overrides[get_provider_client] = lambda: fake_provider
    app.dependency_overrides[get_poll_scheduler] = lambda: poll_scheduler
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client(override_dependencies) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with provider and scheduler overrides.

    Not used as a context manager, so the lifespan (logging setup,
    table creation on the real database, resume polling) does not run.

    Usage:
        def test_get_post(client, sample_post):
            response = client.get(f"/api/v1/posts/{sample_post.id}")
            assert response.status_code == 200
    """
    yield TestClient(app)

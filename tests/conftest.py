"""
Pytest Configuration Fixtures

Sets up test environment with an isolated SQLite database per test.
"""
import json
import os
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

# Set test environment variables BEFORE importing app modules
# This ensures the config module can load successfully
os.environ.setdefault("PTC_API_TOKEN", "test_ptc_token_for_testing")

import post_translator.database as db_module
from post_translator.enums.provider_status import ProviderStatus
from post_translator.models import Post
from post_translator.models.base import Base
from post_translator.workflows.state_machine import TranslationRequestTracker


@pytest.fixture(scope="function")
def test_engine(tmp_path):
    """
    Create an isolated file-backed SQLite engine for testing.

    A file (not :memory:) lets the poll scheduler and API open their own
    sessions and still see the same data.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", db_module.set_sqlite_pragma)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def bind_database(test_engine, monkeypatch):
    """Point database.get_session() / get_db() at the test engine."""
    factory = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, expire_on_commit=False)
    monkeypatch.setattr(db_module, "_engine", test_engine)
    monkeypatch.setattr(db_module, "_session_factory", factory)
    return factory


@pytest.fixture(scope="function")
def test_session(bind_database):
    """Create a database session for testing."""
    session = bind_database()
    yield session
    session.close()


# ==================== Provider Fakes ====================


class FakeProviderClient:
    """
    Scripted stand-in for ProviderClient.

    statuses: ProviderStatus values (or exceptions to raise) returned by
    successive get_status() calls; PENDING once exhausted.
    """

    def __init__(self, statuses=None, result=None, request_id="abc123"):
        self.statuses = list(statuses or [])
        self.result = result if result is not None else {
            "source": {"title": "Hello", "description": "Hello world"},
            "fr": {"title": "Bonjour", "description": "Bonjour le monde"},
            "de": {"title": "Hallo", "description": "Hallo Welt"},
        }
        self.request_id = request_id
        self.submit_error = None
        self.result_error = None
        self.submitted = []
        self.status_calls = []
        self.result_calls = []

    def submit(self, content, name, target_locales, callback_url=None):
        if self.submit_error:
            raise self.submit_error
        self.submitted.append({
            "content": content,
            "name": name,
            "target_locales": list(target_locales),
            "callback_url": callback_url,
        })
        if len(self.submitted) == 1:
            return self.request_id
        return f"{self.request_id}-{len(self.submitted)}"

    def get_status(self, request_id):
        self.status_calls.append(request_id)
        status = self.statuses.pop(0) if self.statuses else ProviderStatus.PENDING
        if isinstance(status, Exception):
            raise status
        return status

    def get_result(self, request_id):
        self.result_calls.append(request_id)
        if self.result_error:
            raise self.result_error
        return self.result


@pytest.fixture
def fake_provider():
    """Provider fake returning the fr/de result for job abc123"""
    return FakeProviderClient()


@pytest.fixture
def make_response():
    """Factory for mocked requests.Response objects"""

    def _make(status_code=200, json_body=None, text=None):
        response = Mock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 400
        if text is not None:
            response.json.side_effect = ValueError("not json")
            response.text = text
        else:
            response.json.return_value = json_body
            response.text = json.dumps(json_body)
        return response

    return _make


# ==================== Test Data Fixtures ====================


@pytest.fixture
def sample_post(test_session) -> Post:
    """Create a sample Post for testing"""
    post = Post(title="Hello", description="Hello world")
    test_session.add(post)
    test_session.commit()
    return post


@pytest.fixture
def tracked_request(test_session, sample_post):
    """Create a submitted TranslationRequest (abc123, fr+de, 3 attempts) for sample_post"""
    request = TranslationRequestTracker(test_session).create(
        "abc123", sample_post, ["fr", "de"], max_attempts=3
    )
    test_session.commit()
    return request

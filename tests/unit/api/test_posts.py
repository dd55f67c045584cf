"""
Posts API Unit Tests

Test Posts, Translation Requests and Root endpoints.
"""
from sqlalchemy import func, select

from post_translator.exceptions import ProviderRejected, ProviderUnavailable
from post_translator.models import Post, TranslationRequest
from post_translator.services.completion_service import CompletionService


def count_requests(session):
    return session.execute(select(func.count()).select_from(TranslationRequest)).scalar_one()


# ==================== POST /posts ====================


def test_create_post_submits_translation(client, fake_provider, poll_scheduler, test_session):
    """
    Given: Provider accepts the job
    When: POST /api/v1/posts
    Then: 201 with the post and a submitted translation request; polling is queued
    """
    response = client.post("/api/v1/posts", json={"title": "Hello", "description": "Hello world"})

    assert response.status_code == 201
    data = response.json()
    assert data["post"]["title"] == "Hello"
    assert data["post"]["translations"] == {}
    assert data["translation_request"]["request_id"] == "abc123"
    assert data["translation_request"]["status"] == "submitted"
    assert data["translation_request"]["target_locales"] == ["fr", "de"]
    assert data["translation_request"]["post_id"] == data["post"]["id"]

    assert fake_provider.submitted[0]["content"] == {"title": "Hello", "description": "Hello world"}
    assert fake_provider.submitted[0]["name"] == "Hello"
    poll_scheduler.schedule.assert_called_once_with("abc123")


def test_create_post_with_provider_rejected(client, fake_provider, poll_scheduler, test_session):
    """
    Given: Provider rejects the job
    When: POST /api/v1/posts
    Then: Post is still created; translation_request is null and nothing is tracked
    """
    fake_provider.submit_error = ProviderRejected("invalid payload", status_code=422, body={"error": "bad"})

    response = client.post("/api/v1/posts", json={"title": "Hello"})

    assert response.status_code == 201
    data = response.json()
    assert data["translation_request"] is None
    assert test_session.get(Post, data["post"]["id"]) is not None
    assert count_requests(test_session) == 0
    poll_scheduler.schedule.assert_not_called()


def test_create_post_blank_title(client, fake_provider):
    response = client.post("/api/v1/posts", json={"title": "   "})

    assert response.status_code == 422
    assert fake_provider.submitted == []


# ==================== GET /posts ====================


def test_get_post_with_translations(client, fake_provider, test_session, sample_post, tracked_request):
    CompletionService(test_session).apply("abc123", fake_provider.result)

    response = client.get(f"/api/v1/posts/{sample_post.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == sample_post.id
    assert data["translations"]["fr"]["title"] == "Bonjour"
    assert data["translations"]["de"]["description"] == "Hallo Welt"
    assert "source" not in data["translations"]


def test_get_post_not_found(client):
    response = client.get("/api/v1/posts/999999")

    assert response.status_code == 404


def test_list_posts(client, test_session, sample_post):
    test_session.add(Post(title="Second", description=""))
    test_session.commit()

    response = client.get("/api/v1/posts", params={"page": 1, "limit": 1})

    assert response.status_code == 200
    data = response.json()
    assert data["page"] == 1
    assert data["limit"] == 1
    assert len(data["items"]) == 1


# ==================== POST /posts/{id}/translations ====================


def test_resubmit_creates_new_request(client, fake_provider, poll_scheduler, test_session, sample_post, tracked_request):
    """
    Given: Post with an existing request abc123
    When: POST /api/v1/posts/{id}/translations for fr only
    Then: 202 with a new request id; the old request is untouched
    """
    fake_provider.submitted.append({})

    response = client.post(f"/api/v1/posts/{sample_post.id}/translations", json={"target_locales": ["fr"]})

    assert response.status_code == 202
    data = response.json()
    assert data["request_id"] == "abc123-2"
    assert data["target_locales"] == ["fr"]
    assert count_requests(test_session) == 2
    poll_scheduler.schedule.assert_called_once_with("abc123-2")


def test_resubmit_without_body_uses_configured_locales(client, fake_provider, sample_post):
    response = client.post(f"/api/v1/posts/{sample_post.id}/translations")

    assert response.status_code == 202
    assert response.json()["target_locales"] == ["fr", "de"]


def test_resubmit_unknown_post(client, fake_provider):
    response = client.post("/api/v1/posts/999999/translations")

    assert response.status_code == 404
    assert fake_provider.submitted == []


def test_resubmit_provider_rejected(client, fake_provider, test_session, sample_post):
    fake_provider.submit_error = ProviderRejected("unauthorized", status_code=401, body={"error": "token"})

    response = client.post(f"/api/v1/posts/{sample_post.id}/translations")

    assert response.status_code == 502
    detail = response.json()["detail"]
    assert detail["provider_status"] == 401
    assert detail["provider_error"] == {"error": "token"}
    assert count_requests(test_session) == 0


def test_resubmit_provider_unavailable(client, fake_provider, test_session, sample_post):
    fake_provider.submit_error = ProviderUnavailable("timed out")

    response = client.post(f"/api/v1/posts/{sample_post.id}/translations")

    assert response.status_code == 503
    assert count_requests(test_session) == 0


# ==================== GET /translation-requests/{id} ====================


def test_get_translation_request(client, tracked_request, sample_post):
    response = client.get("/api/v1/translation-requests/abc123")

    assert response.status_code == 200
    data = response.json()
    assert data["post_id"] == sample_post.id
    assert data["status"] == "submitted"
    assert data["attempt_count"] == 0
    assert data["max_attempts"] == 3


def test_get_translation_request_not_found(client):
    response = client.get("/api/v1/translation-requests/missing")

    assert response.status_code == 404


# ==================== Root ====================


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "running"
    assert client.get("/health").json()["status"] == "healthy"


# ==================== PATCH / DELETE /posts/{id} ====================


def test_update_post_source_fields(client, fake_provider, poll_scheduler, sample_post):
    """
    Given: Post exists
    When: PATCH /api/v1/posts/{id} with a new title
    Then: Title changes, description is kept, nothing is resubmitted
    """
    response = client.patch(f"/api/v1/posts/{sample_post.id}", json={"title": "Hello again"})

    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "Hello again"
    assert data["description"] == "Hello world"
    assert fake_provider.submitted == []
    poll_scheduler.schedule.assert_not_called()


def test_update_post_not_found(client):
    response = client.patch("/api/v1/posts/999999", json={"title": "x"})

    assert response.status_code == 404


def test_update_post_blank_title(client, sample_post):
    response = client.patch(f"/api/v1/posts/{sample_post.id}", json={"title": "  "})

    assert response.status_code == 422


def test_delete_post_keeps_request_history(client, fake_provider, test_session, sample_post, tracked_request):
    """
    Given: Post with translations and a tracked request
    When: DELETE /api/v1/posts/{id}
    Then: 204; post and translations are gone; the request remains with post_id null
    """
    CompletionService(test_session).apply("abc123", fake_provider.result)

    response = client.delete(f"/api/v1/posts/{sample_post.id}")

    assert response.status_code == 204
    assert client.get(f"/api/v1/posts/{sample_post.id}").status_code == 404
    request = client.get("/api/v1/translation-requests/abc123").json()
    assert request["post_id"] is None
    assert request["status"] == "completed"


def test_delete_post_not_found(client):
    response = client.delete("/api/v1/posts/999999")

    assert response.status_code == 404

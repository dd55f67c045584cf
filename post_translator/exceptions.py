"""
Error Taxonomy

Exceptions raised across the submission and completion workflow.

    TranslationSyncError
    ├── ProviderError
    │   ├── ProviderUnavailable   transport / DNS / TLS / timeout, retryable
    │   └── ProviderRejected      non-2xx or malformed body, not retried
    ├── ItemNotFound              owning post is gone, not retried
    ├── PersistenceError          write failed, not retried by the scheduler
    ├── MaxAttemptsExceeded       poll budget exhausted, reported not raised
    └── InvalidTransition         illegal request state change
"""
from typing import Any, Optional


class TranslationSyncError(Exception):
    """Base class for all workflow errors."""


class ProviderError(TranslationSyncError):
    """The translation provider could not serve a request."""


class ProviderUnavailable(ProviderError):
    """Transport-level failure talking to the provider (retryable)."""


class ProviderRejected(ProviderError):
    """
    The provider answered with a non-2xx status or an unusable body.

    Attributes:
        status_code: HTTP status returned by the provider
        body: Parsed JSON error body, or the raw text when it was not JSON
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ItemNotFound(TranslationSyncError):
    """The post a translation belongs to does not exist."""

    def __init__(self, post_id: Optional[int]):
        super().__init__(f"Post not found: id={post_id}")
        self.post_id = post_id


class PersistenceError(TranslationSyncError):
    """Persisting post translations failed."""


class MaxAttemptsExceeded(TranslationSyncError):
    """A request stayed incomplete for its whole polling budget."""

    def __init__(self, request_id: str, attempts: int):
        super().__init__(f"Translation {request_id} not completed after {attempts} attempts")
        self.request_id = request_id
        self.attempts = attempts


class InvalidTransition(TranslationSyncError):
    """A translation request was moved to a state it cannot reach."""

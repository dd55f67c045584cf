"""
API Schemas Package

Pydantic models for API request/response validation.
"""

# Post Schemas
from post_translator.schemas.post import (
    PostCreate,
    PostUpdate,
    PostTranslationResponse,
    PostResponse,
    PostListResponse,
    PostCreateResponse,
)

# Translation Request Schemas
from post_translator.schemas.translation_request import (
    TranslationRequestResponse,
    SubmitTranslationRequest,
)

# Callback Schemas
from post_translator.schemas.callback import CallbackPayload

__all__ = [
    # Post
    "PostCreate",
    "PostUpdate",
    "PostTranslationResponse",
    "PostResponse",
    "PostListResponse",
    "PostCreateResponse",
    # Translation Request
    "TranslationRequestResponse",
    "SubmitTranslationRequest",
    # Callback
    "CallbackPayload",
]

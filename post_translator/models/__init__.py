"""
Models Module

Exports all ORM models for the Post-Translator application.
"""

from post_translator.models.base import Base, TimestampMixin

from post_translator.models.post import Post
from post_translator.models.post_translation import PostTranslation
from post_translator.models.translation_request import TranslationRequest

__all__ = [
    "Base",
    "TimestampMixin",
    "Post",
    "PostTranslation",
    "TranslationRequest",
]

"""
Post Model

Represents a blog post written in the source locale, with its translations
stored per locale.
"""
from typing import Dict

from sqlalchemy import Integer, String, Text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, mapped_column, relationship, object_session
from sqlalchemy.orm.collections import attribute_keyed_dict

from post_translator.exceptions import PersistenceError
from post_translator.models.base import Base, TimestampMixin
from post_translator.models.post_translation import PostTranslation


class Post(Base, TimestampMixin):
    """
    Represents a blog post.

    Attributes:
        id: Primary key
        title: Title in the source locale
        description: Body in the source locale
        translations: Mapping of locale code -> PostTranslation

    Translated fields are reached through the locale-keyed mapping
    (``post.translations["fr"].title``) and written with set_translation().
    """

    __tablename__ = "posts"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Source locale content
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    translations: Mapped[Dict[str, PostTranslation]] = relationship(
        "PostTranslation",
        collection_class=attribute_keyed_dict("locale"),
        back_populates="post",
        cascade="all, delete-orphan",
    )
    translation_requests = relationship("TranslationRequest", back_populates="post", passive_deletes=True)

    def set_translation(self, locale: str, title: str, description: str) -> bool:
        """
        Set the locale-scoped title and description. Does not persist.

        Args:
            locale: Target locale code
            title: Translated title
            description: Translated description

        Returns:
            bool: True if anything changed, False when the stored values were identical
        """
        existing = self.translations.get(locale)
        if existing is None:
            self.translations[locale] = PostTranslation(
                locale=locale, title=title, description=description
            )
            return True

        if existing.title == title and existing.description == description:
            return False

        existing.title = title
        existing.description = description
        return True

    def save(self) -> None:
        """
        Flush pending field changes to the database.

        Raises:
            PersistenceError: If the post is detached or the flush fails
        """
        session = object_session(self)
        if session is None:
            raise PersistenceError(f"Post id={self.id} is not attached to a session")

        try:
            session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save post id={self.id}: {e}") from e

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}', locales={sorted(self.translations)})>"

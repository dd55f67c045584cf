"""
PostTranslation Model

Stores the translated title and description of a post for one locale.
"""
from sqlalchemy import ForeignKey, Integer, String, Text, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from post_translator.models.base import Base, TimestampMixin


class PostTranslation(Base, TimestampMixin):
    """
    One locale variant of a post.

    Attributes:
        id: Primary key
        post_id: Foreign key to Post
        locale: Locale code ('fr', 'de', ...)
        title: Translated title
        description: Translated description

    At most one row exists per (post_id, locale); re-applying a result
    overwrites the row instead of adding a new one.
    """

    __tablename__ = "post_translations"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Foreign key
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        doc="Foreign key to Post"
    )

    locale: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        doc="Locale code ('fr', 'de', etc.)"
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Relationships
    post = relationship("Post", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("post_id", "locale", name="_post_locale_uc"),
        Index("idx_post_translations_locale", "locale"),
    )

    def __repr__(self) -> str:
        return f"<PostTranslation(post_id={self.post_id}, locale='{self.locale}', title='{self.title}')>"

"""
TranslationRequest Model

Tracks one translation job submitted to the provider for a post.
"""
from datetime import datetime
from typing import List

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from post_translator.enums.request_status import RequestStatus
from post_translator.models.base import Base, TimestampMixin


class TranslationRequest(Base, TimestampMixin):
    """
    Represents a translation job at the provider.

    Attributes:
        id: Primary key
        request_id: Provider-assigned job id (unique)
        post_id: Owning post (nulled if the post is deleted)
        source_title: Title snapshot taken at submission
        source_description: Description snapshot taken at submission
        target_locales: Requested locale codes, fixed at creation
        status: RequestStatus value
        attempt_count: Status checks made by the poll scheduler
        max_attempts: Status check budget for this request
        failure_reason: FailureReason value when status is failed
        last_error: Last error message seen while polling
        completed_at: When results were applied

    State changes go through TranslationRequestTracker; the status column is
    also the compare-and-set guard that lets only one completion through.
    """

    __tablename__ = "translation_requests"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    request_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        doc="Provider-assigned job id"
    )

    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        doc="Foreign key to Post"
    )

    # Submission snapshot
    source_title: Mapped[str] = mapped_column(String(255), nullable=False)
    source_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    target_locales: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    # State machine fields
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=RequestStatus.SUBMITTED.value,
        doc="Request status"
    )
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=3)

    failure_reason: Mapped[str | None] = mapped_column(String(40), nullable=True)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    post = relationship("Post", back_populates="translation_requests")

    __table_args__ = (
        Index("idx_translation_requests_request_id", "request_id", unique=True),
        Index("idx_translation_requests_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<TranslationRequest(request_id='{self.request_id}', post_id={self.post_id}, "
            f"status='{self.status}', attempts={self.attempt_count}/{self.max_attempts})>"
        )

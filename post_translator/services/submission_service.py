"""
Submission Service

Sends a post to the translation provider and starts tracking the job.

The tracker row is only created after the provider accepted the job, so a
rejected or failed submission leaves the post without pending translations.
"""
from typing import Iterable, Optional

from loguru import logger
from sqlalchemy.orm import Session

from post_translator.config import (
    POLL_MAX_ATTEMPTS,
    POLLING_ENABLED,
    build_callback_url,
    get_target_locales,
)
from post_translator.models import Post, TranslationRequest
from post_translator.services.provider_client import ProviderClient
from post_translator.workflows.state_machine import TranslationRequestTracker


class SubmissionService:
    """
    Submits posts for translation.

    Attributes:
        db: Database session
        client: Provider client
        scheduler: PollScheduler used to queue status checks (None disables polling)
    """

    def __init__(self, db: Session, client: ProviderClient, scheduler=None):
        self.db = db
        self.client = client
        self.scheduler = scheduler if POLLING_ENABLED else None
        self.tracker = TranslationRequestTracker(db)

    def submit(
        self,
        post: Post,
        target_locales: Optional[Iterable[str]] = None,
        max_attempts: int = POLL_MAX_ATTEMPTS,
    ) -> TranslationRequest:
        """
        Submit a post and track the resulting job.

        Args:
            post: Persisted post (must have an id)
            target_locales: Locales to request (default: configured target locales)
            max_attempts: Status check budget for the poll scheduler

        Returns:
            TranslationRequest: Committed request in the submitted state

        Raises:
            ProviderUnavailable: Provider unreachable, nothing was tracked
            ProviderRejected: Provider refused the job, nothing was tracked
        """
        locales = list(target_locales) if target_locales is not None else get_target_locales()

        request_id = self.client.submit(
            content={"title": post.title, "description": post.description or ""},
            name=post.title,
            target_locales=locales,
            callback_url=build_callback_url(post.id),
        )

        request = self.tracker.create(request_id, post, locales, max_attempts=max_attempts)
        self.db.commit()

        if self.scheduler is not None:
            self.scheduler.schedule(request_id)
        else:
            logger.info(f"Polling disabled, waiting for callback on translation {request_id}")

        return request

"""
Translation Request State Machine

Owns the lifecycle of a TranslationRequest:

    submitted -> polling <-> polling -> completed | failed

- submitted: created right after the provider accepted the job
- polling: entered on the first status check, re-entered on every retry
- completed: results applied; reached at most once (compare-and-set)
- failed: polling stopped; a late callback may still complete the request

There is no way back to submitted and no cancellation once submitted.
"""
from typing import Iterable, List, Optional

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.orm import Session

from post_translator.config import POLL_MAX_ATTEMPTS
from post_translator.enums.failure_reason import FailureReason
from post_translator.enums.request_status import RequestStatus
from post_translator.exceptions import InvalidTransition
from post_translator.models import Post, TranslationRequest
from post_translator.models.base import utcnow


# Allowed target states per current state
_TRANSITIONS = {
    RequestStatus.SUBMITTED: {RequestStatus.POLLING, RequestStatus.COMPLETED, RequestStatus.FAILED},
    RequestStatus.POLLING: {RequestStatus.POLLING, RequestStatus.COMPLETED, RequestStatus.FAILED},
    RequestStatus.FAILED: {RequestStatus.COMPLETED},
    RequestStatus.COMPLETED: set(),
}


class TranslationRequestTracker:
    """
    State machine for translation requests.

    All transitions are flushed, never committed: the caller's unit of work
    decides when the new state becomes visible.
    """

    def __init__(self, db: Session):
        """
        Initialize tracker.

        Args:
            db: Database session
        """
        self.db = db

    # ========================================================================
    # Lookup
    # ========================================================================

    def get(self, request_id: str) -> Optional[TranslationRequest]:
        """
        Get a tracked request by provider id.

        Args:
            request_id: Provider job id

        Returns:
            TranslationRequest or None if the id is not tracked
        """
        return self.db.execute(
            select(TranslationRequest)
            .where(TranslationRequest.request_id == request_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_open(self) -> List[TranslationRequest]:
        """Requests whose poll chain has not finished (submitted or polling)."""
        return list(self.db.execute(
            select(TranslationRequest)
            .where(TranslationRequest.status.in_([
                RequestStatus.SUBMITTED.value,
                RequestStatus.POLLING.value,
            ]))
            .order_by(TranslationRequest.id)
        ).scalars())

    # ========================================================================
    # Transitions
    # ========================================================================

    def create(
        self,
        request_id: str,
        post: Post,
        target_locales: Iterable[str],
        max_attempts: int = POLL_MAX_ATTEMPTS,
    ) -> TranslationRequest:
        """
        Start tracking a job the provider just accepted.

        Args:
            request_id: Provider job id
            post: Post that was submitted
            target_locales: Requested locales
            max_attempts: Status check budget

        Returns:
            TranslationRequest in the submitted state
        """
        request = TranslationRequest(
            request_id=request_id,
            post_id=post.id,
            source_title=post.title,
            source_description=post.description or "",
            target_locales=list(target_locales),
            status=RequestStatus.SUBMITTED.value,
            attempt_count=0,
            max_attempts=max_attempts,
        )
        self.db.add(request)
        self.db.flush()

        logger.info(f"Tracking translation {request_id} for post {post.id}: {request.target_locales}")
        return request

    def record_attempt(self, request: TranslationRequest) -> TranslationRequest:
        """
        Count one status check and move the request to polling.

        Args:
            request: Tracked request

        Returns:
            The same request, attempt_count incremented
        """
        self._transition(request, RequestStatus.POLLING)
        request.attempt_count += 1
        self.db.flush()
        return request

    @staticmethod
    def has_attempts_left(request: TranslationRequest) -> bool:
        """Whether another status check fits in the request's budget."""
        return request.attempt_count < request.max_attempts

    def record_error(self, request: TranslationRequest, message: str) -> None:
        """Remember the last transient error without changing state."""
        request.last_error = message
        self.db.flush()

    def mark_failed(
        self,
        request: TranslationRequest,
        reason: FailureReason,
        detail: Optional[str] = None,
    ) -> TranslationRequest:
        """
        Move the request to failed.

        Args:
            request: Tracked request
            reason: Why polling stopped
            detail: Error message to keep on the row

        Returns:
            The same request in the failed state
        """
        self._transition(request, RequestStatus.FAILED)
        request.failure_reason = reason.value
        if detail:
            request.last_error = detail
        self.db.flush()
        return request

    def claim_completion(self, request_id: str) -> bool:
        """
        Atomically move a request to completed.

        Runs a single conditional UPDATE, so among concurrent callers (callback
        and poll racing) exactly one sees True. It should be the first
        statement of the applying transaction; rolling that transaction back
        releases the claim.

        Args:
            request_id: Provider job id

        Returns:
            bool: True if this caller completed the request, False if it was
            already completed or is not tracked
        """
        result = self.db.execute(
            update(TranslationRequest)
            .where(
                TranslationRequest.request_id == request_id,
                TranslationRequest.status != RequestStatus.COMPLETED.value,
            )
            .values(
                status=RequestStatus.COMPLETED.value,
                completed_at=utcnow(),
                failure_reason=None,
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    # ========================================================================
    # Internals
    # ========================================================================

    @staticmethod
    def _transition(request: TranslationRequest, target: RequestStatus) -> None:
        current = RequestStatus(request.status)
        if target not in _TRANSITIONS[current]:
            raise InvalidTransition(
                f"Translation {request.request_id}: {current.value} -> {target.value} not allowed"
            )
        if current != target:
            logger.debug(f"Translation {request.request_id}: {current.value} -> {target.value}")
        request.status = target.value

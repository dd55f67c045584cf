"""
Completion Service

Applies a finished provider result to its post. Both completion signals
(webhook and polling) go through CompletionService.apply(), which is safe to
call any number of times for the same request:

1. Claim the request with a compare-and-set on its status (first statement of
   the transaction). A caller that loses the claim writes nothing.
2. Drop the provider's "source" entry and write each requested locale with
   Post.set_translation(), then Post.save().
3. Commit. Any failure rolls the claim back together with the writes.

Requests that are not tracked (e.g. a callback for a job submitted before
tracking existed) skip the claim and rely on set_translation() being an
overwrite: identical data leaves the stored rows untouched.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from post_translator.config import get_target_locales
from post_translator.exceptions import PersistenceError
from post_translator.services.post_service import PostService
from post_translator.services.provider_client import strip_source
from post_translator.workflows.state_machine import TranslationRequestTracker


@dataclass
class ApplyOutcome:
    """Result of one apply() call"""

    request_id: str
    post_id: Optional[int]
    applied_locales: List[str] = field(default_factory=list)
    changed_locales: List[str] = field(default_factory=list)
    skipped_locales: List[str] = field(default_factory=list)
    already_completed: bool = False


class CompletionService:
    """
    Completion applier shared by the callback receiver and the poll scheduler.

    Owns its transaction: apply() commits on success and rolls back on error.
    """

    def __init__(self, db: Session):
        """
        Initialize completion service.

        Args:
            db: Database session
        """
        self.db = db
        self.tracker = TranslationRequestTracker(db)
        self.posts = PostService(db)

    def apply(
        self,
        request_id: str,
        raw_result: Dict[str, Any],
        post_id: Optional[int] = None,
    ) -> ApplyOutcome:
        """
        Write a provider result onto the owning post.

        Args:
            request_id: Provider job id
            raw_result: get_result() payload, "source" entry included
            post_id: Owning post, used only when the request is not tracked

        Returns:
            ApplyOutcome: What was written (nothing if already completed)

        Raises:
            ItemNotFound: The owning post does not exist
            PersistenceError: Writing the translations failed
        """
        try:
            outcome = self._apply(request_id, raw_result, post_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise PersistenceError(f"Failed to apply translation {request_id}: {e}") from e
        except Exception:
            self.db.rollback()
            raise

        if outcome.already_completed:
            logger.info(f"Translation {request_id} already applied, skipping")
        else:
            logger.info(
                f"Applied translation {request_id} to post {outcome.post_id}: "
                f"locales={outcome.applied_locales} changed={outcome.changed_locales}"
            )
        return outcome

    def _apply(self, request_id: str, raw_result: Dict[str, Any], post_id: Optional[int]) -> ApplyOutcome:
        claimed = self.tracker.claim_completion(request_id)
        request = self.tracker.get(request_id)

        if request is not None and not claimed:
            return ApplyOutcome(request_id=request_id, post_id=request.post_id, already_completed=True)

        if request is not None:
            if post_id is not None and post_id != request.post_id:
                logger.warning(
                    f"Translation {request_id} belongs to post {request.post_id}, "
                    f"ignoring post {post_id} from the caller"
                )
            owner_id = request.post_id
            wanted = list(request.target_locales or [])
        else:
            logger.warning(f"Translation {request_id} is not tracked, applying to post {post_id}")
            owner_id = post_id
            wanted = get_target_locales()

        post = self.posts.find(owner_id)
        outcome = ApplyOutcome(request_id=request_id, post_id=post.id)

        for locale, data in strip_source(raw_result).items():
            if locale not in wanted or not isinstance(data, dict):
                logger.warning(f"Translation {request_id}: ignoring unexpected entry {locale!r}")
                outcome.skipped_locales.append(locale)
                continue

            changed = post.set_translation(
                locale,
                title=data.get("title") or "",
                description=data.get("description") or "",
            )
            outcome.applied_locales.append(locale)
            if changed:
                outcome.changed_locales.append(locale)

        post.save()
        return outcome

"""
Poll Scheduler

Checks the provider for results of submitted translations. A chain of checks
per request:

    wait interval -> status check -> completed?  apply, stop
                                  -> failed?     report, stop
                                  -> pending?    retry while attempts remain,
                                                 else report MaxAttemptsExceeded

A request holds exactly `max_attempts` status checks; the persisted
attempt_count is the counter, so a chain resumed after a restart continues
the same budget. A transport error (ProviderUnavailable) counts as a pending
check and consumes one attempt; ProviderRejected, ItemNotFound and
PersistenceError end the chain at once. Every check re-reads the request, so
a callback that already completed it stops the chain without touching the
post again.

schedule() never holds a pool worker across the backoff: the wait is a
threading.Timer, and each check is its own short job on the shared executor.
shutdown_executor() cancels pending timers and chains; run() (the inline,
blocking form used by scripts) waits on the same shutdown event.
"""
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, ContextManager, List, Optional, Set

from loguru import logger
from sqlalchemy.orm import Session

from post_translator.config import POLL_INTERVAL_SECONDS, POLL_WORKERS
from post_translator.database import get_session
from post_translator.enums.failure_reason import FailureReason
from post_translator.enums.provider_status import ProviderStatus
from post_translator.enums.request_status import RequestStatus
from post_translator.exceptions import (
    ItemNotFound,
    MaxAttemptsExceeded,
    PersistenceError,
    ProviderRejected,
    ProviderUnavailable,
    TranslationSyncError,
)
from post_translator.services.completion_service import ApplyOutcome, CompletionService
from post_translator.services.provider_client import ProviderClient
from post_translator.workflows.failure_reporter import (
    FailureReporter,
    LoggingFailureReporter,
    TranslationFailure,
)
from post_translator.workflows.state_machine import TranslationRequestTracker


SessionScope = Callable[[], ContextManager[Session]]

# Shared work queue for all poll checks, plus the timers and unresolved chains
# that shutdown has to cancel. _lock guards the first three.
_executor: Optional[ThreadPoolExecutor] = None
_timers: Set[threading.Timer] = set()
_chains: Set[Future] = set()
_lock = threading.RLock()
_stopping = threading.Event()


def _new_executor() -> ThreadPoolExecutor:
    return ThreadPoolExecutor(max_workers=POLL_WORKERS, thread_name_prefix="translation_poll")


def start_executor() -> ThreadPoolExecutor:
    """Open the global poll executor and accept new checks (app startup)."""
    global _executor
    with _lock:
        _stopping.clear()
        if _executor is None:
            _executor = _new_executor()
        return _executor


def get_executor() -> ThreadPoolExecutor:
    """
    Get the global poll executor, creating it on first use.

    Raises:
        RuntimeError: After shutdown_executor(), until start_executor()
    """
    global _executor
    with _lock:
        if _stopping.is_set():
            raise RuntimeError("Poll executor has been shut down")
        if _executor is None:
            _executor = _new_executor()
        return _executor


def shutdown_executor(wait: bool = False) -> None:
    """
    Stop polling: cancel waiting timers and unresolved chains, drop queued checks.

    A check already talking to the provider finishes, but schedules nothing
    after it. Open requests stay submitted/polling and are resumed on the
    next startup.
    """
    global _executor
    _stopping.set()
    with _lock:
        timers = list(_timers)
        _timers.clear()
        for future in _chains:
            future.cancel()
        _chains.clear()
        executor, _executor = _executor, None

    for timer in timers:
        timer.cancel()
    if executor is not None:
        executor.shutdown(wait=wait, cancel_futures=True)


def wait_interval(seconds: float) -> None:
    """Backoff wait for run(); returns early on shutdown."""
    _stopping.wait(seconds)


def _settle(future: Future, outcome: Optional["PollOutcome"] = None, error: Optional[BaseException] = None) -> None:
    """Resolve a chain future unless shutdown already cancelled it."""
    with _lock:
        _chains.discard(future)
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        elif outcome is not None:
            future.set_result(outcome)
        else:
            future.cancel()


@dataclass
class PollOutcome:
    """How a poll chain ended"""

    request_id: str
    status: Optional[RequestStatus]
    attempts: int
    applied: Optional[ApplyOutcome] = None
    failure: Optional[TranslationFailure] = None
    stopped: bool = False


class PollScheduler:
    """
    Polls the provider until a request completes, fails or runs out of attempts.

    Attributes:
        client: Provider client
        reporter: Receives terminal failures
        interval: Seconds to wait before each status check
    """

    def __init__(
        self,
        client: Optional[ProviderClient] = None,
        reporter: Optional[FailureReporter] = None,
        interval: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = wait_interval,
        session_scope: SessionScope = get_session,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.client = client or ProviderClient()
        self.reporter = reporter or LoggingFailureReporter()
        self.interval = interval
        self._sleep = sleep
        self._session_scope = session_scope
        self._executor = executor

    # ========================================================================
    # Scheduling
    # ========================================================================

    def schedule(self, request_id: str) -> Future:
        """
        Start a poll chain for a request (fire-and-forget).

        Args:
            request_id: Provider job id

        Returns:
            Future resolving to the chain's PollOutcome; cancelled on shutdown
        """
        future: Future = Future()
        future.add_done_callback(self._log_crash)
        with _lock:
            _chains.add(future)
        self._arm(request_id, future)
        logger.debug(f"Scheduled polling for translation {request_id} in {self.interval}s")
        return future

    def resume_pending(self) -> List[Future]:
        """
        Restart chains for every request left submitted or polling (e.g. after a restart).

        Polling continues from the persisted attempt_count.

        Returns:
            list: One Future per resumed request
        """
        with self._session_scope() as db:
            request_ids = [r.request_id for r in TranslationRequestTracker(db).list_open()]

        if request_ids:
            logger.info(f"Resuming polling for {len(request_ids)} translation(s)")
        return [self.schedule(request_id) for request_id in request_ids]

    def _arm(self, request_id: str, future: Future) -> None:
        """Queue the next check one interval from now without occupying a worker."""

        def fire():
            with _lock:
                _timers.discard(timer)
            self._enqueue(request_id, future)

        timer = threading.Timer(self.interval, fire)
        timer.daemon = True
        with _lock:
            accepted = not _stopping.is_set()
            if accepted:
                _timers.add(timer)

        if accepted:
            timer.start()
        else:
            _settle(future)

    def _enqueue(self, request_id: str, future: Future) -> None:
        try:
            executor = self._executor or get_executor()
            executor.submit(self._step, request_id, future)
        except RuntimeError as e:
            logger.info(f"Polling for translation {request_id} not queued: {e}")
            _settle(future)

    def _step(self, request_id: str, future: Future) -> None:
        """One check of a scheduled chain; re-arms itself while attempts remain."""
        if _stopping.is_set() or future.done():
            _settle(future)
            return

        try:
            outcome = self._check_once(request_id)
        except Exception as e:
            _settle(future, error=e)
            return

        if outcome is None:
            self._arm(request_id, future)
        else:
            _settle(future, outcome)

    # ========================================================================
    # Poll loop
    # ========================================================================

    def run(self, request_id: str) -> PollOutcome:
        """
        Poll one request to a final outcome in the calling thread.

        Args:
            request_id: Provider job id

        Returns:
            PollOutcome: Final state of the request (stopped=True on shutdown)
        """
        while True:
            self._sleep(self.interval)
            if _stopping.is_set():
                logger.info(f"Polling for translation {request_id} stopped by shutdown")
                return PollOutcome(request_id=request_id, status=None, attempts=0, stopped=True)

            outcome = self._check_once(request_id)
            if outcome is not None:
                return outcome

    def _check_once(self, request_id: str) -> Optional[PollOutcome]:
        """One status check. Returns None when another check should follow."""
        with self._session_scope() as db:
            tracker = TranslationRequestTracker(db)
            request = tracker.get(request_id)
            if request is None:
                logger.warning(f"Translation {request_id} is not tracked, stop polling")
                return PollOutcome(request_id=request_id, status=None, attempts=0)

            status = RequestStatus(request.status)
            if not status.is_open:
                logger.info(f"Translation {request_id} already {status.value}, stop polling")
                return PollOutcome(request_id=request_id, status=status, attempts=request.attempt_count)

            # Budget spent before a restart cut the chain short of its final write
            spent = not tracker.has_attempts_left(request)
            if not spent:
                tracker.record_attempt(request)
            attempt = request.attempt_count
            max_attempts = request.max_attempts

        if spent:
            logger.warning(f"Translation {request_id} has no attempts left ({attempt}/{max_attempts})")
            return self._fail(
                request_id,
                FailureReason.MAX_ATTEMPTS_EXCEEDED,
                MaxAttemptsExceeded(request_id, attempt),
            )

        logger.info(f"Checking translation {request_id} (attempt {attempt}/{max_attempts})")

        transient_error: Optional[str] = None
        try:
            provider_status = self.client.get_status(request_id)
            if provider_status == ProviderStatus.COMPLETED:
                raw_result = self.client.get_result(request_id)
                with self._session_scope() as db:
                    applied = CompletionService(db).apply(request_id, raw_result)
                return PollOutcome(
                    request_id=request_id,
                    status=RequestStatus.COMPLETED,
                    attempts=attempt,
                    applied=applied,
                )
            if provider_status == ProviderStatus.FAILED:
                return self._fail(
                    request_id,
                    FailureReason.PROVIDER_FAILED,
                    TranslationSyncError(f"Provider reported translation {request_id} as failed"),
                )
        except ProviderUnavailable as e:
            transient_error = str(e)
            logger.warning(f"Translation {request_id} attempt {attempt}: provider unavailable, {e}")
        except ProviderRejected as e:
            return self._fail(request_id, FailureReason.PROVIDER_REJECTED, e)
        except ItemNotFound as e:
            return self._fail(request_id, FailureReason.ITEM_NOT_FOUND, e)
        except PersistenceError as e:
            return self._fail(request_id, FailureReason.PERSISTENCE_ERROR, e)

        with self._session_scope() as db:
            tracker = TranslationRequestTracker(db)
            request = tracker.get(request_id)
            if request.status == RequestStatus.COMPLETED.value:
                logger.info(f"Translation {request_id} completed by callback during attempt {attempt}")
                return PollOutcome(request_id=request_id, status=RequestStatus.COMPLETED, attempts=attempt)

            if transient_error:
                tracker.record_error(request, transient_error)
            if tracker.has_attempts_left(request):
                return None
            attempts = request.attempt_count

        return self._fail(
            request_id,
            FailureReason.MAX_ATTEMPTS_EXCEEDED,
            MaxAttemptsExceeded(request_id, attempts),
        )

    def _fail(self, request_id: str, reason: FailureReason, error: Exception) -> PollOutcome:
        """Mark the request failed and hand the failure to the reporter."""
        with self._session_scope() as db:
            tracker = TranslationRequestTracker(db)
            request = tracker.get(request_id)
            if request.status == RequestStatus.COMPLETED.value:
                return PollOutcome(
                    request_id=request_id,
                    status=RequestStatus.COMPLETED,
                    attempts=request.attempt_count,
                )
            tracker.mark_failed(request, reason, str(error))
            failure = TranslationFailure(
                request_id=request_id,
                post_id=request.post_id,
                reason=reason,
                attempts=request.attempt_count,
                error=error,
            )

        self.reporter.report(failure)
        return PollOutcome(
            request_id=request_id,
            status=RequestStatus.FAILED,
            attempts=failure.attempts,
            failure=failure,
        )

    @staticmethod
    def _log_crash(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.opt(exception=error).error(f"Poll job crashed: {error}")

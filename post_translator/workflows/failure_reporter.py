"""
Failure Reporter Module

Terminal poll failures (budget exhausted, provider rejection, missing post,
write failure) are handed to a FailureReporter instead of being raised out of
a background job, where nobody would see them.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from post_translator.enums.failure_reason import FailureReason


@dataclass
class TranslationFailure:
    """A request whose poll chain ended without applying results"""

    request_id: str
    post_id: Optional[int]
    reason: FailureReason
    attempts: int
    error: Exception


class FailureReporter(ABC):
    """Abstract sink for terminal translation failures."""

    @abstractmethod
    def report(self, failure: TranslationFailure) -> None:
        """
        Deliver a terminal failure.

        Args:
            failure: What failed and why
        """
        pass


class LoggingFailureReporter(FailureReporter):
    """Reports failures to the application log."""

    def report(self, failure: TranslationFailure) -> None:
        logger.error(
            f"Translation {failure.request_id} for post {failure.post_id} failed "
            f"after {failure.attempts} attempts [{failure.reason.value}]: {failure.error}"
        )


class CollectingFailureReporter(FailureReporter):
    """Keeps failures in memory; used by scripts and tests."""

    def __init__(self):
        self.failures: List[TranslationFailure] = []

    def report(self, failure: TranslationFailure) -> None:
        self.failures.append(failure)

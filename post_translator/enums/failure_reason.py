"""
Failure Reason Enumeration

Why a translation request ended in the failed state.
"""
from enum import Enum


class FailureReason(str, Enum):
    MAX_ATTEMPTS_EXCEEDED = "max_attempts_exceeded"
    PROVIDER_REJECTED = "provider_rejected"
    PROVIDER_FAILED = "provider_failed"
    ITEM_NOT_FOUND = "item_not_found"
    PERSISTENCE_ERROR = "persistence_error"

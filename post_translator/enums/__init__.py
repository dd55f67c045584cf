"""
Post-Translator Enumeration Module

This module defines all enumeration types used throughout the application.
"""

from post_translator.enums.request_status import RequestStatus
from post_translator.enums.provider_status import ProviderStatus
from post_translator.enums.failure_reason import FailureReason

__all__ = [
    "RequestStatus",
    "ProviderStatus",
    "FailureReason",
]

"""
Provider Status Enumeration

Normalized job status reported by the translation provider's status endpoint.
"""
from enum import Enum


class ProviderStatus(str, Enum):
    """
    Provider job status.

    Anything the provider reports besides "completed" and "failed"
    (queued, in_progress, ...) is treated as pending.
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @classmethod
    def from_provider(cls, value) -> "ProviderStatus":
        """
        Map a raw provider status string onto the enum.

        Args:
            value: Raw "status" field from the provider response

        Returns:
            ProviderStatus: COMPLETED / FAILED on exact match, otherwise PENDING
        """
        normalized = str(value or "").strip().lower()
        if normalized == cls.COMPLETED.value:
            return cls.COMPLETED
        if normalized == cls.FAILED.value:
            return cls.FAILED
        return cls.PENDING

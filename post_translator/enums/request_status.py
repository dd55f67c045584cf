"""
Translation Request Status Enumeration

Defines the lifecycle states of a submitted translation request.
"""
from enum import Enum


class RequestStatus(str, Enum):
    """
    Translation request status enumeration.

    Each request goes through these states:
    - submitted: Accepted by the provider, not polled yet
    - polling: At least one status check has been made
    - completed: Results applied to the post (reached at most once)
    - failed: Polling stopped without a result
    """

    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_open(self) -> bool:
        """Whether the poll chain for this request should keep running."""
        return self in (RequestStatus.SUBMITTED, RequestStatus.POLLING)

    @property
    def label(self) -> str:
        """
        Get human-readable label for the status.

        Returns:
            str: Chinese label for display
        """
        labels = {
            "submitted": "已提交",
            "polling": "轮询中",
            "completed": "翻译完成",
            "failed": "翻译失败",
        }
        return labels.get(self.value, "未知状态")

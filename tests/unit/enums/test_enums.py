"""
Enumeration Unit Tests
"""
import pytest

from post_translator.enums import FailureReason, ProviderStatus, RequestStatus


class TestProviderStatus:
    """Test normalization of provider status strings"""

    @pytest.mark.parametrize("raw", ["completed", "COMPLETED", " completed "])
    def test_completed(self, raw):
        assert ProviderStatus.from_provider(raw) == ProviderStatus.COMPLETED

    def test_failed(self):
        assert ProviderStatus.from_provider("failed") == ProviderStatus.FAILED

    @pytest.mark.parametrize("raw", ["pending", "queued", "in_progress", "", None])
    def test_everything_else_is_pending(self, raw):
        assert ProviderStatus.from_provider(raw) == ProviderStatus.PENDING


class TestRequestStatus:
    """Test RequestStatus helpers"""

    def test_open_states(self):
        assert RequestStatus.SUBMITTED.is_open
        assert RequestStatus.POLLING.is_open
        assert not RequestStatus.COMPLETED.is_open
        assert not RequestStatus.FAILED.is_open

    def test_labels(self):
        assert RequestStatus.COMPLETED.label == "翻译完成"
        assert RequestStatus.POLLING.label == "轮询中"

    def test_string_values(self):
        assert RequestStatus("polling") is RequestStatus.POLLING
        assert FailureReason.MAX_ATTEMPTS_EXCEEDED.value == "max_attempts_exceeded"

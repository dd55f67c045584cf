"""
Services 模块

导出所有服务类。
"""
from post_translator.services.provider_client import ProviderClient
from post_translator.services.post_service import PostService
from post_translator.services.completion_service import CompletionService, ApplyOutcome
from post_translator.services.submission_service import SubmissionService

__all__ = ["ProviderClient", "PostService", "CompletionService", "ApplyOutcome", "SubmissionService"]

"""
Translation Request Schemas

Pydantic models for translation request status and submission.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class TranslationRequestResponse(BaseModel):
    """翻译请求状态响应"""

    request_id: str
    post_id: Optional[int]
    target_locales: List[str]
    status: str
    attempt_count: int
    max_attempts: int
    failure_reason: Optional[str]
    last_error: Optional[str]
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class SubmitTranslationRequest(BaseModel):
    """重新提交翻译请求"""

    target_locales: Optional[List[str]] = Field(
        None, description="目标语言（默认使用配置中的全部目标语言）", min_length=1
    )

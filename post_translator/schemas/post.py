"""
Post Schemas

Pydantic models for Post API request/response validation.
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from post_translator.schemas.translation_request import TranslationRequestResponse


class PostCreate(BaseModel):
    """创建 Post 请求"""

    title: str = Field(..., description="源语言标题", min_length=1, max_length=255)
    description: str = Field("", description="源语言正文")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """验证标题非空"""
        if not v.strip():
            raise ValueError("标题不能为空")
        return v.strip()


class PostUpdate(BaseModel):
    """更新 Post 请求（只修改源语言内容，不会自动重新提交翻译）"""

    title: Optional[str] = Field(None, description="源语言标题", min_length=1, max_length=255)
    description: Optional[str] = Field(None, description="源语言正文")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        """验证标题非空"""
        if v is not None and not v.strip():
            raise ValueError("标题不能为空")
        return v.strip() if v is not None else v


class PostTranslationResponse(BaseModel):
    """单语言翻译"""

    locale: str
    title: str
    description: str
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostResponse(BaseModel):
    """Post 响应"""

    id: int
    title: str
    description: str
    translations: Dict[str, PostTranslationResponse] = {}
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PostCreateResponse(BaseModel):
    """创建 Post 响应（提交失败时 translation_request 为 None）"""

    post: PostResponse
    translation_request: Optional[TranslationRequestResponse] = None


class PostListResponse(BaseModel):
    """Post 列表响应"""

    items: List[PostResponse]
    page: int
    limit: int

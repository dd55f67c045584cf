"""
Callback Schemas

Payload the translation provider sends to the webhook.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class CallbackPayload(BaseModel):
    """Provider 回调参数（status / translations_url 仅记录，不参与逻辑）"""

    id: str = Field(..., description="Provider 翻译任务 ID")
    status: Optional[str] = Field(None, description="任务状态")
    translations_url: Optional[str] = Field(None, description="结果地址")

    model_config = {"extra": "ignore", "coerce_numbers_to_str": True}

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """验证任务 ID 非空"""
        if not v or not v.strip():
            raise ValueError("id 不能为空")
        return v.strip()

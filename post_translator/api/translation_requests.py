"""
Translation Requests API Routes

翻译任务状态查询端点。
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from post_translator.database import get_db
from post_translator.schemas.translation_request import TranslationRequestResponse
from post_translator.workflows.state_machine import TranslationRequestTracker


router = APIRouter()


@router.get("/translation-requests/{request_id}", response_model=TranslationRequestResponse)
def get_translation_request(
    request_id: str,
    db: Session = Depends(get_db),
):
    """
    获取翻译任务状态

    返回状态机当前状态、已轮询次数及失败原因。
    """
    request = TranslationRequestTracker(db).get(request_id)
    if not request:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Translation request not found: id={request_id}"
        )

    return request

"""
Callbacks API Routes

翻译服务商完成通知（webhook）端点。
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from loguru import logger
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from post_translator.api.dependencies import get_provider_client
from post_translator.database import get_db
from post_translator.exceptions import TranslationSyncError
from post_translator.schemas.callback import CallbackPayload
from post_translator.services.completion_service import CompletionService
from post_translator.services.provider_client import ProviderClient


router = APIRouter()


# ==================== Helper Functions ====================


async def read_callback_params(request: Request) -> Dict[str, Any]:
    """合并 query string 与 JSON / 表单 body 中的回调参数（body 优先）"""
    params: Dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            params.update(body)
    elif "form" in content_type:
        form = await request.form()
        params.update(form)

    return params


def dispatch_completion(db: Session, client: ProviderClient, post_id: int, request_id: str) -> None:
    """
    拉取完整翻译结果并写入 Post

    回调 payload 不携带译文，结果总是重新从 Provider 获取。
    错误只记录日志，不向 Provider 返回。
    """
    try:
        raw_result = client.get_result(request_id)
        CompletionService(db).apply(request_id, raw_result, post_id=post_id)
    except TranslationSyncError as e:
        logger.error(f"Callback for translation {request_id} (post {post_id}) failed: {e!r}")


# ==================== API Endpoints ====================


@router.post("/posts/{post_id}/callback", status_code=status.HTTP_200_OK)
async def receive_callback(
    post_id: int,
    request: Request,
    db: Session = Depends(get_db),
    client: ProviderClient = Depends(get_provider_client),
):
    """
    接收翻译完成回调

    参数 id 可以在 JSON body、表单或 query string 中；status 与
    translations_url 会被忽略。只要请求被受理即返回 200（空 body），
    即使该翻译已由轮询先行完成。
    """
    try:
        payload = CallbackPayload.model_validate(await read_callback_params(request))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False, include_context=False),
        )

    logger.info(f"Callback received for translation {payload.id} (post {post_id}, status={payload.status})")
    await run_in_threadpool(dispatch_completion, db, client, post_id, payload.id)

    return Response(status_code=status.HTTP_200_OK)

"""
Posts API Routes

Post 创建、查询、修改、删除与翻译提交端点。
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from loguru import logger
from sqlalchemy.orm import Session

from post_translator.api.dependencies import get_poll_scheduler, get_provider_client
from post_translator.database import get_db
from post_translator.exceptions import ItemNotFound, ProviderError, ProviderRejected
from post_translator.schemas.post import (
    PostCreate,
    PostCreateResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from post_translator.schemas.translation_request import (
    SubmitTranslationRequest,
    TranslationRequestResponse,
)
from post_translator.services.post_service import PostService
from post_translator.services.provider_client import ProviderClient
from post_translator.services.submission_service import SubmissionService
from post_translator.workflows.poll_scheduler import PollScheduler


router = APIRouter()


# ==================== API Endpoints ====================


@router.post("/posts", response_model=PostCreateResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    data: PostCreate,
    db: Session = Depends(get_db),
    client: ProviderClient = Depends(get_provider_client),
    scheduler: PollScheduler = Depends(get_poll_scheduler),
):
    """
    创建新 Post 并提交翻译

    Post 总会被创建；若提交给翻译服务失败，translation_request 为 null，
    可稍后通过 POST /posts/{post_id}/translations 重新提交。
    """
    post = PostService(db).create(title=data.title, description=data.description)
    db.commit()

    translation_request = None
    try:
        request = SubmissionService(db, client, scheduler=scheduler).submit(post)
        translation_request = TranslationRequestResponse.model_validate(request)
    except ProviderError as e:
        db.rollback()
        logger.warning(f"Post {post.id} created but not submitted for translation: {e}")

    db.refresh(post)
    return PostCreateResponse(
        post=PostResponse.model_validate(post),
        translation_request=translation_request,
    )


@router.get("/posts", response_model=PostListResponse)
def list_posts(
    page: int = Query(1, ge=1, description="页码"),
    limit: int = Query(20, ge=1, le=100, description="每页数量"),
    db: Session = Depends(get_db),
):
    """获取 Post 列表（分页，含各语言译文）"""
    posts = PostService(db).list(offset=(page - 1) * limit, limit=limit)
    return PostListResponse(
        items=[PostResponse.model_validate(post) for post in posts],
        page=page,
        limit=limit,
    )


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    """获取 Post 详情（含各语言译文）"""
    try:
        post = PostService(db).find(post_id)
    except ItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post not found: id={post_id}"
        )

    return PostResponse.model_validate(post)


@router.patch("/posts/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    data: PostUpdate,
    db: Session = Depends(get_db),
):
    """
    更新 Post 源语言内容

    不会自动重新提交翻译；如需新译文请调用 POST /posts/{post_id}/translations。
    """
    try:
        post = PostService(db).update(post_id, title=data.title, description=data.description)
    except ItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post not found: id={post_id}"
        )

    db.commit()
    db.refresh(post)
    return PostResponse.model_validate(post)


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
):
    """
    删除 Post 及其译文

    进行中的翻译任务保留记录（post_id 置空），结果到达时记为 item_not_found。
    """
    try:
        PostService(db).delete(post_id)
    except ItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post not found: id={post_id}"
        )

    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/posts/{post_id}/translations",
    response_model=TranslationRequestResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def submit_post_translation(
    post_id: int,
    data: SubmitTranslationRequest | None = None,
    db: Session = Depends(get_db),
    client: ProviderClient = Depends(get_provider_client),
    scheduler: PollScheduler = Depends(get_poll_scheduler),
):
    """
    重新提交翻译（按需）

    每次提交都会在 Provider 端创建新的翻译任务，旧任务的状态不受影响。
    """
    try:
        post = PostService(db).find(post_id)
    except ItemNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Post not found: id={post_id}"
        )

    target_locales = data.target_locales if data else None
    try:
        request = SubmissionService(db, client, scheduler=scheduler).submit(post, target_locales=target_locales)
    except ProviderRejected as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": str(e), "provider_status": e.status_code, "provider_error": e.body},
        )
    except ProviderError as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Translation provider unavailable: {e}"
        )

    return request

"""
FastAPI Main Entry

Post-Translator - 博客文章自动翻译同步服务。
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from post_translator.config import (
    APP_NAME,
    APP_VERSION,
    API_HOST,
    API_PORT,
    CORS_ORIGINS,
    DEBUG,
    POLLING_ENABLED,
    POLL_RESUME_ON_STARTUP,
)
from post_translator.database import create_tables
from post_translator.exceptions import ItemNotFound, ProviderRejected, ProviderUnavailable
from post_translator.logging_config import setup_logging


# ==================== Lifespan ====================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用启动 / 关闭时执行"""
    from post_translator.api.dependencies import get_poll_scheduler
    from post_translator.workflows.poll_scheduler import shutdown_executor, start_executor

    setup_logging()
    create_tables()
    start_executor()
    logger.info(f"{APP_NAME} API v{APP_VERSION} listening on http://{API_HOST}:{API_PORT}")

    if POLLING_ENABLED and POLL_RESUME_ON_STARTUP:
        get_poll_scheduler().resume_pending()

    yield

    shutdown_executor(wait=False)
    logger.info(f"{APP_NAME} stopped")


# ==================== Create FastAPI App ====================
app = FastAPI(
    title=APP_NAME,
    version=APP_VERSION,
    debug=DEBUG,
    description="""
    Post-Translator API

    将博客文章提交给异步翻译服务，并通过回调或轮询将各语言译文写回文章。

    ## 主要功能
    * **Post 管理**: 创建、查询 Post（含各语言译文）
    * **翻译提交**: 创建 Post 时自动提交，也可按需重新提交
    * **回调接收**: 接收翻译服务完成通知
    * **任务状态**: 查询翻译任务的轮询进度与失败原因
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ==================== Configure CORS ====================
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==================== Import and Register Routers ====================
from post_translator.api import callbacks, posts, translation_requests

app.include_router(posts.router, prefix="/api/v1", tags=["posts"])
app.include_router(translation_requests.router, prefix="/api/v1", tags=["translation-requests"])
app.include_router(callbacks.router, prefix="/api", tags=["callbacks"])


# ==================== Root Endpoint ====================
@app.get("/", tags=["Root"])
async def root():
    """API 服务根路径"""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "redoc": "/redoc",
    }


# ==================== Health Check ====================
@app.get("/health", tags=["Root"])
async def health_check():
    """健康检查端点"""
    return {
        "status": "healthy",
        "service": APP_NAME,
        "version": APP_VERSION,
    }


# ==================== Global Exception Handlers ====================
@app.exception_handler(ItemNotFound)
async def item_not_found_handler(request, exc):
    """资源不存在"""
    return JSONResponse(
        status_code=404,
        content={"detail": str(exc), "error_type": "item_not_found"},
    )


@app.exception_handler(ProviderRejected)
async def provider_rejected_handler(request, exc):
    """翻译服务拒绝请求"""
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "error_type": "provider_rejected",
            "provider_status": exc.status_code,
        },
    )


@app.exception_handler(ProviderUnavailable)
async def provider_unavailable_handler(request, exc):
    """翻译服务不可达"""
    return JSONResponse(
        status_code=503,
        content={"detail": str(exc), "error_type": "provider_unavailable"},
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_exception_handler(request, exc):
    """数据库异常处理"""
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Database error occurred",
            "error_type": "database_error",
            "message": str(exc) if app.debug else "Internal database error",
        },
    )


# ==================== Run Server (Development) ====================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "post_translator.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=True,
        log_level="info",
    )

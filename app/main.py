"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어, 예외 핸들러 및 라우터 등록.

FastAPI application entry point — Middleware, exception handler and router
registration for the community report API. All endpoints live under /api;
in local storage mode the uploaded photos are served from /uploads.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import engine
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.error_handler import register_exception_handlers
from app.services.storage_service import UPLOADS_DIR, storage_service

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """시작 시 저장소 구성을 기록하고, 종료 시 DB 연결 풀을 닫습니다."""
    logger.info(
        "starting %s (report store: %s, photo storage: %s)",
        settings.APP_NAME,
        settings.REPORT_STORE,
        "local" if storage_service.is_local else "s3",
    )
    yield
    await engine.dispose()


app: FastAPI = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어: CORS보다 먼저 등록하여 모든 요청을 캡처
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어: Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


from app.api import api_router  # noqa: E402

app.include_router(api_router, prefix="/api")

# 로컬 모드 사진 제공: Serve locally stored photos when S3 is not configured
if storage_service.is_local:
    app.mount("/uploads", StaticFiles(directory=UPLOADS_DIR, check_dir=False), name="uploads")

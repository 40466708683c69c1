"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router that the
application mounts under /api.

Included routers:
    - reports: 신고 제출/조회/상태 변경/코멘트 (Reports, status lifecycle, comments)
    - locations: 위치별 신고 현황 (Per-location report aggregation)
    - storage: 사진 업로드 (Photo presigned URLs and uploads)
"""

from fastapi import APIRouter

from app.api.locations import router as locations_router
from app.api.reports import router as reports_router
from app.api.storage import router as storage_router

api_router: APIRouter = APIRouter()

api_router.include_router(reports_router, prefix="/reports", tags=["Reports"])
api_router.include_router(locations_router, prefix="/locations", tags=["Locations"])
# 사진 업로드: /presigned-url, /upload, /uploads/{key}
api_router.include_router(storage_router, tags=["Photo Uploads"])

"""위치 현황 라우터 — 위치별 신고 집계 API.

Location Router — Per (building, location) report counts for the dashboard.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.report import LocationStatusListResponse
from app.services.report_service import report_service

router: APIRouter = APIRouter()


@router.get("/status", response_model=LocationStatusListResponse)
async def get_location_status(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LocationStatusListResponse:
    """위치별 신고 수 및 최신 신고 일시. 신고가 없는 위치는 포함되지 않음."""
    statuses = await report_service.get_location_status(db)
    return LocationStatusListResponse(location_status=statuses)

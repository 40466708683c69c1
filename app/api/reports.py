"""신고 라우터 — 신고 제출, 조회, 상태 변경, 코멘트 API.

Report Router — Submission, dashboard listing, detail, status updates and
comments. Bodies are taken as raw JSON objects and validated by the report
service so that every violated field is reported in one 400 response.
Ids are taken as strings so that malformed ids become InvalidIdError (400)
rather than FastAPI's generic 422.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.report import (
    CommentResponse,
    ReportCreatedResponse,
    ReportDetailResponse,
    ReportResponse,
)
from app.services.report_service import report_service

router: APIRouter = APIRouter()


@router.post("", response_model=ReportCreatedResponse, status_code=201)
async def create_report(
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportCreatedResponse:
    """신고 제출. 신고 코드(CR-YYYY-XXXX)를 함께 반환."""
    created = await report_service.create_report(db, payload)
    await db.commit()
    return created


@router.get("", response_model=list[ReportResponse])
async def list_reports(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[ReportResponse]:
    """전체 신고 목록 조회 (최신순)."""
    return await report_service.list_reports(db)


@router.get("/{report_id}", response_model=ReportDetailResponse)
async def get_report(
    report_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportDetailResponse:
    """신고 상세 조회 — 코멘트 포함 (최신순)."""
    return await report_service.get_report(db, report_id)


@router.patch("/{report_id}", response_model=ReportResponse)
async def update_report_status(
    report_id: str,
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ReportResponse:
    """신고 상태 변경. improvementText는 보낸 경우에만 반영."""
    updated = await report_service.update_report_status(db, report_id, payload)
    await db.commit()
    return updated


@router.post("/{report_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    report_id: str,
    payload: Annotated[dict[str, Any], Body()],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentResponse:
    """신고 코멘트 작성."""
    comment = await report_service.add_comment(db, report_id, payload)
    await db.commit()
    return comment


@router.get("/{report_id}/comments", response_model=list[CommentResponse])
async def list_comments(
    report_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[CommentResponse]:
    """신고 코멘트 목록 조회 (최신순)."""
    return await report_service.list_comments(db, report_id)

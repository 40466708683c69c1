"""신고 서비스.

Report service — Validation and orchestration for report CRUD, the status
lifecycle, comments and the per-location aggregation. Independent of HTTP:
callers pass plain mappings and receive response records or domain errors.
"""

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.repositories.comment_repository import comment_repository
from app.repositories.memory_repository import MemoryReportStore
from app.repositories.report_repository import report_repository
from app.schemas.report import (
    CommentCreate,
    CommentResponse,
    LocationStatus,
    ReportCreate,
    ReportCreatedResponse,
    ReportDetailResponse,
    ReportResponse,
    ReportStatusUpdate,
)
from app.utils.exceptions import FieldError, InvalidIdError, NotFoundError, ValidationError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_POSITIVE_INT = re.compile(r"[0-9]+")

REPORT_NOT_FOUND = "找不到此回報 (Report not found)"

# cr_reports.id는 INTEGER 컬럼 (PostgreSQL int4); 그보다 큰 ID의 신고는 존재할 수 없음
MAX_REPORT_ID: int = 2**31 - 1

# 필드별 기본 메시지: Default user-facing message per field
_FIELD_MESSAGES: dict[str, str] = {
    "building": "請選擇棟別",
    "location": "請選擇區域/樓層",
    "reportType": "請選擇回報改善類型",
    "description": "請填寫問題描述",
    "contact": "聯絡方式格式錯誤",
    "photos": "請至少上傳一張照片",
    "status": "無效的處理狀態",
    "improvementText": "改善說明格式錯誤",
    "content": "請填寫留言內容",
    "createdBy": "請填寫留言者名稱",
}

# (필드, pydantic 에러 타입)별 메시지: Messages for specific constraint kinds
_TYPE_MESSAGES: dict[tuple[str, str], str] = {
    ("description", "string_too_long"): "描述不能超過500字",
    ("content", "string_too_long"): "留言不能超過500字",
    ("photos", "too_long"): f"最多只能上傳{settings.MAX_PHOTOS_PER_REPORT}張照片",
}


def _to_field_errors(exc: PydanticValidationError) -> list[FieldError]:
    """pydantic 검증 오류를 필드별 FieldError 목록으로 변환합니다."""
    errors: list[FieldError] = []
    for err in exc.errors():
        loc = [str(part) for part in err["loc"]]
        field = ".".join(loc) or "body"
        root = loc[0] if loc else "body"
        if len(loc) > 1 and root == "photos":
            message = "照片網址格式錯誤"
        else:
            message = _TYPE_MESSAGES.get((root, err["type"])) or _FIELD_MESSAGES.get(root, err["msg"])
        errors.append(FieldError(field, message))
    return errors


def validate_input(schema: type[SchemaT], payload: Mapping[str, Any] | None) -> SchemaT:
    """입력을 스키마로 검증하고, 위반된 모든 필드를 한 번에 보고합니다.

    Validate payload against schema, collecting every violated field into a
    single ValidationError instead of stopping at the first one.

    Raises:
        ValidationError: 하나 이상의 필드 제약 위반 (One or more violations)
    """
    if not isinstance(payload, Mapping):
        raise ValidationError([FieldError("body", "請求內容必須是 JSON 物件")])
    try:
        return schema.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(_to_field_errors(exc)) from exc


def parse_report_id(raw_id: Any) -> int:
    """경로 ID를 양의 정수로 변환합니다.

    Accepts ints and decimal digit strings; anything else (negative numbers,
    zero, "abc", booleans) is an InvalidIdError.
    """
    if isinstance(raw_id, bool):
        raise InvalidIdError(raw_id)
    if isinstance(raw_id, int):
        value = raw_id
    elif isinstance(raw_id, str) and _POSITIVE_INT.fullmatch(raw_id):
        value = int(raw_id)
    else:
        raise InvalidIdError(raw_id)
    if value <= 0:
        raise InvalidIdError(raw_id)
    return value


def _in_id_range(report_id: int) -> bool:
    return report_id <= MAX_REPORT_ID


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_report_code(report_id: int, created_at: datetime) -> str:
    """신고 코드를 생성합니다 (e.g. id=7 in 2024 -> "CR-2024-0007")."""
    return f"CR-{created_at.year}-{report_id:04d}"


class ReportStore(Protocol):
    async def create_report(self, db: Any, data: ReportCreate) -> ReportResponse: ...
    async def get_report(self, db: Any, report_id: int) -> ReportResponse | None: ...
    async def list_reports(self, db: Any) -> list[ReportResponse]: ...
    async def update_status(self, db: Any, report_id: int, update_data: dict[str, Any]) -> ReportResponse | None: ...
    async def report_exists(self, db: Any, report_id: int) -> bool: ...
    async def get_location_status(self, db: Any) -> list[LocationStatus]: ...


class CommentStore(Protocol):
    async def add_comment(self, db: Any, report_id: int, data: CommentCreate) -> CommentResponse: ...
    async def list_comments(self, db: Any, report_id: int) -> list[CommentResponse]: ...


class ReportService:
    """신고 비즈니스 로직.

    Args:
        reports: 신고 저장소 (SQL repository or in-memory store)
        comments: 코멘트 저장소 (SQL repository or in-memory store)
    """

    def __init__(self, reports: ReportStore, comments: CommentStore) -> None:
        self.reports: ReportStore = reports
        self.comments: CommentStore = comments

    async def create_report(
        self,
        db: AsyncSession | None,
        payload: Mapping[str, Any],
    ) -> ReportCreatedResponse:
        """신고를 검증 후 pending 상태로 저장하고 신고 코드를 함께 반환합니다."""
        data = validate_input(ReportCreate, payload)
        report = await self.reports.create_report(db, data)
        return ReportCreatedResponse(
            report=report,
            report_code=format_report_code(report.id, report.created_at),
        )

    async def get_report(self, db: AsyncSession | None, raw_id: Any) -> ReportDetailResponse:
        report_id = parse_report_id(raw_id)
        report = await self.reports.get_report(db, report_id) if _in_id_range(report_id) else None
        if report is None:
            raise NotFoundError(REPORT_NOT_FOUND)
        comments = await self.comments.list_comments(db, report_id)
        return ReportDetailResponse(report=report, comments=comments)

    async def list_reports(self, db: AsyncSession | None) -> list[ReportResponse]:
        return await self.reports.list_reports(db)

    async def update_report_status(
        self,
        db: AsyncSession | None,
        raw_id: Any,
        payload: Mapping[str, Any],
    ) -> ReportResponse:
        """상태를 변경하고 updated_at을 갱신합니다.

        Any status may move to any other status. improvement_text is written
        only when the caller sent it, so an omitted field keeps the stored
        value while "" clears it.
        """
        report_id = parse_report_id(raw_id)
        data = validate_input(ReportStatusUpdate, payload)

        update_data: dict[str, Any] = {
            "status": data.status,
            "updated_at": _utcnow(),
        }
        if "improvement_text" in data.model_fields_set:
            update_data["improvement_text"] = data.improvement_text

        updated: ReportResponse | None = None
        if _in_id_range(report_id):
            updated = await self.reports.update_status(db, report_id, update_data)
        if updated is None:
            raise NotFoundError(REPORT_NOT_FOUND)
        return updated

    async def add_comment(
        self,
        db: AsyncSession | None,
        raw_report_id: Any,
        payload: Mapping[str, Any],
    ) -> CommentResponse:
        report_id = parse_report_id(raw_report_id)
        data = validate_input(CommentCreate, payload)
        # 존재하지 않는 신고에 코멘트가 남지 않도록 먼저 확인 (No orphan comments)
        if not _in_id_range(report_id) or not await self.reports.report_exists(db, report_id):
            raise NotFoundError(REPORT_NOT_FOUND)
        return await self.comments.add_comment(db, report_id, data)

    async def list_comments(self, db: AsyncSession | None, raw_report_id: Any) -> list[CommentResponse]:
        report_id = parse_report_id(raw_report_id)
        if not _in_id_range(report_id):
            return []
        return await self.comments.list_comments(db, report_id)

    async def get_location_status(self, db: AsyncSession | None) -> list[LocationStatus]:
        return await self.reports.get_location_status(db)


def build_report_service(store: str) -> ReportService:
    """설정된 저장소 종류에 맞는 ReportService를 생성합니다."""
    if store == "memory":
        memory = MemoryReportStore()
        return ReportService(reports=memory, comments=memory)
    return ReportService(reports=report_repository, comments=comment_repository)


report_service: ReportService = build_report_service(settings.REPORT_STORE)

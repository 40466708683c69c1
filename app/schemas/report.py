"""신고 Pydantic 스키마.

Report and comment request/response schemas.
Request models carry every field constraint so that one validation pass
reports all violations at once. Response models are the structured records
shared by the SQL and in-memory repositories; they serialize with camelCase
aliases (reportType, improvementText, createdAt, ...).
"""

from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.config import settings
from app.models.report import ReportStatus, ReportType

DESCRIPTION_MAX_LENGTH: int = 500
COMMENT_MAX_LENGTH: int = 500

_http_url: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def _check_photo_url(value: str) -> str:
    """http(s) 절대 URL인지 확인하고 원래 문자열을 그대로 반환합니다.

    The original string is returned untouched so the stored photo list is
    byte-for-byte what the client sent.
    """
    try:
        _http_url.validate_python(value)
    except PydanticValidationError as exc:
        raise ValueError("invalid photo URL") from exc
    return value


PhotoUrl = Annotated[str, AfterValidator(_check_photo_url)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# === 요청 (Request) 스키마 ===

class ReportCreate(CamelModel):
    """신고 생성 요청 스키마.

    Report creation request schema. status and improvementText are not
    accepted here; they change only through the status update operation.

    Attributes:
        building: 동 코드 (Building code)
        location: 구역 코드 (Area code within the building)
        report_type: 신고 유형 (One of ReportType)
        description: 문제 설명 (1–500 characters)
        contact: 연락처 (Optional)
        photos: 사진 URL 목록 (1 to MAX_PHOTOS_PER_REPORT absolute URLs)
    """

    building: str = Field(min_length=1)
    location: str = Field(min_length=1)
    report_type: ReportType
    description: str = Field(min_length=1, max_length=DESCRIPTION_MAX_LENGTH)
    contact: str | None = None
    photos: list[PhotoUrl] = Field(min_length=1, max_length=settings.MAX_PHOTOS_PER_REPORT)


class ReportStatusUpdate(CamelModel):
    """신고 상태 변경 요청 스키마.

    improvementText가 요청에 없으면 기존 값 유지, 빈 문자열이면 빈 값으로 교체.
    An omitted improvementText leaves the stored value untouched; any value
    that is present (including "") replaces it.
    """

    status: ReportStatus
    improvement_text: str | None = None


class CommentCreate(CamelModel):
    content: str = Field(min_length=1, max_length=COMMENT_MAX_LENGTH)
    created_by: str = Field(min_length=1)


# === 응답 (Response) 스키마 ===

class ReportResponse(CamelModel):
    id: int
    building: str
    location: str
    report_type: str
    description: str
    contact: str | None = None
    photos: list[str]
    status: ReportStatus
    improvement_text: str | None = None
    created_at: datetime
    updated_at: datetime


class CommentResponse(CamelModel):
    id: int
    report_id: int
    content: str
    created_by: str
    created_at: datetime


class LocationStatus(CamelModel):
    """위치별 신고 집계 (Derived, never stored).

    Attributes:
        building: 동 코드
        location: 구역 코드
        report_count: 해당 위치의 신고 수 (Exact row count, always >= 1)
        latest_report_date: 최신 신고 생성 일시 ISO-8601 (Max createdAt)
    """

    building: str
    location: str
    report_count: int
    latest_report_date: str | None = None


class ReportCreatedResponse(CamelModel):
    report: ReportResponse
    report_code: str  # CR-<year>-<id 4자리> (e.g. CR-2024-0007)


class ReportDetailResponse(CamelModel):
    report: ReportResponse
    comments: list[CommentResponse]  # 최신순 (Newest first)


class LocationStatusListResponse(CamelModel):
    location_status: list[LocationStatus]

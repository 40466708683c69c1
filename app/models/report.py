"""신고(Report) 및 코멘트 SQLAlchemy ORM 모델 정의.

Report and comment SQLAlchemy ORM model definitions.
A report is a single facility issue submitted by a resident; staff move it
through the status values and discuss it in comments.

Tables:
    - cr_reports: 시설 문제 신고 (Facility issue reports with photo URLs)
    - cr_comments: 신고 코멘트 (Comments owned by a report)
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import JSON, ARRAY, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class ReportStatus(str, enum.Enum):
    """신고 처리 상태 — 네 가지 값만 허용.

    Report status. Any value may move to any other value, including itself;
    there is no guarded workflow.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    REJECTED = "rejected"


class ReportType(str, enum.Enum):
    """신고 유형 코드 (Closed set of report category codes)."""

    CEILING_WALL_FLOOR = "ceiling_wall_floor"
    SOCKET_SWITCH = "socket_switch"
    PAINT = "paint"
    EQUIPMENT_LOCATION = "equipment_location"
    CLEANING = "cleaning"
    WATER_LEAKAGE = "water_leakage"
    MAJOR_DEFECT = "major_defect"
    OTHER_MARKED = "other_marked"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 사진 URL 목록: PostgreSQL text[] (SQLite 테스트 환경에서는 JSON 배열)
# Ordered photo URLs: native text[] on PostgreSQL, JSON list on SQLite
PhotoList = ARRAY(Text).with_variant(JSON(), "sqlite")


class Report(Base):
    """신고 모델 — 주민이 제출한 시설 문제 한 건.

    Report model — One facility issue submitted by a resident.
    status and improvement_text change only through the status update
    operation; photos never change after creation.

    Attributes:
        id: 고유 식별자 (Database-assigned sequence id)
        building: 동 코드 (Building code, e.g. "A", "outdoor", "parking")
        location: 구역 코드 (Area code scoped to the building, e.g. "A-lobby")
        report_type: 신고 유형 코드 (One of ReportType)
        description: 문제 설명 (1–500 characters)
        contact: 연락처 (Optional contact info)
        photos: 사진 URL 목록 (Ordered photo URLs)
        status: 처리 상태 (One of ReportStatus, default pending)
        improvement_text: 개선 내용 (Staff note written when resolving)
        created_at: 생성 일시 UTC (Creation timestamp, immutable)
        updated_at: 수정 일시 UTC (Refreshed on every status update)
    """

    __tablename__ = "cr_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    building: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    report_type: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    contact: Mapped[str | None] = mapped_column(Text, nullable=True)
    photos: Mapped[list[str]] = mapped_column(PhotoList, nullable=False)
    status: Mapped[ReportStatus] = mapped_column(
        Enum(
            ReportStatus,
            name="report_status",
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=ReportStatus.PENDING,
    )
    improvement_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_cr_reports_building_location", "building", "location"),
    )


class Comment(Base):
    """신고 코멘트 모델 — 신고에 달린 텍스트 메모.

    Comment model — Text remark attached to exactly one report.
    Immutable once created; removed only together with its report.

    Attributes:
        id: 고유 식별자 (Database-assigned sequence id)
        report_id: 소속 신고 FK (Owning report)
        content: 코멘트 내용 (1–500 characters)
        created_by: 작성자 표시 이름 (Free-text display name)
        created_at: 생성 일시 UTC
    """

    __tablename__ = "cr_comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    report_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("cr_reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

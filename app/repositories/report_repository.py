"""신고 레포지토리.

Report repository — Handles cr_reports DB queries and the per-location
aggregation. Rows are converted to ReportResponse records by an explicit
column-to-field mapping; callers never see ORM objects.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import Report, ReportStatus
from app.repositories.base import BaseRepository, store_errors
from app.schemas.report import LocationStatus, ReportCreate, ReportResponse


def as_utc(value: datetime) -> datetime:
    """타임존 없는 값은 UTC로 간주합니다 (SQLite returns naive datetimes)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_report_record(row: Report) -> ReportResponse:
    """cr_reports 행을 ReportResponse 레코드로 변환합니다."""
    return ReportResponse(
        id=row.id,
        building=row.building,
        location=row.location,
        report_type=row.report_type,
        description=row.description,
        contact=row.contact,
        photos=list(row.photos),
        status=row.status,
        improvement_text=row.improvement_text,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class ReportRepository(BaseRepository[Report]):

    def __init__(self) -> None:
        super().__init__(Report)

    async def create_report(self, db: AsyncSession, data: ReportCreate) -> ReportResponse:
        now = datetime.now(timezone.utc)
        row = await self.create(
            db,
            {
                "building": data.building,
                "location": data.location,
                "report_type": data.report_type.value,
                "description": data.description,
                "contact": data.contact,
                "photos": list(data.photos),
                "status": ReportStatus.PENDING,
                "created_at": now,
                "updated_at": now,
            },
        )
        return to_report_record(row)

    async def get_report(self, db: AsyncSession, report_id: int) -> ReportResponse | None:
        row = await self.get_by_id(db, report_id)
        return to_report_record(row) if row is not None else None

    async def list_reports(self, db: AsyncSession) -> list[ReportResponse]:
        query: Select = select(Report).order_by(Report.created_at.desc(), Report.id.desc())
        rows = await self.get_all(db, query)
        return [to_report_record(r) for r in rows]

    async def update_status(
        self,
        db: AsyncSession,
        report_id: int,
        update_data: dict[str, Any],
    ) -> ReportResponse | None:
        """상태/개선 내용/updated_at을 한 번에 반영합니다.

        update_data holds status, updated_at and, only when the caller
        supplied it, improvement_text.
        """
        row = await self.update(db, report_id, update_data)
        return to_report_record(row) if row is not None else None

    async def report_exists(self, db: AsyncSession, report_id: int) -> bool:
        return await self.exists(db, report_id)

    async def get_location_status(self, db: AsyncSession) -> list[LocationStatus]:
        """(building, location) 쌍별 신고 수와 최신 생성 일시를 집계합니다.

        Groups strictly by the (building, location) pair. Pairs without
        reports produce no row, so absence means "no reports".
        """
        query: Select = (
            select(
                Report.building,
                Report.location,
                func.count().label("report_count"),
                func.max(Report.created_at).label("latest_report_date"),
            )
            .group_by(Report.building, Report.location)
            .order_by(Report.building, Report.location)
        )
        with store_errors("cr_reports.location_status"):
            result = await db.execute(query)
            rows = result.all()

        return [
            LocationStatus(
                building=row.building,
                location=row.location,
                report_count=int(row.report_count),
                latest_report_date=(
                    as_utc(row.latest_report_date).isoformat() if row.latest_report_date else None
                ),
            )
            for row in rows
        ]


report_repository: ReportRepository = ReportRepository()

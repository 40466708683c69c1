"""인메모리 신고 저장소 — 개발/오프라인용 대체 저장소.

In-memory report store — Development/offline fallback for the SQL repositories.
Keeps reports and comments in insertion-ordered dicts keyed by id. An
asyncio.Lock guards the id counters and the maps, so concurrent coroutines
on one event loop never race; it is not safe across OS threads or processes.
Data lives only as long as the process.

Usage:
    store = MemoryReportStore()
    service = ReportService(reports=store, comments=store)
"""

import asyncio
from datetime import datetime, timezone
from typing import Any

from app.models.report import ReportStatus
from app.schemas.report import (
    CommentCreate,
    CommentResponse,
    LocationStatus,
    ReportCreate,
    ReportResponse,
)


class MemoryReportStore:
    """신고/코멘트 인메모리 저장소.

    Implements the same methods as ReportRepository and CommentRepository.
    The db argument is accepted for signature compatibility and ignored.
    Stored records are copied on the way in and out so callers cannot mutate
    stored state.
    """

    def __init__(self) -> None:
        self._reports: dict[int, ReportResponse] = {}
        self._comments: dict[int, CommentResponse] = {}
        self._next_report_id: int = 1
        self._next_comment_id: int = 1
        self._lock: asyncio.Lock = asyncio.Lock()

    # --- Reports ---

    async def create_report(self, db: Any, data: ReportCreate) -> ReportResponse:
        async with self._lock:
            now = datetime.now(timezone.utc)
            record = ReportResponse(
                id=self._next_report_id,
                building=data.building,
                location=data.location,
                report_type=data.report_type.value,
                description=data.description,
                contact=data.contact,
                photos=list(data.photos),
                status=ReportStatus.PENDING,
                improvement_text=None,
                created_at=now,
                updated_at=now,
            )
            self._reports[record.id] = record
            self._next_report_id += 1
            return record.model_copy(deep=True)

    async def get_report(self, db: Any, report_id: int) -> ReportResponse | None:
        record = self._reports.get(report_id)
        return record.model_copy(deep=True) if record is not None else None

    async def list_reports(self, db: Any) -> list[ReportResponse]:
        ordered = sorted(self._reports.values(), key=lambda r: (r.created_at, r.id), reverse=True)
        return [r.model_copy(deep=True) for r in ordered]

    async def update_status(
        self,
        db: Any,
        report_id: int,
        update_data: dict[str, Any],
    ) -> ReportResponse | None:
        async with self._lock:
            record = self._reports.get(report_id)
            if record is None:
                return None
            # 새 레코드로 교체: 모든 필드가 함께 반영되거나 아무것도 반영되지 않음
            updated = record.model_copy(update=update_data, deep=True)
            self._reports[report_id] = updated
            return updated.model_copy(deep=True)

    async def report_exists(self, db: Any, report_id: int) -> bool:
        return report_id in self._reports

    async def get_location_status(self, db: Any) -> list[LocationStatus]:
        groups: dict[tuple[str, str], list[datetime]] = {}
        for record in self._reports.values():
            groups.setdefault((record.building, record.location), []).append(record.created_at)

        return [
            LocationStatus(
                building=building,
                location=location,
                report_count=len(created),
                latest_report_date=max(created).isoformat(),
            )
            for (building, location), created in sorted(groups.items())
        ]

    # --- Comments ---

    async def add_comment(self, db: Any, report_id: int, data: CommentCreate) -> CommentResponse:
        async with self._lock:
            record = CommentResponse(
                id=self._next_comment_id,
                report_id=report_id,
                content=data.content,
                created_by=data.created_by,
                created_at=datetime.now(timezone.utc),
            )
            self._comments[record.id] = record
            self._next_comment_id += 1
            return record.model_copy(deep=True)

    async def list_comments(self, db: Any, report_id: int) -> list[CommentResponse]:
        matching = [c for c in self._comments.values() if c.report_id == report_id]
        matching.sort(key=lambda c: (c.created_at, c.id), reverse=True)
        return [c.model_copy(deep=True) for c in matching]

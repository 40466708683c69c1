"""신고 코멘트 레포지토리.

Comment repository — Handles cr_comments DB queries.
"""

from datetime import datetime, timezone

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.report import Comment
from app.repositories.base import BaseRepository
from app.repositories.report_repository import as_utc
from app.schemas.report import CommentCreate, CommentResponse


def to_comment_record(row: Comment) -> CommentResponse:
    return CommentResponse(
        id=row.id,
        report_id=row.report_id,
        content=row.content,
        created_by=row.created_by,
        created_at=as_utc(row.created_at),
    )


class CommentRepository(BaseRepository[Comment]):

    def __init__(self) -> None:
        super().__init__(Comment)

    async def add_comment(
        self,
        db: AsyncSession,
        report_id: int,
        data: CommentCreate,
    ) -> CommentResponse:
        row = await self.create(
            db,
            {
                "report_id": report_id,
                "content": data.content,
                "created_by": data.created_by,
                "created_at": datetime.now(timezone.utc),
            },
        )
        return to_comment_record(row)

    async def list_comments(self, db: AsyncSession, report_id: int) -> list[CommentResponse]:
        query: Select = (
            select(Comment)
            .where(Comment.report_id == report_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        )
        rows = await self.get_all(db, query)
        return [to_comment_record(r) for r in rows]


comment_repository: CommentRepository = CommentRepository()

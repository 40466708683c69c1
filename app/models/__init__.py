"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations.

Modules:
    report: 신고 및 코멘트 (Reports, comments, status and type enums)
"""

from app.models.report import Comment, Report, ReportStatus, ReportType

__all__ = [
    "Report", "Comment",
    "ReportStatus", "ReportType",
]

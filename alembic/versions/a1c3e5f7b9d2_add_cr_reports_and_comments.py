"""add_cr_reports_and_comments

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000

신고(cr_reports) 및 코멘트(cr_comments) 테이블 생성.
사진 URL은 text[] 배열, 상태는 report_status enum.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "a1c3e5f7b9d2"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

report_status = postgresql.ENUM(
    "pending", "processing", "completed", "rejected",
    name="report_status",
    create_type=False,
)


def upgrade() -> None:
    report_status.create(op.get_bind(), checkfirst=True)

    op.create_table(
        "cr_reports",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("building", sa.Text(), nullable=False),
        sa.Column("location", sa.Text(), nullable=False),
        sa.Column("report_type", sa.String(50), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("contact", sa.Text(), nullable=True),
        sa.Column("photos", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("status", report_status, server_default="pending", nullable=False),
        sa.Column("improvement_text", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_cr_reports_building_location", "cr_reports", ["building", "location"])
    op.create_index("ix_cr_reports_created_at", "cr_reports", ["created_at"])

    op.create_table(
        "cr_comments",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("report_id", sa.Integer(), sa.ForeignKey("cr_reports.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_by", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_cr_comments_report_id", "cr_comments", ["report_id"])


def downgrade() -> None:
    op.drop_index("ix_cr_comments_report_id")
    op.drop_table("cr_comments")
    op.drop_index("ix_cr_reports_created_at")
    op.drop_index("ix_cr_reports_building_location")
    op.drop_table("cr_reports")
    report_status.drop(op.get_bind(), checkfirst=True)

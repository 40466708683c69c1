"""테스트 인프라 — 테스트 DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — Test database, session, and httpx client fixtures.
Runs against an in-memory SQLite database (aiosqlite) by default; set
TEST_DATABASE_URL to a postgresql+asyncpg URL to run the same suite against
PostgreSQL. The schema is created and dropped around every test.
"""

import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.database import Base, engine_options, get_db
from app.main import app
from app.models import *  # noqa: F401,F403

# ---------------------------------------------------------------------------
# 테스트 DB 설정
# ---------------------------------------------------------------------------
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

REPORTS_URL = "/api/reports"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 매 테스트마다 스키마를 새로 만듭니다."""
    eng = create_async_engine(TEST_DATABASE_URL, echo=False, **engine_options(TEST_DATABASE_URL))
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield eng

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def uploads_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """로컬 업로드 디렉토리를 임시 경로로 교체합니다."""
    monkeypatch.setattr("app.services.storage_service.UPLOADS_DIR", tmp_path)
    return tmp_path


@pytest.fixture
def later_clock(monkeypatch: pytest.MonkeyPatch) -> datetime:
    """상태 변경 시각을 현재보다 1초 뒤로 고정합니다."""
    later = datetime.now(timezone.utc) + timedelta(seconds=1)
    monkeypatch.setattr("app.services.report_service._utcnow", lambda: later)
    return later


# ---------------------------------------------------------------------------
# 헬퍼: 테스트용 요청 데이터
# ---------------------------------------------------------------------------
def report_payload(**overrides: Any) -> dict[str, Any]:
    """유효한 신고 생성 요청 본문을 만듭니다."""
    payload: dict[str, Any] = {
        "building": "A",
        "location": "A-lobby",
        "reportType": "water_leakage",
        "description": "Ceiling is dripping near the elevator",
        "contact": "0912-345-678",
        "photos": ["https://cdn.example.com/reports/1.jpg"],
    }
    payload.update(overrides)
    return payload


async def create_report(client: AsyncClient, **overrides: Any) -> dict[str, Any]:
    """API로 신고를 생성하고 응답 JSON을 반환합니다."""
    res = await client.post(REPORTS_URL, json=report_payload(**overrides))
    assert res.status_code == 201, res.text
    return res.json()


def parse_time(value: str) -> datetime:
    """API 응답의 ISO-8601 일시 문자열을 datetime으로 변환합니다."""
    return datetime.fromisoformat(value.replace("Z", "+00:00"))

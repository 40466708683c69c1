"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Builds the async SQLAlchemy engine for settings.DATABASE_URL (asyncpg for
PostgreSQL, aiosqlite for local SQLite files and tests), the request-scoped
session factory and the declarative base shared by the report models.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from app.config import settings


def engine_options(url: str) -> dict[str, Any]:
    """URL 종류에 맞는 엔진 옵션을 반환합니다.

    SQLite does not take pool sizing; an in-memory SQLite database must share
    one connection (StaticPool) or every session sees an empty schema.

    Args:
        url: SQLAlchemy async 연결 문자열 (Async connection URL)

    Returns:
        dict: create_async_engine에 전달할 키워드 인자
    """
    if url.startswith("sqlite"):
        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.endswith("://") or ":memory:" in url:
            options["poolclass"] = StaticPool
        return options
    # pool_pre_ping: 풀에서 꺼낸 연결을 사용 전에 확인
    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
    }


# 비동기 데이터베이스 엔진: 연결은 첫 쿼리 시점에 열림
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **engine_options(settings.DATABASE_URL),
)

# expire_on_commit=False: 커밋 후에도 레코드 변환 시 추가 쿼리 없음
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션을 열고, 요청 종료 시 커밋되지 않은 변경을 롤백합니다.

    FastAPI dependency. Handlers commit explicitly after a successful
    mutation; anything left uncommitted when the handler raised is rolled
    back so a failed write never leaves a partial row behind.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

"""기본 CRUD 레포지토리 — 모든 SQL 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for the SQL repositories.
Provides generic Create/Read/Update operations keyed by integer ids and
translates every SQLAlchemy failure into PersistenceError.

Usage:
    class CommentRepository(BaseRepository[Comment]):
        def __init__(self) -> None:
            super().__init__(Comment)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import Base
from app.utils.exceptions import PersistenceError

# 제네릭 타입 변수: SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """저장소 예외를 PersistenceError로 변환합니다.

    Re-raise any SQLAlchemy failure inside the block as PersistenceError,
    keeping the original exception as __cause__. No retry is attempted.

    Args:
        operation: 로그/디버깅용 작업 이름 (Operation name for logs)
    """
    try:
        yield
    except SQLAlchemyError as exc:
        raise PersistenceError(operation) from exc


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.
    Methods flush but never commit; the request handler owns the commit so
    each mutation stays inside one transaction.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    @property
    def _name(self) -> str:
        return self.model.__tablename__

    async def get_by_id(self, db: AsyncSession, record_id: int) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 ID (Id of the record to retrieve)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        with store_errors(f"{self._name}.get_by_id"):
            result = await db.execute(select(self.model).where(self.model.id == record_id))
            return result.scalar_one_or_none()

    async def get_all(self, db: AsyncSession, query: Select) -> Sequence[ModelType]:
        """주어진 SELECT 쿼리의 모든 레코드를 조회합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 필터/정렬이 적용된 SELECT 쿼리 (Filtered and ordered query)

        Returns:
            Sequence[ModelType]: 조회된 레코드 목록 (List of matching records)
        """
        with store_errors(f"{self._name}.get_all"):
            result = await db.execute(query)
            return result.scalars().all()

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """새 레코드를 생성합니다.

        Insert a new row and refresh it so server-assigned values (id,
        timestamps) are populated.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리 (Column values)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        with store_errors(f"{self._name}.create"):
            db_obj: ModelType = self.model(**obj_data)
            db.add(db_obj)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: int,
        update_data: dict[str, Any],
    ) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Apply every field in update_data in a single flush. Either all
        fields land or the flush raises and none do.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 업데이트할 레코드의 ID (Id of the record to update)
            update_data: 업데이트할 필드와 값 (Fields to update)

        Returns:
            ModelType | None: 업데이트된 레코드 또는 None (Updated record or None)
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        with store_errors(f"{self._name}.update"):
            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
            await db.flush()
            await db.refresh(db_obj)
            return db_obj

    async def exists(self, db: AsyncSession, record_id: int) -> bool:
        """해당 ID의 레코드가 존재하는지 확인합니다."""
        with store_errors(f"{self._name}.exists"):
            query: Select = select(func.count()).select_from(self.model).where(self.model.id == record_id)
            count: int = (await db.execute(query)).scalar() or 0
            return count > 0

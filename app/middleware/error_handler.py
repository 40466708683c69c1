"""전역 예외 핸들러 — 일관된 JSON 오류 응답.

Global exception handlers for consistent error responses.
Client errors echo their message (and, for validation, every violated field).
Server errors are logged with their chained cause and answered with a generic
message so store and S3 error text never reaches end users.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.utils.exceptions import FieldError, PersistenceError, UploadError, ValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """필드 검증 실패 — 위반된 모든 필드를 반환합니다."""
    logger.info("validation failed on %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "errors": [e.to_dict() for e in exc.errors]},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """요청 파싱 실패 (잘못된 JSON, 누락된 쿼리 등)를 400으로 변환합니다."""
    errors = [
        FieldError(".".join(str(p) for p in err["loc"] if p != "body") or "body", err["msg"])
        for err in exc.errors()
    ]
    return await validation_error_handler(request, ValidationError(errors))


async def persistence_error_handler(request: Request, exc: PersistenceError) -> JSONResponse:
    logger.error(
        "store operation %s failed on %s %s",
        exc.operation,
        request.method,
        request.url.path,
        exc_info=exc.__cause__ or exc,
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    logger.error("photo upload failed on %s", request.url.path, exc_info=exc.__cause__ or exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """리포지토리 밖(예: commit)에서 발생한 DB 오류."""
    return await persistence_error_handler(request, _wrap(exc))


def _wrap(exc: SQLAlchemyError) -> PersistenceError:
    wrapped = PersistenceError("commit")
    wrapped.__cause__ = exc
    return wrapped


def register_exception_handlers(app: FastAPI) -> None:
    """모든 예외 핸들러를 FastAPI 앱에 등록합니다."""
    app.add_exception_handler(ValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PersistenceError, persistence_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(UploadError, upload_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)  # type: ignore[arg-type]


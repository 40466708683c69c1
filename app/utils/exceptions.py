"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for the report domain.
Services and repositories raise these directly; FastAPI renders them through
the handlers registered in app.main.

Usage:
    from app.utils.exceptions import NotFoundError, ValidationError
    raise NotFoundError("Report not found")
    raise ValidationError([FieldError("building", "請選擇棟別")])
"""

from dataclasses import asdict, dataclass

from fastapi import HTTPException, status


@dataclass(frozen=True)
class FieldError:
    """단일 필드 검증 실패 (One violated field constraint)."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


class ValidationError(HTTPException):
    """400 Bad Request 예외 — 입력 필드 제약 위반 시 사용.

    400 Bad Request exception raised when input violates field constraints.
    Always carries every violated field, never just the first one, so a form
    can show all problems at once.

    Args:
        errors: 위반된 필드 목록 (Every violated field constraint)
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors: list[FieldError] = list(errors)
        message = "; ".join(f"{e.field}: {e.message}" for e in self.errors)
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=message or "Invalid input")

    @property
    def fields(self) -> set[str]:
        return {e.field for e in self.errors}


class InvalidIdError(HTTPException):
    """400 Bad Request 예외 — ID가 양의 정수가 아닐 때 사용.

    Raised when a path id cannot be parsed as a positive integer.
    Kept distinct from NotFoundError so clients can tell a malformed id
    from a well-formed id that does not exist.
    """

    def __init__(self, raw_id: object) -> None:
        self.raw_id = raw_id
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="無效的回報編號 (Invalid report ID)")


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource not found")
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class PersistenceError(HTTPException):
    """500 예외 — 저장소 연결 실패 또는 쿼리 거부.

    Raised when the underlying store is unreachable or rejects an operation.
    The client only ever sees the generic detail; the original exception is
    chained as __cause__ (raise ... from exc) and logged server-side.

    Args:
        operation: 실패한 저장소 작업 이름 (Name of the failed store operation)
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="伺服器處理失敗，請稍後再試 (Failed to process request)",
        )


class UploadError(HTTPException):
    """500 예외 — Blob 저장소 업로드 실패.

    Raised when the blob store rejects or fails an upload. The message is
    generic and safe to retry.
    """

    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="檔案上傳失敗，請重試 (Failed to upload file)",
        )

"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API request to Axiom: method, path, status
code, duration, JSON request body and the error detail of failed responses.
Resident contact details and credentials are masked; photo bytes (multipart
uploads, local PUT uploads) are never read into the log.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴: contact(주민 연락처) 포함
_SENSITIVE_KEYS = re.compile(
    r"(contact|phone|email|password|secret|token|authorization|api_key|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로: Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

_MAX_DETAIL = 500


def _mask(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _is_json(request: Request) -> bool:
    return request.headers.get("content-type", "").startswith("application/json")


def _error_detail(body: bytes) -> str:
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_DETAIL]
    detail = data.get("detail", data) if isinstance(data, dict) else data
    text = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
    return text[:_MAX_DETAIL]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Pass-through when AXIOM_API_TOKEN or AXIOM_DATASET is not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    def _skip(self, request: Request) -> bool:
        path = request.url.path
        return path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not self._client or self._skip(request):
            return await call_next(request)

        start_time = time.perf_counter()
        method = request.method
        path = request.url.path

        # JSON 요청 body만 수집: Only JSON bodies are captured
        request_body: Any = None
        if method in ("POST", "PUT", "PATCH") and _is_json(request):
            body_bytes = await request.body()
            if body_bytes:
                try:
                    request_body = _mask(json.loads(body_bytes))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    request_body = "(invalid json body)"

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            # 에러 응답시 body에서 사유 추출 후 응답을 다시 구성
            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _error_detail(resp_body)
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event: dict[str, Any] = {
                "service": settings.APP_NAME,
                "method": method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            }
            if request.query_params:
                log_event["query_params"] = _mask(dict(request.query_params))
            if request.path_params:
                log_event["path_params"] = dict(request.path_params)
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail

            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                logger.warning("axiom ingest failed for %s %s", method, path, exc_info=True)

        return response

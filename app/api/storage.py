"""사진 업로드 라우터 — presigned URL 생성 + 서버 경유 업로드 API.

Photo Upload Router — Presigned URLs for direct browser uploads, an upload
endpoint that stores bytes through the server, and the local-mode PUT target.
로컬 모드에서는 PUT 엔드포인트로 파일을 직접 받아 저장합니다.
"""

from typing import Annotated

from fastapi import APIRouter, File, Query, Request, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import settings
from app.schemas.storage import PresignedUrlResponse, UploadResponse
from app.services.storage_service import storage_service, validate_photo_upload

router: APIRouter = APIRouter()


@router.get("/presigned-url", response_model=PresignedUrlResponse)
async def create_presigned_url(
    file_name: Annotated[str, Query(alias="fileName", min_length=1)],
    file_type: Annotated[str, Query(alias="fileType", min_length=1)],
) -> PresignedUrlResponse:
    """presigned upload URL을 생성합니다 (S3 또는 로컬)."""
    result = await run_in_threadpool(
        storage_service.generate_presigned_upload_url, file_name, file_type
    )
    return PresignedUrlResponse(
        presigned_url=result["upload_url"],
        file_url=result["file_url"],
        expires_in=result["expires_in"],
    )


@router.post("/upload", response_model=UploadResponse)
async def upload_photo(photo: Annotated[UploadFile, File()]) -> UploadResponse:
    """사진 1장을 서버를 통해 저장하고 조회 URL을 반환합니다."""
    if photo.size is not None:
        validate_photo_upload(photo.content_type, photo.size)
    # 상한 + 1 바이트까지만 읽음: 초과하면 upload()의 크기 검사에서 거부
    data = await photo.read(settings.MAX_UPLOAD_BYTES + 1)
    url = await run_in_threadpool(
        storage_service.upload, data, photo.filename or "photo", photo.content_type or ""
    )
    return UploadResponse(url=url)


@router.put("/uploads/{key:path}")
async def upload_local(key: str, request: Request) -> dict:
    """로컬 모드 전용: presigned URL 대신 이 엔드포인트로 PUT합니다."""
    content_type = request.headers.get("content-type")
    declared = request.headers.get("content-length")
    if declared is not None and declared.isdigit():
        validate_photo_upload(content_type, int(declared))
    body = await request.body()
    await run_in_threadpool(storage_service.receive_local_upload, key, body, content_type)
    return {"ok": True}

"""스토리지 서비스 — 신고 사진을 S3 또는 로컬 디스크에 저장.

Storage Service — Report photos on S3 or local disk.
AWS 키가 비어있으면 자동으로 로컬 모드로 전환됩니다.
Presigned PUT URLs let the browser upload directly; upload() stores bytes
that came through the server. Both return a durable retrieval URL.
"""

import re
import uuid
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.utils.exceptions import FieldError, UploadError, ValidationError

# 로컬 업로드 디렉토리: .env의 LOCAL_UPLOADS_DIR 또는 server/uploads/
_SERVER_ROOT: Path = Path(__file__).resolve().parent.parent.parent
UPLOADS_DIR: Path = Path(settings.LOCAL_UPLOADS_DIR) if settings.LOCAL_UPLOADS_DIR else _SERVER_ROOT / "uploads"

_EXTENSIONS: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/heic": "heic",
}

# presign이 발급하는 키는 모두 이 접두사 아래에 있음
KEY_PREFIX: str = "reports/"
_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9_-]+")
_MAX_STEM = 40


def validate_photo_upload(content_type: str | None, size: int | None = None) -> None:
    """사진 형식과 크기를 확인합니다.

    Enforce the content-type allow-list and, when the size is known, the
    per-file byte cap. Both violations are reported together.

    Raises:
        ValidationError: 허용되지 않는 형식 또는 크기 초과
    """
    errors: list[FieldError] = []
    if content_type not in settings.ALLOWED_PHOTO_TYPES:
        errors.append(FieldError("fileType", "僅支援 JPG、PNG、HEIC 格式"))
    if size is not None and size > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES // (1024 * 1024)
        errors.append(FieldError("file", f"檔案大小不能超過 {limit_mb}MB"))
    if size == 0:
        errors.append(FieldError("file", "檔案內容為空"))
    if errors:
        raise ValidationError(errors)


class StorageService:
    """파일 업로드 서비스 — S3 또는 로컬 모드 자동 선택."""

    def __init__(self) -> None:
        self._client = None

    @property
    def is_local(self) -> bool:
        return not settings.AWS_ACCESS_KEY_ID or not settings.AWS_S3_BUCKET

    @property
    def client(self):
        if self.is_local:
            return None
        if self._client is None:
            import boto3
            from botocore.config import Config as BotoConfig

            self._client = boto3.client(
                "s3",
                region_name=settings.AWS_S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                config=BotoConfig(signature_version="s3v4"),
            )
        return self._client

    def _generate_key(self, filename: str, content_type: str) -> str:
        """업로드 키: reports/YYYY/MM/DD/<uuid>-<파일명>.<ext>

        The extension always follows the validated content type; the client
        file name only contributes a sanitized stem.
        """
        stem = _UNSAFE_NAME.sub("-", PurePosixPath(filename).stem).strip("-")[:_MAX_STEM]
        name = f"{uuid.uuid4().hex}-{stem}" if stem else uuid.uuid4().hex
        date_prefix = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        return f"{KEY_PREFIX}{date_prefix}/{name}.{_EXTENSIONS[content_type]}"

    def file_url(self, key: str) -> str:
        if self.is_local:
            return f"{settings.PUBLIC_BASE_URL}/uploads/{key}"
        return f"https://{settings.AWS_S3_BUCKET}.s3.{settings.AWS_S3_REGION}.amazonaws.com/{key}"

    def generate_presigned_upload_url(self, filename: str, content_type: str) -> dict[str, str | int]:
        """presigned PUT URL과 최종 file URL을 반환합니다.

        The upload URL expires after PRESIGNED_URL_EXPIRES seconds. In local
        mode it points at this server's PUT /api/uploads/{key} endpoint.

        Raises:
            ValidationError: 허용되지 않는 사진 형식
            UploadError: S3 서명 실패
        """
        validate_photo_upload(content_type)
        key = self._generate_key(filename, content_type)
        expires = settings.PRESIGNED_URL_EXPIRES

        if self.is_local:
            upload_url = f"{settings.PUBLIC_BASE_URL}/api/uploads/{key}"
            return {"upload_url": upload_url, "file_url": self.file_url(key), "key": key, "expires_in": expires}

        try:
            upload_url = self.client.generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": settings.AWS_S3_BUCKET,
                    "Key": key,
                    "ContentType": content_type,
                },
                ExpiresIn=expires,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError() from exc
        return {"upload_url": upload_url, "file_url": self.file_url(key), "key": key, "expires_in": expires}

    def upload(self, data: bytes, filename: str, content_type: str) -> str:
        """서버를 거친 사진을 저장하고 조회 URL을 반환합니다.

        Raises:
            ValidationError: 허용되지 않는 형식 또는 크기 초과
            UploadError: 저장소 쓰기 실패
        """
        validate_photo_upload(content_type, len(data))
        key = self._generate_key(filename, content_type)

        if self.is_local:
            try:
                self.save_local(key, data)
            except OSError as exc:
                raise UploadError() from exc
            return self.file_url(key)

        try:
            self.client.put_object(
                Bucket=settings.AWS_S3_BUCKET,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError() from exc
        return self.file_url(key)

    def receive_local_upload(self, key: str, data: bytes, content_type: str | None) -> str:
        """로컬 모드 presigned URL로 PUT된 사진을 저장합니다.

        Only keys under KEY_PREFIX that do not exist yet are accepted, so a PUT
        can never replace a photo that is already stored.

        Raises:
            ValidationError: S3 모드, 잘못된 키, 허용되지 않는 형식 또는 크기 초과
            UploadError: 디스크 쓰기 실패
        """
        if not self.is_local:
            raise ValidationError([FieldError("key", "S3 模式不支援直接上傳")])
        if not key.startswith(KEY_PREFIX):
            raise ValidationError([FieldError("key", "無效的檔案路徑")])
        validate_photo_upload(content_type, len(data))
        if self._local_path(key).exists():
            raise ValidationError([FieldError("key", "檔案已存在")])
        try:
            self.save_local(key, data)
        except OSError as exc:
            raise UploadError() from exc
        return self.file_url(key)

    def _local_path(self, key: str) -> Path:
        """key를 업로드 디렉토리 내부 경로로 변환합니다 (.. 및 절대 경로 거부)."""
        parts = PurePosixPath(key).parts
        if not parts or key.startswith("/") or any(p in ("..", ".") for p in parts):
            raise ValidationError([FieldError("key", "無效的檔案路徑")])
        return UPLOADS_DIR.joinpath(*parts)

    def save_local(self, key: str, data: bytes) -> str:
        """로컬 파일 저장. 경로를 반환합니다."""
        path = self._local_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return str(path)


storage_service: StorageService = StorageService()

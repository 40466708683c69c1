"""사진 업로드 테스트 — 로컬 모드.

Photo upload tests in local storage mode (no AWS credentials configured).
Uploaded files are written to a temporary directory.
"""

from pathlib import Path

import pytest
from botocore.exceptions import ClientError
from httpx import AsyncClient

from app.services.storage_service import StorageService, storage_service, validate_photo_upload
from app.utils.exceptions import UploadError, ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestValidatePhotoUpload:
    """사진 형식/크기 검증 테스트."""

    def test_allowed_types(self):
        for content_type in ("image/jpeg", "image/png", "image/heic"):
            validate_photo_upload(content_type, 1024)

    def test_rejects_type(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_photo_upload("application/pdf", 1024)
        assert exc_info.value.fields == {"fileType"}

    def test_rejects_size(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("app.services.storage_service.settings.MAX_UPLOAD_BYTES", 10)
        with pytest.raises(ValidationError) as exc_info:
            validate_photo_upload("image/png", 11)
        assert exc_info.value.fields == {"file"}

    def test_rejects_empty_file(self):
        with pytest.raises(ValidationError):
            validate_photo_upload("image/png", 0)


class TestLocalStorage:
    """로컬 저장 테스트."""

    def test_upload_writes_file(self, uploads_dir: Path):
        url = storage_service.upload(PNG_BYTES, "leak.png", "image/png")
        key = url.split("/uploads/", 1)[1]
        assert key.startswith("reports/")
        assert key.endswith(".png")
        assert (uploads_dir / key).read_bytes() == PNG_BYTES

    @pytest.mark.parametrize("key", ["../escape.png", "reports/../../x.png", "/etc/passwd", ""])
    def test_rejects_unsafe_keys(self, uploads_dir: Path, key: str):
        with pytest.raises(ValidationError):
            storage_service.save_local(key, PNG_BYTES)

    def test_s3_failure_becomes_upload_error(self, monkeypatch: pytest.MonkeyPatch):
        """S3 오류는 UploadError로 변환."""
        class FailingClient:
            def put_object(self, **kwargs):
                raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")

        service = StorageService()
        service._client = FailingClient()
        monkeypatch.setattr(StorageService, "is_local", property(lambda self: False))
        monkeypatch.setattr(StorageService, "client", property(lambda self: self._client))

        with pytest.raises(UploadError) as exc_info:
            service.upload(PNG_BYTES, "leak.png", "image/png")
        assert isinstance(exc_info.value.__cause__, ClientError)


class TestUploadApi:
    """사진 업로드 API 테스트."""

    async def test_presigned_url_local(self, client: AsyncClient):
        """로컬 모드 presigned URL은 서버의 PUT 엔드포인트를 가리킴."""
        res = await client.get("/api/presigned-url", params={"fileName": "leak.jpg", "fileType": "image/jpeg"})
        assert res.status_code == 200
        data = res.json()
        assert "/api/uploads/reports/" in data["presignedUrl"]
        assert "/uploads/reports/" in data["fileUrl"]
        assert data["fileUrl"].endswith(".jpg")
        assert data["expiresIn"] == 300

    async def test_presigned_url_rejects_type(self, client: AsyncClient):
        res = await client.get("/api/presigned-url", params={"fileName": "a.gif", "fileType": "image/gif"})
        assert res.status_code == 400

    async def test_presigned_url_missing_params(self, client: AsyncClient):
        res = await client.get("/api/presigned-url")
        assert res.status_code == 400

    async def test_put_to_presigned_url(self, client: AsyncClient, uploads_dir: Path):
        """presigned URL로 PUT 후 파일이 저장됨."""
        res = await client.get("/api/presigned-url", params={"fileName": "a.png", "fileType": "image/png"})
        upload_path = res.json()["presignedUrl"].split("http://localhost:8000", 1)[1]
        key = upload_path.split("/api/uploads/", 1)[1]

        put = await client.put(upload_path, content=PNG_BYTES, headers={"content-type": "image/png"})
        assert put.status_code == 200
        assert (uploads_dir / key).read_bytes() == PNG_BYTES

    async def test_multipart_upload(self, client: AsyncClient, uploads_dir: Path):
        res = await client.post("/api/upload", files={"photo": ("leak.jpg", b"\xff\xd8\xff" * 10, "image/jpeg")})
        assert res.status_code == 200
        url = res.json()["url"]
        assert url.endswith(".jpg")
        key = url.split("/uploads/", 1)[1]
        assert (uploads_dir / key).exists()

    async def test_multipart_upload_rejects_type(self, client: AsyncClient, uploads_dir: Path):
        res = await client.post("/api/upload", files={"photo": ("doc.pdf", b"%PDF-1.4", "application/pdf")})
        assert res.status_code == 400
        assert list(uploads_dir.iterdir()) == []


class TestUploadKeys:
    """업로드 키 생성 테스트."""

    def test_extension_follows_content_type(self):
        key = storage_service._generate_key("photo.jpg", "image/heic")
        assert key.startswith("reports/")
        assert key.endswith(".heic")

    def test_filename_is_sanitized(self):
        """파일명은 안전한 문자만 남긴 stem으로 포함."""
        key = storage_service._generate_key("../../etc/pass wd.PNG", "image/png")
        assert ".." not in key
        assert "pass-wd" in key
        assert key.endswith(".png")
        assert key.count("/") == 4


class TestReceiveLocalUpload:
    """로컬 모드 PUT 업로드 테스트."""

    def test_disk_failure_becomes_upload_error(self, uploads_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """디스크 쓰기 실패는 UploadError."""
        def _disk_full(self, key, data):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(StorageService, "save_local", _disk_full)
        with pytest.raises(UploadError) as exc_info:
            storage_service.receive_local_upload("reports/2024/01/01/a.png", PNG_BYTES, "image/png")
        assert isinstance(exc_info.value.__cause__, OSError)

    async def test_put_outside_reports_prefix(self, client: AsyncClient, uploads_dir: Path):
        """presign이 발급하지 않는 경로로는 PUT 불가."""
        res = await client.put("/api/uploads/avatars/x.png", content=PNG_BYTES, headers={"content-type": "image/png"})
        assert res.status_code == 400
        assert list(uploads_dir.iterdir()) == []

    async def test_put_does_not_overwrite(self, client: AsyncClient, uploads_dir: Path):
        """이미 저장된 사진은 덮어쓰지 않음."""
        url = "/api/uploads/reports/2024/01/01/existing.png"
        first = await client.put(url, content=PNG_BYTES, headers={"content-type": "image/png"})
        assert first.status_code == 200

        second = await client.put(url, content=b"\x89PNG replaced", headers={"content-type": "image/png"})
        assert second.status_code == 400
        assert (uploads_dir / "reports/2024/01/01/existing.png").read_bytes() == PNG_BYTES

    async def test_put_disk_failure(self, client: AsyncClient, uploads_dir: Path, monkeypatch: pytest.MonkeyPatch):
        def _disk_full(self, key, data):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(StorageService, "save_local", _disk_full)
        res = await client.put(
            "/api/uploads/reports/2024/01/01/b.png", content=PNG_BYTES, headers={"content-type": "image/png"},
        )
        assert res.status_code == 500
        assert "No space left" not in res.text

    async def test_put_too_large(self, client: AsyncClient, uploads_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("app.services.storage_service.settings.MAX_UPLOAD_BYTES", 16)
        res = await client.put(
            "/api/uploads/reports/2024/01/01/c.png", content=b"\x00" * 64, headers={"content-type": "image/png"},
        )
        assert res.status_code == 400
        assert list(uploads_dir.iterdir()) == []


class TestUploadSizeLimit:
    """서버 경유 업로드 크기 제한 테스트."""

    async def test_multipart_upload_too_large(self, client: AsyncClient, uploads_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """상한을 넘는 사진은 400, 파일은 저장되지 않음."""
        monkeypatch.setattr("app.services.storage_service.settings.MAX_UPLOAD_BYTES", 16)
        res = await client.post("/api/upload", files={"photo": ("big.png", b"\x00" * 64, "image/png")})
        assert res.status_code == 400
        assert {e["field"] for e in res.json()["errors"]} == {"file"}
        assert list(uploads_dir.iterdir()) == []

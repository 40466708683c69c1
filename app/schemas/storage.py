"""사진 업로드 Pydantic 스키마.

Photo upload request/response schemas.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PresignedUrlResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    presigned_url: str  # PUT 대상 URL (Time-limited upload URL)
    file_url: str  # 업로드 후 조회 URL (Durable retrieval URL)
    expires_in: int  # 유효 시간(초) (Seconds until the upload URL expires)


class UploadResponse(BaseModel):
    url: str

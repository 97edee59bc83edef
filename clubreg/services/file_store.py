"""
services/file_store.py

업로드 파일(이미지) 저장소 서비스.

같은 계약(FileStore)을 가진 두 가지 백엔드를 제공하며,
어떤 백엔드를 쓸지는 앱 시작 시 설정(STORAGE_BACKEND)으로 한 번만 결정한다.

백엔드:
- LocalFileStore : 서버 로컬 디스크(UPLOAD_DIR)에 저장, 상대 경로(/uploads/...) 반환
- GCSFileStore   : Google Cloud Storage 버킷에 저장, 장기 서명 URL 반환

주요 기능:
- 이미지 파일 검증 (MIME 타입 허용 목록, 최대 5MB)
- 충돌 없는 파일명 생성 (밀리초 타임스탬프 + 랜덤 hex + 원본 확장자)
- 파일 저장 / 삭제 (삭제는 멱등)

설계 원칙:
- 검증은 어떤 쓰기 작업보다 먼저 수행 (검증 실패 시 부작용 없음)
- 파일명 충돌은 기존 파일 조회가 아닌 생성 방식으로 회피
- 호출 측은 반환된 url 을 불투명한 값으로 취급

관련 파일:
- clubreg.routers.upload    : 업로드 API
- clubreg.main              : 백엔드 선택 및 /uploads 정적 서빙

"""

import logging
import os
import re
import secrets
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from google.api_core import exceptions as gcs_exceptions
from google.cloud import storage
from google.oauth2 import service_account
from requests.exceptions import Timeout as RequestsTimeout

from clubreg.core.config import Settings
from clubreg.core.errors import StorageError, UpstreamTimeoutError, ValidationError

logger = logging.getLogger(__name__)


MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
ALLOWED_IMAGE_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
})
DEFAULT_FOLDER = "uploads"

_FOLDER_RE = re.compile(r"^[A-Za-z0-9_-]+(/[A-Za-z0-9_-]+)*$")
_EXT_RE = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


@dataclass(frozen=True)
class StoredFile:
    url: str
    path: str
    file_name: str
    size: int
    content_type: str


"""
업로드 파일 검증

- MIME 타입이 허용된 이미지 형식인지 확인
- 크기가 5MB 이하인지 확인
- 실패 시 ValidationError 발생

"""

def validate_image(data: bytes, mime_type: str | None) -> None:
    if (mime_type or "").lower() not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Only image files are allowed (JPG, PNG, GIF, WebP)")
    if len(data) > MAX_FILE_SIZE:
        raise ValidationError("File size must not exceed 5MB")


def normalize_folder(folder: str | None) -> str:
    folder = (folder or DEFAULT_FOLDER).strip("/")
    if not folder:
        return DEFAULT_FOLDER
    if not _FOLDER_RE.match(folder):
        raise ValidationError("Invalid folder name")
    return folder


"""
고유 파일명 생성

- 형식: <밀리초 타임스탬프>_<랜덤 16자리 hex><확장자>
- 확장자는 원본 파일명에서 가져오며, 이상한 값이면 생략

"""

def generate_file_name(original_name: str | None) -> str:
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(8)
    ext = os.path.splitext(original_name or "")[1].lower()
    if not _EXT_RE.match(ext):
        ext = ""
    return f"{timestamp}_{random_part}{ext}"


class FileStore(ABC):
    """업로드 파일 저장소 공통 계약."""

    def store(self, data: bytes, mime_type: str | None, original_name: str | None,
              folder: str | None = None) -> StoredFile:
        validate_image(data, mime_type)
        folder = normalize_folder(folder)
        file_name = generate_file_name(original_name)
        return self._write(data, mime_type.lower(), folder, file_name)

    @abstractmethod
    def _write(self, data: bytes, content_type: str, folder: str, file_name: str) -> StoredFile:
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """path 에 해당하는 파일 삭제. 없는 파일이어도 오류가 아니다."""


class LocalFileStore(FileStore):
    def __init__(self, root_dir: str | Path, url_prefix: str = "/uploads"):
        self.root_dir = Path(root_dir).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")

    def _write(self, data: bytes, content_type: str, folder: str, file_name: str) -> StoredFile:
        target_dir = self.root_dir / folder
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            (target_dir / file_name).write_bytes(data)
        except OSError as e:
            logger.error("Local upload failed for %s/%s", folder, file_name, exc_info=True)
            raise StorageError("File upload failed") from e

        relative = f"{self.url_prefix}/{folder}/{file_name}"
        logger.info("Stored %s (%d bytes)", relative, len(data))
        return StoredFile(url=relative, path=relative, file_name=file_name,
                          size=len(data), content_type=content_type)

    def _resolve(self, path: str) -> Path:
        prefix = self.url_prefix + "/"
        if not path.startswith(prefix):
            raise ValidationError("Invalid file path")
        relative = path[len(prefix):]
        target = (self.root_dir / relative).resolve()
        # 업로드 루트 밖을 가리키는 경로 차단
        if self.root_dir not in target.parents:
            raise ValidationError("Invalid file path")
        return target

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        try:
            target.unlink(missing_ok=True)
        except OSError as e:
            logger.error("Local delete failed for %s", path, exc_info=True)
            raise StorageError("File delete failed") from e


class GCSFileStore(FileStore):
    def __init__(
        self,
        bucket_name: str,
        *,
        client: storage.Client | None = None,
        credentials_path: str | None = None,
        signed_url_expire_days: int = 365,
        timeout: float = 30.0,
    ):
        if not bucket_name:
            raise ValueError("GCS_BUCKET is required for the gcs storage backend")
        if client is None:
            # 로컬에서는 서비스 계정 키 파일, 배포 환경에서는 기본 자격 증명 사용
            if credentials_path and os.path.isfile(credentials_path):
                creds = service_account.Credentials.from_service_account_file(credentials_path)
                client = storage.Client(credentials=creds)
            else:
                client = storage.Client()
        self.bucket_name = bucket_name
        self._bucket = client.bucket(bucket_name)
        self._expiration = timedelta(days=signed_url_expire_days)
        self._timeout = timeout

    def _write(self, data: bytes, content_type: str, folder: str, file_name: str) -> StoredFile:
        object_name = f"{folder}/{file_name}"
        blob = self._bucket.blob(object_name)

        try:
            blob.upload_from_string(data, content_type=content_type, timeout=self._timeout)
        except RequestsTimeout as e:
            logger.error("GCS upload timed out for %s", object_name)
            raise UpstreamTimeoutError("File upload timed out") from e
        except (gcs_exceptions.GoogleAPIError, OSError) as e:
            logger.error("GCS upload failed for %s", object_name, exc_info=True)
            raise StorageError("File upload failed") from e

        # V4 서명은 최대 7일이라 장기 URL 은 V2 서명 사용
        try:
            url = blob.generate_signed_url(version="v2", expiration=self._expiration, method="GET")
        except Exception as e:
            logger.warning("Signed URL generation failed for %s, using public URL: %s", object_name, e)
            url = blob.public_url

        logger.info("Stored gs://%s/%s (%d bytes)", self.bucket_name, object_name, len(data))
        return StoredFile(url=url, path=object_name, file_name=file_name,
                          size=len(data), content_type=content_type)

    def delete(self, path: str) -> None:
        object_name = path.lstrip("/")
        if not object_name:
            raise ValidationError("Invalid file path")
        try:
            self._bucket.blob(object_name).delete(timeout=self._timeout)
        except gcs_exceptions.NotFound:
            return
        except RequestsTimeout as e:
            raise UpstreamTimeoutError("File delete timed out") from e
        except gcs_exceptions.GoogleAPIError as e:
            logger.error("GCS delete failed for %s", object_name, exc_info=True)
            raise StorageError("File delete failed") from e


"""
설정에 따라 파일 저장소 백엔드 생성

- 앱 시작 시 한 번만 호출 (요청마다 분기하지 않음)

"""

def build_file_store(settings: Settings) -> FileStore:
    if settings.STORAGE_BACKEND == "gcs":
        return GCSFileStore(
            settings.GCS_BUCKET or "",
            credentials_path=settings.GCS_CREDENTIALS_PATH,
            signed_url_expire_days=settings.SIGNED_URL_EXPIRE_DAYS,
            timeout=settings.STORAGE_TIMEOUT_SECONDS,
        )
    return LocalFileStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX)

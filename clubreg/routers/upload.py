"""
upload.py

이미지 파일 업로드 API.

- multipart/form-data 의 file 필드와 선택적 folder 필드 사용
- 업로드는 토큰 없이도 가능 (가입 전 프로필 사진 업로드), 삭제는 로그인 필요
- 이미지(JPG / PNG / GIF / WebP)만, 최대 5MB
- 저장 위치(로컬 디스크 / GCS)는 앱 시작 시 설정으로 결정

설계 원칙:
- 5MB + 1 바이트까지만 읽어 크기 초과를 판단 (큰 파일 전체를 메모리에 올리지 않음)
- 검증 실패 시 어떤 파일도 저장되지 않음

관련 파일:
- clubreg.services.file_store : 저장소 백엔드

"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from clubreg.core.deps import get_activity_log, get_current_user, get_file_store, get_optional_user
from clubreg.models.user import User
from clubreg.schemas.upload import DeleteFileRequest, UploadResponse
from clubreg.services.activity_log import ActivityLog
from clubreg.services.file_store import DEFAULT_FOLDER, MAX_FILE_SIZE, FileStore

router = APIRouter(prefix="/api", tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
def upload_file(
    file: UploadFile = File(...),
    folder: str = Form(default=DEFAULT_FOLDER),
    current_user: User | None = Depends(get_optional_user),
    store: FileStore = Depends(get_file_store),
    activity_log: ActivityLog = Depends(get_activity_log),
):
    data = file.file.read(MAX_FILE_SIZE + 1)
    stored = store.store(data, file.content_type, file.filename, folder)

    activity_log.success("upload", "File uploaded", {
        "path": stored.path,
        "size": stored.size,
        "user_id": str(current_user.id) if current_user else None,
    })
    return UploadResponse(url=stored.url, path=stored.path, file_name=stored.file_name)


# 업로드 파일 삭제 (없는 파일이어도 성공 처리)
@router.delete("/upload")
def delete_file(
    body: DeleteFileRequest,
    current_user: User = Depends(get_current_user),
    store: FileStore = Depends(get_file_store),
    activity_log: ActivityLog = Depends(get_activity_log),
):
    store.delete(body.path)
    activity_log.info("upload", "File deleted", {
        "path": body.path,
        "user_id": str(current_user.id),
    })
    return {"message": "File deleted"}

"""
deps.py

FastAPI 의존성(Dependency) 모음.

create_app()이 app.state 에 올려둔 공용 객체(설정, 세션 팩토리, 파일 저장소, 활동 로그)를
요청 핸들러에 주입하고, 요청 단위 서비스 객체(Registry / Store)를 조립한다.

인증 규칙:
- Authorization 헤더 없음            : 401 (get_optional_user 는 None)
- 토큰 위조 / 만료 / 삭제된 사용자     : 403
- 관리자 전용 API 에 일반 사용자 접근  : 403

"""

from typing import Generator
import uuid

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from clubreg.core.config import Settings
from clubreg.core.security import decode_access_token
from clubreg.models.user import Role, User
from clubreg.services.activity_log import ActivityLog
from clubreg.services.applications import ApplicationRegistry
from clubreg.services.credentials import CredentialStore
from clubreg.services.file_store import FileStore
from clubreg.services.projects import ProjectRegistry


# Swagger Authorize에서 "Bearer 토큰" 입력받는 스키마
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_activity_log(request: Request) -> ActivityLog:
    return request.app.state.activity_log


def get_file_store(request: Request) -> FileStore:
    return request.app.state.file_store


def get_credential_store(
    db: Session = Depends(get_db),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> CredentialStore:
    return CredentialStore(db, activity_log)


def get_application_registry(
    db: Session = Depends(get_db),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> ApplicationRegistry:
    return ApplicationRegistry(db, activity_log)


def get_project_registry(
    db: Session = Depends(get_db),
    activity_log: ActivityLog = Depends(get_activity_log),
) -> ProjectRegistry:
    return ProjectRegistry(db, activity_log)


def _user_from_token(token: str, settings: Settings, db: Session) -> User:
    try:
        sub = decode_access_token(settings, token)
        # User.id가 UUID라서 변환
        user_id = uuid.UUID(sub)
    except (JWTError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    user = db.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired token",
        )

    return user


def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User:
    if cred is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _user_from_token(cred.credentials, settings, db)


# 토큰 없이도 호출 가능한 API 용 (헤더가 있으면 같은 규칙으로 검증)
def get_optional_user(
    cred: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User | None:
    if cred is None:
        return None
    return _user_from_token(cred.credentials, settings, db)


def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != Role.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user

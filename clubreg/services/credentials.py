"""
services/credentials.py

사용자 계정(Credential Store) 서비스.

주요 기능:
- 회원 가입 (User + UserProfile 동시 생성)
- 로그인 (이메일 / 비밀번호 검증)
- 사용자 + 프로필 조회
- 관리자 계정 생성 (초기화 스크립트 전용)

설계 원칙:
- HTTP / FastAPI 의존성 없음, 오류는 clubreg.core.errors 예외로 표현
- 비밀번호 평문은 저장하지도, 로그에 남기지도 않음
- User 와 UserProfile 은 하나의 트랜잭션으로 커밋 (프로필 생성 실패 시 User 도 롤백)
- 로그인 실패 사유(이메일 없음 / 비밀번호 불일치)는 구분하지 않고 같은 AuthError

관련 파일:
- clubreg.core.security     : 비밀번호 해시 / 검증
- clubreg.models.user       : User / UserProfile / Role 모델
- clubreg.routers.auth      : 가입 / 로그인 API

"""

import logging
import uuid
from typing import Any, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clubreg.core.errors import AuthError, ConflictError, NotFoundError, ValidationError, storage_errors
from clubreg.core.security import dummy_verify, get_password_hash, verify_password
from clubreg.models.user import Role, User, UserProfile
from clubreg.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "student_id",
    "major",
    "grade",
    "phone",
    "birthday",
    "qq",
    "bio",
    "avatar_url",
    "introduction",
)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


# 학년(grade) 등 숫자로 들어올 수 있는 프로필 값은 문자열로 저장
def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


class CredentialStore:
    def __init__(self, db: Session, activity_log: ActivityLog | None = None):
        self.db = db
        self.activity_log = activity_log

    def _get_by_email(self, email: str) -> User | None:
        return self.db.scalar(select(User).where(User.email == email))

    """
    회원 가입

    - 이메일 중복 시 ConflictError
    - 비밀번호는 bcrypt 해시만 저장
    - 같은 트랜잭션 안에서 UserProfile 생성 (실패 시 전체 롤백)

    """
    def sign_up(self, email: str, password: str, profile: Mapping[str, Any] | None = None,
                *, role: Role = Role.USER) -> User:
        email = _normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        profile = dict(profile or {})
        name = (profile.get("name") or "").strip() or email

        with storage_errors(self.db, "sign up"):
            if self._get_by_email(email):
                raise ConflictError("Email already registered")

            user = User(
                email=email,
                password_hash=get_password_hash(password),
                name=name,
                role=role,
            )
            user.profile = UserProfile(
                name=name,
                email=email,
                **{k: _as_text(profile.get(k)) for k in PROFILE_FIELDS},
            )
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError as e:
                # 동시 가입으로 unique 제약에 걸린 경우
                self.db.rollback()
                raise ConflictError("Email already registered") from e
            self.db.refresh(user)

        logger.info("User signed up: %s", user.id)
        if self.activity_log is not None:
            self.activity_log.success("auth", "User signed up", {"user_id": str(user.id)})
        return user

    """
    로그인

    - 이메일이 없으면 더미 해시 검증 후 AuthError
    - 비밀번호 불일치도 같은 AuthError

    """
    def sign_in(self, email: str, password: str) -> User:
        email = _normalize_email(email)
        with storage_errors(self.db, "sign in"):
            user = self._get_by_email(email)

        if user is None:
            dummy_verify()
            raise AuthError("Invalid credentials")
        if not verify_password(password or "", user.password_hash):
            raise AuthError("Invalid credentials")

        if self.activity_log is not None:
            self.activity_log.info("auth", "User signed in", {"user_id": str(user.id)})
        return user

    """
    사용자 + 프로필 조회 (LEFT JOIN)

    - 프로필이 없으면 profile 은 None
    - 사용자가 없으면 NotFoundError

    """
    def get_user(self, user_id: uuid.UUID) -> tuple[User, UserProfile | None]:
        with storage_errors(self.db, "get user"):
            row = self.db.execute(
                select(User, UserProfile)
                .outerjoin(UserProfile, UserProfile.user_id == User.id)
                .where(User.id == user_id)
            ).first()

        if row is None:
            raise NotFoundError("User not found")
        user, profile = row
        return user, profile

    def create_admin(self, email: str, password: str, name: str = "Admin") -> User:
        return self.sign_up(email, password, {"name": name}, role=Role.ADMIN)

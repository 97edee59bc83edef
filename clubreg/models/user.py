"""
user.py

사용자(User), 사용자 프로필(UserProfile) 및 권한(Role) 모델 정의 파일.

User는 로그인에 필요한 최소 정보(이메일, 비밀번호 해시, 권한)만 가지고,
학번/전공/연락처 등 확장 정보는 1:1 관계의 UserProfile에 분리해 저장한다.

두 행은 회원 가입 시 같은 트랜잭션 안에서 함께 생성된다.

"""

import uuid
import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String, Text, DateTime, ForeignKey, Uuid, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from clubreg.db.base import Base, utcnow



"""
사용자 권한(Role) 정의

- USER   : 일반 사용자 (가입 신청서 / 프로젝트 제출)
- ADMIN  : 관리자 (신청서 심사, 통계, 활동 로그 조회)

"""

class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        default=Role.USER,
        nullable=False,
    )

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    profile: Mapped[Optional["UserProfile"]] = relationship(back_populates="user", uselist=False)


"""
사용자 프로필(UserProfile) 모델

- user_id 는 users.id 에 대한 1:1 외래키 (unique)
- 가입 이후 이 시스템 범위 안에서는 수정하지 않음

"""

class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), unique=True, nullable=False)

    name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    student_id: Mapped[str | None] = mapped_column(String(20), nullable=True)
    major: Mapped[str | None] = mapped_column(String(100), nullable=True)
    grade: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    birthday: Mapped[str | None] = mapped_column(String(20), nullable=True)
    qq: Mapped[str | None] = mapped_column(String(20), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    introduction: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    user: Mapped[User] = relationship(back_populates="profile")

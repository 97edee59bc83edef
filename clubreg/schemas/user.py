import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from clubreg.models.user import Role, User, UserProfile


# 🔹 토큰 발급 응답에 포함되는 최소 정보
class UserResponse(BaseModel):
    id: uuid.UUID
    email: str
    name: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


# 🔹 /api/user 응답용 (프로필은 LEFT JOIN, 없으면 null)
class UserDetailResponse(UserResponse):
    created_at: datetime
    student_id: str | None = None
    major: str | None = None
    grade: str | None = None
    phone: str | None = None
    birthday: str | None = None
    qq: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    introduction: str | None = None


PROFILE_KEYS = ("student_id", "major", "grade", "phone", "birthday", "qq", "bio", "avatar_url", "introduction")


def user_detail(user: User, profile: UserProfile | None) -> UserDetailResponse:
    return UserDetailResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        created_at=user.created_at,
        **{k: getattr(profile, k) if profile else None for k in PROFILE_KEYS},
    )

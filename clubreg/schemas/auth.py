from pydantic import BaseModel, EmailStr, Field


class SignUpRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=64)
    name: str | None = Field(default=None, max_length=50)

    # 가입 시 함께 저장되는 프로필 (모두 선택)
    student_id: str | None = Field(default=None, max_length=20)
    major: str | None = Field(default=None, max_length=100)
    grade: int | str | None = None
    phone: str | None = Field(default=None, max_length=30)
    birthday: str | None = Field(default=None, max_length=20)
    qq: str | None = Field(default=None, max_length=20)
    bio: str | None = None
    avatar_url: str | None = Field(default=None, max_length=1024)
    introduction: str | None = None


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

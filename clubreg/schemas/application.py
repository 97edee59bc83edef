import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from clubreg.models.application import ApplicationStatus


class ApplicationCreateRequest(BaseModel):
    """가입 신청서 제출 요청.

    status 필드는 받지 않는다 (들어와도 무시되고 서버에서 pending 으로 저장).
    """

    name: str = Field(min_length=1, max_length=50)
    student_id: str = Field(min_length=1, max_length=20)
    major: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str | None = Field(default=None, max_length=30)
    department: str | None = Field(default=None, max_length=100)
    skills: str | None = None
    experience: str | None = None
    motivation: str | None = None
    photo_url: str | None = Field(default=None, max_length=1024)


class ApplicationStatusUpdateRequest(BaseModel):
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID | None
    name: str
    student_id: str
    major: str
    email: str
    phone: str | None
    department: str | None
    skills: str | None
    experience: str | None
    motivation: str | None
    photo_url: str | None
    status: ApplicationStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ApplicationStats(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0

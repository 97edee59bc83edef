import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ProjectCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    category: str | None = Field(default=None, max_length=50)
    image_url: str | None = Field(default=None, max_length=1024)
    doc_url: str | None = Field(default=None, max_length=1024)
    ppt_url: str | None = Field(default=None, max_length=1024)
    other_attachment_url: str | None = Field(default=None, max_length=1024)


class ProjectResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    category: str | None
    image_url: str | None
    doc_url: str | None
    ppt_url: str | None
    other_attachment_url: str | None
    owner_id: uuid.UUID
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from clubreg.db.base import Base, utcnow


class Project(Base):
    """회원이 제출한 프로젝트 레코드.

    첨부 자료는 최대 4개(이미지 / 문서 / 발표 자료 / 기타)의 파일 참조(URL)로 보관한다.
    생성 이후 수정/삭제 API는 없다.
    """

    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_owner_id", "owner_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)

    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    doc_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    ppt_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    other_attachment_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

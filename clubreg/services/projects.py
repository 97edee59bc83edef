"""
services/projects.py

회원 프로젝트(Project Registry) 비즈니스 로직.

- 프로젝트 생성 (소유자 = 로그인한 사용자)
- 프로젝트 목록 조회 (최신순, 소유자 필터)

수정 / 삭제 기능은 없다.

"""

import uuid
from typing import Any, Mapping

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from clubreg.core.errors import ValidationError, storage_errors
from clubreg.models.project import Project
from clubreg.services.activity_log import ActivityLog

PROJECT_FIELDS = ("description", "category", "image_url", "doc_url", "ppt_url", "other_attachment_url")


class ProjectRegistry:
    def __init__(self, db: Session, activity_log: ActivityLog | None = None):
        self.db = db
        self.activity_log = activity_log

    def create(self, data: Mapping[str, Any], owner_id: uuid.UUID) -> Project:
        name = str(data.get("name") or "").strip()
        if not name:
            raise ValidationError("Missing required fields: name")

        project = Project(
            name=name,
            owner_id=owner_id,
            **{f: data.get(f) for f in PROJECT_FIELDS},
        )
        with storage_errors(self.db, "create project"):
            self.db.add(project)
            self.db.commit()
            self.db.refresh(project)

        if self.activity_log is not None:
            self.activity_log.success("projects", "Project created", {
                "project_id": str(project.id),
                "owner_id": str(owner_id),
            })
        return project

    def list(self, owner_id: uuid.UUID | None = None) -> list[Project]:
        stmt = select(Project).order_by(desc(Project.created_at))
        if owner_id:
            stmt = stmt.where(Project.owner_id == owner_id)

        with storage_errors(self.db, "list projects"):
            return list(self.db.scalars(stmt).all())

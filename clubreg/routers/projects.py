"""
projects.py

회원 프로젝트 API 모음.

- 프로젝트 등록 (로그인 사용자, 소유자는 토큰의 사용자)
- 프로젝트 목록 조회 (공개, userId 로 소유자 필터)

"""

import uuid

from fastapi import APIRouter, Depends, Query

from clubreg.core.deps import get_current_user, get_project_registry
from clubreg.models.user import User
from clubreg.schemas.project import ProjectCreateRequest, ProjectResponse
from clubreg.services.projects import ProjectRegistry

router = APIRouter(prefix="/api", tags=["projects"])


@router.post("/projects")
def create_project(
    body: ProjectCreateRequest,
    current_user: User = Depends(get_current_user),
    registry: ProjectRegistry = Depends(get_project_registry),
):
    project = registry.create(body.model_dump(), current_user.id)
    return {
        "message": "Project created",
        "id": str(project.id),
    }


@router.get("/projects")
def list_projects(
    user_id: uuid.UUID | None = Query(default=None, alias="userId"),
    registry: ProjectRegistry = Depends(get_project_registry),
):
    projects = registry.list(user_id)
    return {
        "data": [
            ProjectResponse.model_validate(p).model_dump(mode="json")
            for p in projects
        ]
    }

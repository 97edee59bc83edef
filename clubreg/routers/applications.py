"""
applications.py

동아리 가입 신청서 API 모음.

주요 기능:
- 신청서 제출 (로그인 사용자)
- 신청서 목록 / 상세 조회 (관리자)
- 신청서 상태 변경 (관리자)
- 상태별 통계 (관리자)
- 신청서 CSV / Excel(xlsx) 내보내기 (관리자)

설계 원칙:
- 비즈니스 로직은 ApplicationRegistry 에 위임
- 이 라우터는 요청/응답 처리 및 권한 검증에만 집중
- 제출 시 클라이언트가 보낸 status 는 스키마 단계에서 버려짐

관련 파일:
- clubreg.services.applications : 신청서 로직
- clubreg.schemas.application   : 요청/응답 스키마

"""

import uuid
from typing import Literal

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response

from clubreg.core.deps import get_application_registry, get_current_admin, get_current_user
from clubreg.models.application import ApplicationStatus
from clubreg.models.user import User
from clubreg.schemas.application import (
    ApplicationCreateRequest,
    ApplicationResponse,
    ApplicationStats,
    ApplicationStatusUpdateRequest,
)
from clubreg.services.applications import ApplicationRegistry

router = APIRouter(prefix="/api", tags=["applications"])


"""
신청서 제출 API

- 로그인한 사용자만 제출 가능
- status 는 항상 pending 으로 저장

"""
@router.post("/applications")
def submit_application(
    body: ApplicationCreateRequest,
    current_user: User = Depends(get_current_user),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    application = registry.submit(body.model_dump(), current_user.id)
    return {
        "message": "Application submitted",
        "id": str(application.id),
    }


"""
신청서 목록 조회 API (관리자)

- 최신 제출 순
- status 쿼리로 pending / approved / rejected 필터

"""
@router.get("/applications")
def list_applications(
    status: ApplicationStatus | None = Query(default=None),
    _: User = Depends(get_current_admin),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    applications = registry.list(status)
    return {
        "data": [
            ApplicationResponse.model_validate(a).model_dump(mode="json")
            for a in applications
        ]
    }


"""
신청서 내보내기 API (관리자)

- format=csv  : UTF-8 BOM 포함 CSV (Excel 호환)
- format=xlsx : openpyxl 로 만든 Excel 파일

"""
@router.get("/applications/export")
def export_applications(
    format: Literal["csv", "xlsx"] = Query(default="csv"),
    _: User = Depends(get_current_admin),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    if format == "xlsx":
        return Response(
            content=registry.export_xlsx(),
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": 'attachment; filename="applications.xlsx"'},
        )

    return Response(
        content=registry.export_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="applications.csv"'},
    )


@router.get("/applications/{application_id}")
def get_application(
    application_id: uuid.UUID,
    _: User = Depends(get_current_admin),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    application = registry.get(application_id)
    return {"data": ApplicationResponse.model_validate(application).model_dump(mode="json")}


"""
신청서 상태 변경 API (관리자)

- 허용 값: pending / approved / rejected (그 외 400)
- 존재하지 않는 신청서면 404
- 상태 간 전이 제한 없음

"""
@router.put("/applications/{application_id}/status")
def update_application_status(
    application_id: uuid.UUID,
    body: ApplicationStatusUpdateRequest,
    _: User = Depends(get_current_admin),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    application = registry.update_status(application_id, body.status)
    return {
        "message": "Status updated",
        "data": {
            "id": str(application.id),
            "status": application.status.value,
        },
    }


# 신청서 상태별 통계 (관리자)
@router.get("/statistics")
def statistics(
    _: User = Depends(get_current_admin),
    registry: ApplicationRegistry = Depends(get_application_registry),
):
    return {"data": ApplicationStats(**registry.stats()).model_dump()}

"""
services/applications.py

동아리 가입 신청서(Application Registry) 비즈니스 로직 모음.

이 파일은 신청서 제출, 목록 조회, 상태 변경, 통계 계산을 담당한다.
라우터는 이 클래스의 메서드를 호출하고 응답 형태만 만든다.

주요 기능:
- 신청서 제출 (status 는 항상 pending 으로 시작)
- 신청서 목록 조회 (최신순, 상태 필터)
- 신청서 상태 변경 (pending / approved / rejected)
- 상태별 통계 (단일 쿼리로 일관된 집계)
- 관리자용 CSV / Excel 내보내기

설계 원칙:
- HTTP / FastAPI 의존성 없음
- 클라이언트가 보낸 status 값은 제출 시 무시
- 상태 전이 제한은 두지 않음 (approved → pending 등도 허용)
- 성공한 제출 / 상태 변경은 활동 로그에 기록 (로그 실패는 무시됨)

관련 파일:
- clubreg.models.application : Application / ApplicationStatus 모델
- clubreg.routers.applications : 신청서 API
- clubreg.services.activity_log : 활동 로그

"""

import csv
import io
import logging
import uuid
from typing import Any, Mapping

from openpyxl import Workbook
from sqlalchemy import case, desc, func, select
from sqlalchemy.orm import Session

from clubreg.core.errors import NotFoundError, ValidationError, storage_errors
from clubreg.db.base import utcnow
from clubreg.models.application import Application, ApplicationStatus
from clubreg.services.activity_log import ActivityLog

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "student_id", "major", "email")
OPTIONAL_FIELDS = ("phone", "department", "skills", "experience", "motivation", "photo_url")

EXPORT_COLUMNS = [
    "id", "name", "student_id", "major", "email", "phone", "department",
    "skills", "experience", "motivation", "photo_url", "status", "created_at", "updated_at",
]


def parse_status(value: ApplicationStatus | str) -> ApplicationStatus:
    try:
        return ApplicationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ApplicationStatus)
        raise ValidationError(f"status must be one of: {allowed}")


def _export_row(a: Application) -> list[Any]:
    # CSV / Excel 모두 문자열 기반으로 내보내므로 UUID / datetime 은 문자열로 변환
    return [
        str(a.id), a.name, a.student_id, a.major, a.email,
        a.phone or "", a.department or "", a.skills or "", a.experience or "",
        a.motivation or "", a.photo_url or "", a.status.value,
        a.created_at.isoformat() if a.created_at else "",
        a.updated_at.isoformat() if a.updated_at else "",
    ]


class ApplicationRegistry:
    def __init__(self, db: Session, activity_log: ActivityLog | None = None):
        self.db = db
        self.activity_log = activity_log

    def _log(self, message: str, data: dict) -> None:
        if self.activity_log is not None:
            self.activity_log.success("applications", message, data)

    """
    신청서 제출

    - name / student_id / major / email 누락 시 ValidationError
    - 입력에 status 가 있어도 무시하고 pending 으로 저장

    """
    def submit(self, data: Mapping[str, Any], submitting_user_id: uuid.UUID | None) -> Application:
        missing = [f for f in REQUIRED_FIELDS if not str(data.get(f) or "").strip()]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        application = Application(
            user_id=submitting_user_id,
            status=ApplicationStatus.PENDING,
            **{f: str(data[f]).strip() for f in REQUIRED_FIELDS},
            **{f: data.get(f) for f in OPTIONAL_FIELDS},
        )

        with storage_errors(self.db, "submit application"):
            self.db.add(application)
            self.db.commit()
            self.db.refresh(application)

        self._log("Application submitted", {
            "application_id": str(application.id),
            "user_id": str(submitting_user_id) if submitting_user_id else None,
        })
        return application

    def get(self, application_id: uuid.UUID) -> Application:
        with storage_errors(self.db, "get application"):
            application = self.db.get(Application, application_id)
        if application is None:
            raise NotFoundError("Application not found")
        return application

    """
    신청서 목록 조회

    - 생성 시각 기준 내림차순
    - status 지정 시 해당 상태만 반환 (허용되지 않은 값이면 ValidationError)

    """
    def list(self, status: ApplicationStatus | str | None = None) -> list[Application]:
        stmt = select(Application).order_by(desc(Application.created_at))
        if status:
            stmt = stmt.where(Application.status == parse_status(status))

        with storage_errors(self.db, "list applications"):
            return list(self.db.scalars(stmt).all())

    """
    신청서 상태 변경

    - 허용되지 않은 status 값이면 ValidationError
    - 존재하지 않는 신청서면 NotFoundError
    - updated_at 갱신

    """
    def update_status(self, application_id: uuid.UUID, new_status: ApplicationStatus | str) -> Application:
        status = parse_status(new_status)
        application = self.get(application_id)
        before = application.status

        with storage_errors(self.db, "update application status"):
            application.status = status
            application.updated_at = utcnow()
            self.db.commit()
            self.db.refresh(application)

        self._log("Application status updated", {
            "application_id": str(application.id),
            "before": before.value,
            "after": status.value,
        })
        return application

    """
    상태별 통계

    - 전체 / pending / approved / rejected 개수를 하나의 SELECT 로 계산

    """
    def stats(self) -> dict[str, int]:
        def _count(status: ApplicationStatus):
            return func.coalesce(func.sum(case((Application.status == status, 1), else_=0)), 0)

        stmt = select(
            func.count(Application.id),
            _count(ApplicationStatus.PENDING),
            _count(ApplicationStatus.APPROVED),
            _count(ApplicationStatus.REJECTED),
        )
        with storage_errors(self.db, "application stats"):
            total, pending, approved, rejected = self.db.execute(stmt).one()

        return {
            "total": int(total or 0),
            "pending": int(pending or 0),
            "approved": int(approved or 0),
            "rejected": int(rejected or 0),
        }

    def export_csv(self) -> str:
        output = io.StringIO()
        # Excel 에서 UTF-8 CSV 글자 깨짐 방지를 위해 BOM 먼저 출력
        output.write("\ufeff")
        writer = csv.writer(output)
        writer.writerow(EXPORT_COLUMNS)
        for a in self.list():
            writer.writerow(_export_row(a))
        return output.getvalue()

    def export_xlsx(self) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "applications"
        ws.append(EXPORT_COLUMNS)
        for a in self.list():
            ws.append(_export_row(a))

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

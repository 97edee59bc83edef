"""
logs.py

관리자 전용 활동 로그 API 모음.

주요 기능:
- 활동 로그 조회 (모듈 / 레벨 / 기간 / 최근 N개)
- JSON / CSV 내보내기
- 레벨별 / 모듈별 통계
- 로그 초기화

관련 파일:
- clubreg.services.activity_log : 활동 로그 저장소

"""

from datetime import datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response

from clubreg.core.deps import get_activity_log, get_current_admin
from clubreg.models.user import User
from clubreg.services.activity_log import ActivityLog, LogLevel

router = APIRouter(prefix="/api/logs", tags=["logs"])


"""
활동 로그 조회 API

- 조건은 모두 AND
- limit 은 조건에 맞는 것 중 최근 N개 (1 ~ 1000)

"""
@router.get("")
def list_logs(
    module: str | None = None,
    level: LogLevel | None = None,
    start_time: datetime | None = None,
    end_time: datetime | None = None,
    limit: int | None = Query(default=None, ge=1, le=1000),
    activity_log: ActivityLog = Depends(get_activity_log),
    _: User = Depends(get_current_admin),
):
    entries = activity_log.query(
        module=module,
        level=level,
        start_time=start_time,
        end_time=end_time,
        limit=limit,
    )
    return {
        "data": entries,
        "meta": {
            "limit": limit,
            "count": len(entries),
        },
    }


@router.get("/export")
def export_logs(
    format: Literal["json", "csv"] = Query(default="json"),
    activity_log: ActivityLog = Depends(get_activity_log),
    _: User = Depends(get_current_admin),
):
    content = activity_log.export(format)
    media_type = "text/csv; charset=utf-8" if format == "csv" else "application/json"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="activity_logs.{format}"'},
    )


@router.get("/stats")
def log_stats(
    activity_log: ActivityLog = Depends(get_activity_log),
    _: User = Depends(get_current_admin),
):
    return {
        "data": {
            **activity_log.stats(),
            "healthy": activity_log.is_healthy(),
        }
    }


@router.delete("")
def clear_logs(
    activity_log: ActivityLog = Depends(get_activity_log),
    _: User = Depends(get_current_admin),
):
    activity_log.clear()
    return {"message": "Activity log cleared"}

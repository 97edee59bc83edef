"""
services/activity_log.py

시스템 활동 로그(Activity Log) 서비스.

가입 신청 제출, 상태 변경, 파일 업로드 등 주요 활동을
메모리 버퍼에 쌓고, 매 기록마다 버퍼 전체를 JSON 파일에 저장한다(write-through).

주요 기능:
- 로그 기록 (info / warning / error / success)
- 조건 조회 (모듈, 레벨, 기간, 최근 N개)
- JSON / CSV 내보내기
- 레벨별 / 모듈별 통계
- 로그 초기화

설계 원칙:
- record()는 어떤 경우에도 예외를 밖으로 던지지 않음
- 최대 보관 개수를 넘으면 가장 오래된 로그부터 제거
- 스레드풀에서 동시에 호출되므로 버퍼 접근은 Lock으로 보호
- 모든 로그는 표준 logging(clubreg.activity)에도 함께 출력

관련 파일:
- clubreg.main              : 앱 시작 시 인스턴스 생성 (app.state.activity_log)
- clubreg.routers.logs      : 관리자용 로그 조회 API

"""

import csv
import io
import json
import logging
import threading
import uuid
from collections import Counter
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)
activity_logger = logging.getLogger("clubreg.activity")


class LogLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"


_STD_LEVEL = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.SUCCESS: logging.INFO,
}

CSV_HEADER = ["timestamp", "module", "message", "level", "data"]


def _parse_time(value: datetime | str) -> datetime:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    # naive 시각은 UTC로 간주
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _is_valid_entry(entry: Any) -> bool:
    if not isinstance(entry, dict) or not isinstance(entry.get("timestamp"), str):
        return False
    try:
        _parse_time(entry["timestamp"])
    except ValueError:
        return False
    return True


class ActivityLog:
    def __init__(self, path: str | Path | None, max_entries: int = 1000):
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._path = Path(path) if path else None
        self._max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: list[dict[str, Any]] = []
        self._load()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def _load(self) -> None:
        if self._path is None or not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                raise ValueError("activity log file must contain a JSON list")
            # 손으로 고친 파일 등에서 형식이 맞지 않는 항목은 버림
            entries = [e for e in data if _is_valid_entry(e)]
            if len(entries) != len(data):
                logger.warning("Dropped %d malformed activity log entries from %s",
                               len(data) - len(entries), self._path)
            self._entries = entries[-self._max_entries:]
        except (OSError, ValueError) as e:
            logger.warning("Could not load activity log from %s: %s", self._path, e)
            self._entries = []

    # Lock을 잡은 상태에서만 호출
    def _save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._entries, ensure_ascii=False, default=str), encoding="utf-8")
        tmp.replace(self._path)

    """
    활동 로그 기록

    - module  : 모듈 이름 (예: applications, upload)
    - message : 로그 메시지
    - level   : info / warning / error / success
    - data    : 추가 정보 (JSON 직렬화 가능한 값)

    NOTE:
    - 예외를 던지지 않는다. 저장 실패는 표준 logging으로만 남긴다.

    """
    def record(self, module: str, message: str, level: LogLevel | str = LogLevel.INFO,
               data: Any = None) -> None:
        try:
            lvl = LogLevel(level)
        except ValueError:
            lvl = LogLevel.INFO

        entry = {
            "id": uuid.uuid4().hex,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "module": module,
            "message": message,
            "level": lvl.value,
            "data": data,
        }

        try:
            with self._lock:
                self._entries.append(entry)
                if len(self._entries) > self._max_entries:
                    del self._entries[: len(self._entries) - self._max_entries]
                self._save()
        except Exception:
            logger.exception("Failed to persist activity log entry")

        try:
            activity_logger.log(_STD_LEVEL[lvl], "[%s] %s", module, message,
                                extra={"activity_data": data})
        except Exception:
            logger.exception("Failed to emit activity log entry")

    def info(self, module: str, message: str, data: Any = None) -> None:
        self.record(module, message, LogLevel.INFO, data)

    def warning(self, module: str, message: str, data: Any = None) -> None:
        self.record(module, message, LogLevel.WARNING, data)

    def error(self, module: str, message: str, data: Any = None) -> None:
        self.record(module, message, LogLevel.ERROR, data)

    def success(self, module: str, message: str, data: Any = None) -> None:
        self.record(module, message, LogLevel.SUCCESS, data)

    """
    활동 로그 조회

    - 모든 조건은 AND로 결합
    - start_time / end_time 은 경계값 포함
    - limit 지정 시 조건을 만족하는 것 중 가장 최근 N개 반환 (오래된 순 정렬 유지)

    """
    def query(
        self,
        *,
        module: Optional[str] = None,
        level: LogLevel | str | None = None,
        start_time: datetime | str | None = None,
        end_time: datetime | str | None = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            entries = list(self._entries)

        if module:
            entries = [e for e in entries if e.get("module") == module]
        if level:
            level_value = LogLevel(level).value
            entries = [e for e in entries if e.get("level") == level_value]
        if start_time:
            start = _parse_time(start_time)
            entries = [e for e in entries if _parse_time(e["timestamp"]) >= start]
        if end_time:
            end = _parse_time(end_time)
            entries = [e for e in entries if _parse_time(e["timestamp"]) <= end]
        if limit:
            entries = entries[-limit:]

        return entries

    def export(self, fmt: str = "json") -> str:
        with self._lock:
            entries = list(self._entries)

        if fmt == "csv":
            output = io.StringIO()
            writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
            writer.writerow(CSV_HEADER)
            for e in entries:
                data = e.get("data")
                writer.writerow([
                    e.get("timestamp", ""),
                    e.get("module", ""),
                    e.get("message", ""),
                    e.get("level", ""),
                    json.dumps(data, ensure_ascii=False, default=str) if data is not None else "",
                ])
            return output.getvalue()

        if fmt == "json":
            return json.dumps(entries, ensure_ascii=False, indent=2, default=str)

        raise ValueError(f"unsupported export format: {fmt}")

    def stats(self) -> dict[str, Any]:
        with self._lock:
            entries = list(self._entries)

        return {
            "total": len(entries),
            "by_level": dict(Counter(e.get("level") for e in entries)),
            "by_module": dict(Counter(e.get("module") for e in entries)),
            "recent": entries[-10:],
        }

    def clear(self) -> None:
        with self._lock:
            self._entries = []
            self._save()
        self.record("system", "Activity log cleared", LogLevel.INFO)

    def is_healthy(self) -> bool:
        with self._lock:
            return len(self._entries) < self._max_entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

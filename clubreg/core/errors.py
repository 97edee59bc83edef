"""
errors.py

서비스 계층 공통 예외(Error Taxonomy) 정의 파일.

서비스(Registry / Store)는 HTTP를 모르고 아래 예외만 발생시키며,
API 계층(main.py의 exception handler)이 각 예외를 HTTP 상태 코드와
사용자에게 노출해도 안전한 메시지로 변환한다.

예외 → 상태 코드:
- ValidationError       : 400 (입력 누락/형식 오류)
- AuthError             : 401 (자격 증명 불일치)
- ForbiddenError        : 403 (권한 부족)
- NotFoundError         : 404
- ConflictError         : 409 (이메일 중복 등)
- StorageError          : 500 (DB / 파일 저장소 I/O 실패)
- UpstreamTimeoutError  : 504 (외부 저장소 응답 시간 초과)

설계 원칙:
- 드라이버 예외(SQLAlchemyError 등)는 storage_errors()에서 StorageError로 감싸고
  원본 메시지는 서버 로그에만 남긴다
- 클라이언트 응답에는 public_message만 포함

"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import OperationalError, SQLAlchemyError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class ClubError(Exception):
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(ClubError):
    status_code = 400
    public_message = "Invalid request"


class AuthError(ClubError):
    status_code = 401
    public_message = "Invalid credentials"


class ForbiddenError(ClubError):
    status_code = 403
    public_message = "Forbidden"


class NotFoundError(ClubError):
    status_code = 404
    public_message = "Not found"


class ConflictError(ClubError):
    status_code = 409
    public_message = "Conflict"


class StorageError(ClubError):
    status_code = 500
    public_message = "Storage error"


class UpstreamTimeoutError(StorageError):
    status_code = 504
    public_message = "Storage timeout"


def client_message(exc: ClubError) -> str:
    # 5xx 계열은 고정 메시지만 노출
    if exc.status_code >= 500:
        return exc.public_message
    return exc.message


# 드라이버별 잠금 대기 / 타임아웃 메시지 (소문자 비교)
_TIMEOUT_MARKERS = (
    "database is locked",
    "lock wait timeout",
    "statement timeout",
    "timeout expired",
    "timed out",
)


def _is_timeout(exc: OperationalError) -> bool:
    text = str(exc.orig or exc).lower()
    return any(marker in text for marker in _TIMEOUT_MARKERS)


"""
DB 작업 예외 변환 컨텍스트 매니저

- 블록 안에서 SQLAlchemyError 발생 시 rollback 후 StorageError로 변환
- 커넥션 풀 대기 / 잠금 대기 / 드라이버 타임아웃은 UpstreamTimeoutError로 변환
- ClubError는 rollback만 하고 그대로 전파

"""
@contextmanager
def storage_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except ClubError:
        db.rollback()
        raise
    except PoolTimeoutError as e:
        db.rollback()
        logger.error("DB timeout during %s", action, exc_info=True)
        raise UpstreamTimeoutError(f"Database timeout during {action}") from e
    except OperationalError as e:
        db.rollback()
        if _is_timeout(e):
            logger.error("DB timeout during %s: %s", action, e.orig)
            raise UpstreamTimeoutError(f"Database timeout during {action}") from e
        logger.error("DB error during %s: %s", action, type(e).__name__, exc_info=True)
        raise StorageError(f"Database error during {action}") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("DB error during %s: %s", action, type(e).__name__, exc_info=True)
        raise StorageError(f"Database error during {action}") from e

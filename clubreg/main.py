"""
main.py

FastAPI 애플리케이션 진입점(Entry Point).

이 파일은 서버 실행 시 가장 먼저 로드되며,
설정을 받아 애플리케이션과 공용 의존 객체를 조립한다.

주요 역할:
- create_app(settings): 앱 인스턴스 생성
  - DB 엔진 / 세션 팩토리, 파일 저장소, 활동 로그를 한 번만 만들어 app.state 에 보관
  - 시작 시(lifespan) ORM 메타데이터로 테이블 생성
- CORS 미들웨어 설정
- 서비스 예외(ClubError) → HTTP 응답 변환
- 각 도메인별 라우터(auth, users, applications, projects, upload, logs) 등록
- 헬스 체크 및 DB 연결 상태 확인용 엔드포인트 제공

설계 원칙:
- 비즈니스 로직은 포함하지 않고 설정/조립 역할만 수행
- 전역 싱글턴 대신 app.state + Depends 로 주입
- 클라이언트에게는 내부 오류 상세(드라이버 메시지, 스택)를 노출하지 않음

관련 파일:
- clubreg.core.config        : 환경 변수 및 설정 로드
- clubreg.core.deps          : 요청 단위 의존성
- clubreg.core.errors        : 예외 → 상태 코드 규칙
- clubreg.routers.*          : 기능별 API 라우터

실행:
- uvicorn clubreg.main:app

"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.orm import Session

from clubreg.core.config import Settings
from clubreg.core.deps import get_db
from clubreg.core.errors import ClubError, client_message
from clubreg.core.log_config import setup_logging
from clubreg.db.base import Base
from clubreg.db.session import build_engine, build_session_factory
from clubreg.models import application, project, user  # noqa: F401  (Base.metadata 에 테이블 등록)
from clubreg.routers import applications, auth, logs, projects, upload, users
from clubreg.services.activity_log import ActivityLog
from clubreg.services.file_store import LocalFileStore, build_file_store

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    # ("body", "email") → "email"
    loc = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    msg = first.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClubError)
    async def club_error_handler(request: Request, exc: ClubError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": client_message(exc)})

    # 스키마 검증 실패는 422 대신 400
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": _validation_message(exc)})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.LOG_LEVEL)

    engine = build_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        Base.metadata.create_all(bind=engine)
        app.state.activity_log.info("system", "Server started", {"storage": settings.STORAGE_BACKEND})
        yield
        engine.dispose()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.file_store = build_file_store(settings)
    app.state.activity_log = ActivityLog(settings.ACTIVITY_LOG_PATH, settings.ACTIVITY_LOG_MAX_ENTRIES)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(applications.router)
    app.include_router(projects.router)
    app.include_router(upload.router)
    app.include_router(logs.router)

    # 로컬 저장소일 때만 업로드 파일 정적 서빙
    if isinstance(app.state.file_store, LocalFileStore):
        upload_root: Path = app.state.file_store.root_dir
        upload_root.mkdir(parents=True, exist_ok=True)
        app.mount(app.state.file_store.url_prefix, StaticFiles(directory=upload_root), name="uploads")

    """
    서버 헬스 체크 엔드포인트

    - 애플리케이션 프로세스가 정상 동작 중인지 확인

    """
    @app.get("/health")
    def health():
        return {"status": "ok"}

    """
    데이터베이스 연결 상태 확인 엔드포인트

    - 간단한 SELECT 1 쿼리를 통해 DB 연결 여부 확인

    """
    @app.get("/db-ping")
    def db_ping(db: Session = Depends(get_db)):
        value = db.execute(text("SELECT 1")).scalar_one()
        return {"db": "ok", "value": value}

    return app


app = create_app()

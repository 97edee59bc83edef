"""
session.py

데이터베이스 엔진 및 세션(Session) 팩토리 생성 파일.

이 파일은 설정(Settings)을 받아 SQLAlchemy Engine과 세션 팩토리를 만든다.
create_app()에서 한 번 호출되어 app.state에 보관되며,
FastAPI 의존성(get_db)이 요청 단위로 세션을 생성/종료한다.

백엔드 선택:
- sqlite:///...  : 로컬 파일 DB (기본값)
- sqlite://      : 메모리 DB (테스트용, 단일 커넥션 공유)
- 그 외 URL       : 원격 관리형 DB (PostgreSQL 등)

설계 원칙:
- DB 연결 설정은 한 곳에서만 정의
- 모든 연결에 대기 시간 상한(DB_TIMEOUT_SECONDS) 적용
- pool_pre_ping=True로 유휴 연결 오류 방지

관련 파일:
- clubreg.core.config        : DATABASE_URL 설정
- clubreg.core.deps          : get_db 의존성

"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from clubreg.core.config import Settings


def build_engine(settings: Settings) -> Engine:
    url = make_url(settings.DATABASE_URL)

    if url.get_backend_name() == "sqlite":
        connect_args = {
            # 요청은 스레드풀에서 처리되므로 스레드 검사 해제
            "check_same_thread": False,
            # 잠금 대기 시간 상한
            "timeout": settings.DB_TIMEOUT_SECONDS,
        }
        if url.database in (None, "", ":memory:"):
            # 메모리 DB는 커넥션마다 별도 DB가 되므로 하나를 공유
            return create_engine(url, connect_args=connect_args, poolclass=StaticPool)
        return create_engine(url, connect_args=connect_args)

    connect_args = {}
    if url.get_backend_name() in ("postgresql", "mysql", "mariadb"):
        # 원격 DB 접속 대기 상한 (psycopg / pymysql 모두 정수 초 단위)
        connect_args["connect_timeout"] = max(1, int(settings.DB_TIMEOUT_SECONDS))

    return create_engine(
        url,
        connect_args=connect_args,
        pool_pre_ping=True,
        pool_timeout=settings.DB_TIMEOUT_SECONDS,
    )


# 요청 단위로 사용할 세션 팩토리
def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )

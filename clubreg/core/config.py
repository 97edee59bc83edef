"""
config.py

애플리케이션 전역 설정(Configuration) 관리 파일.

이 파일은 .env 환경 변수들을 Pydantic BaseSettings를 통해 로드하여
create_app()에 전달할 설정 객체를 정의한다.

주요 설정 항목:
- 데이터베이스 연결 정보 (로컬 SQLite / 원격 관리형 DB)
- JWT 인증 관련 시크릿 및 만료 정책
- 파일 저장소 백엔드 선택 (local / gcs)
- 활동 로그 보관 경로 및 최대 개수
- CORS 허용 도메인 목록

설계 원칙:
- 모든 환경 변수는 이 파일을 통해서만 접근
- 설정 객체는 create_app() 시점에 한 번 만들어 app.state에 보관
- 테스트에서는 Settings(...)를 직접 생성해 주입

관련 파일:
- clubreg.main              : 설정을 받아 앱과 의존 객체를 조립
- clubreg.core.security     : JWT 시크릿 / 만료 설정 사용
- clubreg.db.session        : DATABASE_URL 사용
- clubreg.services.file_store : 저장소 백엔드 설정 사용

"""

from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


# .env 파일에 정의된 환경 변수를 로드하는 설정 클래스
# extra="ignore" 옵션으로 정의되지 않은 환경 변수는 무시
class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    PROJECT_NAME: str = "Club Registration Backend"

    # 로컬 기본값은 SQLite 파일, 운영에서는 원격 DB URL로 교체
    DATABASE_URL: str = "sqlite:///./club.db"
    DB_TIMEOUT_SECONDS: float = 10.0

    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # 기본 7일
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # 파일 저장소
    # - local: UPLOAD_DIR 아래에 저장하고 UPLOAD_URL_PREFIX로 서빙
    # - gcs  : GCS_BUCKET 버킷에 저장하고 서명 URL 반환
    STORAGE_BACKEND: Literal["local", "gcs"] = "local"
    UPLOAD_DIR: str = "uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    GCS_BUCKET: str | None = None
    GCS_CREDENTIALS_PATH: str | None = None
    SIGNED_URL_EXPIRE_DAYS: int = 365
    STORAGE_TIMEOUT_SECONDS: float = 30.0

    # 활동 로그
    ACTIVITY_LOG_PATH: str = "activity_logs.json"
    ACTIVITY_LOG_MAX_ENTRIES: int = 1000

    LOG_LEVEL: str = "INFO"

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

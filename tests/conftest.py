import os
import tempfile

import pytest
from fastapi.testclient import TestClient

# clubreg.main 은 import 시점에 기본 앱을 만들므로 환경 변수를 먼저 채워둔다
_IMPORT_DIR = tempfile.mkdtemp(prefix="clubreg-test-")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_IMPORT_DIR, "uploads"))
os.environ.setdefault("ACTIVITY_LOG_PATH", os.path.join(_IMPORT_DIR, "activity_logs.json"))

from clubreg.core.config import Settings  # noqa: E402
from clubreg.main import create_app  # noqa: E402


@pytest.fixture()
def settings(tmp_path):
    """테스트마다 새 인메모리 DB / 업로드 폴더 / 활동 로그 파일"""
    return Settings(
        SECRET_KEY="test-secret-key",
        DATABASE_URL="sqlite://",
        STORAGE_BACKEND="local",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        ACTIVITY_LOG_PATH=str(tmp_path / "activity_logs.json"),
        ACTIVITY_LOG_MAX_ENTRIES=100,
    )


@pytest.fixture()
def app(settings):
    return create_app(settings)


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def db_session(app, client):
    """테스트에서 직접 DB 조작할 때 쓰는 세션 (client 시작 후 테이블 생성됨)"""
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()

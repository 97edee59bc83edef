"""

관리자(ADMIN) 초기 계정 생성 스크립트.

- 서버 최초 세팅 시 실행하는 용도
- .env에 정의된 ADMIN_* 환경 변수를 읽어
  ADMIN 계정을 생성한다.
- 같은 이메일의 ADMIN 계정이 이미 있으면 생성하지 않고 종료한다.

사용 목적:
- 공개 가입 API로는 관리자 권한을 얻을 수 없으므로
  신청서 심사 / 통계 / 활동 로그 API에 접근할 관리자 계정을 초기화하기 위함

사용 방법
- 가상환경 접속
- (.venv) ~\backend~$ python -m scripts.create_admin

"""

import os
from dotenv import load_dotenv
load_dotenv()

from sqlalchemy import select

from clubreg.core.config import Settings
from clubreg.core.errors import ConflictError
from clubreg.db.base import Base
from clubreg.db.session import build_engine, build_session_factory
from clubreg.models import application, project  # noqa: F401
from clubreg.models.user import User, Role
from clubreg.services.activity_log import ActivityLog
from clubreg.services.credentials import CredentialStore


def main():
    settings = Settings()
    engine = build_engine(settings)
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()

    try:
        email = os.environ["ADMIN_EMAIL"].strip().lower()
        password = os.environ["ADMIN_PASSWORD"]
        name = os.environ.get("ADMIN_NAME", "Admin")

        existing = db.scalar(select(User).where(User.email == email))
        if existing and existing.role == Role.ADMIN:
            print("✅ ADMIN already exists. Skip creation.")
            return

        activity_log = ActivityLog(settings.ACTIVITY_LOG_PATH, settings.ACTIVITY_LOG_MAX_ENTRIES)
        store = CredentialStore(db, activity_log)
        try:
            store.create_admin(email, password, name)
        except ConflictError:
            raise RuntimeError("Email already exists but is not ADMIN")

        print(f"🚀 ADMIN created: {email}")

    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()

"""
base.py

SQLAlchemy ORM Base 정의 파일.

이 파일은 모든 SQLAlchemy 모델이 상속받는
공통 Base 클래스를 정의한다.

모든 모델(User, UserProfile, Application, Project)은
이 Base를 기준으로 테이블 메타데이터가 관리되며,
앱 시작 시 Base.metadata.create_all()로 테이블이 생성된다.

설계 원칙:
- Base 정의는 단일 파일에서만 관리
- 모델 간 순환 참조 방지

관련 파일:
- clubreg.models.*        : 모든 ORM 모델
- clubreg.main            : 시작 시 테이블 생성

"""

from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base

# 모든 ORM 모델이 상속받는 Base 클래스
Base = declarative_base()


# created_at / updated_at 기본값 (timezone-aware UTC)
def utcnow() -> datetime:
    return datetime.now(timezone.utc)

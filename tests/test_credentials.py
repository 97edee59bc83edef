"""

CredentialStore / ProjectRegistry 서비스 단위 테스트.
- 빈 활동 로그를 넘겨도 가입 / 로그인 / 관리자 생성 / 프로젝트 생성이 기록되는지 확인한다.

"""

import pytest

from clubreg.core.errors import AuthError, ConflictError
from clubreg.models.user import Role
from clubreg.services.activity_log import ActivityLog
from clubreg.services.credentials import CredentialStore
from clubreg.services.projects import ProjectRegistry
from tests.helpers import ADMIN_PASSWORD, USER_PASSWORD, unique_email


def test_sign_up_and_sign_in_are_logged_on_empty_log(db_session):
    activity_log = ActivityLog(None)
    assert len(activity_log) == 0
    store = CredentialStore(db_session, activity_log)

    email = unique_email()
    user = store.sign_up(email, USER_PASSWORD, {"name": "신입", "grade": 1})
    store.sign_in(email, USER_PASSWORD)

    messages = [e["message"] for e in activity_log.query(module="auth")]
    assert messages == ["User signed up", "User signed in"]
    assert activity_log.query(module="auth")[0]["data"] == {"user_id": str(user.id)}

    _, profile = store.get_user(user.id)
    assert profile.grade == "1"


def test_create_admin_is_logged(db_session):
    activity_log = ActivityLog(None)
    admin = CredentialStore(db_session, activity_log).create_admin(unique_email("admin"), ADMIN_PASSWORD)

    assert admin.role == Role.ADMIN
    assert activity_log.query(module="auth", level="success")[-1]["data"]["user_id"] == str(admin.id)


def test_sign_up_conflict_and_bad_credentials(db_session):
    store = CredentialStore(db_session, ActivityLog(None))
    email = unique_email()
    store.sign_up(email, USER_PASSWORD)

    with pytest.raises(ConflictError):
        store.sign_up(email.upper(), USER_PASSWORD)
    with pytest.raises(AuthError):
        store.sign_in(email, "WrongPassw0rd!")


def test_project_create_is_logged_on_empty_log(db_session):
    activity_log = ActivityLog(None)
    owner = CredentialStore(db_session).sign_up(unique_email(), USER_PASSWORD)

    project = ProjectRegistry(db_session, activity_log).create({"name": "스터디 봇"}, owner.id)

    entries = activity_log.query(module="projects")
    assert [e["message"] for e in entries] == ["Project created"]
    assert entries[0]["data"] == {"project_id": str(project.id), "owner_id": str(owner.id)}

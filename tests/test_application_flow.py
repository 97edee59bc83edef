"""

가입 신청서 플로우 통합 테스트.
- 제출(항상 pending) → 관리자 목록/상세 조회 → 상태 변경 → 상태 필터,
  통계, CSV / Excel 내보내기, 권한(비로그인 401 / 일반 회원 403)까지 검증한다.

"""

import uuid

from tests.helpers import (
    admin_token,
    application_body,
    auth_header,
    signup_user,
    submit_application,
)


def test_submit_always_starts_pending(client, db_session):
    user = signup_user(client)
    admin = admin_token(client, db_session)

    # 클라이언트가 status 를 보내도 무시
    app_id = submit_application(client, user["token"], status="approved")

    r = client.get(f"/api/applications/{app_id}", headers=auth_header(admin))
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["status"] == "pending"
    assert data["user_id"] == user["user"]["id"]


def test_submit_requires_login_and_required_fields(client):
    r = client.post("/api/applications", json=application_body())
    assert r.status_code == 401

    user = signup_user(client)

    body = application_body()
    del body["student_id"]
    r = client.post("/api/applications", json=body, headers=auth_header(user["token"]))
    assert r.status_code == 400

    r = client.post(
        "/api/applications",
        json=application_body(email="not-an-email"),
        headers=auth_header(user["token"]),
    )
    assert r.status_code == 400


def test_review_flow_and_status_filter(client, db_session):
    user = signup_user(client)
    admin = admin_token(client, db_session)

    approved_id = submit_application(client, user["token"])
    pending_id = submit_application(client, user["token"])

    r = client.put(
        f"/api/applications/{approved_id}/status",
        json={"status": "approved"},
        headers=auth_header(admin),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"id": approved_id, "status": "approved"}

    r = client.get("/api/applications", params={"status": "approved"}, headers=auth_header(admin))
    assert r.status_code == 200, r.text
    ids = [a["id"] for a in r.json()["data"]]
    assert ids == [approved_id]

    r = client.get("/api/applications", params={"status": "pending"}, headers=auth_header(admin))
    assert [a["id"] for a in r.json()["data"]] == [pending_id]

    r = client.get("/api/applications", headers=auth_header(admin))
    assert {a["id"] for a in r.json()["data"]} == {approved_id, pending_id}

    # 상태 전이 제한 없음 (approved → pending)
    r = client.put(
        f"/api/applications/{approved_id}/status",
        json={"status": "pending"},
        headers=auth_header(admin),
    )
    assert r.status_code == 200, r.text
    assert r.json()["data"]["status"] == "pending"


def test_status_update_errors(client, db_session):
    user = signup_user(client)
    admin = admin_token(client, db_session)
    app_id = submit_application(client, user["token"])

    bad_status = client.put(
        f"/api/applications/{app_id}/status",
        json={"status": "archived"},
        headers=auth_header(admin),
    )
    assert bad_status.status_code == 400

    missing = client.put(
        f"/api/applications/{uuid.uuid4()}/status",
        json={"status": "approved"},
        headers=auth_header(admin),
    )
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Application not found"

    bad_filter = client.get("/api/applications", params={"status": "archived"}, headers=auth_header(admin))
    assert bad_filter.status_code == 400

    # 실패한 변경은 상태를 바꾸지 않음
    r = client.get(f"/api/applications/{app_id}", headers=auth_header(admin))
    assert r.json()["data"]["status"] == "pending"


def test_admin_endpoints_forbidden_for_members(client):
    user = signup_user(client)
    app_id = submit_application(client, user["token"])
    headers = auth_header(user["token"])

    assert client.get("/api/applications", headers=headers).status_code == 403
    assert client.get(f"/api/applications/{app_id}", headers=headers).status_code == 403
    assert client.get("/api/statistics", headers=headers).status_code == 403
    assert client.get("/api/applications/export", headers=headers).status_code == 403

    r = client.put(f"/api/applications/{app_id}/status", json={"status": "approved"}, headers=headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "Admin privileges required"


def test_statistics(client, db_session):
    admin = admin_token(client, db_session)

    r = client.get("/api/statistics", headers=auth_header(admin))
    assert r.status_code == 200, r.text
    assert r.json()["data"] == {"total": 0, "pending": 0, "approved": 0, "rejected": 0}

    user = signup_user(client)
    ids = [submit_application(client, user["token"]) for _ in range(4)]
    client.put(f"/api/applications/{ids[0]}/status", json={"status": "approved"}, headers=auth_header(admin))
    client.put(f"/api/applications/{ids[1]}/status", json={"status": "rejected"}, headers=auth_header(admin))

    stats = client.get("/api/statistics", headers=auth_header(admin)).json()["data"]
    assert stats == {"total": 4, "pending": 2, "approved": 1, "rejected": 1}
    assert stats["pending"] + stats["approved"] + stats["rejected"] <= stats["total"]


def test_export_csv(client, db_session):
    user = signup_user(client)
    admin = admin_token(client, db_session)
    app_id = submit_application(client, user["token"], name="홍길동")

    r = client.get("/api/applications/export", params={"format": "csv"}, headers=auth_header(admin))
    assert r.status_code == 200, r.text
    assert r.headers["content-type"].startswith("text/csv")
    assert "applications.csv" in r.headers["content-disposition"]

    text = r.content.decode("utf-8")
    assert text.startswith("\ufeff")
    lines = text.lstrip("\ufeff").splitlines()
    assert lines[0].startswith("id,name,student_id,major,email")
    assert app_id in lines[1]
    assert "홍길동" in lines[1]


def test_export_xlsx(client, db_session):
    user = signup_user(client)
    admin = admin_token(client, db_session)
    submit_application(client, user["token"])

    r = client.get("/api/applications/export", params={"format": "xlsx"}, headers=auth_header(admin))
    assert r.status_code == 200, r.text
    assert "applications.xlsx" in r.headers["content-disposition"]
    # xlsx 는 zip 포맷
    assert r.content[:2] == b"PK"


def test_submission_is_recorded_in_activity_log(client, app):
    user = signup_user(client)
    app_id = submit_application(client, user["token"])

    entries = app.state.activity_log.query(module="applications")
    assert entries[-1]["message"] == "Application submitted"
    assert entries[-1]["level"] == "success"
    assert entries[-1]["data"]["application_id"] == app_id

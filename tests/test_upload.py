"""

파일 업로드 API 통합 테스트 (로컬 저장소).
- 이미지 업로드 → 정적 서빙 확인 → 삭제(멱등),
  형식/크기 제한, 파일명 충돌 회피, 경로 조작 차단까지 검증한다.

"""

from pathlib import Path

from fastapi.testclient import TestClient

from clubreg.main import create_app
from clubreg.services.file_store import MAX_FILE_SIZE
from tests.helpers import auth_header, signup_user

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def _upload(client, token, *, content=PNG_BYTES, filename="avatar.png", content_type="image/png", folder=None):
    data = {"folder": folder} if folder is not None else None
    return client.post(
        "/api/upload",
        files={"file": (filename, content, content_type)},
        data=data,
        headers=auth_header(token),
    )


def _stored_files(settings) -> list[Path]:
    root = Path(settings.UPLOAD_DIR)
    if not root.exists():
        return []
    return [p for p in root.rglob("*") if p.is_file()]


def test_upload_and_serve_image(client, settings):
    user = signup_user(client)

    r = _upload(client, user["token"])
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["url"].startswith("/uploads/uploads/")
    assert body["path"] == body["url"]
    assert body["fileName"].endswith(".png")

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_into_folder(client, settings):
    user = signup_user(client)

    r = _upload(client, user["token"], folder="avatars")
    assert r.status_code == 200, r.text
    assert r.json()["url"].startswith("/uploads/avatars/")
    assert (Path(settings.UPLOAD_DIR) / "avatars" / r.json()["fileName"]).is_file()


def test_same_original_name_gets_distinct_paths(client):
    user = signup_user(client)

    first = _upload(client, user["token"]).json()
    second = _upload(client, user["token"]).json()
    assert first["path"] != second["path"]


def test_rejects_non_image_and_oversized_files(client, settings):
    user = signup_user(client)

    r = _upload(client, user["token"], content=b"hello", filename="note.txt", content_type="text/plain")
    assert r.status_code == 400
    assert r.json()["detail"] == "Only image files are allowed (JPG, PNG, GIF, WebP)"

    too_big = b"\x00" * (MAX_FILE_SIZE + 1)
    r = _upload(client, user["token"], content=too_big, filename="big.png")
    assert r.status_code == 400
    assert r.json()["detail"] == "File size must not exceed 5MB"

    # 검증 실패 시 아무 것도 저장되지 않음
    assert _stored_files(settings) == []


def test_rejects_folder_traversal(client, settings):
    user = signup_user(client)

    r = _upload(client, user["token"], folder="../outside")
    assert r.status_code == 400
    assert _stored_files(settings) == []


def test_upload_without_token_is_allowed(client, app):
    # 가입 전에 프로필 사진을 먼저 올릴 수 있어야 함
    r = client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["url"] and body["path"] and body["fileName"]

    entry = app.state.activity_log.query(module="upload")[-1]
    assert entry["data"]["path"] == body["path"]
    assert entry["data"]["user_id"] is None

    # 업로드한 URL 을 그대로 가입에 사용
    u = signup_user(client, avatar_url=body["url"])
    me = client.get("/api/user", headers=auth_header(u["token"]))
    assert me.json()["user"]["avatar_url"] == body["url"]


def test_upload_with_token_records_user(client, app):
    user = signup_user(client)
    r = _upload(client, user["token"])
    assert r.status_code == 200, r.text

    entry = app.state.activity_log.query(module="upload")[-1]
    assert entry["data"]["user_id"] == user["user"]["id"]


def test_upload_with_bad_token_is_rejected(client):
    r = _upload(client, "not-a-jwt")
    assert r.status_code == 403


def test_delete_requires_login(client):
    r = client.request("DELETE", "/api/upload", json={"path": "/uploads/uploads/x.png"})
    assert r.status_code == 401


def test_url_prefix_is_normalized_for_mount(settings):
    app = create_app(settings.model_copy(update={"UPLOAD_URL_PREFIX": "files/"}))
    with TestClient(app) as client:
        r = client.post("/api/upload", files={"file": ("a.png", PNG_BYTES, "image/png")})
        assert r.status_code == 200, r.text
        url = r.json()["url"]
        assert url.startswith("/files/uploads/")

        served = client.get(url)
        assert served.status_code == 200
        assert served.content == PNG_BYTES


def test_delete_is_idempotent(client, settings):
    user = signup_user(client)
    stored = _upload(client, user["token"]).json()

    for _ in range(2):
        r = client.request(
            "DELETE", "/api/upload", json={"path": stored["path"]}, headers=auth_header(user["token"])
        )
        assert r.status_code == 200, r.text
        assert r.json()["message"] == "File deleted"

    assert _stored_files(settings) == []


def test_delete_rejects_paths_outside_upload_root(client):
    user = signup_user(client)

    r = client.request(
        "DELETE", "/api/upload", json={"path": "/uploads/../activity_logs.json"}, headers=auth_header(user["token"])
    )
    assert r.status_code == 400

    r = client.request(
        "DELETE", "/api/upload", json={"path": "/etc/passwd"}, headers=auth_header(user["token"])
    )
    assert r.status_code == 400

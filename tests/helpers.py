# tests/helpers.py
import uuid

from sqlalchemy.orm import Session

from clubreg.models.user import User
from clubreg.services.credentials import CredentialStore

ADMIN_PASSWORD = "AdminPassw0rd!"
USER_PASSWORD = "UserPassw0rd!"


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:6]}@example.com"


def signup_user(client, **overrides) -> dict:
    """
    일반 회원 가입 후 {"email", "password", "token", "user"} 반환
    """
    body = {
        "email": unique_email(),
        "password": USER_PASSWORD,
        "name": "테스트유저",
        "student_id": f"2024{uuid.uuid4().hex[:4]}",
        "major": "Computer Science",
        "grade": 2,
    }
    body.update(overrides)

    r = client.post("/api/auth/signup", json=body)
    assert r.status_code == 200, r.text
    data = r.json()
    return {
        "email": body["email"],
        "password": body["password"],
        "token": data["token"],
        "user": data["user"],
    }


def create_admin_in_db(db: Session, *, email: str, password: str = ADMIN_PASSWORD) -> User:
    return CredentialStore(db).create_admin(email, password, "ADMIN")


def admin_token(client, db: Session) -> str:
    email = unique_email("admin")
    create_admin_in_db(db, email=email)

    r = client.post("/api/auth/signin", json={"email": email, "password": ADMIN_PASSWORD})
    assert r.status_code == 200, r.text
    return r.json()["token"]


def application_body(**overrides) -> dict:
    body = {
        "name": "김지원",
        "student_id": f"2023{uuid.uuid4().hex[:4]}",
        "major": "Software Engineering",
        "email": unique_email("applicant"),
        "phone": "010-1234-5678",
        "department": "backend",
        "skills": "Python, SQL",
        "motivation": "동아리 프로젝트에 참여하고 싶습니다",
    }
    body.update(overrides)
    return body


def submit_application(client, token: str, **overrides) -> str:
    r = client.post("/api/applications", json=application_body(**overrides), headers=auth_header(token))
    assert r.status_code == 200, r.text
    return r.json()["id"]

"""
auth.py

인증(Authentication) API 모음.

이 파일은 회원 가입과 로그인을 담당한다.
JWT 기반 인증 방식을 사용하며, 발급된 Access Token 은
이후 요청의 Authorization Header(Bearer)로 전달된다.

주요 기능:
- 회원 가입 (User + 프로필 생성 후 바로 토큰 발급)
- 로그인 및 토큰 발급

설계 원칙:
- 라우터는 요청/응답 처리만 담당, 계정 로직은 CredentialStore 에 위임
- 로그인 실패 시 이메일 존재 여부를 알 수 없도록 같은 401 응답
- 관리자 권한은 가입 API 로 얻을 수 없음 (scripts/create_admin.py 로만 생성)

관련 파일:
- clubreg.services.credentials : 가입 / 로그인 로직
- clubreg.core.security        : JWT 생성
- clubreg.schemas.auth         : 요청 스키마

"""

from fastapi import APIRouter, Depends

from clubreg.core.config import Settings
from clubreg.core.deps import get_credential_store, get_settings
from clubreg.core.security import create_access_token
from clubreg.models.user import User
from clubreg.schemas.auth import SignInRequest, SignUpRequest
from clubreg.schemas.user import UserResponse
from clubreg.services.credentials import CredentialStore

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(settings: Settings, user: User) -> dict:
    token = create_access_token(settings, str(user.id), email=user.email)
    return {
        "token": token,
        "user": UserResponse.model_validate(user).model_dump(mode="json"),
    }


"""
회원 가입 API

- 이메일 중복이면 409
- 필수 값 누락 / 형식 오류면 400
- 가입 성공 시 바로 토큰 발급

"""

@router.post("/signup")
def signup(
    data: SignUpRequest,
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
):
    profile = data.model_dump(exclude={"email", "password"})
    user = store.sign_up(data.email, data.password, profile)
    return _token_response(settings, user)


"""
로그인 API

- 이메일 / 비밀번호 인증
- 실패 사유와 관계없이 401 "Invalid credentials"

"""

@router.post("/signin")
def signin(
    data: SignInRequest,
    store: CredentialStore = Depends(get_credential_store),
    settings: Settings = Depends(get_settings),
):
    user = store.sign_in(data.email, data.password)
    return _token_response(settings, user)

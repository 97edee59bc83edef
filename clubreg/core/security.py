"""
security.py

비밀번호 해싱 및 JWT 토큰 생성/검증을 담당하는 보안 유틸리티 모음.

이 파일은 인증(auth) 로직에서 사용하는
저수준(low-level) 보안 기능만을 제공하며,
라우터나 비즈니스 로직은 포함하지 않는다.

주요 기능:
- 비밀번호 해싱 및 검증 (bcrypt)
- 존재하지 않는 계정에 대한 더미 검증 (타이밍 차이로 계정 유무 노출 방지)
- JWT Access Token 생성 / 디코딩

설계 원칙:
- 설정은 전역 객체가 아닌 Settings 인자로 전달받음
- 시간 기반(exp) 만료는 UTC 기준으로 처리
- 토큰 payload에는 사용자 식별자(sub)와 이메일만 포함

관련 파일:
- clubreg.core.config        : JWT 시크릿 키 및 만료 설정
- clubreg.core.deps          : 토큰을 실제로 검증하는 인증 의존성
- clubreg.services.credentials : 가입 / 로그인 시 해시 사용

"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from passlib.context import CryptContext

from clubreg.core.config import Settings


# bcrypt 기반 비밀번호 해싱 컨텍스트
# deprecated="auto"로 향후 알고리즘 교체 가능하도록 설정

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


"""
더미 비밀번호 검증

- 이메일이 존재하지 않을 때도 해시 비교와 비슷한 시간을 소모
- 로그인 실패 응답 시간으로 계정 존재 여부를 추측하지 못하게 함

"""

def dummy_verify() -> None:
    pwd_context.dummy_verify()


"""
Access Token 생성 함수

- subject(sub): 사용자 식별자(user_id)
- exp: 만료 시각 (UTC timestamp)
- Authorization Header(Bearer)에 담겨 전달됨

"""

def create_access_token(settings: Settings, subject: str, *, email: Optional[str] = None,
                        expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {
        "sub": subject,
        "type": "access",
        "exp": int(expire.timestamp()),
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


"""
Access Token 디코딩 및 검증 함수

- 서명 / 만료(exp) 검증
- 토큰 타입(access) 확인
- subject(user_id) 반환
- 유효하지 않을 경우 JWTError 발생

"""

def decode_access_token(settings: Settings, token: str) -> str:
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if payload.get("type") != "access":
        raise JWTError("Not an access token")
    sub = payload.get("sub")
    if not sub:
        raise JWTError("Missing subject")
    return sub

"""
users.py

로그인한 사용자 본인 정보 조회 API.

- 기본 계정 정보 + 프로필(LEFT JOIN) 반환
- 프로필이 없으면 프로필 필드는 null

관련 파일:
- clubreg.services.credentials : get_user
- clubreg.schemas.user         : 응답 스키마
"""

from fastapi import APIRouter, Depends

from clubreg.core.deps import get_credential_store, get_current_user
from clubreg.models.user import User
from clubreg.schemas.user import user_detail
from clubreg.services.credentials import CredentialStore

router = APIRouter(prefix="/api", tags=["users"])


@router.get("/user")
def me(
    current_user: User = Depends(get_current_user),
    store: CredentialStore = Depends(get_credential_store),
):
    user, profile = store.get_user(current_user.id)
    return {"user": user_detail(user, profile).model_dump(mode="json")}

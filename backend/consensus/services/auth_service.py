"""Auth Service 도메인 서비스 레이어입니다. 토큰 발급과 모의 SSO 로그인을 담당합니다."""

from datetime import timedelta
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from consensus.models.user import User
from consensus.config import settings
from consensus.utils.helpers import utcnow

ALGORITHM = "HS256"


def create_access_token(user_id: int) -> str:
    expire = utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(user_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_sso_login(db: Session, username: str) -> User:
    user = db.query(User).filter(User.username == username, User.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"'{username}'에 해당하는 활성 사용자를 찾을 수 없습니다.",
        )
    return user

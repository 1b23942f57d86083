from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from pcoin.config import settings
from pcoin.core.exceptions import AccountBanned, AuthorizationError
from pcoin.database.session import get_db
from pcoin.models.user import UserRole
from pcoin.schemas.user import User as UserSchema
from pcoin.services.auth_service import AuthService

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> UserSchema:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    auth_service = AuthService(db, settings=settings)
    user = auth_service.get_current_user(credentials.credentials)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(
    current_user: UserSchema = Depends(get_current_user),
) -> UserSchema:
    """차단되지 않은 사용자만 허용"""
    if current_user.is_banned:
        raise AccountBanned(current_user.banned_reason)
    return current_user


def require_role(required_role: UserRole):
    """특정 역할 이상의 권한이 필요한 엔드포인트용 의존성 팩토리"""

    def _require_role(
        current_user: UserSchema = Depends(get_current_active_user),
    ) -> UserSchema:
        if not current_user.has_at_least(required_role):
            raise AuthorizationError(
                "Forbidden",
                details={"required_role": required_role.value},
            )
        return current_user

    return _require_role


require_admin = require_role(UserRole.ADMIN)
require_owner = require_role(UserRole.OWNER)

verify_bearer_token = get_current_user

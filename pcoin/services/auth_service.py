import logging
from typing import Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import AuthenticationError, ConflictError
from pcoin.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from pcoin.database.session import atomic
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, Token
from pcoin.schemas.user import User as UserSchema

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.settings = settings

    def _issue_token(self, user: UserSchema) -> Token:
        access_token = create_access_token(
            data={"sub": user.username, "user_id": user.id}
        )
        return Token(access_token=access_token, token_type="bearer")

    def register(self, request: RegisterRequest) -> AuthResponse:
        """회원가입 - 사용자명 중복 불가 (대소문자 무시)

        새 계정의 잔액은 0이며, 가입 보너스는 별도 요청으로 1회 지급된다.
        """
        with atomic(self.db):
            if self.user_repo.get_model_by_username(request.username) is not None:
                raise ConflictError(
                    f"Username already taken: {request.username}",
                    error_code="USER_001",
                )
            created = self.user_repo.create_user(
                username=request.username,
                password_hash=hash_password(request.password),
            )
            user = UserSchema.model_validate(created)

        logger.info(f"New user registered: {user.username} (id={user.id})")
        return AuthResponse(user=user, token=self._issue_token(user))

    def login(self, request: LoginRequest) -> AuthResponse:
        """사용자명/비밀번호 로그인

        Raises:
            AuthenticationError: 사용자명 또는 비밀번호가 틀린 경우
        """
        user_model = self.user_repo.get_model_by_username(request.username)
        if user_model is None or not verify_password(
            request.password, user_model.password_hash
        ):
            logger.warning(f"Failed login attempt for {request.username}")
            raise AuthenticationError("Invalid username or password")

        user = UserSchema.model_validate(user_model)
        return AuthResponse(user=user, token=self._issue_token(user))

    def get_current_user(self, token: str) -> Optional[UserSchema]:
        """토큰으로 현재 사용자 조회"""
        token_data = decode_access_token(token)
        if not token_data or not token_data.user_id:
            return None
        return self.user_repo.get_by_id(token_data.user_id)

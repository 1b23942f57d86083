import logging

from fastapi import APIRouter, Depends, status

from pcoin.core.auth_middleware import get_current_user
from pcoin.core.dependencies import get_auth_service
from pcoin.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from pcoin.schemas.user import User as UserSchema
from pcoin.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """회원가입

    새 계정은 잔액 0으로 시작하며, 가입 보너스는 /wallet/welcome-bonus 로 받는다.

    HTTP Status:
        201: 가입 성공 (토큰 포함)
        409: 이미 사용 중인 사용자명
        422: 입력 형식 오류
    """
    return auth_service.register(request)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """사용자명/비밀번호 로그인 - 401: 인증 실패"""
    return auth_service.login(request)


@router.get("/me", response_model=UserSchema)
def me(current_user: UserSchema = Depends(get_current_user)) -> UserSchema:
    """현재 로그인한 사용자 정보"""
    return current_user

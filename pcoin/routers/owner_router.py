"""
Owner Router

소유자 전용 API 엔드포인트
- 잔액 절대값 설정/초기화
- 플랫폼 전체 차단/해제
- 프로모션 코드 발급/조회
- 관리자 목록, 관리자 지정/해제
"""

from fastapi import APIRouter, Depends, status

from pcoin.core.auth_middleware import require_owner
from pcoin.core.dependencies import get_admin_service, get_redeem_service
from pcoin.schemas.admin import (
    BanUserRequest,
    SetCoinsRequest,
    UnbanUserRequest,
    UserIdRequest,
)
from pcoin.schemas.ledger import BalanceChangeResponse
from pcoin.schemas.redeem import (
    GenerateCodeRequest,
    RedeemCodeListResponse,
    RedeemCodeResponse,
)
from pcoin.schemas.user import User as UserSchema, UserListResponse
from pcoin.services.admin_service import AdminService
from pcoin.services.redeem_service import RedeemService

router = APIRouter(prefix="/owner", tags=["owner"])


@router.post("/coins/set", response_model=BalanceChangeResponse)
def set_coins(
    request: SetCoinsRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> BalanceChangeResponse:
    """잔액을 절대값으로 설정 (자기 자신 포함)"""
    return admin_service.set_coins(
        current_user, request.user_id, request.amount, request.reason
    )


@router.post("/coins/reset", response_model=BalanceChangeResponse)
def reset_coins(
    request: UserIdRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> BalanceChangeResponse:
    return admin_service.reset_coins(current_user, request.user_id)


@router.post("/users/ban", response_model=UserSchema)
def ban_user(
    request: BanUserRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    """플랫폼 전체 차단 - 자기 자신과 소유자는 차단 불가"""
    return admin_service.ban_user(current_user, request.user_id, request.reason)


@router.post("/users/unban", response_model=UserSchema)
def unban_user(
    request: UnbanUserRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    return admin_service.unban_user(current_user, request.user_id)


@router.post("/codes", response_model=RedeemCodeResponse, status_code=status.HTTP_201_CREATED)
def generate_code(
    request: GenerateCodeRequest,
    current_user: UserSchema = Depends(require_owner),
    redeem_service: RedeemService = Depends(get_redeem_service),
) -> RedeemCodeResponse:
    """프로모션 코드 발급 (code를 생략하면 6자리 무작위 코드)"""
    return redeem_service.generate(
        request.amount, request.usage_limit, current_user.id, code=request.code
    )


@router.get("/codes", response_model=RedeemCodeListResponse)
def list_codes(
    current_user: UserSchema = Depends(require_owner),
    redeem_service: RedeemService = Depends(get_redeem_service),
) -> RedeemCodeListResponse:
    return redeem_service.list_codes()


@router.get("/admins", response_model=UserListResponse)
def list_admins(
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserListResponse:
    return admin_service.list_admins()


@router.post("/admins", response_model=UserSchema)
def promote_admin(
    request: UserIdRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    return admin_service.promote_admin(current_user, request.user_id)


@router.post("/admins/remove", response_model=UserSchema)
def remove_admin(
    request: UserIdRequest,
    current_user: UserSchema = Depends(require_owner),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    return admin_service.remove_admin(current_user, request.user_id)

"""
Admin Router

관리자(admin 이상) 전용 API 엔드포인트
- 코인 지급, 게임별 차단, VIP 설정, 역할 변경, 사용자 삭제
- 사용자/거래/은행 계좌 조회 및 통계

대상 규칙은 AdminService가 검사한다 (자기 자신 수정 불가, 관리자는 다른 관리자 수정 불가).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from pcoin.core.auth_middleware import require_admin
from pcoin.core.dependencies import get_admin_service
from pcoin.schemas.admin import (
    AddCoinsRequest,
    AdminStats,
    GameBanEntry,
    GameBanRequest,
    GameUnbanRequest,
    SetVipRequest,
    UpdateRoleRequest,
)
from pcoin.schemas.auth import BaseResponse
from pcoin.schemas.bank import BankAccountListResponse
from pcoin.schemas.ledger import BalanceChangeResponse, TransactionListResponse
from pcoin.schemas.user import User as UserSchema, UserListResponse
from pcoin.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/coins/add", response_model=BalanceChangeResponse)
def add_coins(
    request: AddCoinsRequest,
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> BalanceChangeResponse:
    """사용자 잔액에 코인 추가 (양수만)"""
    return admin_service.add_coins(
        current_user, request.user_id, request.amount, request.reason
    )


@router.post("/game-bans", response_model=GameBanEntry)
def ban_game(
    request: GameBanRequest,
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> GameBanEntry:
    """특정 게임 플레이 차단"""
    return admin_service.ban_game(
        current_user, request.user_id, request.game_type, request.reason
    )


@router.post("/game-bans/remove", response_model=BaseResponse)
def unban_game(
    request: GameUnbanRequest,
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> BaseResponse:
    admin_service.unban_game(current_user, request.user_id, request.game_type)
    return BaseResponse(
        success=True,
        data={"user_id": request.user_id, "game_type": request.game_type},
    )


@router.get("/game-bans", response_model=List[GameBanEntry])
def list_game_bans(
    user_id: Optional[int] = Query(None, gt=0),
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> List[GameBanEntry]:
    return admin_service.list_game_bans(user_id)


@router.put("/users/{user_id}/vip", response_model=UserSchema)
def set_vip(
    request: SetVipRequest,
    user_id: int = Path(..., gt=0),
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    """VIP 설정/해제 (duration_days가 없으면 무기한)"""
    return admin_service.set_vip(
        current_user, user_id, request.is_vip, request.duration_days
    )


@router.put("/users/role", response_model=UserSchema)
def update_role(
    request: UpdateRoleRequest,
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserSchema:
    """
    역할 변경

    HTTP Status:
        200: 변경 완료
        403: 자기 자신, 상위/동급 대상, 소유자 권한 부여, 소유자가 아닌 관리자 권한 변경
        404: 사용자 없음
    """
    return admin_service.update_role(current_user, request.user_id, request.role)


@router.delete("/users/{user_id}", response_model=BaseResponse)
def delete_user(
    user_id: int = Path(..., gt=0),
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> BaseResponse:
    """사용자 삭제 - 대기 중인 송금은 송신자에게 환불된다"""
    admin_service.delete_user(current_user, user_id)
    return BaseResponse(success=True, data={"deleted_user_id": user_id})


@router.get("/users", response_model=UserListResponse)
def list_users(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> UserListResponse:
    return admin_service.list_users(limit=limit, offset=offset)


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> TransactionListResponse:
    """전체 지갑 거래 내역 (최신순)"""
    return admin_service.list_transactions(limit=limit, offset=offset)


@router.get("/stats", response_model=AdminStats)
def stats(
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStats:
    return admin_service.stats()


@router.get("/bank-accounts", response_model=BankAccountListResponse)
def list_bank_accounts(
    current_user: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> BankAccountListResponse:
    return admin_service.list_bank_accounts()

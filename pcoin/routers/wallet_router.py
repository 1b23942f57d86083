"""
지갑 API 라우터

- GET /wallet/balance: 내 P COIN 잔액
- GET /wallet/transactions: 내 거래 내역 (최신순, 페이징)
- POST /wallet/welcome-bonus: 가입 보너스 수령 (1회)
- GET /wallet/integrity: 잔액-원장 정합성 검증

모든 엔드포인트는 Bearer 토큰 인증 필요
"""

import logging

from fastapi import APIRouter, Depends, Query

from pcoin.core.auth_middleware import get_current_active_user
from pcoin.core.dependencies import get_ledger_service
from pcoin.schemas.ledger import (
    BalanceChangeResponse,
    BalanceResponse,
    IntegrityCheckResponse,
    TransactionListResponse,
)
from pcoin.schemas.user import User as UserSchema
from pcoin.services.ledger_service import LedgerService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("/balance", response_model=BalanceResponse)
def get_my_balance(
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> BalanceResponse:
    """
    내 잔액 조회

    Returns:
        BalanceResponse: 현재 잔액

    HTTP Status:
        200: 성공
        401: 인증 실패
        403: 차단된 계정
    """
    return ledger_service.get_balance(current_user.id)


@router.get("/transactions", response_model=TransactionListResponse)
def get_my_transactions(
    limit: int = Query(50, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> TransactionListResponse:
    """
    내 거래 내역 조회

    사용 예시:
        GET /wallet/transactions?limit=20&offset=0
    """
    return ledger_service.list_transactions(current_user.id, limit=limit, offset=offset)


@router.post("/welcome-bonus", response_model=BalanceChangeResponse)
def claim_welcome_bonus(
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> BalanceChangeResponse:
    """가입 보너스 수령 - 두 번째 요청은 409"""
    return ledger_service.claim_welcome_bonus(current_user.id)


@router.get("/integrity", response_model=IntegrityCheckResponse)
def verify_my_integrity(
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> IntegrityCheckResponse:
    return ledger_service.verify_integrity(current_user.id)

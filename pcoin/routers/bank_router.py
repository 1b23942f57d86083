import logging
from typing import List

from fastapi import APIRouter, Depends, Query

from pcoin.core.auth_middleware import get_current_active_user
from pcoin.core.dependencies import get_bank_service
from pcoin.schemas.bank import (
    BankAccountResponse,
    BankAmountRequest,
    BankOperationResponse,
    BankTransactionEntry,
)
from pcoin.schemas.user import User as UserSchema
from pcoin.services.bank_service import BankService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bank", tags=["bank"])


@router.get("/account", response_model=BankAccountResponse)
def get_account(
    current_user: UserSchema = Depends(get_current_active_user),
    bank_service: BankService = Depends(get_bank_service),
) -> BankAccountResponse:
    """
    내 은행 계좌 조회

    계좌가 없으면 개설하고, 마지막 이자 지급 후 24시간이 지났다면 하루치 이자를 지급한다.
    """
    return bank_service.get_account(current_user.id)


@router.post("/deposit", response_model=BankOperationResponse)
def deposit(
    request: BankAmountRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    bank_service: BankService = Depends(get_bank_service),
) -> BankOperationResponse:
    """지갑 -> 은행 입금 (400: 지갑 잔액 부족)"""
    return bank_service.deposit(current_user.id, request.amount)


@router.post("/withdraw", response_model=BankOperationResponse)
def withdraw(
    request: BankAmountRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    bank_service: BankService = Depends(get_bank_service),
) -> BankOperationResponse:
    """은행 -> 지갑 출금 (400: 은행 잔액 부족)"""
    return bank_service.withdraw(current_user.id, request.amount)


@router.get("/transactions", response_model=List[BankTransactionEntry])
def transactions(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: UserSchema = Depends(get_current_active_user),
    bank_service: BankService = Depends(get_bank_service),
) -> List[BankTransactionEntry]:
    return bank_service.list_transactions(current_user.id, limit=limit, offset=offset)

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class BalanceResponse(BaseModel):
    """지갑 잔액 응답"""

    user_id: int
    balance: Decimal = Field(..., description="현재 P COIN 잔액")


class TransactionEntry(BaseModel):
    """지갑 거래 기록 항목"""

    id: int = Field(..., description="거래 ID")
    user_id: int
    amount: Decimal = Field(..., description="부호 있는 변동량")
    category: str = Field(..., description="거래 카테고리")
    description: str = Field("", description="거래 설명")
    balance_after: Decimal = Field(..., description="거래 후 잔액")
    created_at: Optional[datetime] = Field(None, description="생성 시간")

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    """거래 내역 조회 응답"""

    balance: Optional[Decimal] = Field(None, description="현재 잔액 (사용자 조회 시)")
    entries: List[TransactionEntry]
    total_count: int
    has_next: bool


class BalanceChangeResponse(BaseModel):
    """잔액 변경 결과"""

    success: bool = True
    user_id: int
    amount: Decimal
    category: str
    new_balance: Decimal
    message: str = ""


class IntegrityCheckResponse(BaseModel):
    """잔액-원장 정합성 검증 응답"""

    status: str = Field(..., description="검증 상태 (OK, MISMATCH)")
    user_id: int
    recorded_balance: Decimal = Field(..., description="users 테이블 잔액")
    ledger_balance: Optional[Decimal] = Field(
        None, description="최신 거래의 balance_after"
    )
    entry_count: int
    verified_at: datetime

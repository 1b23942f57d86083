from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from pcoin.models.trade import TradeStatus


class TradeCreateRequest(BaseModel):
    receiver_username: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., gt=0, description="송금 금액")
    message: Optional[str] = Field(None, max_length=500)


class TradeResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    amount: Decimal
    message: Optional[str] = None
    status: TradeStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TradeActionResponse(BaseModel):
    """거래 생성/수락/취소 결과 - 호출자의 새 잔액 포함"""

    success: bool = True
    trade: TradeResponse
    new_balance: Decimal
    message: str


class TradeListResponse(BaseModel):
    trades: List[TradeResponse]
    total_count: int

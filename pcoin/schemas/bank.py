from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class BankAccountResponse(BaseModel):
    id: int
    user_id: int
    balance: Decimal
    interest_rate: Decimal = Field(..., description="연 이율 (0.0500 = 5%)")
    last_interest_calculation: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BankAmountRequest(BaseModel):
    amount: Decimal = Field(..., gt=0)


class BankOperationResponse(BaseModel):
    success: bool = True
    account: BankAccountResponse
    wallet_balance: Decimal
    message: str


class BankTransactionEntry(BaseModel):
    id: int
    account_id: int
    user_id: int
    amount: Decimal
    type: str
    description: str = ""
    balance_after: Decimal
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BankAccountWithOwner(BankAccountResponse):
    """관리자용 - 계좌 소유자 이름 포함"""

    username: str


class BankAccountListResponse(BaseModel):
    accounts: List[BankAccountWithOwner]
    total_balance: Decimal

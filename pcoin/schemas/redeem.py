from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class RedeemRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=16)


class RedeemResponse(BaseModel):
    success: bool = True
    code: str
    amount: Decimal
    new_balance: Decimal
    message: str


class GenerateCodeRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, description="코드당 지급 금액")
    usage_limit: int = Field(1, ge=1, le=100000, description="전체 사용 가능 횟수")
    code: Optional[str] = Field(
        None, min_length=1, max_length=16, description="지정 코드 (없으면 무작위 생성)"
    )


class RedeemCodeResponse(BaseModel):
    id: int
    code: str
    amount: Decimal
    usage_limit: int
    used_count: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RedeemCodeListResponse(BaseModel):
    codes: List[RedeemCodeResponse]
    total_count: int

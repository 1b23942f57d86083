from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from pcoin.models.user import UserRole


class AddCoinsRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., gt=0, description="추가할 금액 (양수만)")
    reason: str = Field("", max_length=255)


class SetCoinsRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    amount: Decimal = Field(..., ge=0, description="새 절대 잔액")
    reason: str = Field("", max_length=255)


class BanUserRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    reason: str = Field("", max_length=500)


class UnbanUserRequest(BaseModel):
    user_id: int = Field(..., gt=0)


class GameBanRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    game_type: str
    reason: str = Field("", max_length=500)


class GameUnbanRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    game_type: str


class GameBanEntry(BaseModel):
    id: int
    user_id: int
    game_type: str
    reason: Optional[str] = None
    banned_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SetVipRequest(BaseModel):
    is_vip: bool = True
    duration_days: Optional[int] = Field(
        None, ge=1, le=3650, description="VIP 기간 (없으면 무기한)"
    )


class UpdateRoleRequest(BaseModel):
    user_id: int = Field(..., gt=0)
    role: UserRole


class UserIdRequest(BaseModel):
    user_id: int = Field(..., gt=0)


class AdminStats(BaseModel):
    total_users: int
    total_coins: Decimal
    total_transactions: int
    total_bank_balance: Decimal
    total_games_played: int

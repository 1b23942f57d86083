from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from pcoin.models.user import UserRole


class User(BaseModel):
    id: int
    username: str
    p_coin_balance: Decimal = Decimal("0.00")
    role: UserRole = UserRole.USER
    has_received_welcome_bonus: bool = False
    is_vip: bool = False
    vip_expires_at: Optional[datetime] = None
    is_banned: bool = False
    banned_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.has_at_least(self.role, UserRole.ADMIN)

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER

    def has_at_least(self, required_role: UserRole) -> bool:
        return UserRole.has_at_least(self.role, required_role)


class UserPublic(BaseModel):
    """다른 사용자에게 노출되는 최소 정보"""

    id: int
    username: str
    is_vip: bool = False

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: List[User]
    total_count: int = Field(..., description="전체 사용자 수")

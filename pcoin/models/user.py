from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pcoin.models.base import BaseModel, BigIntPK, WalletAmount

"""User role enumeration for role-based access control."""


class UserRole(str, Enum):
    """사용자 역할 정의 (user < admin < owner)"""

    USER = "user"  # 일반 사용자
    ADMIN = "admin"  # 관리자
    OWNER = "owner"  # 소유자

    @classmethod
    def get_hierarchy_level(cls, role: Union[str, "UserRole"]) -> int:
        """역할의 계층 레벨을 반환 (숫자가 높을수록 높은 권한)"""
        if isinstance(role, cls):
            role = role.value

        hierarchy = {
            cls.USER.value: 1,
            cls.ADMIN.value: 2,
            cls.OWNER.value: 3,
        }
        return hierarchy.get(str(role), 0)

    @classmethod
    def has_at_least(
        cls, user_role: Union[str, "UserRole"], required_role: Union[str, "UserRole"]
    ) -> bool:
        """사용자 역할이 요구되는 역할 이상인지 확인"""
        return cls.get_hierarchy_level(user_role) >= cls.get_hierarchy_level(
            required_role
        )


class User(BaseModel):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        BigIntPK, primary_key=True, autoincrement=True
    )
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    p_coin_balance: Mapped[Decimal] = mapped_column(
        WalletAmount, default=Decimal("0.00"), nullable=False
    )
    has_received_welcome_bonus: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.USER.value, nullable=False
    )
    is_vip: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    vip_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    # 플랫폼 전체 정지 (게임별 정지는 GameBan)
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    banned_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    banned_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"

    def has_at_least(self, required_role: Union[str, UserRole]) -> bool:
        return UserRole.has_at_least(str(self.role), required_role)

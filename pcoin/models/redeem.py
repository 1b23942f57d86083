from decimal import Decimal
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from pcoin.models.base import BaseModel, BigIntPK, LogModel, WalletAmount


class RedeemCode(BaseModel):
    """프로모션 코드 - used_count는 usage_limit를 넘지 않는다"""

    __tablename__ = "redeem_codes"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(16), unique=True, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(WalletAmount, nullable=False)
    usage_limit: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    used_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_by: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def is_exhausted(self) -> bool:
        return self.used_count >= self.usage_limit


class CodeRedemption(LogModel):
    """(코드, 사용자) 쌍당 최대 1행"""

    __tablename__ = "code_redemptions"
    __table_args__ = (
        UniqueConstraint("code_id", "user_id", name="uq_code_redemption_user"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    code_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("redeem_codes.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(WalletAmount, nullable=False)

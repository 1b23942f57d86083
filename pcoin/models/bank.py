import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from pcoin.models.base import BankAmount, BaseModel, BigIntPK, LogModel


class BankTransactionType(str, enum.Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INTEREST = "interest"


class BankAccount(BaseModel):
    """사용자당 1개의 은행 계좌 (첫 조회 시 생성)"""

    __tablename__ = "bank_accounts"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    balance: Mapped[Decimal] = mapped_column(
        BankAmount, default=Decimal("0.00"), nullable=False
    )
    # 연 이율 (0.0500 = 5%)
    interest_rate: Mapped[Decimal] = mapped_column(
        Numeric(5, 4, asdecimal=True), default=Decimal("0.0500"), nullable=False
    )
    last_interest_calculation: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class BankTransaction(LogModel):
    __tablename__ = "bank_transactions"

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("bank_accounts.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(BankAmount, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    balance_after: Mapped[Decimal] = mapped_column(BankAmount, nullable=False)

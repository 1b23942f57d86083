"""
P COIN 지갑 원장 모델

사용자 지갑 잔액의 모든 변동을 기록하는 거래(transaction) 테이블을 정의합니다.
잔액 필드(users.p_coin_balance)가 기준값이며, 이 테이블은 감사 추적용 기록입니다.

원칙:
1. 불변성(Immutable): 한번 생성된 레코드는 수정/삭제되지 않음 (사용자 삭제 시 cascade 제외)
2. 완전성(Complete): 잔액 변동 1회당 정확히 1개의 레코드
3. 정합성(Integrity): balance_after로 잔액과 원장의 일치 여부를 검증
"""

from decimal import Decimal

from sqlalchemy import BigInteger, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pcoin.models.base import BigIntPK, LogModel, WalletAmount


class TransactionCategory:
    """거래 카테고리 태그"""

    WELCOME_BONUS = "welcome_bonus"
    GAME_WIN = "game_win"
    GAME_LOSS = "game_loss"
    GAME_PUSH = "game_push"
    TRADE_PENDING = "trade_pending"
    TRADE_RECEIVE = "trade_receive"
    TRADE_REFUND = "trade_refund"
    BANK_DEPOSIT = "bank_deposit"
    BANK_WITHDRAWAL = "bank_withdrawal"
    CODE_REDEEM = "code_redeem"
    ADMIN_ADD = "admin_add"
    ADMIN_ADJUSTMENT = "admin_adjustment"
    OWNER_RESET = "owner_reset"


class CoinTransaction(LogModel):
    """지갑 거래 기록 - 잔액 변동 1회당 1행"""

    __tablename__ = "p_coin_transactions"
    __table_args__ = (Index("idx_p_coin_transactions_user", "user_id", "id"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    # 부호 있는 변동량 (set_balance의 경우 새 절대값)
    amount: Mapped[Decimal] = mapped_column(WalletAmount, nullable=False)
    category: Mapped[str] = mapped_column(String(32), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    balance_after: Mapped[Decimal] = mapped_column(WalletAmount, nullable=False)

"""
지갑 원장 리포지토리 - 잔액 변경의 유일한 경로

이 파일은 P COIN 경제의 핵심 규칙을 담당합니다:
1. 잔액 변경은 apply_delta / set_balance 두 경로로만 이루어집니다
2. 변경 전 사용자 행을 잠가(SELECT ... FOR UPDATE) 동일 사용자의 변경을 직렬화합니다
3. 결과 잔액은 0 이상, MAX_BALANCE 이하여야 합니다
4. 잔액 갱신과 거래 기록 추가는 같은 트랜잭션에서 flush 됩니다

커밋은 하지 않습니다. 호출한 서비스의 작업 단위(atomic)가 커밋/롤백을 결정하므로
에스크로 생성처럼 여러 단계를 가진 작업도 전부 반영되거나 전부 취소됩니다.
"""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from pcoin.config import settings
from pcoin.core.exceptions import AmountTooLarge, InsufficientFunds, InvalidAmount
from pcoin.models.ledger import CoinTransaction
from pcoin.models.user import User as UserModel
from pcoin.repositories.base import BaseRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.ledger import TransactionEntry
from pcoin.utils.money import ZERO, Number, quantize

logger = logging.getLogger(__name__)


class LedgerRepository(BaseRepository[CoinTransaction, TransactionEntry]):
    """지갑 잔액 + 거래 기록 리포지토리"""

    def __init__(self, db: Session, max_balance: Optional[Decimal] = None):
        super().__init__(CoinTransaction, TransactionEntry, db)
        self.users = UserRepository(db)
        self.max_balance = max_balance if max_balance is not None else settings.MAX_BALANCE

    def get_balance(self, user_id: int) -> Decimal:
        return self.users.require(user_id).p_coin_balance

    def apply_delta(
        self,
        user_id: int,
        amount: Number,
        category: str,
        description: str = "",
    ) -> Decimal:
        """
        잔액에 부호 있는 변동량을 적용하고 거래를 기록

        Args:
            user_id: 대상 사용자 ID
            amount: 변동량 (양수=입금, 음수=출금, 0=기록만)
            category: 거래 카테고리
            description: 거래 설명

        Returns:
            Decimal: 새 잔액

        Raises:
            UserNotFound: 사용자가 없는 경우
            InvalidAmount: 숫자가 아니거나 무한대인 경우
            InsufficientFunds: 결과 잔액이 음수가 되는 경우
            AmountTooLarge: 결과 잔액이 최대치를 넘는 경우
        """
        delta = quantize(amount)
        user = self.users.lock(user_id)

        current = user.p_coin_balance
        new_balance = current + delta

        if new_balance < ZERO:
            logger.warning(
                f"Rejected delta {delta} for user {user_id} ({category}): balance {current}"
            )
            raise InsufficientFunds(required=-delta, available=current)
        if new_balance > self.max_balance:
            logger.warning(
                f"Rejected delta {delta} for user {user_id} ({category}): exceeds {self.max_balance}"
            )
            raise AmountTooLarge(self.max_balance, details={"balance": str(current)})

        self._write(user, delta, new_balance, category, description)
        return new_balance

    def set_balance(
        self,
        user_id: int,
        amount: Number,
        category: str,
        description: str = "",
    ) -> Decimal:
        """
        잔액을 절대값으로 설정 (관리자 전용 경로)

        변동량 검사를 거치지 않으며, 거래 기록의 amount에는 새 절대값이 남는다.
        """
        new_balance = quantize(amount)
        if new_balance < ZERO:
            raise InvalidAmount("Balance cannot be negative", details={"amount": str(amount)})
        if new_balance > self.max_balance:
            raise AmountTooLarge(self.max_balance)

        user = self.users.lock(user_id)
        self._write(user, new_balance, new_balance, category, description)
        return new_balance

    def _write(
        self,
        user: UserModel,
        logged_amount: Decimal,
        new_balance: Decimal,
        category: str,
        description: str,
    ) -> None:
        previous = user.p_coin_balance
        user.p_coin_balance = new_balance
        self.db.add(
            CoinTransaction(
                user_id=user.id,
                amount=logged_amount,
                category=category,
                description=description,
                balance_after=new_balance,
            )
        )
        self.db.flush()
        logger.info(
            f"Ledger user={user.id} {category} amount={logged_amount} balance {previous} -> {new_balance}"
        )

    def list_for_user(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> List[TransactionEntry]:
        """사용자 거래 내역 (최신순)"""
        stmt = (
            select(CoinTransaction)
            .where(CoinTransaction.user_id == user_id)
            .order_by(desc(CoinTransaction.id))
            .limit(limit)
            .offset(offset)
        )
        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))

    def list_all(self, limit: int = 100, offset: int = 0) -> List[TransactionEntry]:
        """전체 거래 내역 (관리자용, 최신순)"""
        return self.find_all(
            order_by="id", descending=True, limit=limit, offset=offset
        )

    def count_for_user(self, user_id: int) -> int:
        return self.count({"user_id": user_id})

    def latest_for_user(self, user_id: int) -> Optional[CoinTransaction]:
        stmt = (
            select(CoinTransaction)
            .where(CoinTransaction.user_id == user_id)
            .order_by(desc(CoinTransaction.id))
            .limit(1)
        )
        return self.db.execute(stmt).scalars().first()

    def total_count(self) -> int:
        return int(self.db.execute(select(func.count(CoinTransaction.id))).scalar_one())

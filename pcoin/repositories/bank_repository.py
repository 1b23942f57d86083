from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from pcoin.models.bank import BankAccount, BankTransaction
from pcoin.models.user import User
from pcoin.repositories.base import BaseRepository
from pcoin.schemas.bank import BankAccountResponse, BankTransactionEntry


class BankRepository(BaseRepository[BankAccount, BankAccountResponse]):
    """은행 계좌 / 은행 거래 기록 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(BankAccount, BankAccountResponse, db)

    def get_or_create_locked(
        self, user_id: int, default_rate: Decimal
    ) -> BankAccount:
        """사용자 계좌를 잠금 상태로 조회, 없으면 생성 (지연 생성)"""
        stmt = (
            select(BankAccount)
            .where(BankAccount.user_id == user_id)
            .with_for_update()
        )
        account = self.db.execute(stmt).scalars().first()
        if account is None:
            account = self.create(
                user_id=user_id,
                balance=Decimal("0.00"),
                interest_rate=default_rate,
                last_interest_calculation=datetime.now(timezone.utc),
            )
        return account

    def add_transaction(
        self,
        account: BankAccount,
        amount: Decimal,
        type_: str,
        description: str,
    ) -> BankTransaction:
        entry = BankTransaction(
            account_id=account.id,
            user_id=account.user_id,
            amount=amount,
            type=type_,
            description=description,
            balance_after=account.balance,
        )
        return self.add(entry)

    def list_transactions(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> List[BankTransactionEntry]:
        stmt = (
            select(BankTransaction)
            .where(BankTransaction.user_id == user_id)
            .order_by(desc(BankTransaction.id))
            .limit(limit)
            .offset(offset)
        )
        rows = self.db.execute(stmt).scalars().all()
        return [BankTransactionEntry.model_validate(r) for r in rows]

    def list_with_owner(self) -> List[Tuple[BankAccount, str]]:
        stmt = (
            select(BankAccount, User.username)
            .join(User, User.id == BankAccount.user_id)
            .order_by(desc(BankAccount.balance))
        )
        return [(account, username) for account, username in self.db.execute(stmt).all()]

    def total_balance(self) -> Decimal:
        total = self.db.execute(select(func.sum(BankAccount.balance))).scalar()
        return Decimal(total or 0).quantize(Decimal("0.01"))

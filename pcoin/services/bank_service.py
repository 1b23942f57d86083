import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import InsufficientFunds
from pcoin.database.session import atomic
from pcoin.models.bank import BankAccount, BankTransactionType
from pcoin.models.ledger import TransactionCategory
from pcoin.repositories.bank_repository import BankRepository
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.bank import (
    BankAccountListResponse,
    BankAccountResponse,
    BankAccountWithOwner,
    BankOperationResponse,
    BankTransactionEntry,
)
from pcoin.utils.money import ZERO, Number, positive_amount, quantize

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal(365)


def _as_utc(value: datetime) -> datetime:
    # sqlite는 tzinfo 없이 돌려준다
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def daily_interest(balance: Decimal, annual_rate: Decimal) -> Decimal:
    """하루치 이자 = 잔액 × (연이율 / 365), 소수점 2자리 절삭"""
    return quantize(balance * annual_rate / DAYS_PER_YEAR)


class BankService:
    """은행 계좌 서비스 - 예금, 출금, 이자 지급

    이자는 백그라운드 스케줄러 없이 계좌 조회 시점에 계산한다.
    마지막 계산 이후 24시간 이상 지났으면 하루치 이자를 1회 지급한다
    (오래 방치된 계좌도 밀린 일수만큼 소급하지 않는다).
    """

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.bank_repo = BankRepository(db)
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)
        self.user_repo = UserRepository(db)
        self.interest_interval = timedelta(hours=settings.BANK_INTEREST_INTERVAL_HOURS)

    def _open(self, user_id: int) -> BankAccount:
        self.user_repo.require(user_id)
        return self.bank_repo.get_or_create_locked(
            user_id, self.settings.BANK_DEFAULT_INTEREST_RATE
        )

    def _accrue(self, account: BankAccount, now: datetime) -> Decimal:
        """잠금된 계좌에 이자 적용, 지급액 반환 (창 안이면 0)"""
        last = _as_utc(account.last_interest_calculation)
        if now - last < self.interest_interval:
            return ZERO

        interest = daily_interest(account.balance, account.interest_rate)
        if interest <= ZERO:
            return ZERO

        account.balance = account.balance + interest
        account.last_interest_calculation = now
        rate_pct = (account.interest_rate * 100).normalize()
        self.bank_repo.add_transaction(
            account,
            interest,
            BankTransactionType.INTEREST.value,
            f"Daily interest earned ({rate_pct}% APY)",
        )
        logger.info(
            f"Interest {interest} credited to bank account {account.id} (user {account.user_id})"
        )
        return interest

    def accrue_interest(self, user_id: int, now: Optional[datetime] = None) -> Decimal:
        """이자 계산만 수행 (24시간 창 안에서 반복 호출하면 아무 일도 없음)"""
        now = now or datetime.now(timezone.utc)
        with atomic(self.db):
            account = self._open(user_id)
            return self._accrue(account, now)

    def get_account(
        self, user_id: int, now: Optional[datetime] = None
    ) -> BankAccountResponse:
        """계좌 조회 - 부수효과로 이자를 지급"""
        now = now or datetime.now(timezone.utc)
        with atomic(self.db):
            account = self._open(user_id)
            self._accrue(account, now)
        return BankAccountResponse.model_validate(account)

    def deposit(self, user_id: int, amount: Number) -> BankOperationResponse:
        """지갑 -> 은행 입금

        Raises:
            InvalidAmount: 금액이 0 이하
            InsufficientFunds: 지갑 잔액 부족
        """
        value = positive_amount(amount)
        with atomic(self.db):
            account = self._open(user_id)
            wallet_balance = self.ledger_repo.apply_delta(
                user_id,
                -value,
                TransactionCategory.BANK_DEPOSIT,
                f"Deposit to bank account #{account.id}",
            )
            account.balance = account.balance + value
            self.bank_repo.add_transaction(
                account, value, BankTransactionType.DEPOSIT.value, "Deposit from wallet"
            )

        logger.info(f"User {user_id} deposited {value} to bank")
        return BankOperationResponse(
            account=BankAccountResponse.model_validate(account),
            wallet_balance=wallet_balance,
            message=f"Deposited {value} P COIN",
        )

    def withdraw(self, user_id: int, amount: Number) -> BankOperationResponse:
        """은행 -> 지갑 출금

        Raises:
            InvalidAmount: 금액이 0 이하
            InsufficientFunds: 은행 잔액 부족
            AmountTooLarge: 지갑 최대 잔액 초과
        """
        value = positive_amount(amount)
        with atomic(self.db):
            account = self._open(user_id)
            if account.balance < value:
                raise InsufficientFunds(required=value, available=account.balance)
            account.balance = account.balance - value
            self.bank_repo.add_transaction(
                account,
                -value,
                BankTransactionType.WITHDRAWAL.value,
                "Withdrawal to wallet",
            )
            wallet_balance = self.ledger_repo.apply_delta(
                user_id,
                value,
                TransactionCategory.BANK_WITHDRAWAL,
                f"Withdrawal from bank account #{account.id}",
            )

        logger.info(f"User {user_id} withdrew {value} from bank")
        return BankOperationResponse(
            account=BankAccountResponse.model_validate(account),
            wallet_balance=wallet_balance,
            message=f"Withdrew {value} P COIN",
        )

    def list_transactions(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> List[BankTransactionEntry]:
        return self.bank_repo.list_transactions(user_id, limit=min(limit, 100), offset=offset)

    def list_all_accounts(self) -> BankAccountListResponse:
        """전체 계좌 목록 (관리자용)"""
        rows = self.bank_repo.list_with_owner()
        accounts = [
            BankAccountWithOwner(
                **BankAccountResponse.model_validate(account).model_dump(),
                username=username,
            )
            for account, username in rows
        ]
        return BankAccountListResponse(
            accounts=accounts, total_balance=self.bank_repo.total_balance()
        )

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import ConflictError
from pcoin.database.session import atomic
from pcoin.models.ledger import TransactionCategory
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.ledger import (
    BalanceChangeResponse,
    BalanceResponse,
    IntegrityCheckResponse,
    TransactionListResponse,
)

logger = logging.getLogger(__name__)


class LedgerService:
    """지갑 잔액/거래 내역 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.settings = settings
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)
        self.user_repo = UserRepository(db)

    def get_balance(self, user_id: int) -> BalanceResponse:
        """사용자 지갑 잔액 조회

        Args:
            user_id: 사용자 ID

        Returns:
            BalanceResponse: 잔액 정보
        """
        balance = self.ledger_repo.get_balance(user_id)
        return BalanceResponse(user_id=user_id, balance=balance)

    def list_transactions(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> TransactionListResponse:
        """사용자 거래 내역 조회

        Args:
            user_id: 사용자 ID
            limit: 페이지 크기 (최대 100)
            offset: 오프셋
        """
        limit = min(limit, 100)
        balance = self.ledger_repo.get_balance(user_id)
        entries = self.ledger_repo.list_for_user(user_id, limit=limit, offset=offset)
        total = self.ledger_repo.count_for_user(user_id)
        return TransactionListResponse(
            balance=balance,
            entries=entries,
            total_count=total,
            has_next=offset + limit < total,
        )

    def claim_welcome_bonus(self, user_id: int) -> BalanceChangeResponse:
        """가입 보너스 지급 (사용자당 1회)"""
        bonus = self.settings.WELCOME_BONUS
        with atomic(self.db):
            user = self.user_repo.lock(user_id)
            if user.has_received_welcome_bonus:
                raise ConflictError(
                    "Welcome bonus already claimed", error_code="BONUS_001"
                )
            new_balance = self.ledger_repo.apply_delta(
                user_id,
                bonus,
                TransactionCategory.WELCOME_BONUS,
                "Welcome bonus for new users",
            )
            user.has_received_welcome_bonus = True

        logger.info(f"Welcome bonus {bonus} granted to user {user_id}")
        return BalanceChangeResponse(
            user_id=user_id,
            amount=bonus,
            category=TransactionCategory.WELCOME_BONUS,
            new_balance=new_balance,
            message=f"Welcome bonus of {bonus} P COIN claimed",
        )

    def verify_integrity(self, user_id: int) -> IntegrityCheckResponse:
        """
        잔액-원장 정합성 검증

        users 테이블 잔액과 가장 최근 거래의 balance_after를 비교한다.
        거래 기록이 없으면 잔액이 0이어야 OK.
        """
        recorded = self.ledger_repo.get_balance(user_id)
        latest = self.ledger_repo.latest_for_user(user_id)
        ledger_balance = latest.balance_after if latest is not None else None
        expected = ledger_balance if ledger_balance is not None else Decimal("0.00")
        status = "OK" if recorded == expected else "MISMATCH"
        if status != "OK":
            logger.warning(
                f"Ledger mismatch for user {user_id}: balance={recorded} ledger={ledger_balance}"
            )
        return IntegrityCheckResponse(
            status=status,
            user_id=user_id,
            recorded_balance=recorded,
            ledger_balance=ledger_balance,
            entry_count=self.ledger_repo.count_for_user(user_id),
            verified_at=datetime.now(timezone.utc),
        )

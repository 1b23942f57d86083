import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from pcoin.config import Settings, settings as default_settings
from pcoin.core.exceptions import (
    AlreadyInTerminalState,
    AuthorizationError,
    UserNotFound,
    ValidationError,
)
from pcoin.database.session import atomic
from pcoin.models.ledger import TransactionCategory
from pcoin.models.trade import Trade as TradeModel, TradeStatus
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.repositories.trade_repository import TradeRepository
from pcoin.repositories.user_repository import UserRepository
from pcoin.schemas.trade import (
    TradeActionResponse,
    TradeCreateRequest,
    TradeListResponse,
    TradeResponse,
)
from pcoin.utils.money import Number, positive_amount

logger = logging.getLogger(__name__)


class TradeService:
    """P2P 에스크로 송금 서비스

    상태 전이: pending -> completed | pending -> cancelled (종료 상태에서는 전이 없음)
    생성 시 송신자에게서 차감된 금액은 수락 시 수신자에게, 취소 시 송신자에게 돌아간다.
    """

    def __init__(self, db: Session, settings: Settings = default_settings):
        self.db = db
        self.trade_repo = TradeRepository(db)
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db, max_balance=settings.MAX_BALANCE)

    def create_trade(
        self, sender_id: int, request: TradeCreateRequest
    ) -> TradeActionResponse:
        receiver = self.user_repo.get_model_by_username(request.receiver_username)
        if receiver is None:
            raise UserNotFound(request.receiver_username)
        return self.create(sender_id, receiver.id, request.amount, request.message)

    def create(
        self,
        sender_id: int,
        receiver_id: int,
        amount: Number,
        message: Optional[str] = None,
    ) -> TradeActionResponse:
        """송금 생성 - 송신자 차감과 거래 행 생성을 하나의 작업 단위로 처리

        Raises:
            ValidationError: 자기 자신에게 송금하는 경우
            InvalidAmount: 금액이 0 이하인 경우
            InsufficientFunds: 송신자 잔액 부족
        """
        if sender_id == receiver_id:
            raise ValidationError("Cannot send coins to yourself", error_code="TRADE_002")
        value = positive_amount(amount)

        with atomic(self.db):
            receiver = self.user_repo.require(receiver_id)
            new_balance = self.ledger_repo.apply_delta(
                sender_id,
                -value,
                TransactionCategory.TRADE_PENDING,
                f"Trade to {receiver.username} (pending)",
            )
            trade = self.trade_repo.create_pending(sender_id, receiver_id, value, message)

        logger.info(
            f"Trade {trade.id} created: {sender_id} -> {receiver_id} amount={value}"
        )
        return self._response(trade, new_balance, f"Sent {value} P COIN to {receiver.username}")

    def accept(self, trade_id: int, caller_id: int) -> TradeActionResponse:
        """수신자가 거래를 수락 - 보관 중인 금액을 수신자에게 지급"""
        with atomic(self.db):
            trade = self.trade_repo.lock(trade_id)
            if caller_id != trade.receiver_id:
                raise AuthorizationError("Only the receiver can accept this trade")
            self._ensure_pending(trade)
            new_balance = self.ledger_repo.apply_delta(
                trade.receiver_id,
                trade.amount,
                TransactionCategory.TRADE_RECEIVE,
                f"Trade #{trade.id} received from user {trade.sender_id}",
            )
            trade.status = TradeStatus.COMPLETED.value
            trade.completed_at = datetime.now(timezone.utc)
            self.db.flush()

        logger.info(f"Trade {trade_id} accepted by user {caller_id}")
        return self._response(trade, new_balance, "Trade accepted")

    def cancel(self, trade_id: int, caller_id: int) -> TradeActionResponse:
        """송신자 또는 수신자가 거래를 취소 - 송신자에게 환불"""
        with atomic(self.db):
            trade = self.trade_repo.lock(trade_id)
            if caller_id not in (trade.sender_id, trade.receiver_id):
                raise AuthorizationError("Not a party to this trade")
            self._ensure_pending(trade)
            sender_balance = self._refund(trade)
            caller_balance = (
                sender_balance
                if caller_id == trade.sender_id
                else self.ledger_repo.get_balance(caller_id)
            )

        logger.info(f"Trade {trade_id} cancelled by user {caller_id}")
        return self._response(trade, caller_balance, "Trade cancelled")

    def cancel_pending_for_user(self, user_id: int) -> int:
        """사용자가 관련된 모든 대기 거래를 환불 처리 (사용자 삭제 전 호출, 커밋은 호출자)"""
        trades = self.trade_repo.pending_involving(user_id)
        for trade in trades:
            if trade.sender_id == user_id:
                # 삭제되는 송신자의 보관금은 함께 소멸
                trade.status = TradeStatus.CANCELLED.value
                trade.completed_at = datetime.now(timezone.utc)
            else:
                self._refund(trade)
        self.db.flush()
        return len(trades)

    def list_sent(self, user_id: int) -> TradeListResponse:
        trades = self.trade_repo.list_sent(user_id)
        return TradeListResponse(trades=trades, total_count=len(trades))

    def list_received(self, user_id: int) -> TradeListResponse:
        trades = self.trade_repo.list_received(user_id)
        return TradeListResponse(trades=trades, total_count=len(trades))

    def _refund(self, trade: TradeModel):
        new_balance = self.ledger_repo.apply_delta(
            trade.sender_id,
            trade.amount,
            TransactionCategory.TRADE_REFUND,
            f"Trade #{trade.id} refunded",
        )
        trade.status = TradeStatus.CANCELLED.value
        trade.completed_at = datetime.now(timezone.utc)
        self.db.flush()
        return new_balance

    @staticmethod
    def _ensure_pending(trade: TradeModel) -> None:
        if not trade.is_pending:
            raise AlreadyInTerminalState(
                f"Trade is already {trade.status}",
                details={"trade_id": trade.id, "status": trade.status},
                error_code="TRADE_003",
            )

    @staticmethod
    def _response(trade: TradeModel, new_balance, message: str) -> TradeActionResponse:
        return TradeActionResponse(
            trade=TradeResponse.model_validate(trade),
            new_balance=new_balance,
            message=message,
        )

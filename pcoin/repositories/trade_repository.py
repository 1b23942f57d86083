from decimal import Decimal
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from pcoin.core.exceptions import TradeNotFound
from pcoin.models.trade import Trade as TradeModel, TradeStatus
from pcoin.repositories.base import BaseRepository
from pcoin.schemas.trade import TradeResponse


class TradeRepository(BaseRepository[TradeModel, TradeResponse]):
    """에스크로 거래 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(TradeModel, TradeResponse, db)

    def create_pending(
        self, sender_id: int, receiver_id: int, amount: Decimal, message: Optional[str]
    ) -> TradeModel:
        return self.create(
            sender_id=sender_id,
            receiver_id=receiver_id,
            amount=amount,
            message=message,
            status=TradeStatus.PENDING.value,
        )

    def lock(self, trade_id: int) -> TradeModel:
        trade = self.get_for_update(trade_id)
        if trade is None:
            raise TradeNotFound(trade_id)
        return trade

    def list_sent(self, user_id: int, limit: int = 50) -> List[TradeResponse]:
        stmt = (
            select(TradeModel)
            .where(TradeModel.sender_id == user_id)
            .order_by(desc(TradeModel.id))
            .limit(limit)
        )
        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))

    def list_received(self, user_id: int, limit: int = 50) -> List[TradeResponse]:
        stmt = (
            select(TradeModel)
            .where(TradeModel.receiver_id == user_id)
            .order_by(desc(TradeModel.id))
            .limit(limit)
        )
        return self._to_schemas(list(self.db.execute(stmt).scalars().all()))

    def pending_involving(self, user_id: int) -> List[TradeModel]:
        stmt = (
            select(TradeModel)
            .where(
                (TradeModel.status == TradeStatus.PENDING.value)
                & ((TradeModel.sender_id == user_id) | (TradeModel.receiver_id == user_id))
            )
            .with_for_update()
        )
        return list(self.db.execute(stmt).scalars().all())

import enum
from decimal import Decimal
from typing import Optional

from sqlalchemy import JSON, BigInteger, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from pcoin.models.base import BaseModel, BigIntPK, LogModel, WalletAmount


class GameResult(str, enum.Enum):
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


class GameSession(LogModel):
    """게임 1회 플레이 기록 (통계/리포팅 전용)"""

    __tablename__ = "game_sessions"
    __table_args__ = (
        Index("idx_game_sessions_user", "user_id", "id"),
        Index("idx_game_sessions_type", "game_type"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    game_type: Mapped[str] = mapped_column(String(32), nullable=False)
    bet_amount: Mapped[Decimal] = mapped_column(WalletAmount, nullable=False)
    win_amount: Mapped[Decimal] = mapped_column(
        WalletAmount, default=Decimal("0.00"), nullable=False
    )
    multiplier: Mapped[Decimal] = mapped_column(
        Numeric(12, 4, asdecimal=True), default=Decimal("0"), nullable=False
    )
    # postgres에서는 jsonb, 그 외(sqlite)는 JSON
    game_data: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )
    result: Mapped[str] = mapped_column(String(8), nullable=False)


class GameBan(BaseModel):
    """게임별 차단 목록 - 행이 있으면 해당 게임 플레이 불가"""

    __tablename__ = "game_bans"
    __table_args__ = (
        UniqueConstraint("user_id", "game_type", name="uq_game_ban_user_game"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    game_type: Mapped[str] = mapped_column(String(32), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    banned_by: Mapped[Optional[int]] = mapped_column(
        BigInteger, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

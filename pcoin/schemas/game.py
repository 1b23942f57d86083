from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from pcoin.models.game import GameResult


class PlayRequest(BaseModel):
    """게임 플레이 요청"""

    game_type: str = Field(..., description="게임 종류 (roulette, slide, plinko, ...)")
    bet_amount: Decimal = Field(..., gt=0, description="베팅 금액")
    game_params: Dict[str, Any] = Field(
        default_factory=dict, description="게임별 파라미터"
    )


class PlayResponse(BaseModel):
    """게임 플레이 결과"""

    success: bool = True
    session_id: int
    game_type: str
    bet_amount: Decimal
    win_amount: Decimal
    multiplier: Decimal
    result: GameResult
    new_balance: Decimal
    outcome: Dict[str, Any] = Field(..., description="게임별 결과 상세")


class GameSessionEntry(BaseModel):
    id: int
    user_id: int
    game_type: str
    bet_amount: Decimal
    win_amount: Decimal
    multiplier: Decimal
    result: GameResult
    game_data: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GameStats(BaseModel):
    """게임 통계 (세션 로그에서 파생)"""

    user_id: int
    total_wins: int = 0
    total_winnings: Decimal = Decimal("0.00")
    games_played: int = 0
    biggest_win: Decimal = Decimal("0.00")


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str
    total_winnings: Decimal
    games_played: int
    biggest_win: Decimal
    win_rate: float = Field(..., description="승률 (0~1)")


class GameInfo(BaseModel):
    game_type: str
    name: str
    description: str
    params: Dict[str, str] = Field(default_factory=dict)


class JackpotResponse(BaseModel):
    amount: Decimal
    seed: Decimal

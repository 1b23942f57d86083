import random
from decimal import Decimal
from typing import Any, Dict

from pcoin.games.base import GameEngine, GameOutcome, require_int

CUP_COUNT = 3
CUP_PAYOUT = Decimal(3)


class CupsEngine(GameEngine):
    """세 컵 중 공이 든 컵 맞히기 - 적중 시 3배"""

    game_type = "cups"
    name = "Cups"
    description = "Find the ball hidden under one of three cups."
    params_help = {"selected_cup": "0 | 1 | 2"}

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"selected_cup": require_int(params or {}, "selected_cup", 0, CUP_COUNT - 1)}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return CUP_PAYOUT

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        ball_position = rng.randrange(CUP_COUNT)
        won = ball_position == params["selected_cup"]
        return GameOutcome(
            multiplier=CUP_PAYOUT if won else Decimal(0),
            outcome={
                "selected_cup": params["selected_cup"],
                "ball_position": ball_position,
                "won": won,
            },
        )

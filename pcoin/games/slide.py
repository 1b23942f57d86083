import random
from decimal import Decimal
from typing import Any, Dict

from pcoin.games.base import GameEngine, GameOutcome, require_choice, require_int

MAX_MULTIPLIER = Decimal(20)
FIFTY = Decimal(50)

# 기대값이 1 미만이 되는 기준값 범위 (X는 0~100 균등)
HIGHER_RANGE = (29, 99)
LOWER_RANGE = (1, 71)


def slide_multiplier(target: int, direction: str) -> Decimal:
    if direction == "higher":
        if target >= 95:
            return MAX_MULTIPLIER
        return Decimal(100 - target) / FIFTY
    if target <= 5:
        return MAX_MULTIPLIER
    return Decimal(target) / FIFTY


class SlideEngine(GameEngine):
    """0~100 사이 숫자가 기준값보다 높을지/낮을지 맞히는 게임"""

    game_type = "slide"
    name = "Slide"
    description = "Guess whether the roll lands above or below your target."
    params_help = {
        "target": "higher: 29..99, lower: 1..71",
        "direction": "higher | lower",
    }

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        direction = require_choice(params or {}, "direction", ("higher", "lower"))
        low, high = HIGHER_RANGE if direction == "higher" else LOWER_RANGE
        target = require_int(params, "target", low, high)
        return {"target": target, "direction": direction}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return slide_multiplier(params["target"], params["direction"])

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        target, direction = params["target"], params["direction"]
        rolled = rng.randint(0, 100)
        won = rolled > target if direction == "higher" else rolled < target
        potential = slide_multiplier(target, direction)
        return GameOutcome(
            multiplier=potential if won else Decimal(0),
            outcome={
                "rolled": rolled,
                "target": target,
                "direction": direction,
                "potential_multiplier": str(potential),
                "won": won,
            },
        )

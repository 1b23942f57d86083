import random
from decimal import Decimal
from math import comb
from typing import Any, Dict

from pcoin.core.exceptions import InvalidGameParams
from pcoin.games.base import GameEngine, GameOutcome, require_int, require_int_list

GRID_SIZE = 25
GROWTH = Decimal("1.2")
MINE_BONUS = Decimal("0.1")
HOUSE_EDGE = Decimal("0.97")


def mines_multiplier(mine_count: int, gems: int) -> Decimal:
    """안전한 칸 g개를 연속으로 찾았을 때의 배수

    1.2^g * (1 + 0.1m) 공식을 쓰되, 공정 배수의 97%를 넘지 않도록 제한한다.
    """
    if gems == 0:
        return Decimal(1)
    formula = GROWTH ** gems * (1 + MINE_BONUS * mine_count)
    fair = Decimal(comb(GRID_SIZE, gems)) / Decimal(comb(GRID_SIZE - mine_count, gems))
    return min(formula, HOUSE_EDGE * fair)


class MinesEngine(GameEngine):
    """5x5 지뢰찾기 - 선택한 칸을 순서대로 열고 지뢰를 밟으면 전액 손실"""

    game_type = "mines"
    name = "Mines"
    description = "Reveal tiles on a 5x5 grid without hitting a mine."
    params_help = {
        "mine_count": "1..24",
        "picks": "distinct cells 0..24 revealed in order (at most 25 - mine_count)",
    }

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        params = params or {}
        mine_count = require_int(params, "mine_count", 1, GRID_SIZE - 1)
        picks = require_int_list(params, "picks", 0, GRID_SIZE - 1, 1, GRID_SIZE)
        if len(picks) > GRID_SIZE - mine_count:
            raise InvalidGameParams(
                f"At most {GRID_SIZE - mine_count} picks with {mine_count} mines",
                details={"param": "picks", "count": len(picks)},
            )
        return {"mine_count": mine_count, "picks": picks}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return mines_multiplier(params["mine_count"], len(params["picks"]))

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        mine_count, picks = params["mine_count"], params["picks"]
        mines = sorted(rng.sample(range(GRID_SIZE), mine_count))
        mine_set = set(mines)

        revealed = []
        for cell in picks:
            revealed.append(cell)
            if cell in mine_set:
                return self.lose({
                    "mine_count": mine_count,
                    "picks": picks,
                    "revealed": revealed,
                    "mines": mines,
                    "hit_mine": cell,
                })

        return GameOutcome(
            multiplier=mines_multiplier(mine_count, len(picks)),
            outcome={
                "mine_count": mine_count,
                "picks": picks,
                "revealed": revealed,
                "mines": mines,
                "hit_mine": None,
            },
        )

import random
from decimal import Decimal
from typing import Any, Dict, List

from pcoin.games.base import GameEngine, GameOutcome, require_choice


def _table(*values: str) -> List[Decimal]:
    return [Decimal(v) for v in values]


# 버킷 배수표 - 좌우 대칭, 가장자리일수록 높음. 행 수 = len(table) - 1
PLINKO_TABLES: Dict[str, List[Decimal]] = {
    "easy": _table("1.8", "1.1", "1", "0.5", "0.3", "0.5", "1", "1.1", "1.8"),
    "normal": _table(
        "2.5", "1.2", "1", "0.6", "0.4", "0.3", "0.2",
        "0.3", "0.4", "0.6", "1", "1.2", "2.5",
    ),
    "hard": _table(
        "3.5", "1.2", "1", "0.5", "0.3", "0.2", "0.2", "0.2", "0.2",
        "0.2", "0.2", "0.2", "0.3", "0.5", "1", "1.2", "3.5",
    ),
}


def start_position(rows: int) -> int:
    return rows // 2


def step(position: int, index: int, right: bool) -> int:
    """index번째 행에서 한 칸 이동

    오른쪽 이동은 index + 2를 넘지 못하고, 왼쪽 이동은 0에서 멈춘다.
    """
    if right:
        return min(position + 1, index + 2)
    return max(position - 1, 0)


class PlinkoEngine(GameEngine):
    """공이 핀을 지날 때마다 좌/우로 한 칸씩 이동

    rows // 2 에서 출발해 행마다 ±1 이동하고, 마지막 위치가 버킷 번호가 된다.
    표 범위를 넘으면 마지막 버킷으로 떨어진다.
    """

    game_type = "plinko"
    name = "Plinko"
    description = "Drop a ball through the pegs and land in a multiplier bucket."
    params_help = {"difficulty": "easy | normal | hard"}

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        difficulty = require_choice(params or {}, "difficulty", PLINKO_TABLES.keys(), default="normal")
        return {"difficulty": difficulty}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return max(PLINKO_TABLES[params["difficulty"]])

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        table = PLINKO_TABLES[params["difficulty"]]
        rows = len(table) - 1
        position = start_position(rows)
        path = [position]
        for index in range(rows):
            position = step(position, index, rng.random() < 0.5)
            path.append(position)
        bucket = min(position, len(table) - 1)
        return GameOutcome(
            multiplier=table[bucket],
            outcome={
                "difficulty": params["difficulty"],
                "rows": rows,
                "path": path,
                "bucket": bucket,
                "bucket_multiplier": str(table[bucket]),
            },
        )

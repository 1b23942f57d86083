import random
from decimal import ROUND_DOWN, Decimal
from typing import Any, Dict

from pcoin.games.base import GameEngine, GameOutcome, require_choice, require_int_list

LEVELS = 8
HOUSE_EDGE = Decimal("0.97")

# 난이도 -> (층당 타일 수, 안전 타일 수)
DIFFICULTIES = {
    "easy": (4, 3),
    "medium": (3, 2),
    "hard": (2, 1),
    "expert": (3, 1),
}


def towers_multiplier(difficulty: str, levels_cleared: int) -> Decimal:
    tiles, safe = DIFFICULTIES[difficulty]
    raw = HOUSE_EDGE * (Decimal(tiles) / Decimal(safe)) ** levels_cleared
    return raw.quantize(Decimal("0.01"), rounding=ROUND_DOWN)


class TowersEngine(GameEngine):
    """층마다 타일 하나를 골라 올라가는 게임, 함정을 밟으면 전액 손실"""

    game_type = "towers"
    name = "Towers"
    description = "Climb up to eight levels by choosing a safe tile on each."
    params_help = {
        "difficulty": "easy | medium | hard | expert",
        "picks": "one tile index per level, bottom first (1..8 levels)",
    }

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        params = params or {}
        difficulty = require_choice(params, "difficulty", DIFFICULTIES.keys())
        tiles, _ = DIFFICULTIES[difficulty]
        picks = require_int_list(params, "picks", 0, tiles - 1, 1, LEVELS, distinct=False)
        return {"difficulty": difficulty, "picks": picks}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return towers_multiplier(params["difficulty"], len(params["picks"]))

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        difficulty, picks = params["difficulty"], params["picks"]
        tiles, safe = DIFFICULTIES[difficulty]

        safe_tiles = []
        for level, pick in enumerate(picks):
            level_safe = sorted(rng.sample(range(tiles), safe))
            safe_tiles.append(level_safe)
            if pick not in level_safe:
                return self.lose({
                    "difficulty": difficulty,
                    "picks": picks,
                    "safe_tiles": safe_tiles,
                    "levels_cleared": level,
                    "trapped_at": level,
                })

        return GameOutcome(
            multiplier=towers_multiplier(difficulty, len(picks)),
            outcome={
                "difficulty": difficulty,
                "picks": picks,
                "safe_tiles": safe_tiles,
                "levels_cleared": len(picks),
                "trapped_at": None,
            },
        )

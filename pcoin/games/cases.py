import random
from decimal import Decimal
from typing import Any, Dict

from pcoin.core.exceptions import InvalidGameParams
from pcoin.games.base import GameEngine, GameOutcome, require_choice
from pcoin.models.game import GameResult

CASE_MULTIPLIERS = {"bronze": 1, "silver": 2, "gold": 3, "diamond": 5}
BASE_COST = Decimal(16)

# (기본 보상, 천분율 가중치) - 합계 1000
REWARD_TIERS = (
    (Decimal(5), 500),
    (Decimal(10), 250),
    (Decimal(20), 150),
    (Decimal(50), 70),
    (Decimal(100), 25),
    (Decimal(200), 5),
)


def case_cost(case_type: str) -> Decimal:
    return BASE_COST * CASE_MULTIPLIERS[case_type]


def draw_tier(roll: int) -> Decimal:
    """0..999 사이 값을 보상 등급으로 변환"""
    cumulative = 0
    for reward, weight in REWARD_TIERS:
        cumulative += weight
        if roll < cumulative:
            return reward
    return REWARD_TIERS[-1][0]


class CasesEngine(GameEngine):
    """케이스 개봉 - 베팅액은 케이스 가격과 같아야 하며 보상은 항상 지급"""

    game_type = "cases"
    name = "Cases"
    description = "Open a case for a weighted random reward."
    params_help = {"case_type": "bronze (16) | silver (32) | gold (48) | diamond (80)"}

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        case_type = require_choice(params or {}, "case_type", CASE_MULTIPLIERS.keys())
        cost = case_cost(case_type)
        if bet != cost:
            raise InvalidGameParams(
                f"A {case_type} case costs {cost}",
                details={"case_type": case_type, "cost": str(cost)},
            )
        return {"case_type": case_type}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return REWARD_TIERS[-1][0] / BASE_COST

    def max_payout(self, bet: Decimal, params: Dict[str, Any]) -> Decimal:
        return REWARD_TIERS[-1][0] * CASE_MULTIPLIERS[params["case_type"]]

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        case_type = params["case_type"]
        cost = case_cost(case_type)
        tier = draw_tier(rng.randrange(1000))
        reward = tier * CASE_MULTIPLIERS[case_type]
        return GameOutcome(
            multiplier=reward / cost,
            outcome={
                "case_type": case_type,
                "cost": str(cost),
                "tier": str(tier),
                "reward": str(reward),
            },
            result=GameResult.WIN if reward >= cost else GameResult.LOSE,
            payout=reward,
        )

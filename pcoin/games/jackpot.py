import random
from decimal import Decimal
from typing import Any, Dict

from pcoin.core.exceptions import InvalidGameParams
from pcoin.games.base import GameEngine, GameOutcome
from pcoin.services.jackpot_service import JackpotPool

JACKPOT_SYMBOL = "crown"

# 세 개 일치 시 배수 (crown은 풀 전액 지급)
SYMBOL_MULTIPLIERS = {
    "diamond": Decimal(50),
    "star": Decimal(25),
    "cherry": Decimal(10),
    "lemon": Decimal(5),
    "apple": Decimal(3),
    "grape": Decimal(2),
    "orange": Decimal(2),
}
SYMBOLS = (JACKPOT_SYMBOL,) + tuple(SYMBOL_MULTIPLIERS)
PAIR_MULTIPLIER = Decimal("1.5")


class JackpotEngine(GameEngine):
    """3릴 슬롯 머신

    crown 3개가 나오면 풀 전액을 지급하고 풀은 seed로 초기화된다.
    정산이 커밋된 베팅만 일부가 풀에 적립된다 (on_settled).
    """

    game_type = "jackpot"
    name = "Jackpot"
    description = "Three-reel slots with a progressive jackpot for three crowns."
    params_help = {}

    def __init__(self, pool: JackpotPool, min_bet: Decimal = Decimal("1.00")):
        self.pool = pool
        self.min_bet = Decimal(min_bet)

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        if bet < self.min_bet:
            raise InvalidGameParams(
                f"Minimum jackpot bet is {self.min_bet}",
                details={"min_bet": str(self.min_bet)},
            )
        return {}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return max(SYMBOL_MULTIPLIERS.values())

    def max_payout(self, bet: Decimal, params: Dict[str, Any]) -> Decimal:
        return max(self.pool.current(), super().max_payout(bet, params))

    def on_settled(self, bet: Decimal) -> None:
        self.pool.contribute(bet)

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        reels = [rng.choice(SYMBOLS) for _ in range(3)]
        outcome = {"reels": reels, "jackpot_won": False}

        if reels.count(JACKPOT_SYMBOL) == 3:
            won = self.pool.claim()
            outcome.update(jackpot_won=True, jackpot_amount=str(won))
            return GameOutcome(
                multiplier=(won / bet) if bet else Decimal(0),
                outcome=outcome,
                payout=won,
            )

        if reels[0] == reels[1] == reels[2]:
            return GameOutcome(multiplier=SYMBOL_MULTIPLIERS[reels[0]], outcome=outcome)

        if len(set(reels)) == 2:
            return GameOutcome(multiplier=PAIR_MULTIPLIER, outcome=outcome)

        return self.lose(outcome)

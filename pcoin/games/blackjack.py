import random
from decimal import Decimal
from typing import Any, Dict

from pcoin.games.base import GameEngine, GameOutcome, require_int
from pcoin.games.cards import blackjack_value, is_natural, labels, new_deck

DEALER_STANDS_ON = 17
NATURAL_PAYOUT = Decimal("2.5")
WIN_PAYOUT = Decimal(2)
PUSH_PAYOUT = Decimal(1)


class BlackjackEngine(GameEngine):
    """자동 진행 블랙잭

    플레이어는 stand_on 이상이 될 때까지 카드를 받고, 딜러는 17 미만이면 계속 받는다.
    플레이어 내추럴(첫 두 장 21)은 딜러 패와 무관하게 2.5배.
    """

    game_type = "blackjack"
    name = "Blackjack"
    description = "Automated blackjack: choose when to stand, the dealer stands on 17."
    params_help = {"stand_on": "12..21 (default 17)"}

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"stand_on": require_int(params or {}, "stand_on", 12, 21, default=17)}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return NATURAL_PAYOUT

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        deck = new_deck()
        rng.shuffle(deck)

        player = [deck.pop(), deck.pop()]
        dealer = [deck.pop(), deck.pop()]

        def summary(verdict: str) -> Dict[str, Any]:
            return {
                "stand_on": params["stand_on"],
                "player_cards": labels(player),
                "dealer_cards": labels(dealer),
                "player_value": blackjack_value(player),
                "dealer_value": blackjack_value(dealer),
                "verdict": verdict,
            }

        if is_natural(player):
            return GameOutcome(multiplier=NATURAL_PAYOUT, outcome=summary("blackjack"))

        while blackjack_value(player) < params["stand_on"]:
            player.append(deck.pop())
        player_value = blackjack_value(player)
        if player_value > 21:
            return self.lose(summary("player_bust"))

        while blackjack_value(dealer) < DEALER_STANDS_ON:
            dealer.append(deck.pop())
        dealer_value = blackjack_value(dealer)

        if dealer_value > 21:
            return GameOutcome(multiplier=WIN_PAYOUT, outcome=summary("dealer_bust"))
        if player_value > dealer_value:
            return GameOutcome(multiplier=WIN_PAYOUT, outcome=summary("player_wins"))
        if player_value == dealer_value:
            return GameOutcome(multiplier=PUSH_PAYOUT, outcome=summary("push"))
        return self.lose(summary("dealer_wins"))

import random
from collections import Counter
from decimal import Decimal
from itertools import combinations
from typing import Any, Dict, Sequence

from pcoin.games.base import GameEngine, GameOutcome
from pcoin.games.cards import Card, labels, new_deck

HAND_NAMES = (
    "high_card",
    "one_pair",
    "two_pair",
    "three_of_a_kind",
    "straight",
    "flush",
    "full_house",
    "four_of_a_kind",
    "straight_flush",
)

WIN_PAYOUT = Decimal(2)
TIE_PAYOUT = Decimal(1)


def _is_straight(ranks: Sequence[int]) -> bool:
    unique = sorted(set(ranks))
    if len(unique) != 5:
        return False
    if unique[-1] - unique[0] == 4:
        return True
    # A-2-3-4-5
    return unique == [2, 3, 4, 5, 14]


def five_card_category(cards: Sequence[Card]) -> int:
    ranks = [rank for rank, _ in cards]
    flush = len({suit for _, suit in cards}) == 1
    straight = _is_straight(ranks)
    counts = sorted(Counter(ranks).values(), reverse=True)

    if straight and flush:
        return 8
    if counts[0] == 4:
        return 7
    if counts[:2] == [3, 2]:
        return 6
    if flush:
        return 5
    if straight:
        return 4
    if counts[0] == 3:
        return 3
    if counts[:2] == [2, 2]:
        return 2
    if counts[0] == 2:
        return 1
    return 0


def best_category(cards: Sequence[Card]) -> int:
    """7장 중 최선의 5장 조합 족보 (0=하이카드 .. 8=스트레이트 플러시)"""
    return max(five_card_category(hand) for hand in combinations(cards, 5))


class PokerEngine(GameEngine):
    """헤즈업 텍사스 홀덤 - 족보 등급만 비교 (키커 없음)"""

    game_type = "poker"
    name = "Poker"
    description = "Heads-up hold'em against the dealer, decided by hand category."
    params_help = {}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        return WIN_PAYOUT

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        deck = new_deck()
        rng.shuffle(deck)

        player = [deck.pop(), deck.pop()]
        dealer = [deck.pop(), deck.pop()]
        board = [deck.pop() for _ in range(5)]

        player_rank = best_category(player + board)
        dealer_rank = best_category(dealer + board)

        outcome = {
            "player_cards": labels(player),
            "dealer_cards": labels(dealer),
            "community_cards": labels(board),
            "player_hand": HAND_NAMES[player_rank],
            "dealer_hand": HAND_NAMES[dealer_rank],
        }
        if player_rank > dealer_rank:
            return GameOutcome(multiplier=WIN_PAYOUT, outcome=outcome)
        if player_rank == dealer_rank:
            return GameOutcome(multiplier=TIE_PAYOUT, outcome=outcome)
        return self.lose(outcome)

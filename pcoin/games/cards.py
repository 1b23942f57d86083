from typing import List, Sequence, Tuple

SUITS = ("hearts", "diamonds", "clubs", "spades")
# 2..10, J=11, Q=12, K=13, A=14
RANKS = tuple(range(2, 15))
RANK_LABELS = {11: "J", 12: "Q", 13: "K", 14: "A"}

Card = Tuple[int, str]


def new_deck() -> List[Card]:
    return [(rank, suit) for suit in SUITS for rank in RANKS]


def card_label(card: Card) -> str:
    rank, suit = card
    return f"{RANK_LABELS.get(rank, str(rank))}{suit[0].upper()}"


def labels(cards: Sequence[Card]) -> List[str]:
    return [card_label(c) for c in cards]


def blackjack_value(cards: Sequence[Card]) -> int:
    """블랙잭 점수 - 에이스는 버스트가 나지 않는 한 11로 계산"""
    total = 0
    aces = 0
    for rank, _ in cards:
        if rank == 14:
            aces += 1
            total += 11
        elif rank >= 10:
            total += 10
        else:
            total += rank
    while total > 21 and aces:
        total -= 10
        aces -= 1
    return total


def is_natural(cards: Sequence[Card]) -> bool:
    return len(cards) == 2 and blackjack_value(cards) == 21

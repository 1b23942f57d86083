import random
from decimal import Decimal
from fractions import Fraction
from math import comb
from unittest.mock import Mock

import pytest

from pcoin.core.exceptions import InvalidGameParams
from pcoin.games.blackjack import BlackjackEngine
from pcoin.games.cards import blackjack_value, new_deck
from pcoin.games.cases import CASE_MULTIPLIERS, CasesEngine, case_cost, draw_tier
from pcoin.games.cups import CupsEngine
from pcoin.games.jackpot import SYMBOLS, JackpotEngine
from pcoin.games.mines import GRID_SIZE, MinesEngine, mines_multiplier
from pcoin.games.plinko import PLINKO_TABLES, PlinkoEngine, start_position, step
from pcoin.games.poker import PokerEngine, best_category, five_card_category
from pcoin.games.registry import GAME_TYPES, build_registry
from pcoin.games.roulette import RouletteEngine
from pcoin.games.slide import HIGHER_RANGE, LOWER_RANGE, SlideEngine, slide_multiplier
from pcoin.games.towers import DIFFICULTIES, LEVELS, TowersEngine, towers_multiplier
from pcoin.models.game import GameResult
from pcoin.services.jackpot_service import JackpotPool

BET = Decimal("10.00")


def _play(engine, params, rng, bet=BET):
    return engine.play(bet, engine.validate(bet, params), rng)


def _stacked_shuffle(*draw_order):
    """deck.pop() 순서대로 draw_order 카드가 나오도록 덱을 배치"""

    def _shuffle(deck):
        rest = [c for c in deck if c not in draw_order]
        deck[:] = rest + list(reversed(draw_order))

    return _shuffle


def test_registry_has_all_games():
    registry = build_registry(JackpotPool(Decimal("100"), Decimal("0.01")))
    assert set(registry) == set(GAME_TYPES)
    assert len(registry) == 10


@pytest.mark.parametrize(
    "game_type, params, bet",
    [
        ("roulette", {"selected_numbers": [17]}, BET),
        ("roulette", {"selected_color": "red"}, BET),
        ("slide", {"target": 97, "direction": "higher"}, BET),
        ("plinko", {"difficulty": "hard"}, BET),
        ("cups", {"selected_cup": 0}, BET),
        ("jackpot", {}, BET),
        ("mines", {"mine_count": 3, "picks": [0, 1, 2]}, BET),
        ("cases", {"case_type": "gold"}, Decimal("48")),
        ("towers", {"difficulty": "easy", "picks": [0, 1, 2]}, BET),
        ("blackjack", {}, BET),
        ("poker", {}, BET),
    ],
)
def test_outcomes_never_exceed_max_payout(game_type, params, bet):
    engine = build_registry(JackpotPool(Decimal("100.00"), Decimal("0.01")))[game_type]
    normalized = engine.validate(bet, params)
    ceiling = engine.max_payout(bet, normalized)
    rng = random.Random(7)
    for _ in range(300):
        assert engine.play(bet, normalized, rng).win_amount(bet) <= ceiling


class TestRoulette:
    def test_single_number_hit_pays_36x(self):
        rng = Mock()
        rng.randint.return_value = 17
        outcome = _play(RouletteEngine(), {"selected_numbers": [17]}, rng)

        assert outcome.win_amount(BET) == Decimal("360.00")
        assert outcome.result_for(BET) == GameResult.WIN
        rng.randint.assert_called_once_with(0, 36)

    def test_zero_loses_color_and_parity(self):
        rng = Mock()
        rng.randint.return_value = 0
        assert _play(RouletteEngine(), {"selected_color": "red"}, rng).win_amount(BET) == 0
        assert _play(RouletteEngine(), {"selected_parity": "even"}, rng).win_amount(BET) == 0

    def test_exactly_one_bet_class(self):
        with pytest.raises(InvalidGameParams):
            RouletteEngine().validate(BET, {})
        with pytest.raises(InvalidGameParams):
            RouletteEngine().validate(BET, {"selected_color": "red", "selected_parity": "odd"})
        with pytest.raises(InvalidGameParams):
            RouletteEngine().validate(BET, {"selected_numbers": [37]})
        with pytest.raises(InvalidGameParams):
            RouletteEngine().validate(BET, {"selected_numbers": [1, 1]})

    @pytest.mark.parametrize(
        "params",
        [
            {"selected_numbers": [7]},
            {"selected_numbers": list(range(1, 13))},
            {"selected_color": "black"},
            {"selected_parity": "odd"},
        ],
    )
    def test_exact_expected_value_below_one(self, params):
        engine = RouletteEngine()
        total = Decimal(0)
        for number in range(37):
            rng = Mock()
            rng.randint.return_value = number
            total += _play(engine, params, rng).multiplier
        ev = total / 37
        assert 0 < ev < 1


class TestSlide:
    def test_higher_win(self):
        rng = Mock()
        rng.randint.return_value = 80
        outcome = _play(SlideEngine(), {"direction": "higher", "target": 50}, rng)
        assert outcome.multiplier == Decimal(1)
        assert outcome.outcome["rolled"] == 80

    def test_max_multiplier_at_extremes(self):
        assert slide_multiplier(95, "higher") == Decimal(20)
        assert slide_multiplier(5, "lower") == Decimal(20)

    def test_target_out_of_range(self):
        with pytest.raises(InvalidGameParams):
            SlideEngine().validate(BET, {"direction": "higher", "target": 10})
        with pytest.raises(InvalidGameParams):
            SlideEngine().validate(BET, {"direction": "lower", "target": 90})

    def test_every_allowed_target_has_ev_below_one(self):
        engine = SlideEngine()
        for direction, (low, high) in (("higher", HIGHER_RANGE), ("lower", LOWER_RANGE)):
            for target in range(low, high + 1):
                wins = sum(
                    1
                    for x in range(101)
                    if (x > target if direction == "higher" else x < target)
                )
                ev = Decimal(wins) / 101 * slide_multiplier(target, direction)
                assert 0 < ev < 1, (direction, target)
        assert engine.validate(BET, {"direction": "LOWER", "target": "30"}) == {
            "target": 30,
            "direction": "lower",
        }


class TestPlinko:
    def test_all_right_steps_hit_the_cap_and_clamp(self):
        rng = Mock()
        rng.random.side_effect = [0.1] * 8  # 모두 오른쪽
        outcome = _play(PlinkoEngine(), {"difficulty": "easy"}, rng)
        # 4 -> 2 (index 0 상한) -> 3 -> ... -> 9, 마지막 버킷(8)으로 보정
        assert outcome.outcome["path"] == [4, 2, 3, 4, 5, 6, 7, 8, 9]
        assert outcome.outcome["bucket"] == 8
        assert outcome.multiplier == Decimal("1.8")

    def test_all_left_steps_stop_at_zero(self):
        rng = Mock()
        rng.random.side_effect = [0.9] * 8
        outcome = _play(PlinkoEngine(), {"difficulty": "easy"}, rng)
        assert outcome.outcome["path"] == [4, 3, 2, 1, 0, 0, 0, 0, 0]
        assert outcome.outcome["bucket"] == 0

    def test_step_bounds(self):
        assert step(8, 0, right=True) == 2
        assert step(8, 0, right=False) == 7
        assert step(0, 5, right=False) == 0
        assert step(3, 5, right=True) == 4

    def test_default_difficulty(self):
        assert PlinkoEngine().validate(BET, {}) == {"difficulty": "normal"}

    def test_easy_bucket_distribution(self):
        counts = _plinko_distribution(len(PLINKO_TABLES["easy"]) - 1)
        assert [c * 256 for c in counts] == [42, 56, 28, 56, 16, 36, 6, 13, 3]

    @pytest.mark.parametrize("difficulty", sorted(PLINKO_TABLES))
    def test_exact_expected_value_below_one(self, difficulty):
        table = PLINKO_TABLES[difficulty]
        distribution = _plinko_distribution(len(table) - 1)
        assert sum(distribution) == 1
        ev = sum(p * Fraction(str(m)) for p, m in zip(distribution, table))
        assert Fraction(9, 10) < ev < 1
        assert table == table[::-1]


def _plinko_distribution(rows):
    """모든 경로를 따라간 버킷별 정확한 확률"""
    positions = {start_position(rows): Fraction(1)}
    for index in range(rows):
        nxt = {}
        for position, p in positions.items():
            for right in (True, False):
                moved = step(position, index, right)
                nxt[moved] = nxt.get(moved, 0) + p / 2
        positions = nxt
    buckets = [Fraction(0)] * (rows + 1)
    for position, p in positions.items():
        buckets[min(position, rows)] += p
    return buckets


class TestCups:
    def test_found_ball_pays_triple(self):
        rng = Mock()
        rng.randrange.return_value = 1
        outcome = _play(CupsEngine(), {"selected_cup": 1}, rng, bet=Decimal("5"))
        assert outcome.win_amount(Decimal("5")) == Decimal("15.00")

    def test_wrong_cup(self):
        rng = Mock()
        rng.randrange.return_value = 2
        assert _play(CupsEngine(), {"selected_cup": 0}, rng).multiplier == 0

    def test_invalid_cup(self):
        with pytest.raises(InvalidGameParams):
            CupsEngine().validate(BET, {"selected_cup": 3})


class TestJackpot:
    def test_three_crowns_pays_pool_and_resets(self):
        pool = JackpotPool(Decimal("100.00"), Decimal("0.01"))
        rng = Mock()
        rng.choice.side_effect = ["crown", "crown", "crown"]

        outcome = _play(JackpotEngine(pool), {}, rng)

        assert outcome.win_amount(BET) == Decimal("100.00")
        assert outcome.outcome["jackpot_won"] is True
        assert pool.current() == Decimal("100.00")

    def test_triple_and_pair(self):
        pool = JackpotPool(Decimal("100.00"), Decimal("0.01"))
        rng = Mock()
        rng.choice.side_effect = ["diamond"] * 3 + ["cherry", "cherry", "lemon"]
        engine = JackpotEngine(pool)

        assert _play(engine, {}, rng).multiplier == Decimal(50)
        assert _play(engine, {}, rng).multiplier == Decimal("1.5")
        # 엔진 실행만으로는 적립되지 않음
        assert pool.current() == Decimal("100.00")

    def test_settled_bets_feed_the_pool(self):
        pool = JackpotPool(Decimal("100.00"), Decimal("0.01"))
        engine = JackpotEngine(pool)
        engine.on_settled(BET)
        engine.on_settled(BET)
        assert pool.current() == Decimal("100.20")

    def test_max_payout_covers_pool_and_top_symbol(self):
        pool = JackpotPool(Decimal("100.00"), Decimal("0.01"))
        engine = JackpotEngine(pool)
        assert engine.max_payout(Decimal("1.00"), {}) == Decimal("100.00")
        assert engine.max_payout(Decimal("10.00"), {}) == Decimal("500.00")

    def test_minimum_bet(self):
        engine = JackpotEngine(JackpotPool(Decimal("100"), Decimal("0.01")))
        with pytest.raises(InvalidGameParams):
            engine.validate(Decimal("0.99"), {})

    def test_expected_value_at_seed_below_one(self):
        engine = JackpotEngine(JackpotPool(Decimal("100.00"), Decimal("0.01")))
        total = Decimal(0)
        n = len(SYMBOLS)
        for a in SYMBOLS:
            for b in SYMBOLS:
                for c in SYMBOLS:
                    engine.pool = JackpotPool(Decimal("100.00"), Decimal("0.01"))
                    rng = Mock()
                    rng.choice.side_effect = [a, b, c]
                    total += _play(engine, {}, rng, bet=Decimal("1.00")).win_amount(Decimal("1.00"))
        ev = total / n ** 3
        assert 0 < ev < 1


class TestMines:
    def test_safe_picks(self):
        rng = Mock()
        rng.sample.return_value = [0, 1, 2]
        outcome = _play(MinesEngine(), {"mine_count": 3, "picks": [3, 4]}, rng)
        assert outcome.multiplier == mines_multiplier(3, 2)
        assert outcome.outcome["hit_mine"] is None

    def test_hit_mine_stops_reveal(self):
        rng = Mock()
        rng.sample.return_value = [0, 1, 2]
        outcome = _play(MinesEngine(), {"mine_count": 3, "picks": [5, 1, 7]}, rng)
        assert outcome.multiplier == 0
        assert outcome.outcome["revealed"] == [5, 1]

    def test_pick_limits(self):
        with pytest.raises(InvalidGameParams):
            MinesEngine().validate(BET, {"mine_count": 24, "picks": [0, 1]})
        with pytest.raises(InvalidGameParams):
            MinesEngine().validate(BET, {"mine_count": 0, "picks": [0]})
        with pytest.raises(InvalidGameParams):
            MinesEngine().validate(BET, {"mine_count": 3, "picks": [25]})

    def test_every_configuration_has_ev_below_one(self):
        for mines in range(1, GRID_SIZE):
            for gems in range(1, GRID_SIZE - mines + 1):
                survive = comb(GRID_SIZE - mines, gems) / comb(GRID_SIZE, gems)
                ev = survive * float(mines_multiplier(mines, gems))
                assert 0 < ev < 1, (mines, gems)


class TestBlackjack:
    def test_natural_pays_two_and_a_half(self):
        rng = Mock()
        rng.shuffle.side_effect = _stacked_shuffle(
            (14, "spades"), (13, "hearts"), (10, "clubs"), (9, "clubs")
        )
        outcome = _play(BlackjackEngine(), {}, rng)
        assert outcome.multiplier == Decimal("2.5")
        assert outcome.outcome["verdict"] == "blackjack"

    def test_push(self):
        rng = Mock()
        rng.shuffle.side_effect = _stacked_shuffle(
            (10, "spades"), (8, "hearts"), (10, "clubs"), (8, "clubs")
        )
        outcome = _play(BlackjackEngine(), {"stand_on": 17}, rng)
        assert outcome.multiplier == Decimal(1)
        assert outcome.result_for(BET) == GameResult.DRAW

    def test_player_bust(self):
        rng = Mock()
        rng.shuffle.side_effect = _stacked_shuffle(
            (10, "spades"), (6, "hearts"), (10, "clubs"), (7, "clubs"), (9, "hearts")
        )
        outcome = _play(BlackjackEngine(), {"stand_on": 17}, rng)
        assert outcome.outcome["verdict"] == "player_bust"
        assert outcome.multiplier == 0

    def test_soft_ace(self):
        assert blackjack_value([(14, "s"), (14, "h"), (9, "c")]) == 21
        assert blackjack_value([(14, "s"), (10, "h"), (5, "c")]) == 16

    def test_stand_on_range(self):
        with pytest.raises(InvalidGameParams):
            BlackjackEngine().validate(BET, {"stand_on": 22})

    def test_monte_carlo_expected_value_below_one(self):
        engine = BlackjackEngine()
        rng = random.Random(20240101)
        n = 50000
        total = sum(_play(engine, {}, rng).multiplier for _ in range(n))
        ev = total / n
        assert Decimal("0.85") < ev < 1


class TestPoker:
    @pytest.mark.parametrize(
        "cards,category",
        [
            ([(2, "h"), (3, "h"), (4, "h"), (5, "h"), (6, "h")], 8),
            ([(9, "h"), (9, "d"), (9, "s"), (9, "c"), (2, "h")], 7),
            ([(9, "h"), (9, "d"), (9, "s"), (4, "c"), (4, "h")], 6),
            ([(2, "h"), (7, "h"), (9, "h"), (11, "h"), (13, "h")], 5),
            ([(14, "h"), (2, "d"), (3, "s"), (4, "c"), (5, "h")], 4),
            ([(9, "h"), (9, "d"), (9, "s"), (4, "c"), (5, "h")], 3),
            ([(9, "h"), (9, "d"), (4, "s"), (4, "c"), (5, "h")], 2),
            ([(9, "h"), (9, "d"), (3, "s"), (4, "c"), (5, "h")], 1),
            ([(9, "h"), (12, "d"), (3, "s"), (4, "c"), (5, "h")], 0),
        ],
    )
    def test_five_card_categories(self, cards, category):
        assert five_card_category(cards) == category

    def test_best_of_seven(self):
        cards = [(14, "h"), (13, "h"), (12, "h"), (11, "h"), (10, "h"), (2, "c"), (2, "d")]
        assert best_category(cards) == 8

    def test_ties_pay_even(self):
        rng = Mock()
        # 양쪽 모두 보드의 로열 플러시를 사용
        rng.shuffle.side_effect = _stacked_shuffle(
            (2, "c"), (3, "d"), (4, "c"), (5, "d"),
            (14, "h"), (13, "h"), (12, "h"), (11, "h"), (10, "h"),
        )
        outcome = _play(PokerEngine(), {}, rng)
        assert outcome.multiplier == Decimal(1)

    def test_monte_carlo_is_symmetric(self):
        engine = PokerEngine()
        rng = random.Random(7)
        n = 3000
        ev = sum(_play(engine, {}, rng).multiplier for _ in range(n)) / n
        assert Decimal("0.9") < ev < Decimal("1.1")


class TestCases:
    def test_bet_must_equal_cost(self):
        engine = CasesEngine()
        assert engine.validate(Decimal("48"), {"case_type": "gold"}) == {"case_type": "gold"}
        with pytest.raises(InvalidGameParams):
            engine.validate(Decimal("10"), {"case_type": "gold"})

    def test_reward_and_label(self):
        rng = Mock()
        rng.randrange.return_value = 999  # 최고 등급
        outcome = _play(CasesEngine(), {"case_type": "silver"}, rng, bet=Decimal("32"))
        assert outcome.win_amount(Decimal("32")) == Decimal("400.00")
        assert outcome.result_for(Decimal("32")) == GameResult.WIN

        rng.randrange.return_value = 0
        outcome = _play(CasesEngine(), {"case_type": "silver"}, rng, bet=Decimal("32"))
        assert outcome.win_amount(Decimal("32")) == Decimal("10.00")
        assert outcome.result_for(Decimal("32")) == GameResult.LOSE

    def test_tier_boundaries(self):
        assert draw_tier(499) == Decimal(5)
        assert draw_tier(500) == Decimal(10)
        assert draw_tier(994) == Decimal(100)
        assert draw_tier(995) == Decimal(200)

    @pytest.mark.parametrize("case_type", sorted(CASE_MULTIPLIERS))
    def test_exact_expected_value_below_one(self, case_type):
        cost = case_cost(case_type)
        total = sum(draw_tier(roll) * CASE_MULTIPLIERS[case_type] for roll in range(1000))
        ev = total / 1000 / cost
        assert 0 < ev < 1


class TestTowers:
    def test_climb_all_picks(self):
        rng = Mock()
        rng.sample.side_effect = [[0, 1, 2], [1, 2, 3]]
        outcome = _play(TowersEngine(), {"difficulty": "easy", "picks": [0, 3]}, rng)
        assert outcome.multiplier == towers_multiplier("easy", 2)
        assert outcome.outcome["levels_cleared"] == 2

    def test_trap(self):
        rng = Mock()
        rng.sample.side_effect = [[0], [1]]
        outcome = _play(TowersEngine(), {"difficulty": "hard", "picks": [0, 0]}, rng)
        assert outcome.multiplier == 0
        assert outcome.outcome["trapped_at"] == 1

    def test_picks_validation(self):
        with pytest.raises(InvalidGameParams):
            TowersEngine().validate(BET, {"difficulty": "hard", "picks": [2]})
        with pytest.raises(InvalidGameParams):
            TowersEngine().validate(BET, {"difficulty": "easy", "picks": [0] * 9})

    def test_every_configuration_has_ev_below_one(self):
        for difficulty, (tiles, safe) in DIFFICULTIES.items():
            for levels in range(1, LEVELS + 1):
                ev = (safe / tiles) ** levels * float(towers_multiplier(difficulty, levels))
                assert 0 < ev < 1, (difficulty, levels)


def test_deck_is_complete():
    deck = new_deck()
    assert len(deck) == 52
    assert len(set(deck)) == 52

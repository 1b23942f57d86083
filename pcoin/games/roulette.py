import random
from decimal import Decimal
from typing import Any, Dict, Optional

from pcoin.core.exceptions import InvalidGameParams
from pcoin.games.base import GameEngine, GameOutcome, require_choice, require_int_list

RED_NUMBERS = frozenset([1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36])

NUMBER_PAYOUT = Decimal(36)
EVEN_MONEY = Decimal(2)


def color_of(number: int) -> Optional[str]:
    if number == 0:
        return None
    return "red" if number in RED_NUMBERS else "black"


def parity_of(number: int) -> Optional[str]:
    if number == 0:
        return None
    return "even" if number % 2 == 0 else "odd"


class RouletteEngine(GameEngine):
    """유럽식 룰렛 (0~36)

    한 번의 스핀에는 하나의 베팅 종류만 허용한다. 숫자/색상/홀짝을 함께 보내면
    InvalidGameParams로 거부한다 (조합 베팅 없음).
    - 숫자: 선택한 숫자 중 하나가 나오면 36 / 선택 개수 배 (숫자 1개면 36배)
    - 색상(red/black), 홀짝(even/odd): 2배, 0은 어느 쪽에도 속하지 않음
    """

    game_type = "roulette"
    name = "Roulette"
    description = "Spin the wheel: one bet per spin on numbers, a color or even/odd (no combined bets)."
    params_help = {
        "selected_numbers": "list of 1-36 distinct numbers in 0..36",
        "selected_color": "red | black",
        "selected_parity": "even | odd",
    }

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        params = params or {}
        chosen = [
            key
            for key in ("selected_numbers", "selected_color", "selected_parity")
            if params.get(key) not in (None, [], "")
        ]
        if len(chosen) != 1:
            raise InvalidGameParams(
                "Choose exactly one bet: selected_numbers, selected_color or selected_parity"
            )
        key = chosen[0]
        if key == "selected_numbers":
            return {"selected_numbers": require_int_list(params, key, 0, 36, 1, 36)}
        if key == "selected_color":
            return {"selected_color": require_choice(params, key, ("red", "black"))}
        return {"selected_parity": require_choice(params, key, ("even", "odd"))}

    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        numbers = params.get("selected_numbers")
        if numbers:
            return NUMBER_PAYOUT / Decimal(len(numbers))
        return EVEN_MONEY

    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        winning_number = rng.randint(0, 36)
        multiplier = Decimal(0)
        matched = None

        # 우선순위: 숫자 > 색상 > 홀짝 (중복 지급 없음)
        numbers = params.get("selected_numbers") or []
        if winning_number in numbers:
            multiplier = NUMBER_PAYOUT / Decimal(len(numbers))
            matched = "number"
        elif params.get("selected_color") and params["selected_color"] == color_of(winning_number):
            multiplier = EVEN_MONEY
            matched = "color"
        elif params.get("selected_parity") and params["selected_parity"] == parity_of(winning_number):
            multiplier = EVEN_MONEY
            matched = "parity"

        return GameOutcome(
            multiplier=multiplier,
            outcome={
                "winning_number": winning_number,
                "color": color_of(winning_number) or "green",
                "parity": parity_of(winning_number),
                "matched": matched,
                **params,
            },
        )

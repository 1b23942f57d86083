"""
게임 결과 엔진 공통 인터페이스

각 엔진은 (베팅액, 파라미터, 난수원) -> GameOutcome 을 계산하는 순수 로직입니다.
잔액 확인/차감/기록은 GameService가 담당하며, 엔진은 DB를 알지 못합니다.

    engine = RouletteEngine()
    params = engine.validate(bet, {"selected_numbers": [17]})
    outcome = engine.play(bet, params, random.Random())
    outcome.win_amount(bet)
"""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from pcoin.core.exceptions import InvalidGameParams
from pcoin.models.game import GameResult
from pcoin.utils.money import ZERO, quantize


@dataclass
class GameOutcome:
    """한 판의 결과

    multiplier: 베팅액 대비 지급 배수 (0이면 전액 손실)
    outcome: 게임별 결과 상세 (클라이언트 표시/세션 기록용)
    result: 결과 라벨 강제값 (없으면 지급액과 베팅액 비교로 결정)
    payout: 배수 대신 사용할 절대 지급액 (잭팟 풀 지급)
    """

    multiplier: Decimal
    outcome: Dict[str, Any] = field(default_factory=dict)
    result: Optional[GameResult] = None
    payout: Optional[Decimal] = None

    def win_amount(self, bet: Decimal) -> Decimal:
        if self.payout is not None:
            return quantize(self.payout)
        return quantize(bet * self.multiplier)

    def result_for(self, bet: Decimal) -> GameResult:
        if self.result is not None:
            return self.result
        win = self.win_amount(bet)
        if win > bet:
            return GameResult.WIN
        if win == bet:
            return GameResult.DRAW
        return GameResult.LOSE


class GameEngine(ABC):
    """게임 엔진 베이스 클래스"""

    game_type: str = ""
    name: str = ""
    description: str = ""
    # 파라미터 이름 -> 설명
    params_help: Dict[str, str] = {}

    def validate(self, bet: Decimal, params: Dict[str, Any]) -> Dict[str, Any]:
        """파라미터 검증 및 정규화 (난수 사용 전에 호출)"""
        return dict(params or {})

    @abstractmethod
    def play(
        self, bet: Decimal, params: Dict[str, Any], rng: random.Random
    ) -> GameOutcome:
        """정규화된 파라미터로 한 판을 진행"""

    @abstractmethod
    def max_multiplier(self, params: Dict[str, Any]) -> Decimal:
        """정규화된 파라미터로 나올 수 있는 최대 배수"""

    def max_payout(self, bet: Decimal, params: Dict[str, Any]) -> Decimal:
        """난수 사용 전 잔액 상한 검사에 쓰는 최대 지급액"""
        return quantize(bet * self.max_multiplier(params))

    def on_settled(self, bet: Decimal) -> None:
        """정산이 커밋된 뒤 호출"""

    def lose(self, outcome: Dict[str, Any]) -> GameOutcome:
        return GameOutcome(multiplier=ZERO, outcome=outcome)


# ---------------------------------------------------------------------------
# 파라미터 검증 헬퍼
# ---------------------------------------------------------------------------


def require_int(params: Dict[str, Any], key: str, low: int, high: int, default: Optional[int] = None) -> int:
    value = params.get(key, default)
    if value is None:
        raise InvalidGameParams(f"'{key}' is required", details={"param": key})
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidGameParams(f"'{key}' must be an integer", details={"param": key})
    try:
        number = int(value)
    except ValueError:
        raise InvalidGameParams(f"'{key}' must be an integer", details={"param": key})
    if not low <= number <= high:
        raise InvalidGameParams(
            f"'{key}' must be between {low} and {high}",
            details={"param": key, "value": number},
        )
    return number


def require_choice(params: Dict[str, Any], key: str, choices: Iterable[str], default: Optional[str] = None) -> str:
    options = list(choices)
    value = params.get(key, default)
    if not isinstance(value, str) or value.lower() not in options:
        raise InvalidGameParams(
            f"'{key}' must be one of {options}",
            details={"param": key, "value": value},
        )
    return value.lower()


def require_int_list(
    params: Dict[str, Any],
    key: str,
    low: int,
    high: int,
    min_len: int,
    max_len: int,
    distinct: bool = True,
) -> List[int]:
    values = params.get(key)
    if not isinstance(values, list):
        raise InvalidGameParams(f"'{key}' must be a list", details={"param": key})
    if not min_len <= len(values) <= max_len:
        raise InvalidGameParams(
            f"'{key}' must contain between {min_len} and {max_len} items",
            details={"param": key, "count": len(values)},
        )
    result = [require_int({key: v}, key, low, high) for v in values]
    if distinct and len(set(result)) != len(result):
        raise InvalidGameParams(f"'{key}' must not contain duplicates", details={"param": key})
    return result

"""P COIN 금액 유틸리티 - 모든 금액은 소수점 2자리 Decimal"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

from pcoin.core.exceptions import InvalidAmount

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """입력값을 Decimal로 변환 (float은 문자열 표현을 거쳐 이진 오차를 피함)"""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            raise InvalidAmount(f"Not a number: {value!r}")
    if not result.is_finite():
        raise InvalidAmount(f"Amount must be finite: {value!r}")
    return result


def quantize(value: Number) -> Decimal:
    """소수점 2자리로 절삭 (유효 자릿수를 넘는 값은 InvalidAmount)"""
    try:
        return to_decimal(value).quantize(CENT, rounding=ROUND_DOWN)
    except InvalidOperation:
        raise InvalidAmount("Amount is out of range", details={"amount": str(value)})


def positive_amount(value: Number) -> Decimal:
    """0보다 큰 금액만 허용 (절삭 후 0이 되면 거부)"""
    amount = quantize(value)
    if amount <= ZERO:
        raise InvalidAmount(details={"amount": str(value)})
    return amount

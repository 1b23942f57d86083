from decimal import Decimal

import pytest

from pcoin.core.exceptions import InvalidAmount
from pcoin.utils.money import positive_amount, quantize, to_decimal


def test_quantize_truncates_toward_zero():
    assert quantize("1.999") == Decimal("1.99")
    assert quantize(-1.999) == Decimal("-1.99")
    assert quantize(0.1) == Decimal("0.10")


@pytest.mark.parametrize("value", ["1e40", Decimal("123456789012345678901234567890"), "-1E+30"])
def test_out_of_range_amount_is_invalid(value):
    with pytest.raises(InvalidAmount) as exc:
        quantize(value)
    assert exc.value.error_code == "AMOUNT_001"


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity"])
def test_non_numeric(value):
    with pytest.raises(InvalidAmount):
        to_decimal(value)


def test_positive_amount_rejects_dust():
    with pytest.raises(InvalidAmount):
        positive_amount("0.004")
    assert positive_amount("0.019") == Decimal("0.01")

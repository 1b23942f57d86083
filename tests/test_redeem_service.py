from decimal import Decimal
from unittest.mock import patch

import pytest

from pcoin.core.exceptions import (
    AlreadyRedeemed,
    CodeExhausted,
    ConflictError,
    InvalidAmount,
    InvalidCode,
    ValidationError,
)
from pcoin.models.ledger import CoinTransaction, TransactionCategory
from pcoin.models.user import UserRole
from pcoin.services.redeem_service import CODE_ALPHABET, RedeemService, normalize_code


@pytest.fixture
def service(db, test_settings):
    return RedeemService(db, test_settings)


def test_normalize_code():
    assert normalize_code("  abc123 ") == "ABC123"


class TestGenerate:
    def test_random_code_shape(self, service, make_user):
        owner = make_user("owner", role=UserRole.OWNER)
        code = service.generate("5.00", 3, owner.id)

        assert len(code.code) == 6
        assert all(c in CODE_ALPHABET for c in code.code)
        assert code.usage_limit == 3
        assert code.used_count == 0
        assert code.created_by == owner.id

    def test_custom_code_is_normalized(self, service):
        code = service.generate("1.00", 1, None, code="abc123")
        assert code.code == "ABC123"

    def test_duplicate_custom_code(self, service):
        service.generate("1.00", 1, None, code="ABC123")
        with pytest.raises(ConflictError):
            service.generate("1.00", 1, None, code="abc123")

    def test_bad_custom_code(self, service):
        with pytest.raises(ValidationError):
            service.generate("1.00", 1, None, code="AB-12!")

    def test_invalid_amount_or_limit(self, service):
        with pytest.raises(InvalidAmount):
            service.generate("0", 1, None)
        with pytest.raises(ValidationError):
            service.generate("1.00", 0, None)

    def test_collision_retries_then_gives_up(self, service):
        service.generate("1.00", 1, None, code="AAAAAA")
        with patch("pcoin.services.redeem_service.secrets.choice", return_value="A"):
            with pytest.raises(ConflictError):
                service.generate("1.00", 1, None)


class TestRedeem:
    def test_single_use_scenario(self, db, service, make_user):
        service.generate("20.00", 1, None, code="ABC123")
        u1 = make_user("u1")
        u2 = make_user("u2")

        result = service.redeem("abc123", u1.id)
        assert result.amount == Decimal("20.00")
        assert result.new_balance == Decimal("20.00")

        with pytest.raises(AlreadyRedeemed):
            service.redeem("ABC123", u1.id)
        with pytest.raises(CodeExhausted):
            service.redeem("ABC123", u2.id)

        db.refresh(u2)
        assert u2.p_coin_balance == Decimal("0.00")

    def test_unknown_code(self, service, make_user):
        user = make_user("u1")
        with pytest.raises(InvalidCode):
            service.redeem("NOPE00", user.id)

    def test_redemption_is_logged_in_ledger(self, db, service, make_user):
        service.generate("7.50", 10, None, code="LEDGER")
        user = make_user("u1", "1.00")
        service.redeem(" ledger ", user.id)

        entry = db.query(CoinTransaction).one()
        assert entry.category == TransactionCategory.CODE_REDEEM
        assert entry.amount == Decimal("7.50")
        assert entry.balance_after == Decimal("8.50")

    def test_usage_count_and_listing(self, service, make_user):
        service.generate("1.00", 2, None, code="TWOUSE")
        service.redeem("TWOUSE", make_user("u1").id)
        service.redeem("TWOUSE", make_user("u2").id)

        listing = service.list_codes()
        assert listing.total_count == 1
        assert listing.codes[0].used_count == 2
        with pytest.raises(CodeExhausted):
            service.redeem("TWOUSE", make_user("u3").id)

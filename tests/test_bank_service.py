from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pcoin.core.exceptions import InsufficientFunds, InvalidAmount
from pcoin.models.bank import BankTransactionType
from pcoin.services.bank_service import BankService, daily_interest


@pytest.fixture
def service(db, test_settings):
    return BankService(db, test_settings)


def test_daily_interest_truncates():
    assert daily_interest(Decimal("3650.00"), Decimal("0.0500")) == Decimal("0.50")
    assert daily_interest(Decimal("100.00"), Decimal("0.0500")) == Decimal("0.01")
    assert daily_interest(Decimal("1.00"), Decimal("0.0500")) == Decimal("0.00")


class TestDepositWithdraw:
    def test_account_is_opened_lazily(self, service, make_user):
        user = make_user("saver", "10.00")
        account = service.get_account(user.id)
        assert account.balance == Decimal("0.00")
        assert account.interest_rate == Decimal("0.0500")

    def test_out_of_range_deposit_is_rejected(self, db, service, make_user):
        user = make_user("saver", "100.00")

        with pytest.raises(InvalidAmount):
            service.deposit(user.id, Decimal("1e40"))

        db.refresh(user)
        assert user.p_coin_balance == Decimal("100.00")
        assert service.list_transactions(user.id) == []

    def test_round_trip(self, db, service, make_user):
        user = make_user("saver", "100.00")

        deposited = service.deposit(user.id, "60.00")
        assert deposited.wallet_balance == Decimal("40.00")
        assert deposited.account.balance == Decimal("60.00")

        withdrawn = service.withdraw(user.id, "15.00")
        assert withdrawn.wallet_balance == Decimal("55.00")
        assert withdrawn.account.balance == Decimal("45.00")

        history = service.list_transactions(user.id)
        assert [t.type for t in history] == [
            BankTransactionType.WITHDRAWAL.value,
            BankTransactionType.DEPOSIT.value,
        ]

    def test_deposit_more_than_wallet(self, service, make_user):
        user = make_user("saver", "5.00")
        with pytest.raises(InsufficientFunds):
            service.deposit(user.id, "5.01")

    def test_withdraw_more_than_bank(self, db, service, make_user):
        user = make_user("saver", "20.00")
        service.deposit(user.id, "10.00")
        with pytest.raises(InsufficientFunds):
            service.withdraw(user.id, "10.01")
        db.refresh(user)
        assert user.p_coin_balance == Decimal("10.00")

    def test_zero_amount(self, service, make_user):
        user = make_user("saver", "20.00")
        with pytest.raises(InvalidAmount):
            service.deposit(user.id, "0")


class TestInterest:
    def test_interest_paid_once_per_window(self, service, make_user):
        user = make_user("saver", "3650.00")
        service.deposit(user.id, "3650.00")
        start = datetime.now(timezone.utc)

        assert service.accrue_interest(user.id, now=start + timedelta(hours=1)) == Decimal("0.00")
        assert service.accrue_interest(user.id, now=start + timedelta(hours=25)) == Decimal("0.50")
        # 같은 창 안에서 반복 호출해도 추가 지급 없음
        assert service.accrue_interest(user.id, now=start + timedelta(hours=30)) == Decimal("0.00")

        account = service.get_account(user.id, now=start + timedelta(hours=30))
        assert account.balance == Decimal("3650.50")

    def test_long_idle_account_gets_one_day_only(self, service, make_user):
        user = make_user("saver", "3650.00")
        service.deposit(user.id, "3650.00")
        later = datetime.now(timezone.utc) + timedelta(days=30)

        assert service.accrue_interest(user.id, now=later) == Decimal("0.50")
        assert service.accrue_interest(user.id, now=later) == Decimal("0.00")

    def test_interest_is_logged(self, service, make_user):
        user = make_user("saver", "3650.00")
        service.deposit(user.id, "3650.00")
        service.get_account(user.id, now=datetime.now(timezone.utc) + timedelta(days=1, minutes=1))

        latest = service.list_transactions(user.id)[0]
        assert latest.type == BankTransactionType.INTEREST.value
        assert latest.amount == Decimal("0.50")
        assert "5% APY" in latest.description

    def test_wallet_untouched_by_interest(self, db, service, make_user):
        user = make_user("saver", "3650.00")
        service.deposit(user.id, "3650.00")
        service.accrue_interest(user.id, now=datetime.now(timezone.utc) + timedelta(days=2))
        db.refresh(user)
        assert user.p_coin_balance == Decimal("0.00")

    def test_admin_listing(self, service, make_user):
        a = make_user("a", "10.00")
        b = make_user("b", "30.00")
        service.deposit(a.id, "10.00")
        service.deposit(b.id, "30.00")

        listing = service.list_all_accounts()
        assert [acc.username for acc in listing.accounts] == ["b", "a"]
        assert listing.total_balance == Decimal("40.00")

from decimal import Decimal

import pytest

from pcoin.core.exceptions import (
    AmountTooLarge,
    ConflictError,
    InsufficientFunds,
    InvalidAmount,
    UserNotFound,
)
from pcoin.database.session import atomic
from pcoin.models.ledger import CoinTransaction, TransactionCategory
from pcoin.repositories.ledger_repository import LedgerRepository
from pcoin.services.ledger_service import LedgerService


@pytest.fixture
def ledger(db, test_settings):
    return LedgerRepository(db, max_balance=test_settings.MAX_BALANCE)


class TestApplyDelta:
    def test_credit_and_debit_record_balance_after(self, db, ledger, make_user):
        user = make_user("alice", "50.00")

        with atomic(db):
            assert ledger.apply_delta(user.id, "25.50", TransactionCategory.ADMIN_ADD) == Decimal("75.50")
        with atomic(db):
            assert ledger.apply_delta(user.id, -75.5, TransactionCategory.GAME_LOSS) == Decimal("0.00")

        entries = db.query(CoinTransaction).order_by(CoinTransaction.id).all()
        assert [e.amount for e in entries] == [Decimal("25.50"), Decimal("-75.50")]
        assert [e.balance_after for e in entries] == [Decimal("75.50"), Decimal("0.00")]

    def test_negative_result_is_rejected_and_nothing_written(self, db, ledger, make_user):
        user = make_user("bob", "10.00")

        with pytest.raises(InsufficientFunds):
            with atomic(db):
                ledger.apply_delta(user.id, "-10.01", TransactionCategory.GAME_LOSS)

        db.refresh(user)
        assert user.p_coin_balance == Decimal("10.00")
        assert db.query(CoinTransaction).count() == 0

    def test_balance_cap(self, db, ledger, make_user):
        user = make_user("rich", "99999999.00")

        with pytest.raises(AmountTooLarge):
            with atomic(db):
                ledger.apply_delta(user.id, "1.00", TransactionCategory.ADMIN_ADD)

    def test_amount_is_truncated_to_cents(self, db, ledger, make_user):
        user = make_user("carol", "0.00")
        with atomic(db):
            new_balance = ledger.apply_delta(user.id, "1.239", TransactionCategory.ADMIN_ADD)
        assert new_balance == Decimal("1.23")

    def test_non_finite_amount(self, db, ledger, make_user):
        user = make_user("dave", "0.00")
        with pytest.raises(InvalidAmount):
            ledger.apply_delta(user.id, "NaN", TransactionCategory.ADMIN_ADD)

    def test_unknown_user(self, db, ledger):
        with pytest.raises(UserNotFound):
            ledger.apply_delta(999, "1.00", TransactionCategory.ADMIN_ADD)

    def test_set_balance_logs_absolute_amount(self, db, ledger, make_user):
        user = make_user("erin", "500.00")
        with atomic(db):
            ledger.set_balance(user.id, "42.00", TransactionCategory.ADMIN_ADJUSTMENT)

        entry = db.query(CoinTransaction).one()
        assert entry.amount == Decimal("42.00")
        assert entry.balance_after == Decimal("42.00")

    def test_set_balance_rejects_negative(self, db, ledger, make_user):
        user = make_user("frank", "5.00")
        with pytest.raises(InvalidAmount):
            ledger.set_balance(user.id, "-1", TransactionCategory.ADMIN_ADJUSTMENT)


class TestLedgerService:
    def test_welcome_bonus_only_once(self, db, make_user, test_settings):
        user = make_user("newbie")
        service = LedgerService(db, test_settings)

        result = service.claim_welcome_bonus(user.id)
        assert result.new_balance == Decimal("10.00")
        assert result.category == TransactionCategory.WELCOME_BONUS

        with pytest.raises(ConflictError):
            service.claim_welcome_bonus(user.id)
        assert service.get_balance(user.id).balance == Decimal("10.00")

    def test_transactions_newest_first_with_paging(self, db, make_user, test_settings):
        user = make_user("pager", "0.00")
        ledger = LedgerRepository(db)
        for amount in ("1.00", "2.00", "3.00"):
            with atomic(db):
                ledger.apply_delta(user.id, amount, TransactionCategory.ADMIN_ADD)

        page = LedgerService(db, test_settings).list_transactions(user.id, limit=2)
        assert [e.amount for e in page.entries] == [Decimal("3.00"), Decimal("2.00")]
        assert page.total_count == 3
        assert page.has_next is True
        assert page.balance == Decimal("6.00")

    def test_integrity_ok_and_mismatch(self, db, make_user, test_settings):
        user = make_user("checker", "0.00")
        service = LedgerService(db, test_settings)
        service.claim_welcome_bonus(user.id)
        assert service.verify_integrity(user.id).status == "OK"

        # 원장을 거치지 않은 직접 수정
        user.p_coin_balance = Decimal("999.00")
        db.commit()
        report = service.verify_integrity(user.id)
        assert report.status == "MISMATCH"
        assert report.ledger_balance == Decimal("10.00")

    def test_integrity_without_entries(self, db, make_user, test_settings):
        user = make_user("empty", "0.00")
        report = LedgerService(db, test_settings).verify_integrity(user.id)
        assert report.status == "OK"
        assert report.entry_count == 0

"""
Unit tests for the settlement service.
"""

from contextlib import contextmanager
from decimal import Decimal

import pytest
from django.db import DatabaseError

from core.locks import LockTimeout
from loyalty.exceptions import InvalidArgumentError, InvalidStateError, NotFoundError, StorageError
from loyalty.models import PointsBalance, Transaction
from loyalty.money import MAX_MINOR_UNITS
from loyalty.services import SettlementService, normalize_message
from loyalty.stores import PointsBalanceStore
from tests.factories.loyalty import MerchantFactory, PointsBalanceFactory
from tests.factories.users import UserFactory


def settle(user, merchant, amount, points_used=0, message="", service=None):
    service = service or SettlementService()
    return service.settle(
        merchant_id=merchant.pk,
        user=user,
        amount=amount,
        points_used=points_used,
        formatted_amount=f"{amount / 100:.2f} kr.",
        message=message,
    )


def balance_of(user, merchant):
    return PointsBalance.objects.get(user=user, merchant=merchant).amount


class TestSettlement:
    """
    Tests for business logic regarding points earning and redemption.
    """

    def test_first_purchase_creates_balance(self):
        """
        Scenario: 500 spent at a 2% merchant, no previous balance.
        Expected: 10 points earned, a new balance row holding 10.
        """
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0.02"))

        transaction = settle(user, merchant, amount=500)

        assert transaction.pk is not None
        assert transaction.amount == 500
        assert transaction.points_used == 0
        assert transaction.points_earned == 10
        assert transaction.formatted_amount == "5.00 kr."
        assert transaction.created_at is not None
        assert balance_of(user, merchant) == 10

    def test_redemption_updates_existing_balance(self):
        """
        Balance 10, redeem 10 on a purchase of 1000.
        Net 990 at 2% earns 19 (19.8 truncated), so the balance ends at 10 - 10 + 19.
        """
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0.02"))
        settle(user, merchant, amount=500)

        transaction = settle(user, merchant, amount=1000, points_used=10)

        assert transaction.points_used == 10
        assert transaction.points_earned == 19
        assert transaction.amount == 1000  # gross amount is stored, not the net
        assert balance_of(user, merchant) == 19
        assert PointsBalance.objects.filter(user=user, merchant=merchant).count() == 1

    def test_over_redemption_is_rejected(self):
        user = UserFactory()
        merchant = MerchantFactory()
        PointsBalanceFactory(user=user, merchant=merchant, amount=5)

        with pytest.raises(InvalidArgumentError) as exc:
            settle(user, merchant, amount=1000, points_used=6)

        assert "more points than you have" in exc.value.message
        assert Transaction.objects.count() == 0
        assert balance_of(user, merchant) == 5

    def test_redemption_without_balance_is_invalid_state(self):
        user = UserFactory()
        merchant = MerchantFactory()

        with pytest.raises(InvalidStateError):
            settle(user, merchant, amount=1000, points_used=1)

        assert Transaction.objects.count() == 0
        assert not PointsBalance.objects.exists()

    def test_redeeming_more_than_amount_is_rejected(self):
        """
        Points used may not exceed the purchase amount, even with a large balance.
        """
        user = UserFactory()
        merchant = MerchantFactory()
        PointsBalanceFactory(user=user, merchant=merchant, amount=100)

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=50, points_used=60)

        assert Transaction.objects.count() == 0
        assert balance_of(user, merchant) == 100

    def test_redeeming_whole_amount_earns_nothing(self):
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0.5"))
        PointsBalanceFactory(user=user, merchant=merchant, amount=100)

        transaction = settle(user, merchant, amount=60, points_used=60)

        assert transaction.points_earned == 0
        assert balance_of(user, merchant) == 40

    def test_unknown_merchant_is_not_found(self):
        user = UserFactory()

        with pytest.raises(NotFoundError):
            SettlementService().settle(merchant_id=999999, user=user, amount=100, formatted_amount="1.00")

    def test_soft_deleted_merchant_is_not_found(self):
        user = UserFactory()
        merchant = MerchantFactory()
        merchant.delete()

        with pytest.raises(NotFoundError):
            settle(user, merchant, amount=100)

    def test_negative_amount_is_rejected(self):
        user = UserFactory()
        merchant = MerchantFactory()

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=-1)

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=100, points_used=-5)

    def test_amount_above_column_limit_is_rejected(self):
        user = UserFactory()
        merchant = MerchantFactory()

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=2**63)

        assert not Transaction.objects.exists()
        assert not PointsBalance.objects.exists()

    def test_points_used_above_column_limit_is_rejected(self):
        user = UserFactory()
        merchant = MerchantFactory()
        PointsBalanceFactory(user=user, merchant=merchant, amount=50)

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=2**63 - 1, points_used=2**63)

        assert not Transaction.objects.exists()
        assert balance_of(user, merchant) == 50

    def test_balance_overflow_rolls_back_the_transaction(self):
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0.02"))
        PointsBalanceFactory(user=user, merchant=merchant, amount=MAX_MINOR_UNITS)

        with pytest.raises(InvalidArgumentError):
            settle(user, merchant, amount=1000)

        assert not Transaction.objects.exists()
        assert balance_of(user, merchant) == MAX_MINOR_UNITS

    def test_zero_percentage_merchant(self):
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0"))

        transaction = settle(user, merchant, amount=10000)

        assert transaction.points_earned == 0
        assert balance_of(user, merchant) == 0

    def test_points_earned_are_truncated(self):
        """
        0.29 * 100 must be exactly 29 (no float artefacts), 0.0333 * 100 = 3.33 -> 3.
        """
        user = UserFactory()

        assert settle(user, MerchantFactory(points_percentage=Decimal("0.29")), amount=100).points_earned == 29
        assert settle(user, MerchantFactory(points_percentage=Decimal("0.0333")), amount=100).points_earned == 3

    def test_empty_message_is_normalized(self):
        user = UserFactory()
        merchant = MerchantFactory()

        assert settle(user, merchant, amount=100, message="").message == "No message"
        assert settle(user, merchant, amount=100, message="Lunch").message == "Lunch"

    def test_settlement_is_not_idempotent(self):
        """
        Two identical purchases are two real purchases.
        """
        user = UserFactory()
        merchant = MerchantFactory(points_percentage=Decimal("0.02"))

        first = settle(user, merchant, amount=500)
        second = settle(user, merchant, amount=500)

        assert first.pk != second.pk
        assert Transaction.objects.count() == 2
        assert balance_of(user, merchant) == 20

    def test_balances_are_per_merchant(self):
        user = UserFactory()
        netto = MerchantFactory(points_percentage=Decimal("0.02"))
        bilka = MerchantFactory(points_percentage=Decimal("0.10"))

        settle(user, netto, amount=1000)
        settle(user, bilka, amount=1000)

        assert balance_of(user, netto) == 20
        assert balance_of(user, bilka) == 100


class FailingBalanceStore(PointsBalanceStore):
    def upsert_balance(self, user_id, merchant_id, new_amount):
        raise DatabaseError("disk I/O error")


class TimedOutLocks:
    @contextmanager
    def hold(self, key, timeout=None):
        raise LockTimeout(key, timeout)
        yield


class TestSettlementFailures:
    """
    A failed settlement must leave no trace.
    """

    def test_balance_write_failure_rolls_back_transaction(self):
        user = UserFactory()
        merchant = MerchantFactory()
        service = SettlementService(balances=FailingBalanceStore())

        with pytest.raises(StorageError):
            settle(user, merchant, amount=500, service=service)

        assert Transaction.objects.count() == 0
        assert not PointsBalance.objects.exists()

    def test_lock_timeout_is_storage_error(self):
        user = UserFactory()
        merchant = MerchantFactory()
        service = SettlementService(locks=TimedOutLocks())

        with pytest.raises(StorageError) as exc:
            settle(user, merchant, amount=500, service=service)

        assert "Timed out" in exc.value.message
        assert Transaction.objects.count() == 0


def test_normalize_message():
    assert normalize_message("") == "No message"
    assert normalize_message(None) == "No message"
    assert normalize_message("Hi") == "Hi"

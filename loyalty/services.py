"""
Service layer for Loyalty business logic.
Handles settlement of purchases: point redemption, point earning and the
reconciliation of the per (user, merchant) balance.
"""

import logging

from django.conf import settings
from django.db import DatabaseError, transaction

from core.locks import KeyedLock, LockTimeout
from loyalty.directory import MerchantDirectory
from loyalty.exceptions import InvalidArgumentError, InvalidStateError, LoyaltyError, NotFoundError, StorageError
from loyalty.models import NO_MESSAGE, Transaction
from loyalty.money import Amount
from loyalty.stores import PointsBalanceStore, TransactionStore

logger = logging.getLogger(__name__)

# Shared by every SettlementService in the process: one lock per (user, merchant)
settlement_locks = KeyedLock()


def normalize_message(message) -> str:
    return message or NO_MESSAGE


class SettlementService:
    """
    Records purchases and applies their point effects.

    Collaborators are injected so tests (and other entry points) can swap
    them; by default the service talks to the database-backed stores.
    """

    def __init__(self, directory=None, balances=None, transactions=None, locks=None, lock_timeout=None):
        self.directory = directory or MerchantDirectory()
        self.balances = balances or PointsBalanceStore()
        self.transactions = transactions or TransactionStore()
        self.locks = settlement_locks if locks is None else locks
        self.lock_timeout = settings.SETTLEMENT_LOCK_TIMEOUT if lock_timeout is None else lock_timeout

    def settle(
        self,
        *,
        merchant_id,
        user,
        amount: int,
        points_used: int = 0,
        formatted_amount: str = "",
        message: str = "",
    ) -> Transaction:
        """
        Settles one purchase.

        Args:
            merchant_id: Merchant the purchase was made at.
            user: The authenticated buyer.
            amount: Gross purchase amount in minor units.
            points_used: Points redeemed against the purchase.
            formatted_amount: Display string, stored as is.
            message: Free text; empty becomes "No message".

        Returns:
            The created Transaction.

        Raises:
            NotFoundError: unknown merchant.
            InvalidArgumentError: negative/malformed amounts, redeeming more
                points than held, or more points than the purchase amount.
            InvalidStateError: redeeming with no balance at this merchant.
            StorageError: the database failed or the balance lock timed out.
                Nothing was written in that case.
        """

        # 1. Resolve merchant
        merchant = self.directory.resolve(merchant_id)
        if merchant is None:
            raise NotFoundError("The Merchant for the specified Id was not found")

        # 2. Validate amounts
        gross = Amount(amount)
        redeemed = Amount(points_used)

        # 3. Everything touching this (user, merchant) balance runs under its lock,
        #    and both writes commit or roll back together
        key = (user.pk, merchant.id)
        try:
            with self.locks.hold(key, timeout=self.lock_timeout):
                with transaction.atomic():
                    record = self._apply(merchant, user, gross, redeemed, formatted_amount, normalize_message(message))
        except LoyaltyError as e:
            logger.warning("Settlement rejected for user %s at merchant %s: %s", user.pk, merchant.id, e.message)
            raise
        except LockTimeout as e:
            logger.error("Settlement lock timeout for user %s at merchant %s", user.pk, merchant.id)
            raise StorageError("Timed out waiting for another transaction with this merchant to finish.") from e
        except DatabaseError as e:
            logger.exception("Settlement storage failure for user %s at merchant %s", user.pk, merchant.id)
            raise StorageError() from e

        logger.info(
            "Settled transaction %s: user %s, merchant %s, amount %s, used %s, earned %s",
            record.pk,
            user.pk,
            merchant.id,
            record.amount,
            record.points_used,
            record.points_earned,
        )
        return record

    def _apply(self, merchant, user, gross: Amount, redeemed: Amount, formatted_amount: str, message: str):
        """
        Validation against the locked balance, then the two writes.
        Must run inside transaction.atomic() and the (user, merchant) lock.
        """
        balance = self.balances.get_balance(user.pk, merchant.id, for_update=True)

        if redeemed.minor_units > 0:
            if balance is None:
                raise InvalidStateError("Error finding your points with this merchant")
            if balance.amount < redeemed.minor_units:
                raise InvalidArgumentError("You are trying to use more points than you have")

        # Raises InvalidArgumentError when more points are used than the purchase is worth
        net = gross - redeemed
        points_earned = net.points_at(merchant.points_percentage)

        record = self.transactions.append(
            amount=gross.minor_units,
            points_used=redeemed.minor_units,
            formatted_amount=formatted_amount,
            message=message,
            merchant_id=merchant.id,
            user_id=user.pk,
            points_earned=points_earned,
        )

        # A first transaction never redeems (checked above), so starting from 0 is exact
        current = Amount(balance.amount if balance is not None else 0)
        new_balance = current - redeemed + points_earned
        self.balances.upsert_balance(user.pk, merchant.id, new_balance.minor_units)

        return record

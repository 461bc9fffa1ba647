"""
Persistence for the points ledger: balances (mutable) and transactions (append only).
"""

from typing import Optional

from django.utils import timezone

from core.pagination import paginate
from loyalty.exceptions import InvalidArgumentError
from loyalty.models import PointsBalance, Transaction


class PointsBalanceStore:
    """
    Per (user, merchant) point balances.

    The store does no business validation beyond refusing negative amounts;
    computing the new amount is the caller's job.
    """

    def get_balance(self, user_id, merchant_id, for_update: bool = False) -> Optional[PointsBalance]:
        """
        Returns the balance row or None. Never creates one.

        With for_update=True the row is locked until the surrounding
        transaction ends (SELECT ... FOR UPDATE where the backend supports it).
        """
        queryset = PointsBalance.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        return queryset.filter(user_id=user_id, merchant_id=merchant_id).first()

    def upsert_balance(self, user_id, merchant_id, new_amount: int) -> PointsBalance:
        """
        Overwrites the balance of an existing row or creates it.

        Creating a row that another writer created concurrently fails with
        IntegrityError instead of silently overwriting that writer's result.
        """
        if new_amount < 0:
            raise InvalidArgumentError(f"Points balance cannot be negative, got {new_amount}.")

        updated = PointsBalance.objects.filter(user_id=user_id, merchant_id=merchant_id).update(
            amount=new_amount, updated_at=timezone.now()
        )
        if updated:
            return PointsBalance.objects.get(user_id=user_id, merchant_id=merchant_id)

        return PointsBalance.objects.create(user_id=user_id, merchant_id=merchant_id, amount=new_amount)

    def list_balances(self, user_id):
        """
        All balances of a user, with merchant and address preloaded.
        """
        return (
            PointsBalance.objects.filter(user_id=user_id).select_related("merchant__address").order_by("merchant_id")
        )


class TransactionStore:
    """
    Append-only transaction log. Rows get their id and created_at on append.
    """

    def _base_queryset(self):
        return Transaction.objects.select_related("merchant__address", "user")

    def append(
        self,
        *,
        amount: int,
        points_used: int,
        formatted_amount: str,
        message: str,
        merchant_id,
        user_id,
        points_earned: int,
    ) -> Transaction:
        return Transaction.objects.create(
            amount=amount,
            points_used=points_used,
            formatted_amount=formatted_amount,
            message=message,
            merchant_id=merchant_id,
            user_id=user_id,
            points_earned=points_earned,
        )

    def get(self, transaction_id) -> Optional[Transaction]:
        return self._base_queryset().filter(pk=transaction_id).first()

    def list_all(self):
        return self._base_queryset().order_by("id")

    def list_for_user(self, user_id, page_size: int, page_number: int):
        """
        One page of a user's transactions, newest (highest id) first.
        """
        queryset = self._base_queryset().filter(user_id=user_id).order_by("-id")
        return paginate(queryset, page_size, page_number)

    def list_for_merchant(self, merchant_id, page_size: int, page_number: int):
        """
        One page of a merchant's transactions, newest first.
        The caller must have checked that the requester owns the merchant.
        """
        queryset = self._base_queryset().filter(merchant_id=merchant_id).order_by("-id")
        return paginate(queryset, page_size, page_number)

"""
Read-only merchant lookups used by the settlement core.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from loyalty.exceptions import NotFoundError, PermissionDeniedError
from loyalty.models import Merchant


@dataclass(frozen=True)
class MerchantRef:
    """
    The slice of a merchant that settlement needs.
    """

    id: int
    owner_id: int
    points_percentage: Decimal


def merchant_cache_key(merchant_id) -> str:
    return f"merchant_ref:{merchant_id}"


class MerchantDirectory:
    """
    Resolves merchant ids, caching hits in the Django cache.

    Entries are dropped by the Merchant post_save/post_delete signals, so a
    changed percentage or a (soft) deleted merchant is seen on the next lookup.
    """

    def __init__(self, timeout: Optional[int] = None):
        self.timeout = settings.MERCHANT_CACHE_TIMEOUT if timeout is None else timeout

    def resolve(self, merchant_id) -> Optional[MerchantRef]:
        """
        Returns the MerchantRef for `merchant_id`, or None if there is no such (live) merchant.
        Misses are not cached.
        """
        cache_key = merchant_cache_key(merchant_id)
        ref = cache.get(cache_key)
        if ref is not None:
            return ref

        row = Merchant.objects.filter(pk=merchant_id).values("id", "owner_id", "points_percentage").first()
        if row is None:
            return None

        ref = MerchantRef(**row)
        cache.set(cache_key, ref, self.timeout)
        return ref

    def assert_owner(self, merchant_id, user_id) -> MerchantRef:
        """
        Returns the merchant if `user_id` owns it.

        Raises:
            NotFoundError: no such merchant.
            PermissionDeniedError: the merchant belongs to someone else.
        """
        ref = self.resolve(merchant_id)
        if ref is None:
            raise NotFoundError("Couldn't find any merchants with that ID")
        if ref.owner_id != user_id:
            raise PermissionDeniedError("This Merchant does not belong to you")
        return ref

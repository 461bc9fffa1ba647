"""
Tests for Django Signals and Cache Invalidation.
"""

from decimal import Decimal

from django.core.cache import cache

from loyalty.directory import MerchantDirectory, merchant_cache_key
from tests.factories.loyalty import MerchantFactory


class TestMerchantCacheInvalidation:
    """
    Verifies that modifying a Merchant correctly clears its cached lookup.
    """

    def test_signal_clears_cache_on_save(self):
        """
        Scenario: Updating the points percentage (via save()) should delete the cache key.
        """
        merchant = MerchantFactory(points_percentage=Decimal("0.02"))
        cache_key = merchant_cache_key(merchant.pk)

        # Populate Cache
        MerchantDirectory().resolve(merchant.pk)
        assert cache.get(cache_key) is not None

        # Modify Merchant (triggers post_save signal)
        merchant.points_percentage = Decimal("0.10")
        merchant.save()

        # Verify Cache is gone
        assert cache.get(cache_key) is None

        # Fetch again (should be fresh)
        assert MerchantDirectory().resolve(merchant.pk).points_percentage == Decimal("0.10")

    def test_signal_clears_cache_on_soft_delete(self):
        """
        Scenario: Deleting a merchant should delete the cache key, so it stops resolving.
        """
        merchant = MerchantFactory()
        cache_key = merchant_cache_key(merchant.pk)

        MerchantDirectory().resolve(merchant.pk)
        assert cache.get(cache_key) is not None

        merchant.delete()

        assert cache.get(cache_key) is None
        assert MerchantDirectory().resolve(merchant.pk) is None

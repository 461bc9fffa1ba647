"""
Signals for the Loyalty application.
Handles cache invalidation when models are updated.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from loyalty.directory import merchant_cache_key
from loyalty.models import Merchant


@receiver([post_save, post_delete], sender=Merchant)
def clear_merchant_cache(sender, instance, **kwargs):
    """
    Clears the cached merchant lookup whenever a merchant is saved or deleted.
    This ensures that settlement always earns points at the current percentage,
    and never settles against a (soft) deleted merchant.
    """
    cache.delete(merchant_cache_key(instance.pk))

"""
Custom Django managers for core functionality (soft deletion).
"""

from django.db import models


class SoftDeleteManager(models.Manager):
    """
    A custom manager that hides soft-deleted rows.

    Every lookup made through it (filter, get, exists, ...) behaves as if
    the deleted rows were gone, so a deleted merchant simply "does not exist".
    """

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)

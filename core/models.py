"""
Abstract base models and the request log.
"""

from django.db import models
from django.utils import timezone

from core.managers import SoftDeleteManager


class TimeStampedModel(models.Model):
    """
    Abstract base class adding creation and modification timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class SoftDeleteModel(TimeStampedModel):
    """
    Abstract base class for rows that are hidden instead of removed.

    It enforces two main behaviors:
    1. Visibility: `objects` skips deleted rows, `all_objects` sees everything.
    2. Deletion: delete() stamps `deleted_at` and keeps the row.
    """

    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = SoftDeleteManager()
    all_objects = models.Manager()

    class Meta:
        abstract = True

    def delete(self, using=None, keep_parents=False):
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])

    @property
    def is_deleted(self):
        return self.deleted_at is not None


class RequestLog(models.Model):
    """
    One row per API request, keyed by caller ip, HTTP method and path.
    """

    ip = models.CharField(max_length=64)
    method = models.CharField(max_length=10, db_index=True)
    path = models.CharField(max_length=512)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return f"{self.method} {self.path} from {self.ip}"

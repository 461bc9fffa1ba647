"""
Models for the Loyalty application.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.models import SoftDeleteModel, TimeStampedModel
from loyalty.exceptions import InvalidStateError

NO_MESSAGE = "No message"


class Address(TimeStampedModel):
    street = models.CharField(max_length=255)
    zip_code = models.CharField(max_length=20)
    city = models.CharField(max_length=255)
    country = models.CharField(max_length=255)

    def __str__(self):
        return f"{self.street}, {self.zip_code} {self.city}, {self.country}"


class Merchant(SoftDeleteModel):
    """
    A shop where users collect and spend points.

    `points_percentage` is the fraction of every (net) purchase that is paid
    back as points, e.g. 0.02 gives 10 points on a purchase of 500.
    """

    name = models.CharField(max_length=255)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="merchants",
    )
    address = models.ForeignKey(Address, on_delete=models.PROTECT, related_name="merchants")
    points_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        validators=[MinValueValidator(0), MaxValueValidator(1)],
    )

    def __str__(self):
        return self.name


class PointsBalance(TimeStampedModel):
    """
    The points a user currently holds with one merchant.

    One row per (user, merchant), created by the first settlement between the
    two and updated in place by every later one. Only the settlement service
    writes here.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="points_balances",
    )
    merchant = models.ForeignKey(Merchant, on_delete=models.PROTECT, related_name="points_balances")
    # PositiveBigIntegerField adds a CHECK (amount >= 0) at the database level
    amount = models.PositiveBigIntegerField(default=0)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "merchant"], name="unique_points_balance_per_user_merchant"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.merchant}: {self.amount}"


class Transaction(models.Model):
    """
    The Ledger (Journal).
    One immutable row per purchase. Amounts are in minor units.

    amount          gross purchase amount
    points_used     points redeemed against the purchase
    points_earned   points paid back on (amount - points_used)
    """

    amount = models.PositiveBigIntegerField()
    points_used = models.PositiveBigIntegerField(default=0)
    formatted_amount = models.CharField(max_length=64)
    message = models.TextField(default=NO_MESSAGE)
    merchant = models.ForeignKey(Merchant, on_delete=models.PROTECT, related_name="transactions")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="transactions",
    )
    points_earned = models.PositiveBigIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-id"]

    def __str__(self):
        return f"{self.user} - {self.amount} at {self.merchant_id} (+{self.points_earned}/-{self.points_used})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise InvalidStateError("Transactions are immutable once created.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise InvalidStateError("Transactions cannot be deleted.")

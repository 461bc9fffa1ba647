import logging

from celery import shared_task
from django.db.models import Sum

from loyalty.models import PointsBalance, Transaction

logger = logging.getLogger(__name__)


@shared_task
def verify_points_balances():
    """
    Periodic task that checks every stored balance against the transaction ledger.

    For each (user, merchant) pair the balance must equal
    sum(points_earned) - sum(points_used) over that pair's transactions.
    Mismatches are logged; balances are never modified here.
    """
    batch_size = 1000

    ledger = (
        Transaction.objects.order_by()
        .values("user_id", "merchant_id")
        .annotate(earned=Sum("points_earned"), used=Sum("points_used"))
    )
    expected = {(row["user_id"], row["merchant_id"]): row["earned"] - row["used"] for row in ledger}

    checked_count = 0
    mismatch_count = 0

    # Using iterator() to reduce memory usage
    for balance in PointsBalance.objects.order_by("id").iterator(chunk_size=batch_size):
        checked_count += 1
        ledger_amount = expected.pop((balance.user_id, balance.merchant_id), 0)
        if balance.amount != ledger_amount:
            mismatch_count += 1
            logger.error(
                "Balance mismatch for user %s at merchant %s: stored %s, ledger %s",
                balance.user_id,
                balance.merchant_id,
                balance.amount,
                ledger_amount,
            )

    # Pairs with transactions but no balance row at all
    for (user_id, merchant_id), ledger_amount in expected.items():
        mismatch_count += 1
        logger.error("Missing balance for user %s at merchant %s: ledger %s", user_id, merchant_id, ledger_amount)

    logger.info("Verified %s balances, %s mismatches", checked_count, mismatch_count)
    return f"Finished. Checked {checked_count} balances. Mismatches: {mismatch_count}"

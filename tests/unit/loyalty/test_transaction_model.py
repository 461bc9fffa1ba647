"""
Unit tests for Transaction model.
"""

import pytest

from loyalty.exceptions import InvalidStateError
from loyalty.models import NO_MESSAGE, Transaction
from tests.factories.loyalty import TransactionFactory


class TestTransactionModel:
    """
    Tests for the Transaction model (Ledger).
    """

    def test_transaction_cannot_be_modified(self):
        tx = TransactionFactory(amount=1000)
        tx.amount = 1

        with pytest.raises(InvalidStateError):
            tx.save()

        assert Transaction.objects.get(pk=tx.pk).amount == 1000

    def test_transaction_cannot_be_deleted(self):
        tx = TransactionFactory()

        with pytest.raises(InvalidStateError):
            tx.delete()

        assert Transaction.objects.filter(pk=tx.pk).exists()

    def test_defaults_and_ordering(self):
        first = TransactionFactory(message=NO_MESSAGE)
        second = TransactionFactory()

        assert first.message == "No message"
        assert first.created_at is not None
        assert list(Transaction.objects.all()) == [second, first]

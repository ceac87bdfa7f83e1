"""Transaction and budget ledgers backed by :class:`~finance_tracker.storage.Storage`."""

from __future__ import annotations

import logging
import uuid
from typing import List

from . import config
from .models import Budget, Transaction, TransactionType
from .storage import Storage

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Short random identifier for new records."""
    return uuid.uuid4().hex[:9]


class TransactionLedger:
    """Upsert/delete operations over the transaction collection."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list(self, user_id: str) -> List[Transaction]:
        transactions: List[Transaction] = []
        for record in self.storage.load(config.TRANSACTIONS_KEY):
            if record.get('userId') != user_id:
                continue
            try:
                transactions.append(Transaction.from_dict(record))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping malformed transaction %r: %s", record.get('id'), exc)
        return transactions

    def save(self, transaction: Transaction) -> None:
        """Insert ``transaction`` or replace the stored one with the same id."""
        if transaction.is_withdrawal and transaction.type is not TransactionType.GAIN:
            transaction.type = TransactionType.GAIN

        records = self.storage.load(config.TRANSACTIONS_KEY)
        payload = transaction.to_dict()
        for index, record in enumerate(records):
            if str(record.get('id')) == str(transaction.id):
                records[index] = payload
                break
        else:
            records.append(payload)
        self.storage.save(config.TRANSACTIONS_KEY, records)

    def delete(self, transaction_id) -> bool:
        """Remove a transaction; ids are compared as strings.

        Returns:
            True if a record was removed, False if none matched.
        """
        records = self.storage.load(config.TRANSACTIONS_KEY)
        remaining = [r for r in records if str(r.get('id')) != str(transaction_id)]
        if len(remaining) == len(records):
            logger.debug("No transaction %s to delete", transaction_id)
            return False
        self.storage.save(config.TRANSACTIONS_KEY, remaining)
        return True


class BudgetLedger:
    """Monthly planned amounts, one per (user, category, month, year)."""

    def __init__(self, storage: Storage):
        self.storage = storage

    def list(self, user_id: str, month: int, year: int) -> List[Budget]:
        budgets: List[Budget] = []
        for record in self.storage.load(config.BUDGETS_KEY):
            if (
                record.get('userId') != user_id
                or record.get('month') != month
                or record.get('year') != year
            ):
                continue
            try:
                budgets.append(Budget.from_dict(record))
            except (KeyError, ValueError) as exc:
                logger.warning("Skipping malformed budget %r: %s", record.get('id'), exc)
        return budgets

    def save(self, budget: Budget) -> Budget:
        """Upsert ``budget`` by its natural key.

        When a budget already exists for the same user, category and period
        it is overwritten in place and keeps its id.

        Returns:
            The budget as stored.
        """
        records = self.storage.load(config.BUDGETS_KEY)
        for index, record in enumerate(records):
            key = (record.get('userId'), record.get('category'), record.get('month'), record.get('year'))
            if key == budget.natural_key:
                budget.id = str(record.get('id', budget.id))
                records[index] = budget.to_dict()
                break
        else:
            records.append(budget.to_dict())
        self.storage.save(config.BUDGETS_KEY, records)
        return budget

    def delete(self, budget_id) -> bool:
        records = self.storage.load(config.BUDGETS_KEY)
        remaining = [r for r in records if str(r.get('id')) != str(budget_id)]
        if len(remaining) == len(records):
            logger.debug("No budget %s to delete", budget_id)
            return False
        self.storage.save(config.BUDGETS_KEY, remaining)
        return True

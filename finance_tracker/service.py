"""Session-scoped facade over the registry, ledgers and aggregation.

A :class:`FinanceService` is bound to one :class:`~finance_tracker.models.Session`;
every read and write it performs is scoped to that session's user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from . import aggregation, backup, config
from .categories import CategoryRegistry, category_id
from .ledger import BudgetLedger, TransactionLedger, new_id
from .models import Budget, Category, PaymentMode, Session, Transaction, TransactionType
from .storage import Storage


def shift_month(month: int, year: int, delta: int) -> Tuple[int, int]:
    """Move ``delta`` months from ``month``/``year``, wrapping across years."""
    index = year * 12 + month + delta
    return index % 12, index // 12


def search_transactions(transactions: Iterable[Transaction], term: str = '') -> List[Transaction]:
    """Case-insensitive match on description or category, newest first."""
    needle = term.strip().lower()
    matches = [
        t for t in transactions
        if not needle or needle in t.description.lower() or needle in t.category.lower()
    ]
    return sorted(matches, key=lambda t: t.date, reverse=True)


@dataclass
class Snapshot:
    """Everything a dashboard refresh needs for one month."""

    month: int
    year: int
    transactions: List[Transaction] = field(default_factory=list)
    budgets: List[Budget] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)

    @property
    def period_transactions(self) -> List[Transaction]:
        return aggregation.filter_period(self.transactions, self.month, self.year)

    @property
    def annual_transactions(self) -> List[Transaction]:
        return aggregation.filter_year(self.transactions, self.year)

    def summary(self) -> Dict[str, Any]:
        return aggregation.dashboard_summary(self.transactions, self.month, self.year)

    def budget_progress(self) -> pd.DataFrame:
        return aggregation.budget_progress(self.budgets, self.period_transactions, self.categories)


class FinanceService:
    """Ledger and registry operations for the session's user."""

    def __init__(self, storage: Storage, session: Session):
        self.storage = storage
        self.session = session
        self.categories = CategoryRegistry(storage)
        self.transactions = TransactionLedger(storage)
        self.budgets = BudgetLedger(storage)

    @property
    def user_id(self) -> str:
        return self.session.user_id

    def refresh(self, month: int, year: int) -> Snapshot:
        return Snapshot(
            month=month,
            year=year,
            transactions=self.transactions.list(self.user_id),
            budgets=self.budgets.list(self.user_id, month, year),
            categories=self.categories.list(self.user_id),
        )

    # Transactions ------------------------------------------------------------

    def record_transaction(
        self,
        *,
        on: date,
        description: str,
        category: str,
        type: TransactionType,
        amount: float,
        payment_mode: str = PaymentMode.ESPECES.value,
        transaction_id: Optional[str] = None,
    ) -> Transaction:
        transaction = Transaction(
            id=transaction_id or new_id(),
            user_id=self.user_id,
            date=on,
            description=description,
            category=category,
            type=type,
            amount=amount,
            payment_mode=payment_mode,
        )
        self.transactions.save(transaction)
        return transaction

    def record_withdrawal(
        self,
        *,
        on: date,
        savings_category: str,
        amount: float,
        description: str = '',
        payment_mode: str = PaymentMode.ESPECES.value,
    ) -> Transaction:
        """Record money taken out of a savings category as income."""
        transaction = Transaction(
            id=new_id(),
            user_id=self.user_id,
            date=on,
            description=description or f"Retrait {savings_category}",
            category=config.WITHDRAWAL_CATEGORY,
            type=TransactionType.GAIN,
            amount=amount,
            payment_mode=payment_mode,
            linked_category=savings_category,
        )
        self.transactions.save(transaction)
        return transaction

    def delete_transaction(self, transaction_id) -> bool:
        return self.transactions.delete(transaction_id)

    # Categories and budgets --------------------------------------------------

    def add_category(self, name: str, type: TransactionType) -> bool:
        category = Category(
            id=category_id(name),
            name=name.strip(),
            user_id=self.user_id,
            type=TransactionType.parse(type),
        )
        return self.categories.add(category)

    def update_category(self, cat_id: str, new_name: str, new_type: TransactionType) -> bool:
        return self.categories.update(cat_id, new_name.strip(), new_type, self.user_id)

    def delete_category(self, cat_id: str) -> bool:
        return self.categories.delete(cat_id, self.user_id)

    def set_budget(self, category: str, month: int, year: int, planned_amount: float) -> Budget:
        budget = Budget(
            id=new_id(),
            user_id=self.user_id,
            category=category,
            month=month,
            year=year,
            planned_amount=planned_amount,
        )
        return self.budgets.save(budget)

    # Backup ------------------------------------------------------------------

    def export_data(self) -> Dict[str, Any]:
        return backup.export_data(self.storage)

    def import_data(self, document) -> Dict[str, int]:
        return backup.import_data(self.storage, document, self.user_id)

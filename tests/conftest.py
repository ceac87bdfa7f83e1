"""Shared pytest fixtures for the finance tracker tests."""

from __future__ import annotations

from datetime import date

import pytest

from finance_tracker import config
from finance_tracker.models import Session, Transaction, TransactionType, User
from finance_tracker.service import FinanceService
from finance_tracker.storage import Storage

USER_ID = "local-user"
OTHER_USER_ID = "someone-else"


def make_transaction(
    tx_id: str,
    amount: float,
    type: TransactionType = TransactionType.DEPENSE,
    category: str = "Alimentation",
    on: date = date(2024, 1, 15),
    user_id: str = USER_ID,
    linked_category: str | None = None,
) -> Transaction:
    """Helper to build a transaction with sensible defaults."""
    return Transaction(
        id=tx_id,
        user_id=user_id,
        date=on,
        description=f"tx {tx_id}",
        category=category,
        type=type,
        amount=amount,
        payment_mode="Carte",
        linked_category=linked_category,
    )


@pytest.fixture
def storage(tmp_path) -> Storage:
    """Storage rooted in a fresh temporary data directory."""
    return Storage(tmp_path / "data")


@pytest.fixture
def session() -> Session:
    return Session(user=User.from_dict(config.LOCAL_USER))


@pytest.fixture
def service(storage, session) -> FinanceService:
    return FinanceService(storage, session)

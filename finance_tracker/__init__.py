"""Top-level package for the personal finance tracker.

The primary modules are:

* ``storage`` – JSON collections persisted under fixed keys
* ``categories`` – category registry with rename cascades
* ``ledger`` – transaction and budget ledgers
* ``aggregation`` – monthly/annual totals, rollover and budget progress
* ``backup`` – full export and import
* ``service`` – session-scoped facade tying everything together

To print this month's figures from the command line::

    python -m finance_tracker summary
"""

from .errors import (  # noqa: F401  # re-exported for convenience
    FinanceTrackerError,
    ImportFormatError,
    SystemCategoryError,
    ValidationError,
)
from .models import Budget, Category, Session, Transaction, TransactionType, User  # noqa: F401
from .service import FinanceService  # noqa: F401
from .storage import Storage  # noqa: F401

__version__ = "1.0.0"

__all__ = [
    "Budget",
    "Category",
    "FinanceService",
    "FinanceTrackerError",
    "ImportFormatError",
    "Session",
    "Storage",
    "SystemCategoryError",
    "Transaction",
    "TransactionType",
    "User",
    "ValidationError",
]

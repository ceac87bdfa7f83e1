"""Dashboard figures derived from the ledgers.

Every function here is pure: it takes lists of records and returns numbers
or DataFrames, never touching storage.  Months are numbered 0-11 throughout
to match the budget records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from . import config
from .categories import resolve
from .models import Budget, Category, Transaction, TransactionType

FRAME_COLUMNS = ['id', 'Date', 'Description', 'Category', 'Type', 'Amount', 'Linked Category']

GAIN = TransactionType.GAIN.value
DEPENSE = TransactionType.DEPENSE.value
EPARGNE = TransactionType.EPARGNE.value


@dataclass(frozen=True)
class Totals:
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0

    @property
    def net(self) -> float:
        return self.income - self.expenses - self.savings

    def as_dict(self) -> Dict[str, float]:
        return {
            'income': self.income,
            'expenses': self.expenses,
            'savings': self.savings,
            'net': self.net,
        }


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    """Build a DataFrame with one row per transaction plus Year/Month columns."""
    rows = [
        {
            'id': t.id,
            'Date': t.date,
            'Description': t.description,
            'Category': t.category,
            'Type': t.type.value,
            'Amount': float(t.amount),
            'Linked Category': t.linked_category,
        }
        for t in transactions
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    df['Date'] = pd.to_datetime(df['Date'])
    df['Amount'] = pd.to_numeric(df['Amount'], errors='coerce').fillna(0.0).astype(float)
    df['Year'] = df['Date'].dt.year
    df['Month'] = df['Date'].dt.month - 1
    return df


def _totals(df: pd.DataFrame) -> Totals:
    if df.empty:
        return Totals()
    grouped = df.groupby('Type')['Amount'].sum()
    return Totals(
        income=float(grouped.get(GAIN, 0.0)),
        expenses=float(grouped.get(DEPENSE, 0.0)),
        savings=float(grouped.get(EPARGNE, 0.0)),
    )


def filter_period(transactions: Iterable[Transaction], month: int, year: int) -> List[Transaction]:
    return [t for t in transactions if t.date.year == year and t.date.month - 1 == month]


def filter_year(transactions: Iterable[Transaction], year: int) -> List[Transaction]:
    return [t for t in transactions if t.date.year == year]


def monthly_totals(transactions: Iterable[Transaction], month: int, year: int) -> Totals:
    """Sum amounts by type over the transactions dated in ``month``/``year``."""
    df = transactions_frame(transactions)
    return _totals(df[(df['Year'] == year) & (df['Month'] == month)])


def annual_totals(transactions: Iterable[Transaction], year: int) -> Totals:
    df = transactions_frame(transactions)
    return _totals(df[df['Year'] == year])


def monthly_series(transactions: Iterable[Transaction], year: int) -> pd.DataFrame:
    """Twelve-row series of income, expenses and savings for ``year``.

    Returns:
        DataFrame with columns: Month (0-11), Label, Income, Expenses,
        Savings, Balance (income minus expenses), Net (balance minus savings)
    """
    df = transactions_frame(transactions)
    df = df[df['Year'] == year]
    months = range(12)

    series = pd.DataFrame({'Month': list(months)})
    series['Label'] = [name[:3] for name in config.MONTHS]
    for column, type_name in (('Income', GAIN), ('Expenses', DEPENSE), ('Savings', EPARGNE)):
        sums = df[df['Type'] == type_name].groupby('Month')['Amount'].sum()
        series[column] = [float(sums.get(m, 0.0)) for m in months]
    series['Balance'] = series['Income'] - series['Expenses']
    series['Net'] = series['Balance'] - series['Savings']
    return series


def expense_breakdown(transactions: Iterable[Transaction], month: int, year: int) -> pd.Series:
    """Expense totals per category for the period, largest first."""
    df = transactions_frame(transactions)
    scoped = df[(df['Year'] == year) & (df['Month'] == month) & (df['Type'] == DEPENSE)]
    if scoped.empty:
        return pd.Series(dtype=float, name='Amount')
    return scoped.groupby('Category')['Amount'].sum().sort_values(ascending=False)


def savings_actual(transactions: Iterable[Transaction], category_name: str) -> float:
    """Deposits into a savings category minus withdrawals drawn from it.

    The result may be negative; use :func:`display_amount` when showing it.
    """
    df = transactions_frame(transactions)
    if df.empty:
        return 0.0
    deposits = df[(df['Category'] == category_name) & (df['Type'] == EPARGNE)]['Amount'].sum()
    withdrawals = df[
        (df['Category'] == config.WITHDRAWAL_CATEGORY)
        & (df['Linked Category'] == category_name)
    ]['Amount'].sum()
    return float(deposits - withdrawals)


def display_amount(value: float) -> float:
    return max(0.0, float(value))


def rollover_balance(transactions: Iterable[Transaction], month: int, year: int) -> float:
    """Surplus carried into ``month`` from the earlier months of ``year``.

    Each month adds ``income - expenses - savings``.  Whenever the running
    total drops below zero it restarts from zero, so a deficit month wipes
    out earlier surplus without carrying a debt forward.
    """
    series = monthly_series(transactions, year)
    running = 0.0
    for net in series.loc[series['Month'] < month, 'Net']:
        running += float(net)
        if running < 0:
            running = 0.0
    return running


def available_liquidity(transactions: Iterable[Transaction], month: int, year: int) -> float:
    transactions = list(transactions)
    return rollover_balance(transactions, month, year) + monthly_totals(transactions, month, year).net


def budget_progress(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> pd.DataFrame:
    """Compare each budget against the actuals of the given transactions.

    Pass the transactions of the budget's period.  Budgets whose category
    no longer resolves are treated as expense budgets.

    Returns:
        DataFrame with columns: id, Category, Type, Planned, Actual,
        Remaining, Percent, Over, Met
    """
    transactions = list(transactions)
    categories = list(categories)
    df = transactions_frame(transactions)

    rows = []
    for budget in budgets:
        category: Optional[Category] = resolve(budget.category, categories)
        type_name = category.type.value if category else DEPENSE
        planned = float(budget.planned_amount)

        if type_name == EPARGNE:
            actual = savings_actual(transactions, budget.category)
        else:
            actual = float(
                df[(df['Category'] == budget.category) & (df['Type'] == type_name)]['Amount'].sum()
            )

        percent = float(np.clip(actual / (planned or 1) * 100.0, 0.0, 100.0))
        rows.append({
            'id': budget.id,
            'Category': budget.category,
            'Type': type_name,
            'Planned': planned,
            'Actual': actual,
            'Remaining': planned - actual,
            'Percent': percent,
            'Over': type_name == DEPENSE and planned > 0 and actual > planned,
            'Met': type_name in (EPARGNE, GAIN) and planned > 0 and actual >= planned,
        })

    columns = ['id', 'Category', 'Type', 'Planned', 'Actual', 'Remaining', 'Percent', 'Over', 'Met']
    return pd.DataFrame(rows, columns=columns)


def dashboard_summary(transactions: Iterable[Transaction], month: int, year: int) -> Dict[str, object]:
    """Headline figures for the dashboard of ``month``/``year``."""
    transactions = list(transactions)
    monthly = monthly_totals(transactions, month, year)
    rollover = rollover_balance(transactions, month, year)
    return {
        'month': month,
        'year': year,
        'monthly': monthly.as_dict(),
        'annual': annual_totals(transactions, year).as_dict(),
        'rollover': rollover,
        'available_liquidity': rollover + monthly.net,
    }

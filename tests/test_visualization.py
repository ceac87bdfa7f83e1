from __future__ import annotations

from datetime import date

import plotly.graph_objects as go

from conftest import make_transaction
from finance_tracker import aggregation as agg
from finance_tracker import visualization as viz
from finance_tracker.categories import default_categories
from finance_tracker.models import Budget, TransactionType


def _transactions():
    return [
        make_transaction("s", 900, TransactionType.GAIN, "Salaire", date(2024, 2, 1)),
        make_transaction("a", 200, TransactionType.DEPENSE, "Alimentation", date(2024, 2, 3)),
        make_transaction("l", 350, TransactionType.DEPENSE, "Loyer", date(2024, 2, 4)),
    ]


def test_monthly_overview_chart() -> None:
    fig = viz.create_monthly_overview_chart(agg.monthly_totals(_transactions(), 1, 2024))

    assert isinstance(fig, go.Figure)
    assert list(fig.data[0].x) == ["Entrées", "Dépenses", "Épargne"]
    assert list(fig.data[0].y) == [900, 550, 0]
    assert fig.layout.title.text == "Aperçu Mensuel"


def test_expense_pie_chart() -> None:
    fig = viz.create_expense_pie_chart(agg.expense_breakdown(_transactions(), 1, 2024))
    assert isinstance(fig, go.Figure)
    assert set(fig.data[0].labels) == {"Alimentation", "Loyer"}


def test_annual_evolution_chart_has_two_traces() -> None:
    fig = viz.create_annual_evolution_chart(agg.monthly_series(_transactions(), 2024), title="2024")
    assert len(fig.data) == 2
    assert len(fig.data[0].x) == 12
    assert fig.layout.title.text == "2024"


def test_budget_progress_chart_flags_overrun() -> None:
    budgets = [
        Budget(id="b1", user_id="u", category="Loyer", month=1, year=2024, planned_amount=300),
        Budget(id="b2", user_id="u", category="Alimentation", month=1, year=2024, planned_amount=400),
    ]
    progress = agg.budget_progress(budgets, _transactions(), default_categories())
    fig = viz.create_budget_progress_chart(progress)

    assert list(fig.data[0].marker.color) == [viz.EXPENSE_COLOR, viz.SAVINGS_COLOR]


def test_empty_inputs_give_placeholder() -> None:
    assert viz.create_expense_pie_chart(agg.expense_breakdown([], 0, 2024)).layout.title.text == "No data to display"
    assert viz.create_budget_progress_chart(agg.budget_progress([], [], [])).layout.title.text == "No data to display"

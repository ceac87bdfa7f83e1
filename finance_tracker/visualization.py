"""Plotly figure builders for the tracker dashboard.

Each function accepts the output of the matching helper in
:mod:`finance_tracker.aggregation` and returns a
`plotly.graph_objects.Figure` that any front end can render.  Empty input
yields an empty figure titled "No data to display".
"""

from __future__ import annotations

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .aggregation import Totals

INCOME_COLOR = "#10b981"
EXPENSE_COLOR = "#f43f5e"
SAVINGS_COLOR = "#6366f1"
PALETTE = ["#6366f1", "#10b981", "#f59e0b", "#f43f5e", "#ec4899", "#8b5cf6", "#06b6d4"]


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def create_monthly_overview_chart(totals: Totals, title: str | None = None) -> go.Figure:
    """Bar chart of the month's income, expenses and savings.

    Parameters
    ----------
    totals : Totals
        Output of :func:`aggregation.monthly_totals`.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Three-bar chart.
    """
    fig = go.Figure(
        go.Bar(
            x=["Entrées", "Dépenses", "Épargne"],
            y=[totals.income, totals.expenses, totals.savings],
            marker_color=[INCOME_COLOR, EXPENSE_COLOR, SAVINGS_COLOR],
        )
    )
    fig.update_layout(title=title or "Aperçu Mensuel", yaxis_title="Montant")
    return fig


def create_expense_pie_chart(breakdown: pd.Series, title: str | None = None) -> go.Figure:
    """Donut chart of expenses per category.

    Parameters
    ----------
    breakdown : pandas.Series
        Series indexed by category, as returned by
        :func:`aggregation.expense_breakdown`.
    title : str, optional
        Chart title.
    """
    if breakdown.empty:
        return _empty_figure()
    df = breakdown.reset_index()
    df.columns = ["Category", "Value"]
    fig = px.pie(
        df,
        names="Category",
        values="Value",
        hole=0.4,
        color_discrete_sequence=PALETTE,
    )
    fig.update_layout(title=title or "Répartition Mensuelle")
    return fig


def create_annual_evolution_chart(series: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Area chart of monthly income and expenses across the year.

    Parameters
    ----------
    series : pandas.DataFrame
        Twelve-row frame from :func:`aggregation.monthly_series`.
    title : str, optional
        Chart title.
    """
    if series.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=series["Label"], y=series["Income"], name="Entrées",
            fill="tozeroy", line=dict(color=INCOME_COLOR),
        )
    )
    fig.add_trace(
        go.Scatter(
            x=series["Label"], y=series["Expenses"], name="Dépenses",
            fill="tozeroy", line=dict(color=EXPENSE_COLOR),
        )
    )
    fig.update_layout(title=title or "Récapitulatif Annuel", xaxis_title="Mois", yaxis_title="Montant")
    return fig


def create_budget_progress_chart(progress: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Horizontal bars of percent consumed per budget, red when over."""
    if progress.empty:
        return _empty_figure()
    colors = [EXPENSE_COLOR if over else SAVINGS_COLOR for over in progress["Over"]]
    fig = go.Figure(
        go.Bar(
            x=progress["Percent"],
            y=progress["Category"],
            orientation="h",
            marker_color=colors,
            customdata=progress[["Actual", "Planned"]].to_numpy(),
            hovertemplate="%{y}: %{customdata[0]:,.0f} / %{customdata[1]:,.0f}<extra></extra>",
        )
    )
    fig.update_layout(
        title=title or "État du Budget Mensuel",
        xaxis=dict(range=[0, 100], title="% consommé"),
    )
    return fig

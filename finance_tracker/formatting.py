"""Formatting utilities for amounts and periods."""

from __future__ import annotations

from typing import Union

from . import config

CURRENCY_LABEL = "FCFA"


def format_currency(amount: Union[float, int], include_sign: bool = True) -> str:
    """Format an amount the way the dashboard shows it.

    Amounts are rounded to whole units with a space as thousands separator.

    Example:
        >>> format_currency(1234567)
        '1 234 567 FCFA'
        >>> format_currency(-2500.4, include_sign=False)
        '-2 500'
    """
    formatted = f"{amount:,.0f}".replace(",", " ")
    return f"{formatted} {CURRENCY_LABEL}" if include_sign else formatted


def format_period(month: int, year: int) -> str:
    """Human label for a 0-based month, e.g. ``format_period(0, 2024) == 'Janvier 2024'``."""
    return f"{config.MONTHS[month]} {year}"

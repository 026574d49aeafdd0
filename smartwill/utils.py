"""
Utility functions for decimal-string balances and price history.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional

from smartwill.models import StacksPricePoint


# Digits with optional comma thousands grouping and an optional fraction
DECIMAL_PATTERN = re.compile(r'^-?(\d{1,3}(,\d{3})+|\d+)(\.\d+)?$')

# Samples kept by the market widget
PRICE_HISTORY_LIMIT = 50


def parse_decimal_string(value: str, allow_currency: bool = False) -> Optional[Decimal]:
    """
    Parse a displayed balance such as '50,000', '2.5' or '$125,000'.

    Args:
        value: The string to parse
        allow_currency: Accept a single leading '$'

    Returns:
        The Decimal value (possibly negative), or None if malformed
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    negative = text.startswith('-')
    if negative:
        text = text[1:]
    if allow_currency and text.startswith('$'):
        text = text[1:]

    if not DECIMAL_PATTERN.match(text):
        return None

    try:
        number = Decimal(text.replace(',', ''))
    except InvalidOperation:
        return None

    return -number if negative else number


def format_percentage(value: float) -> str:
    if float(value).is_integer():
        return f'{int(value)}%'
    return f'{value:.2f}%'


def order_price_points(points: Iterable[StacksPricePoint]) -> List[StacksPricePoint]:
    """Sort price samples by timestamp (stable for equal timestamps)."""
    return sorted(points, key=lambda p: p.timestamp)


def append_price_point(history: Iterable[StacksPricePoint], point: StacksPricePoint,
                       limit: int = PRICE_HISTORY_LIMIT) -> List[StacksPricePoint]:
    """Return a new history with the sample appended, keeping the latest `limit` samples."""
    updated = order_price_points(list(history) + [point])
    return updated[-limit:] if limit > 0 else []


def price_change(history: Iterable[StacksPricePoint]) -> float:
    """Difference between the two most recent samples."""
    ordered = order_price_points(history)
    if len(ordered) < 2:
        return 0.0
    return ordered[-1].price - ordered[-2].price

"""Shared numeric and sorting helpers for the aggregation functions."""

from typing import Dict, Iterable, List, Sequence, TypeVar

from records.models import Order

T = TypeVar('T')


def safe_percentage(part: float, whole: float) -> float:
    """Return part / whole * 100, or 0.0 when whole is zero."""
    if not whole:
        return 0.0
    return part / whole * 100


def sort_by_amount_desc(rows: Iterable[T]) -> List[T]:
    """Sort summary rows by amount, largest first; ties keep input order."""
    return sorted(rows, key=lambda row: row.amount, reverse=True)


def top_n(rows: Sequence[T], n: int) -> List[T]:
    """First n rows of an already sorted summary list."""
    return list(rows[:max(n, 0)])


def index_orders(orders: Iterable[Order]) -> Dict[str, Order]:
    """Map order id to order so line items can be joined without rescanning."""
    return {order.id: order for order in orders}

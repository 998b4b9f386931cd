"""Spending aggregations over orders and line items.

Every function is pure: it reads only its arguments and returns new
summary rows. Callers re-invoke them whenever their record collections
change.
"""

from typing import Dict, Iterable, List, Tuple
from datetime import date
from collections import defaultdict
import calendar

from records.models import Order, LineItem
from analytics.models import CategorySpending, MonthlySpending, VendorSpending
from analytics.helpers import safe_percentage, sort_by_amount_desc


def category_spending(line_items: Iterable[LineItem]) -> List[CategorySpending]:
    """
    Sum line item amounts per category.

    Categories are grouped by exact label; "Food" and "food" are two groups.

    Args:
        line_items: Line items to aggregate

    Returns:
        One row per category, largest amount first
    """
    total_amount = 0.0
    by_category = defaultdict(lambda: {'amount': 0.0, 'count': 0})

    for item in line_items:
        amount = item.amount
        total_amount += amount

        by_category[item.category]['amount'] += amount
        by_category[item.category]['count'] += 1

    rows = [
        CategorySpending(
            category=category,
            amount=data['amount'],
            percentage=safe_percentage(data['amount'], total_amount),
            count=data['count']
        )
        for category, data in by_category.items()
    ]

    return sort_by_amount_desc(rows)


def monthly_spending(orders: Iterable[Order]) -> List[MonthlySpending]:
    """
    Sum order totals per calendar month.

    Args:
        orders: Orders to aggregate

    Returns:
        One row per (year, month), oldest month first
    """
    by_month: Dict[Tuple[int, int], float] = defaultdict(float)

    for order in orders:
        key = (order.order_date.year, order.order_date.month)
        by_month[key] += order.total_amount

    return [
        MonthlySpending(
            month=calendar.month_abbr[month],
            month_number=month,
            year=year,
            amount=amount
        )
        for (year, month), amount in sorted(by_month.items())
    ]


def vendor_spending(orders: Iterable[Order]) -> List[VendorSpending]:
    """
    Sum order totals per vendor.

    Args:
        orders: Orders to aggregate

    Returns:
        One row per vendor name, largest amount first
    """
    by_vendor = defaultdict(lambda: {'amount': 0.0, 'count': 0})

    for order in orders:
        by_vendor[order.vendor_name]['amount'] += order.total_amount
        by_vendor[order.vendor_name]['count'] += 1

    rows = [
        VendorSpending(vendor=vendor, amount=data['amount'], count=data['count'])
        for vendor, data in by_vendor.items()
    ]

    return sort_by_amount_desc(rows)


def spending_between(orders: Iterable[Order], start: date, end: date) -> float:
    """Sum order totals dated within [start, end]."""
    return sum(
        (order.total_amount for order in orders if start <= order.order_date <= end),
        0.0
    )


def line_items_for_order(line_items: Iterable[LineItem], order_id: str) -> List[LineItem]:
    return [item for item in line_items if item.order_id == order_id]

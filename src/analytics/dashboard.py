"""Dashboard summary built from one record snapshot."""

from datetime import date, timedelta

from records.repository import RecordSnapshot
from analytics.models import DashboardSummary
from analytics.aggregations import (
    category_spending,
    vendor_spending,
    spending_between
)
from analytics.budgets import compute_all_budget_usage, end_of_month, DEFAULT_WEEK_START
from analytics.helpers import safe_percentage, top_n

DEFAULT_NEAR_THRESHOLD = 85.0
TOP_COUNT = 3
RECENT_ORDER_COUNT = 5


def build_dashboard_summary(
    snapshot: RecordSnapshot,
    today: date,
    week_start: str = DEFAULT_WEEK_START,
    near_threshold: float = DEFAULT_NEAR_THRESHOLD
) -> DashboardSummary:
    """
    Build the dashboard headline figures.

    Args:
        snapshot: Orders, line items and budgets for one user
        today: Reference date; its calendar month is the current month
        week_start: First day of a week for weekly budgets
        near_threshold: Usage percentage above which a budget counts as near its limit

    Returns:
        Dashboard summary
    """
    orders = snapshot.orders

    current_start = today.replace(day=1)
    current_end = end_of_month(today)
    last_end = current_start - timedelta(days=1)
    last_start = last_end.replace(day=1)

    current_month_spending = spending_between(orders, current_start, current_end)
    last_month_spending = spending_between(orders, last_start, last_end)

    usages = compute_all_budget_usage(
        snapshot.budgets, orders, snapshot.line_items, week_start
    )

    recent_orders = sorted(orders, key=lambda order: order.order_date, reverse=True)

    return DashboardSummary(
        as_of=today,
        current_month_spending=current_month_spending,
        last_month_spending=last_month_spending,
        spending_change=safe_percentage(
            current_month_spending - last_month_spending, last_month_spending
        ),
        total_spending=sum((order.total_amount for order in orders), 0.0),
        order_count=len(orders),
        current_month_order_count=sum(
            1 for order in orders if current_start <= order.order_date <= current_end
        ),
        over_budget_count=sum(1 for usage in usages if usage.is_over_budget),
        near_budget_count=sum(1 for usage in usages if usage.is_near_limit(near_threshold)),
        top_categories=top_n(category_spending(snapshot.line_items), TOP_COUNT),
        top_vendors=top_n(vendor_spending(orders), TOP_COUNT),
        recent_orders=top_n(recent_orders, RECENT_ORDER_COUNT)
    )

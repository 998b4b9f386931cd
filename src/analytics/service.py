"""Analytics service that loads records and runs the aggregations."""

import os
from typing import Dict, Any, Optional
from datetime import date, datetime
import logging

from records.repository import RecordStore
from records.models import Order, LineItem
from analytics.models import (
    CategorySpending,
    MonthlySpending,
    VendorSpending,
    BudgetUsage
)
from analytics.aggregations import (
    category_spending,
    monthly_spending,
    vendor_spending,
    line_items_for_order
)
from analytics.budgets import compute_all_budget_usage, DEFAULT_WEEK_START
from analytics.dashboard import build_dashboard_summary, DEFAULT_NEAR_THRESHOLD
from analytics.helpers import top_n
from shared.validators import validate_week_start
from shared.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _money(value: float) -> float:
    return round(value, 2)


def serialize_order(order: Order) -> Dict[str, Any]:
    return {
        'id': order.id,
        'vendor_name': order.vendor_name,
        'order_date': order.order_date.isoformat(),
        'total_amount': _money(order.total_amount),
        'currency': order.currency
    }


def serialize_line_item(item: LineItem) -> Dict[str, Any]:
    return {
        'id': item.id,
        'order_id': item.order_id,
        'item_name': item.item_name,
        'price': _money(item.price),
        'quantity': item.quantity,
        'category': item.category,
        'amount': _money(item.amount)
    }


def serialize_category(row: CategorySpending) -> Dict[str, Any]:
    return {
        'category': row.category,
        'amount': _money(row.amount),
        'percentage': round(row.percentage, 2),
        'count': row.count
    }


def serialize_month(row: MonthlySpending) -> Dict[str, Any]:
    return {
        'month': row.month,
        'month_number': row.month_number,
        'year': row.year,
        'amount': _money(row.amount)
    }


def serialize_vendor(row: VendorSpending) -> Dict[str, Any]:
    return {
        'vendor': row.vendor,
        'amount': _money(row.amount),
        'count': row.count
    }


def serialize_budget_usage(usage: BudgetUsage, near_threshold: float) -> Dict[str, Any]:
    return {
        'budget': usage.budget.model_dump(mode='json'),
        'period_start': usage.period.start.isoformat(),
        'period_end': usage.period.end.isoformat(),
        'spent': _money(usage.spent),
        'remaining': _money(usage.remaining),
        'percentage': round(usage.percentage, 2),
        'is_over_budget': usage.is_over_budget,
        'is_near_limit': usage.is_near_limit(near_threshold)
    }


class AnalyticsService:
    """Service for computing spending analytics for a user."""

    def __init__(self):
        """Initialize analytics service."""
        self.record_store = RecordStore()
        self.week_start = validate_week_start(os.environ.get('WEEK_START', DEFAULT_WEEK_START))
        self.near_threshold = float(
            os.environ.get('BUDGET_NEAR_THRESHOLD', DEFAULT_NEAR_THRESHOLD)
        )

    def get_category_spending(self, user_id: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Get spending by line item category.

        Args:
            user_id: User ID
            limit: Optional number of top categories to return

        Returns:
            Dictionary with categories and total
        """
        line_items = self.record_store.fetch_line_items(user_id)
        rows = category_spending(line_items)

        if limit:
            rows = top_n(rows, limit)

        return {
            'categories': [serialize_category(row) for row in rows],
            'total_amount': _money(sum(item.amount for item in line_items)),
            'count': len(rows)
        }

    def get_monthly_spending(self, user_id: str) -> Dict[str, Any]:
        """
        Get spending by calendar month.

        Args:
            user_id: User ID

        Returns:
            Dictionary with months in chronological order
        """
        orders = self.record_store.fetch_orders(user_id)
        rows = monthly_spending(orders)

        return {
            'months': [serialize_month(row) for row in rows],
            'count': len(rows)
        }

    def get_vendor_spending(self, user_id: str, limit: Optional[int] = None) -> Dict[str, Any]:
        """
        Get spending by vendor.

        Args:
            user_id: User ID
            limit: Optional number of top vendors to return

        Returns:
            Dictionary with vendors
        """
        orders = self.record_store.fetch_orders(user_id)
        rows = vendor_spending(orders)

        if limit:
            rows = top_n(rows, limit)

        return {
            'vendors': [serialize_vendor(row) for row in rows],
            'count': len(rows)
        }

    def get_budget_usage(self, user_id: str) -> Dict[str, Any]:
        """
        Get usage of every budget within its current period.

        Args:
            user_id: User ID

        Returns:
            Dictionary with budget usage in budget order
        """
        snapshot = self.record_store.load_snapshot(user_id)
        usages = compute_all_budget_usage(
            snapshot.budgets,
            snapshot.orders,
            snapshot.line_items,
            self.week_start
        )

        logger.info(f"Computed usage of {len(usages)} budgets for user {user_id}")

        return {
            'budgets': [serialize_budget_usage(usage, self.near_threshold) for usage in usages],
            'count': len(usages)
        }

    def get_dashboard(self, user_id: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Get dashboard headline figures.

        Args:
            user_id: User ID
            today: Reference date (default: current UTC date)

        Returns:
            Dashboard summary
        """
        today = today or datetime.utcnow().date()
        snapshot = self.record_store.load_snapshot(user_id)

        summary = build_dashboard_summary(
            snapshot,
            today,
            week_start=self.week_start,
            near_threshold=self.near_threshold
        )

        return {
            'as_of': summary.as_of.isoformat(),
            'current_month_spending': _money(summary.current_month_spending),
            'last_month_spending': _money(summary.last_month_spending),
            'spending_change': round(summary.spending_change, 2),
            'total_spending': _money(summary.total_spending),
            'order_count': summary.order_count,
            'current_month_order_count': summary.current_month_order_count,
            'over_budget_count': summary.over_budget_count,
            'near_budget_count': summary.near_budget_count,
            'top_categories': [serialize_category(row) for row in summary.top_categories],
            'top_vendors': [serialize_vendor(row) for row in summary.top_vendors],
            'recent_orders': [serialize_order(order) for order in summary.recent_orders]
        }

    def get_order_detail(self, user_id: str, order_id: str) -> Dict[str, Any]:
        """
        Get an order with its line items.

        Args:
            user_id: User ID
            order_id: Order ID

        Returns:
            Order data with line items

        Raises:
            ValidationError: If order ID is missing
            NotFoundError: If order not found
        """
        if not order_id:
            raise ValidationError("Order ID is required")

        order = self.record_store.fetch_order(user_id, order_id)

        if not order:
            raise NotFoundError("Order not found")

        items = line_items_for_order(
            self.record_store.fetch_line_items(user_id, order_id=order_id),
            order_id
        )

        return {
            **serialize_order(order),
            'line_items': [serialize_line_item(item) for item in items],
            'item_count': len(items)
        }

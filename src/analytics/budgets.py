"""Budget period resolution and budget usage."""

from typing import Dict, Iterable, List, Optional
from datetime import date, timedelta
import calendar
import logging

from records.models import Order, LineItem, Budget
from analytics.models import BudgetPeriod, BudgetUsage
from analytics.helpers import index_orders, safe_percentage
from shared.validators import validate_week_start

logger = logging.getLogger(__name__)

# date.weekday() index of the first day of a week
WEEK_START_DAYS = {
    'monday': 0,
    'sunday': 6
}

DEFAULT_WEEK_START = 'sunday'


def end_of_month(day: date) -> date:
    """Last calendar day of the month containing day."""
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def end_of_week(day: date, week_start: str = DEFAULT_WEEK_START) -> date:
    """
    Last day of the week containing day.

    Args:
        day: Any day of the week
        week_start: 'sunday' (weeks end on Saturday) or 'monday' (ISO weeks)

    Returns:
        The week's last day, which may be day itself
    """
    first_weekday = WEEK_START_DAYS[validate_week_start(week_start)]
    last_weekday = (first_weekday - 1) % 7
    return day + timedelta(days=(last_weekday - day.weekday()) % 7)


def resolve_budget_period(budget: Budget, week_start: str = DEFAULT_WEEK_START) -> BudgetPeriod:
    """
    Resolve the inclusive date interval a budget covers.

    The period starts on the budget's start date and runs to the end of
    that month (monthly) or that week (weekly).

    Args:
        budget: Budget to resolve
        week_start: First day of a week for weekly budgets

    Returns:
        Budget period
    """
    start = budget.start_date

    if budget.period_type == 'monthly':
        end = end_of_month(start)
    else:  # weekly
        end = end_of_week(start, week_start)

    return BudgetPeriod(start=start, end=end)


def compute_budget_usage(
    budget: Budget,
    orders: Iterable[Order],
    line_items: Iterable[LineItem],
    week_start: str = DEFAULT_WEEK_START,
    order_index: Optional[Dict[str, Order]] = None
) -> BudgetUsage:
    """
    Compute how much of a budget has been spent within its period.

    Category budgets sum the matching line items whose parent order is
    dated inside the period; line items without a parent order are
    skipped. Overall budgets sum the totals of orders dated inside the
    period.

    Args:
        budget: Budget to evaluate
        orders: All orders
        line_items: All line items
        week_start: First day of a week for weekly budgets
        order_index: Prebuilt order id map; built from orders when omitted

    Returns:
        Budget usage
    """
    period = resolve_budget_period(budget, week_start)

    if budget.category is not None:
        if order_index is None:
            order_index = index_orders(orders)

        spent = 0.0
        skipped = 0

        for item in line_items:
            if item.category != budget.category:
                continue

            order = order_index.get(item.order_id)
            if order is None:
                skipped += 1
                continue

            if period.contains(order.order_date):
                spent += item.amount

        if skipped:
            logger.debug(
                f"Budget {budget.id}: skipped {skipped} line items with no parent order"
            )
    else:
        spent = sum(
            (order.total_amount for order in orders if period.contains(order.order_date)),
            0.0
        )

    return BudgetUsage(
        budget=budget,
        period=period,
        spent=spent,
        remaining=budget.amount - spent,
        percentage=safe_percentage(spent, budget.amount)
    )


def compute_all_budget_usage(
    budgets: Iterable[Budget],
    orders: Iterable[Order],
    line_items: Iterable[LineItem],
    week_start: str = DEFAULT_WEEK_START
) -> List[BudgetUsage]:
    """
    Compute usage for every budget, preserving the budgets' order.

    Args:
        budgets: Budgets to evaluate
        orders: All orders
        line_items: All line items
        week_start: First day of a week for weekly budgets

    Returns:
        One usage record per budget
    """
    orders = list(orders)
    line_items = list(line_items)
    order_index = index_orders(orders)

    return [
        compute_budget_usage(budget, orders, line_items, week_start, order_index)
        for budget in budgets
    ]

"""Derived analytics models."""

from typing import List
from datetime import date
from pydantic import BaseModel, ConfigDict

from records.models import Budget, Order


class CategorySpending(BaseModel):
    """Spending summed over the line items of one category."""

    model_config = ConfigDict(frozen=True)

    category: str
    amount: float
    percentage: float
    count: int


class MonthlySpending(BaseModel):
    """Order totals summed over one calendar month."""

    model_config = ConfigDict(frozen=True)

    month: str
    month_number: int
    year: int
    amount: float


class VendorSpending(BaseModel):
    """Order totals summed over one vendor."""

    model_config = ConfigDict(frozen=True)

    vendor: str
    amount: float
    count: int


class BudgetPeriod(BaseModel):
    """Inclusive date interval a budget applies to."""

    model_config = ConfigDict(frozen=True)

    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


class BudgetUsage(BaseModel):
    """Consumption of one budget within its resolved period."""

    model_config = ConfigDict(frozen=True)

    budget: Budget
    period: BudgetPeriod
    spent: float
    remaining: float
    percentage: float

    @property
    def is_over_budget(self) -> bool:
        return self.percentage > 100

    def is_near_limit(self, threshold: float = 85.0) -> bool:
        """True when usage is above threshold but not over budget."""
        return threshold < self.percentage <= 100


class DashboardSummary(BaseModel):
    """Headline figures for the dashboard view."""

    model_config = ConfigDict(frozen=True)

    as_of: date
    current_month_spending: float
    last_month_spending: float
    spending_change: float
    total_spending: float
    order_count: int
    current_month_order_count: int
    over_budget_count: int
    near_budget_count: int
    top_categories: List[CategorySpending]
    top_vendors: List[VendorSpending]
    recent_orders: List[Order]

"""Record models for orders, line items and budgets."""

from typing import Any, Literal, Optional
from datetime import date
from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.validators import parse_date, validate_period_type


class Order(BaseModel):
    """One purchase transaction parsed from a forwarded order email."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    user_id: str
    vendor_name: str
    order_date: date
    total_amount: float = Field(..., ge=0, description="Order total")
    currency: str = Field(default="USD", description="Informational currency code")
    forwarded_email_id: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator('order_date', mode='before')
    @classmethod
    def _parse_order_date(cls, value: Any) -> date:
        return parse_date(value, 'order_date')


class LineItem(BaseModel):
    """One purchased item within an order."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    order_id: str
    user_id: Optional[str] = None
    item_name: str
    price: float = Field(..., ge=0, description="Unit price")
    quantity: int = Field(..., gt=0, description="Units purchased")
    category: str = Field(..., min_length=1, description="Free-text category label")
    created_at: Optional[str] = None

    @property
    def amount(self) -> float:
        """Effective amount of the item (price x quantity)."""
        return self.price * self.quantity


class Budget(BaseModel):
    """Spending cap over a recurring period, optionally scoped to one category."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    period_type: Literal['monthly', 'weekly']
    amount: float = Field(..., ge=0, description="Budget cap")
    start_date: date
    category: Optional[str] = Field(None, description="Category filter (None for all categories)")
    created_at: Optional[str] = None

    @field_validator('period_type', mode='before')
    @classmethod
    def _normalize_period_type(cls, value: Any) -> str:
        return validate_period_type(value)

    @field_validator('start_date', mode='before')
    @classmethod
    def _parse_start_date(cls, value: Any) -> date:
        return parse_date(value, 'start_date')

    @field_validator('category', mode='before')
    @classmethod
    def _blank_category_is_overall(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and not value.strip():
            return None
        return value

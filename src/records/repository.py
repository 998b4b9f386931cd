"""Read-only access to the record store."""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
import logging
from boto3.dynamodb.conditions import Key, Attr
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from shared.dynamodb import DynamoDBClient
from shared.exceptions import ValidationError
from shared.validators import validate_required_fields
from records.models import Order, LineItem, Budget

logger = logging.getLogger(__name__)

M = TypeVar('M', bound=BaseModel)


@dataclass(frozen=True)
class RecordSnapshot:
    """The three record collections for one user at one point in time."""

    orders: Tuple[Order, ...] = ()
    line_items: Tuple[LineItem, ...] = ()
    budgets: Tuple[Budget, ...] = ()


def to_models(items: List[Dict[str, Any]], model: Type[M], kind: str) -> List[M]:
    """
    Convert raw store items into record models.

    Args:
        items: Raw items from the store
        model: Model class to build
        kind: Record kind used in error messages

    Returns:
        List of models

    Raises:
        ValidationError: If a record is malformed
    """
    records = []

    for item in items:
        record_id = item.get('id', '<unknown>')
        try:
            validate_required_fields(item, ['id'])
            records.append(model.model_validate(item))
        except ValidationError as e:
            raise ValidationError(f"Malformed {kind} {record_id}: {e.message}")
        except PydanticValidationError as e:
            error = e.errors()[0]
            field = '.'.join(str(part) for part in error['loc'])
            raise ValidationError(f"Malformed {kind} {record_id}: {field} {error['msg']}")

    return records


class RecordStore:
    """Loads orders, line items and budgets from DynamoDB."""

    def __init__(self):
        """Initialize record store."""
        self.orders_table = DynamoDBClient(os.environ.get('ORDERS_TABLE'))
        self.line_items_table = DynamoDBClient(os.environ.get('LINE_ITEMS_TABLE'))
        self.budgets_table = DynamoDBClient(os.environ.get('BUDGETS_TABLE'))

    def fetch_orders(self, user_id: str) -> List[Order]:
        """
        Fetch all orders for a user, newest first.

        Args:
            user_id: User ID

        Returns:
            List of orders
        """
        items = self.orders_table.query_all(
            key_condition_expression=Key('user_id').eq(user_id),
            index_name='user-date-index',
            scan_forward=False
        )

        orders = to_models(items, Order, 'order')
        orders.sort(key=lambda order: order.order_date, reverse=True)

        logger.info(f"Fetched {len(orders)} orders for user {user_id}")
        return orders

    def fetch_line_items(self, user_id: str, order_id: Optional[str] = None) -> List[LineItem]:
        """
        Fetch line items for a user.

        Args:
            user_id: User ID
            order_id: Optional order to restrict the items to

        Returns:
            List of line items
        """
        if order_id:
            items = self.line_items_table.query_all(
                key_condition_expression=Key('order_id').eq(order_id),
                filter_expression=Attr('user_id').eq(user_id),
                index_name='order-index'
            )
        else:
            items = self.line_items_table.query_all(
                key_condition_expression=Key('user_id').eq(user_id)
            )

        line_items = to_models(items, LineItem, 'line item')

        logger.info(f"Fetched {len(line_items)} line items for user {user_id}")
        return line_items

    def fetch_budgets(self, user_id: str) -> List[Budget]:
        """
        Fetch all budgets for a user, newest start date first.

        Args:
            user_id: User ID

        Returns:
            List of budgets
        """
        items = self.budgets_table.query_all(
            key_condition_expression=Key('user_id').eq(user_id)
        )

        budgets = to_models(items, Budget, 'budget')
        budgets.sort(key=lambda budget: budget.start_date, reverse=True)

        logger.info(f"Fetched {len(budgets)} budgets for user {user_id}")
        return budgets

    def fetch_order(self, user_id: str, order_id: str) -> Optional[Order]:
        """Fetch one order, or None if it does not exist."""
        item = self.orders_table.get_item({'user_id': user_id, 'id': order_id})

        if not item:
            return None

        return to_models([item], Order, 'order')[0]

    def load_snapshot(self, user_id: str) -> RecordSnapshot:
        """
        Load every record collection for a user.

        Args:
            user_id: User ID

        Returns:
            Snapshot of orders, line items and budgets
        """
        return RecordSnapshot(
            orders=tuple(self.fetch_orders(user_id)),
            line_items=tuple(self.fetch_line_items(user_id)),
            budgets=tuple(self.fetch_budgets(user_id))
        )

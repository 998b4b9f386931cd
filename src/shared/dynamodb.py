"""Read access to the DynamoDB record tables."""

import os
import boto3
from typing import Any, Dict, List, Optional
from decimal import Decimal
from botocore.exceptions import ClientError
import logging

from .exceptions import DatabaseError

logger = logging.getLogger(__name__)


def _endpoint_url() -> Optional[str]:
    """LocalStack endpoint, when USE_LOCALSTACK is enabled."""
    if os.environ.get('USE_LOCALSTACK', 'false').lower() == 'true':
        return os.environ.get('LOCALSTACK_ENDPOINT')
    return None


def from_dynamodb(value: Any) -> Any:
    """Convert DynamoDB Decimals to int or float, recursively."""
    if isinstance(value, dict):
        return {k: from_dynamodb(v) for k, v in value.items()}
    if isinstance(value, list):
        return [from_dynamodb(v) for v in value]
    if isinstance(value, Decimal):
        return int(value) if value % 1 == 0 else float(value)
    return value


class DynamoDBClient:
    """Read-only wrapper around one DynamoDB table."""

    def __init__(self, table_name: str):
        """
        Bind the client to a table.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name

        endpoint_url = _endpoint_url()
        if endpoint_url:
            self.dynamodb = boto3.resource('dynamodb', endpoint_url=endpoint_url)
        else:
            self.dynamodb = boto3.resource('dynamodb')

        self.table = self.dynamodb.Table(table_name)

    def _call(self, operation: str, **kwargs) -> Dict[str, Any]:
        try:
            return getattr(self.table, operation)(**kwargs)
        except ClientError as e:
            logger.error(f"DynamoDB {operation} on {self.table_name} failed: {e}")
            raise DatabaseError(f"Failed to {operation.replace('_', ' ')} on {self.table_name}: {str(e)}")

    def get_item(self, key: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Read one item by primary key.

        Returns:
            The item, or None when the key does not exist

        Raises:
            DatabaseError: If DynamoDB rejects the request
        """
        item = self._call('get_item', Key=key).get('Item')
        return from_dynamodb(item) if item else None

    def query(
        self,
        key_condition_expression: Any,
        filter_expression: Optional[Any] = None,
        index_name: Optional[str] = None,
        limit: Optional[int] = None,
        scan_forward: bool = True,
        exclusive_start_key: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Read one page of a query.

        Args:
            key_condition_expression: boto3 key condition
            filter_expression: Optional boto3 filter condition
            index_name: Optional secondary index to query
            limit: Optional page size
            scan_forward: True for ascending sort key order
            exclusive_start_key: Key to resume after

        Returns:
            Dictionary with 'items' and 'last_evaluated_key'

        Raises:
            DatabaseError: If DynamoDB rejects the request
        """
        kwargs = {
            'KeyConditionExpression': key_condition_expression,
            'ScanIndexForward': scan_forward
        }

        if filter_expression is not None:
            kwargs['FilterExpression'] = filter_expression
        if index_name:
            kwargs['IndexName'] = index_name
        if limit:
            kwargs['Limit'] = limit
        if exclusive_start_key:
            kwargs['ExclusiveStartKey'] = exclusive_start_key

        response = self._call('query', **kwargs)

        return {
            'items': [from_dynamodb(item) for item in response.get('Items', [])],
            'last_evaluated_key': response.get('LastEvaluatedKey')
        }

    def query_all(
        self,
        key_condition_expression: Any,
        filter_expression: Optional[Any] = None,
        index_name: Optional[str] = None,
        scan_forward: bool = True,
        page_size: int = 100
    ) -> List[Dict[str, Any]]:
        """Read every page of a query, following LastEvaluatedKey."""
        items = []
        last_key = None

        while True:
            page = self.query(
                key_condition_expression=key_condition_expression,
                filter_expression=filter_expression,
                index_name=index_name,
                limit=page_size,
                scan_forward=scan_forward,
                exclusive_start_key=last_key
            )

            items.extend(page['items'])
            last_key = page['last_evaluated_key']

            if not last_key:
                break

        return items

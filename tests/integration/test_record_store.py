"""Integration tests for loading records from DynamoDB."""

import pytest
from datetime import date
from decimal import Decimal
from moto import mock_aws
import boto3
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.setenv('ORDERS_TABLE', 'test-orders')
    monkeypatch.setenv('LINE_ITEMS_TABLE', 'test-line-items')
    monkeypatch.setenv('BUDGETS_TABLE', 'test-budgets')
    monkeypatch.setenv('USE_LOCALSTACK', 'false')


@pytest.fixture
def dynamodb_client(aws_credentials):
    """Create mock DynamoDB tables for orders, line items and budgets."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')

        dynamodb.create_table(
            TableName='test-orders',
            KeySchema=[
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'id', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'id', 'AttributeType': 'S'},
                {'AttributeName': 'order_date', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST',
            GlobalSecondaryIndexes=[
                {
                    'IndexName': 'user-date-index',
                    'KeySchema': [
                        {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                        {'AttributeName': 'order_date', 'KeyType': 'RANGE'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'}
                }
            ]
        )

        dynamodb.create_table(
            TableName='test-line-items',
            KeySchema=[
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'id', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'id', 'AttributeType': 'S'},
                {'AttributeName': 'order_id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST',
            GlobalSecondaryIndexes=[
                {
                    'IndexName': 'order-index',
                    'KeySchema': [
                        {'AttributeName': 'order_id', 'KeyType': 'HASH'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'}
                }
            ]
        )

        dynamodb.create_table(
            TableName='test-budgets',
            KeySchema=[
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'id', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'id', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST'
        )

        yield dynamodb


@pytest.fixture
def seeded(dynamodb_client):
    """Seed two users' records."""
    orders = dynamodb_client.Table('test-orders')
    for order_id, vendor, order_date, amount in [
        ('o1', 'Acme', '2024-03-05', '50.00'),
        ('o2', 'Books Co', '2024-03-20T09:15:00', '12.50'),
        ('o3', 'Acme', '2024-02-11', '30'),
    ]:
        orders.put_item(Item={
            'user_id': 'user123',
            'id': order_id,
            'vendor_name': vendor,
            'order_date': order_date,
            'total_amount': Decimal(amount),
            'currency': 'USD'
        })
    orders.put_item(Item={
        'user_id': 'other-user',
        'id': 'o9',
        'vendor_name': 'Elsewhere',
        'order_date': '2024-03-06',
        'total_amount': Decimal('999')
    })

    line_items = dynamodb_client.Table('test-line-items')
    for item_id, order_id, category, price, quantity in [
        ('li1', 'o1', 'Tools', '20.00', 2),
        ('li2', 'o1', 'Garden', '10.00', 1),
        ('li3', 'o2', 'Books', '12.50', 1),
        ('li4', 'gone', 'Books', '100.00', 1),
    ]:
        line_items.put_item(Item={
            'user_id': 'user123',
            'id': item_id,
            'order_id': order_id,
            'item_name': f'Item {item_id}',
            'price': Decimal(price),
            'quantity': quantity,
            'category': category
        })

    budgets = dynamodb_client.Table('test-budgets')
    budgets.put_item(Item={
        'user_id': 'user123',
        'id': 'b1',
        'period_type': 'monthly',
        'amount': Decimal('100'),
        'start_date': '2024-03-01',
        'category': 'Books'
    })
    budgets.put_item(Item={
        'user_id': 'user123',
        'id': 'b2',
        'period_type': 'weekly',
        'amount': Decimal('40'),
        'start_date': '2024-03-03T00:00:00',
        'category': None
    })

    return dynamodb_client


class TestRecordStore:
    """Integration tests for RecordStore."""

    def test_fetch_orders_newest_first(self, seeded):
        """Test fetching one user's orders."""
        from records.repository import RecordStore

        orders = RecordStore().fetch_orders('user123')

        assert [order.id for order in orders] == ['o2', 'o1', 'o3']
        assert orders[0].order_date == date(2024, 3, 20)
        assert orders[1].total_amount == 50.0

    def test_fetch_line_items_for_order(self, seeded):
        """Test fetching the items of one order."""
        from records.repository import RecordStore

        items = RecordStore().fetch_line_items('user123', order_id='o1')

        assert sorted(item.id for item in items) == ['li1', 'li2']

    def test_fetch_order(self, seeded):
        """Test fetching a single order."""
        from records.repository import RecordStore

        store = RecordStore()

        assert store.fetch_order('user123', 'o1').vendor_name == 'Acme'
        assert store.fetch_order('user123', 'o9') is None

    def test_snapshot_feeds_budget_usage(self, seeded):
        """Test a loaded snapshot end to end through budget usage."""
        from records.repository import RecordStore
        from analytics.budgets import compute_all_budget_usage

        snapshot = RecordStore().load_snapshot('user123')

        assert len(snapshot.orders) == 3
        assert len(snapshot.line_items) == 4
        # Newest start date first
        assert [budget.id for budget in snapshot.budgets] == ['b2', 'b1']

        usage = compute_all_budget_usage(snapshot.budgets, snapshot.orders, snapshot.line_items)

        # The line item on the missing order is ignored
        assert usage[1].spent == pytest.approx(12.50)
        # Week of 2024-03-03 to 2024-03-09 holds o1 only
        assert usage[0].spent == pytest.approx(50.00)
        assert usage[0].is_over_budget

    def test_malformed_record(self, seeded):
        """Test a malformed stored order surfaces as a validation error."""
        from records.repository import RecordStore
        from shared.exceptions import ValidationError

        seeded.Table('test-orders').put_item(Item={
            'user_id': 'user123',
            'id': 'bad',
            'vendor_name': 'Acme',
            'order_date': 'sometime',
            'total_amount': Decimal('1')
        })

        with pytest.raises(ValidationError) as exc_info:
            RecordStore().fetch_orders('user123')

        assert 'order bad' in exc_info.value.message

    def test_missing_table(self, dynamodb_client, monkeypatch):
        """Test a store failure surfaces as a database error."""
        from records.repository import RecordStore
        from shared.exceptions import DatabaseError

        monkeypatch.setenv('BUDGETS_TABLE', 'no-such-table')

        with pytest.raises(DatabaseError):
            RecordStore().fetch_budgets('user123')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])

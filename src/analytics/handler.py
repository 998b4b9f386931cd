"""Lambda handler for analytics operations."""

import os
import logging
from typing import Dict, Any, Optional
import sys

# Add parent directory to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.response import (
    success_response,
    error_response,
    validation_error_response,
    not_found_response,
    unauthorized_response
)
from shared.validators import parse_date, validate_limit
from shared.exceptions import (
    LedgerException,
    ValidationError,
    NotFoundError,
    AuthenticationError
)
from analytics.service import AnalyticsService

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

ORDERS_PREFIX = '/analytics/orders/'

# Created on first request
analytics_service: Optional[AnalyticsService] = None


def get_service() -> AnalyticsService:
    """Return the shared analytics service, creating it on first use."""
    global analytics_service

    if analytics_service is None:
        analytics_service = AnalyticsService()

    return analytics_service


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for analytics operations.

    Handles:
    - GET /analytics/categories - Spending by category
    - GET /analytics/monthly - Spending by month
    - GET /analytics/vendors - Spending by vendor
    - GET /analytics/budgets - Budget usage
    - GET /analytics/dashboard - Dashboard summary
    - GET /analytics/orders/{id} - Order with line items

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        # Log request
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        # Get user ID from Cognito authorizer
        user_id = get_user_id(event)
        if not user_id:
            raise AuthenticationError()

        http_method = event.get('httpMethod')
        path = event.get('path') or ''

        if http_method != 'GET':
            return error_response("Route not found", status_code=404)

        # Route request
        if path == '/analytics/categories':
            return handle_categories(event, user_id)
        elif path == '/analytics/monthly':
            return handle_monthly(event, user_id)
        elif path == '/analytics/vendors':
            return handle_vendors(event, user_id)
        elif path == '/analytics/budgets':
            return handle_budgets(event, user_id)
        elif path == '/analytics/dashboard':
            return handle_dashboard(event, user_id)
        elif path.startswith(ORDERS_PREFIX):
            return handle_order_detail(event, user_id)
        else:
            return error_response("Route not found", status_code=404)

    except ValidationError as e:
        return validation_error_response(e.message)
    except NotFoundError as e:
        return not_found_response(e.message)
    except AuthenticationError as e:
        return unauthorized_response(e.message)
    except LedgerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_categories(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle spending by category."""
    query_params = event.get('queryStringParameters') or {}
    limit = validate_limit(query_params.get('limit'))

    result = get_service().get_category_spending(user_id, limit=limit)
    return success_response(data=result)


def handle_monthly(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle spending by month."""
    result = get_service().get_monthly_spending(user_id)
    return success_response(data=result)


def handle_vendors(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle spending by vendor."""
    query_params = event.get('queryStringParameters') or {}
    limit = validate_limit(query_params.get('limit'))

    result = get_service().get_vendor_spending(user_id, limit=limit)
    return success_response(data=result)


def handle_budgets(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """Handle budget usage."""
    result = get_service().get_budget_usage(user_id)
    return success_response(data=result)


def handle_dashboard(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Handle dashboard summary.

    Args:
        event: Lambda event
        user_id: User ID

    Returns:
        API Gateway response
    """
    query_params = event.get('queryStringParameters') or {}
    today = query_params.get('today')

    if today:
        today = parse_date(today, 'today')

    result = get_service().get_dashboard(user_id, today=today)
    return success_response(data=result)


def handle_order_detail(event: Dict[str, Any], user_id: str) -> Dict[str, Any]:
    """
    Handle order detail.

    Args:
        event: Lambda event
        user_id: User ID

    Returns:
        API Gateway response
    """
    path_params = event.get('pathParameters') or {}
    order_id = path_params.get('id') or event.get('path', '')[len(ORDERS_PREFIX):]

    if not order_id:
        return validation_error_response("Order ID is required")

    result = get_service().get_order_detail(user_id, order_id)
    return success_response(data=result)


def get_user_id(event: Dict[str, Any]) -> str:
    """
    Extract user ID from Cognito authorizer claims.

    Args:
        event: Lambda event

    Returns:
        User ID (sub claim)
    """
    request_context = event.get('requestContext') or {}
    authorizer = request_context.get('authorizer') or {}
    claims = authorizer.get('claims') or {}
    return claims.get('sub')

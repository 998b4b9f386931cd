"""API Gateway proxy responses for the analytics endpoints."""

import json
from typing import Any, Dict, Optional
from datetime import datetime, date
from decimal import Decimal


# Analytics endpoints are read-only
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
    "Access-Control-Allow-Methods": "GET,OPTIONS"
}


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder for DynamoDB numbers and calendar dates."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


def json_response(body: Dict[str, Any], status_code: int = 200) -> Dict[str, Any]:
    """Wrap a body as a Lambda proxy response with CORS headers."""
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(body, cls=DecimalEncoder)
    }


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Build a 200 response carrying analytics data.

    Args:
        data: JSON-ready payload
        message: Optional human readable note

    Returns:
        Lambda proxy response
    """
    body = {"success": True, "data": data}

    if message:
        body["message"] = message

    return json_response(body)


def error_response(message: str, status_code: int = 500, error_code: Optional[str] = None) -> Dict[str, Any]:
    """
    Build an error response.

    Args:
        message: Error message shown to the caller
        status_code: HTTP status code
        error_code: Machine readable code (default: ERROR_<status>)

    Returns:
        Lambda proxy response
    """
    return json_response(
        {
            "success": False,
            "error": {
                "message": message,
                "code": error_code or f"ERROR_{status_code}"
            }
        },
        status_code
    )


def validation_error_response(message: str) -> Dict[str, Any]:
    return error_response(message, 400, "VALIDATION_ERROR")


def not_found_response(message: str = "Resource not found") -> Dict[str, Any]:
    return error_response(message, 404, "NOT_FOUND")


def unauthorized_response(message: str = "Unauthorized") -> Dict[str, Any]:
    return error_response(message, 401, "UNAUTHORIZED")

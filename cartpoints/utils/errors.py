"""
Standardized error response utilities for the CartPoints API.

Provides consistent error response format across all endpoints:
{
    "error": {
        "message": "User-friendly error message",
        "code": "ERROR_CODE"
    }
}

Usage:
    from cartpoints.utils.errors import error_response, ErrorCode

    return error_response("Product not found", ErrorCode.NOT_FOUND, 404)
"""
import logging
from enum import Enum
from flask import jsonify
from typing import Optional

from .exceptions import (
    CartPointsError,
    NotFoundError,
    ValidationError,
    EmptyCartError,
    DuplicateError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Authentication (401)
    AUTH_REQUIRED = "AUTH_REQUIRED"
    INVALID_CUSTOMER = "INVALID_CUSTOMER"

    # Validation Errors (400)
    INVALID_REQUEST = "INVALID_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    EMPTY_CART = "EMPTY_CART"

    # Not Found (404)
    NOT_FOUND = "NOT_FOUND"
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    CART_NOT_FOUND = "CART_NOT_FOUND"

    # Conflict (409)
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Server Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


def error_response(
    message: str,
    code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    status_code: int = 500,
    log_error: bool = True,
    details: Optional[dict] = None
) -> tuple:
    """
    Create a standardized error response.

    Args:
        message: User-friendly error message
        code: Error code from ErrorCode enum (or a raw code string)
        status_code: HTTP status code
        log_error: Whether to log the error
        details: Optional additional details (only logged, not returned to user)

    Returns:
        Tuple of (response, status_code) for Flask
    """
    code_value = code.value if isinstance(code, ErrorCode) else code

    if log_error and status_code >= 500:
        logger.error(f"API Error [{code_value}]: {message}", extra={"details": details})
    elif log_error and status_code >= 400:
        logger.warning(f"API Error [{code_value}]: {message}", extra={"details": details})

    response = {
        "error": {
            "message": message,
            "code": code_value
        }
    }

    return jsonify(response), status_code


def bad_request(message: str, code: ErrorCode = ErrorCode.INVALID_REQUEST) -> tuple:
    """400 Bad Request error."""
    return error_response(message, code, 400, log_error=False)


def unauthorized(message: str = "Authentication required", code: ErrorCode = ErrorCode.AUTH_REQUIRED) -> tuple:
    """401 Unauthorized error."""
    return error_response(message, code, 401, log_error=False)


def not_found(message: str, code: ErrorCode = ErrorCode.NOT_FOUND) -> tuple:
    """404 Not Found error."""
    return error_response(message, code, 404, log_error=False)


def internal_error(message: str = "An unexpected error occurred", details: Optional[dict] = None) -> tuple:
    """500 Internal Server Error."""
    return error_response(message, ErrorCode.INTERNAL_ERROR, 500, log_error=True, details=details)


def status_for_exception(exc: CartPointsError) -> int:
    """HTTP status code for a business exception."""
    if isinstance(exc, NotFoundError):
        return 404
    if isinstance(exc, (ValidationError, EmptyCartError)):
        return 400
    if isinstance(exc, DuplicateError):
        return 409
    return 422


def exception_response(exc: CartPointsError) -> tuple:
    """Render a CartPointsError as a standardized error response."""
    return error_response(exc.message, exc.code, status_for_exception(exc))

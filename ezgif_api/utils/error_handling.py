"""
Centralized error handling for the EZGIF API facade.

Every error body produced by the service goes through create_error_response()
so the status code, the "error" string and the log level stay consistent.
"""

import logging
from enum import Enum
from typing import Any, Dict

from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Error codes used by the service endpoints."""

    MISSING_ACTION = "MISSING_ACTION"
    INVALID_ACTION = "INVALID_ACTION"
    MISSING_SOURCE = "MISSING_SOURCE"
    NOT_FOUND = "NOT_FOUND"
    CONVERSION_FAILED = "CONVERSION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ErrorSeverity(str, Enum):
    """Error severity levels for logging."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


ERROR_STATUS_MAP: Dict[ErrorCode, int] = {
    ErrorCode.MISSING_ACTION: 400,
    ErrorCode.INVALID_ACTION: 400,
    ErrorCode.MISSING_SOURCE: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONVERSION_FAILED: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}

# Text returned to clients in the "error" field
ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.MISSING_ACTION: "Missing action parameter",
    ErrorCode.INVALID_ACTION: "Invalid action",
    ErrorCode.MISSING_SOURCE: "Either url or file parameter is required",
    ErrorCode.NOT_FOUND: "Endpoint not found",
    ErrorCode.CONVERSION_FAILED: "Conversion failed",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}

ERROR_SEVERITY_MAP: Dict[ErrorCode, ErrorSeverity] = {
    ErrorCode.MISSING_ACTION: ErrorSeverity.LOW,
    ErrorCode.INVALID_ACTION: ErrorSeverity.LOW,
    ErrorCode.MISSING_SOURCE: ErrorSeverity.LOW,
    ErrorCode.NOT_FOUND: ErrorSeverity.LOW,
    ErrorCode.CONVERSION_FAILED: ErrorSeverity.HIGH,
    ErrorCode.INTERNAL_ERROR: ErrorSeverity.CRITICAL,
}

# Replaces exception text in production responses
GENERIC_ERROR_DETAIL = "Something went wrong"


def create_error_response(error_code: ErrorCode, **fields: Any) -> JSONResponse:
    """
    Create a JSON error response for the given error code.

    Args:
        error_code: Error code from the ErrorCode enum
        **fields: Additional fields to include next to "error"

    Returns:
        JSONResponse with the mapped status code
    """
    status_code = ERROR_STATUS_MAP.get(error_code, 500)
    severity = ERROR_SEVERITY_MAP.get(error_code, ErrorSeverity.MEDIUM)

    error_data = {"error": ERROR_MESSAGES[error_code]}
    error_data.update(fields)

    log_message = f"Error response {status_code}: {error_data}"
    if severity == ErrorSeverity.CRITICAL:
        logger.critical(log_message)
    elif severity == ErrorSeverity.HIGH:
        logger.error(log_message)
    elif severity == ErrorSeverity.MEDIUM:
        logger.warning(log_message)
    else:
        logger.info(log_message)

    return JSONResponse(status_code=status_code, content=error_data)


def internal_error_detail(error: BaseException, production: bool) -> str:
    """Message exposed for an unexpected exception; hidden in production."""
    if production:
        return GENERIC_ERROR_DETAIL
    return str(error)

"""
Error types and helpers for safe, standardized error responses.

Domain exceptions are raised by the service layer; the API layer turns them
into HTTP responses with the standard error body:
{
    "detail": {
        "code": "ERROR_CODE",
        "message": "Human readable message"
    }
}
"""
from enum import Enum
from typing import Any, Dict
from loguru import logger
from fastapi import HTTPException


class NottifError(Exception):
    """Base class for Nottif domain errors."""


class ConfigError(NottifError):
    """Persisted configuration could not be read or written."""


class ConfigReadError(ConfigError):
    """Config file exists but could not be read."""


class ConfigParseError(ConfigError):
    """Config file is not valid structured data."""


class ConfigWriteError(ConfigError):
    """Config file could not be written; the mutation did not durably succeed."""


class ScheduleError(NottifError):
    """Cron expression rejected by the schedule engine, or job already scheduled."""


class NotifierError(NottifError):
    """A notification could not be delivered."""


class DeliveryError(NotifierError):
    """A single delivery attempt failed (bad status, transport error, no webhook)."""


class MessageTooLargeError(NotifierError):
    """Message needs more parts than allowed; nothing was sent."""


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # Not found errors (404)
    NOT_FOUND = "NOT_FOUND"

    # Validation errors (400/422)
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Server errors (500)
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"

    # Configuration errors
    CONFIG_ERROR = "CONFIG_ERROR"


def create_error_response(code: ErrorCode, message: str) -> Dict[str, Any]:
    """
    Create a standardized error response dict.

    Args:
        code: Error code enum value
        message: Human-readable error message

    Returns:
        Error response dict suitable for HTTPException detail
    """
    return {
        "code": code.value,
        "message": message
    }


def raise_error(
    code: ErrorCode,
    message: str,
    status_code: int = 500,
    log: bool = True
) -> None:
    """
    Raise a standardized HTTP exception.

    Args:
        code: Error code enum value
        message: Human-readable error message
        status_code: HTTP status code
        log: Whether to log the error (default True)
    """
    if log:
        logger.error(f"API Error [{code.value}]: {message}")

    raise HTTPException(
        status_code=status_code,
        detail=create_error_response(code, message)
    )

"""PhotoScout Error Handling Module

This module defines the error handling system for PhotoScout, providing
structured error classes with context information.

The error hierarchy follows these principles:
- One Source of Truth: All error codes are defined in ErrorCode enum
- Structured Context: ErrorContext provides additional information
- Proper Exception Chaining: Original exceptions are preserved
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Union

# Type alias for primitive context values (str, int, float, bool only)
PrimitiveContextValue = Union[str, int, float, bool]

# Keys masked in safe_dict so credentials never reach the logs
SAFE_DICT_MASK_KEYS: tuple[str, ...] = ("access_token", "client_id")

MASKED_VALUE = "****"


class ErrorCode(str, Enum):
    """Error codes for PhotoScout.

    This enum serves as the single source of truth for all error codes
    used throughout the application.
    """

    # Network and API Errors
    NETWORK_ERROR = "NETWORK_ERROR"
    API_REQUEST_FAILED = "API_REQUEST_FAILED"
    API_AUTHENTICATION_FAILED = "API_AUTHENTICATION_FAILED"
    API_TIMEOUT = "API_TIMEOUT"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    API_INVALID_RESPONSE = "API_INVALID_RESPONSE"

    # Lookup Errors
    NOT_FOUND = "NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Cache Errors
    CACHE_UNAVAILABLE = "CACHE_UNAVAILABLE"
    CACHE_READ_FAILED = "CACHE_READ_FAILED"
    CACHE_WRITE_FAILED = "CACHE_WRITE_FAILED"
    CACHE_CORRUPTED = "CACHE_CORRUPTED"

    # Validation and Parsing Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"

    # Configuration Errors
    CONFIG_ERROR = "CONFIG_ERROR"
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # Application Errors
    APPLICATION_ERROR = "APPLICATION_ERROR"
    DATA_PROCESSING_ERROR = "DATA_PROCESSING_ERROR"


def _coerce_primitives(value: Any | None) -> dict[str, PrimitiveContextValue] | None:
    """Coerce additional_data values to primitives.

    Converts Path and Enum to primitive types.

    Args:
        value: Input dictionary or None

    Returns:
        Dictionary with primitive values only, or None

    Raises:
        TypeError: If value is not a dict or contains unconvertible types
    """
    if value is None:
        return None

    if not isinstance(value, dict):
        error_msg = f"additional_data must be dict, got {type(value).__name__}"
        raise TypeError(error_msg)

    coerced: dict[str, PrimitiveContextValue] = {}
    for key, val in value.items():
        if isinstance(val, (str, int, float, bool)):
            coerced[key] = val
        elif isinstance(val, Path):
            coerced[key] = str(val)
        elif isinstance(val, Enum):
            coerced[key] = val.value
        else:
            error_msg = (
                f"Cannot coerce {type(val).__name__} to primitive type. "
                f"Only str, int, float, bool, Path, Enum are allowed."
            )
            raise TypeError(error_msg)

    return coerced


@dataclass(frozen=True)
class ErrorContext:
    """Context information for errors.

    Only primitive types (str, int, float, bool) are allowed in
    additional_data to ensure safe serialization.

    Attributes:
        operation: Optional operation name that caused the error
        url: Optional URL of the outbound request involved
        additional_data: Optional dict with primitive values only
    """

    operation: str | None = None
    url: str | None = None
    additional_data: dict[str, PrimitiveContextValue] | None = None

    def __post_init__(self) -> None:
        """Post-initialization validation and coercion."""
        if self.additional_data is not None:
            coerced = _coerce_primitives(self.additional_data)
            object.__setattr__(self, "additional_data", coerced)

    def safe_dict(self, *, mask_keys: tuple[str, ...] | None = None) -> dict[str, Any]:
        """Export context as dict with credential masking.

        Args:
            mask_keys: Keys whose values are replaced. Defaults to SAFE_DICT_MASK_KEYS.

        Returns:
            Dictionary with masked sensitive values and guaranteed additional_data key.

        Example:
            >>> ErrorContext(additional_data={"access_token": "abc"}).safe_dict()
            {'additional_data': {'access_token': '****'}}
        """
        if mask_keys is None:
            mask_keys = SAFE_DICT_MASK_KEYS

        data: dict[str, Any] = {}
        if self.operation is not None:
            data["operation"] = self.operation
        if self.url is not None:
            data["url"] = self.url

        additional = dict(self.additional_data or {})
        for key in mask_keys:
            if key in additional:
                additional[key] = MASKED_VALUE
        data["additional_data"] = additional

        return data


class PhotoScoutError(Exception):
    """Base exception class for all PhotoScout errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize PhotoScoutError.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context information
            original_error: Original exception that caused this error
        """
        self.code = code
        self.message = message
        self.context = context or ErrorContext()
        self.original_error = original_error

        super().__init__(f"{code.value}: {message}")

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging with credential masking."""
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }


class DomainError(PhotoScoutError):
    """Domain-specific errors.

    These errors occur when business rules are violated, e.g. an invalid
    page number or a malformed search document.
    """


class InfrastructureError(PhotoScoutError):
    """Infrastructure-related errors.

    These errors occur when interacting with external systems like the
    network, remote APIs or the cache database.
    """


class ApplicationError(PhotoScoutError):
    """Application-level errors (configuration, wiring)."""


class DataProcessingError(PhotoScoutError):
    """Errors raised while converting raw payloads into typed records."""


class NotFoundError(DomainError):
    """An identity lookup yielded no record.

    Surfaced to the caller and never retried.
    """


class UpstreamError(InfrastructureError):
    """A remote provider returned an error response or could not be reached.

    Attributes:
        status_code: HTTP status of the failed response, None for network failures
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(code, message, context, original_error)
        self.status_code = status_code

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status_code"] = self.status_code
        return data


class CacheUnavailable(InfrastructureError):
    """The response store could not be read or written.

    Absorbed by the caching middleware, never shown to users.
    """


def create_upstream_error(
    message: str,
    status_code: int | None = None,
    url: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> UpstreamError:
    """Create an upstream error, picking the code from the HTTP status."""
    if status_code is None:
        code = ErrorCode.NETWORK_ERROR
    elif status_code in (401, 403):
        code = ErrorCode.API_AUTHENTICATION_FAILED
    elif status_code >= 500:
        code = ErrorCode.API_SERVER_ERROR
    else:
        code = ErrorCode.API_REQUEST_FAILED

    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"status_code": status_code} if status_code is not None else None
    )
    context = ErrorContext(
        operation=operation,
        url=url,
        additional_data=additional_data,
    )
    return UpstreamError(code, message, context, original_error, status_code)


def create_not_found_error(
    message: str,
    identifier: str | int | None = None,
    operation: str | None = None,
) -> NotFoundError:
    """Create a not found error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"identifier": identifier} if identifier is not None else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return NotFoundError(ErrorCode.USER_NOT_FOUND, message, context)


def create_validation_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DomainError:
    """Create a validation error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DomainError(
        ErrorCode.VALIDATION_ERROR,
        message,
        context,
        original_error,
    )


def create_parsing_error(
    message: str,
    field: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DataProcessingError:
    """Create a parsing error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"field": field} if field else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return DataProcessingError(
        ErrorCode.PARSING_ERROR,
        message,
        context,
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Create a configuration error with context."""
    additional_data: dict[str, PrimitiveContextValue] | None = (
        {"config_key": config_key} if config_key else None
    )
    context = ErrorContext(
        operation=operation,
        additional_data=additional_data,
    )
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        context,
        original_error,
    )

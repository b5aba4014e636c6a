"""
So Quoteable Backend — Custom Exception Hierarchy
==================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services, the transformation compiler and middleware;
       caught by global handlers.

Exception Hierarchy:
    QuoteableError (base)
    ├── ValidationError              → 400 Bad Request (client can fix)
    │   └── TransformationError      → 400 (bad transformation input)
    │       ├── InvalidDimensionError
    │       ├── InvalidQualityError
    │       ├── InvalidOpacityError
    │       ├── InvalidCropModeError
    │       ├── InvalidGravityError
    │       ├── MissingAssetIdError
    │       └── MissingAccountNameError
    ├── NotFoundError                → 404 Not Found
    ├── ImageServiceError            → 503 Service Unavailable (retry later)
    ├── CircuitBreakerOpenError      → 503 Service Unavailable (circuit open)
    ├── DatabaseError                → 500 Internal Server Error
    └── RateLimitExceededError       → 429 Too Many Requests

Transformation errors are raised by pure code that never touches the
network; they can only be fixed by changing the input.
"""

from typing import Any, Dict, Optional


class QuoteableError(Exception):
    """
    Base exception for all So Quoteable application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for 4xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(QuoteableError):
    """
    Raised when client input fails validation.

    When:    Empty names, missing quote text, out-of-range transformation values.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


# ══════════════════════════════════════════════════════════════════════════
# Transformation Compiler Errors
# ══════════════════════════════════════════════════════════════════════════


class TransformationError(ValidationError):
    """Base class for invalid image transformation input."""


class InvalidDimensionError(TransformationError):
    """Width or height is not a positive number. `dimension` says which one."""

    def __init__(self, dimension: str, value: Any):
        super().__init__(
            message=f"{dimension.capitalize()} must be positive",
            field=dimension,
            context={"value": value},
        )
        self.dimension = dimension
        self.value = value


class InvalidQualityError(TransformationError):
    def __init__(self, value: Any):
        super().__init__(
            message="Quality must be between 1 and 100 or 'auto'",
            field="quality",
            context={"value": value},
        )
        self.value = value


class InvalidOpacityError(TransformationError):
    def __init__(self, value: Any):
        super().__init__(
            message="Opacity must be between 0 and 100",
            field="opacity",
            context={"value": value},
        )
        self.value = value


class InvalidCropModeError(TransformationError):
    def __init__(self, value: Any, allowed: Optional[list] = None):
        super().__init__(
            message=f"Crop mode '{value}' is not supported",
            field="crop",
            context={"value": value, "allowed": allowed or []},
        )
        self.value = value


class InvalidGravityError(TransformationError):
    def __init__(self, value: Any, allowed: Optional[list] = None):
        super().__init__(
            message=f"Gravity '{value}' is not supported",
            field="gravity",
            context={"value": value, "allowed": allowed or []},
        )
        self.value = value


class MissingAssetIdError(TransformationError):
    def __init__(self):
        super().__init__(message="cloudinary_id is required", field="cloudinary_id")


class MissingAccountNameError(TransformationError):
    def __init__(self):
        super().__init__(message="cloud_name is required", field="cloud_name")


# ══════════════════════════════════════════════════════════════════════════
# Service Errors
# ══════════════════════════════════════════════════════════════════════════


class NotFoundError(QuoteableError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/quotes/{id} with an unknown UUID, or creating a quote
             for a person that was deleted.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ImageServiceError(QuoteableError):
    """
    Raised when Cloudinary rejects or fails an upload after all retries.

    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "Image service is temporarily unavailable",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class CircuitBreakerOpenError(QuoteableError):
    """
    Raised when the upload circuit breaker is in OPEN state.

    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Image service is temporarily unavailable due to repeated failures. "
            f"The service will automatically retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(QuoteableError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error. The client only ever sees a generic
             message; the context is logged server-side.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(QuoteableError):
    """HTTP 429, with `retry_after` seconds until the window frees a slot."""

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after

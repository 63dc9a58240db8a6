"""Domain exceptions.

All domain-level errors raised by the catalog service. The API layer
translates each of them into an HTTP status in one place.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the API layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Product Errors
# ============================================================================


class ProductValidationError(DomainError):
    """Raised when product input cannot be turned into a valid record."""

    def __init__(self, field: str, reason: str, value: Any = None) -> None:
        """Initialize product validation error.

        Args:
            field: Wire name of the offending field.
            reason: Explanation of why the value is invalid.
            value: The rejected value, if any.
        """
        super().__init__(
            f"Invalid value for '{field}': {reason}",
            details={"field": field, "reason": reason, "value": value},
        )
        self.field = field


class ProductNotFoundError(DomainError):
    """Raised when an operation targets a product that does not exist."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: The identifier that was looked up.
        """
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )
        self.product_id = product_id


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(DomainError):
    """Raised when the database or the blob store fails unexpectedly.

    The original exception is chained as ``__cause__``; it is logged but
    never exposed to API callers.
    """

    def __init__(self, operation: str) -> None:
        """Initialize storage error.

        Args:
            operation: Name of the operation that failed (e.g. "create").
        """
        super().__init__(
            f"Storage failure during {operation}",
            details={"operation": operation},
        )
        self.operation = operation

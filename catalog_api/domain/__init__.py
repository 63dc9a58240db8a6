"""Domain layer.

Business errors shared by the catalog service and the API layer.
"""

from catalog_api.domain.exceptions import (
    DomainError,
    ProductNotFoundError,
    ProductValidationError,
    StorageError,
)

__all__ = [
    "DomainError",
    "ProductNotFoundError",
    "ProductValidationError",
    "StorageError",
]

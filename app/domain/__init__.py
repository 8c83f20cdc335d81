"""Domain layer - value objects and exceptions.

- **Value Objects**: Immutable objects compared by value (Principal, Role)
- **Exceptions**: Catalog errors with their status classification

Example usage:
    from app.domain import Principal, Role

    principal = Principal(subject_id="auth0|123", role=Role.ADMIN)
    principal.require_role(Role.ADMIN)
"""

from app.domain.exceptions import (
    AttributeDecodeError,
    CatalogError,
    ForbiddenError,
    NotFoundError,
    ProductNotFoundError,
    StorageError,
    UnauthorizedError,
    ValidationFailedError,
)
from app.domain.value_objects import Principal, Role

__all__ = [
    # Value objects
    "Principal",
    "Role",
    # Exceptions
    "AttributeDecodeError",
    "CatalogError",
    "ForbiddenError",
    "NotFoundError",
    "ProductNotFoundError",
    "StorageError",
    "UnauthorizedError",
    "ValidationFailedError",
]

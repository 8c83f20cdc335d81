"""Domain exceptions.

All catalog-level failures. Every exception carries a human-readable
message, optional details, and the HTTP status classification the API
layer uses when translating it into an error response.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All catalog errors should inherit from this class so the API layer
    can translate them uniformly.
    """

    status_code: int = 500
    error_code: str = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Lookup Errors
# ============================================================================


class NotFoundError(CatalogError):
    """Raised when a lookup, update or delete target does not exist."""

    status_code = 404
    error_code = "NOT_FOUND"


class ProductNotFoundError(NotFoundError):
    """Raised when a product cannot be found by id or slug."""

    def __init__(self, *, product_id: int | None = None, slug: str | None = None) -> None:
        """Initialize product not found error.

        Args:
            product_id: Product id that was looked up.
            slug: Product slug that was looked up.
        """
        key = f"slug '{slug}'" if slug is not None else f"id {product_id}"
        details: dict[str, Any] = {}
        if product_id is not None:
            details["product_id"] = product_id
        if slug is not None:
            details["slug"] = slug
        super().__init__(f"Product not found: {key}", details=details)


# ============================================================================
# Access Errors
# ============================================================================


class UnauthorizedError(CatalogError):
    """Raised when the caller could not be authenticated."""

    status_code = 401
    error_code = "UNAUTHORIZED"


class ForbiddenError(CatalogError):
    """Raised when the authenticated principal lacks the required role."""

    status_code = 403
    error_code = "FORBIDDEN"

    def __init__(self, subject_id: str, role: str, required_role: str) -> None:
        """Initialize forbidden error.

        Args:
            subject_id: Subject of the principal.
            role: Role the principal holds.
            required_role: Role the operation requires.
        """
        super().__init__(
            f"Role '{required_role}' required",
            details={
                "subject_id": subject_id,
                "role": role,
                "required_role": required_role,
            },
        )


# ============================================================================
# Input Errors
# ============================================================================


class ValidationFailedError(CatalogError):
    """Raised when malformed input reaches the data layer."""

    status_code = 422
    error_code = "VALIDATION_FAILED"


# ============================================================================
# Storage Errors
# ============================================================================


class StorageError(CatalogError):
    """Raised when the underlying data store fails.

    Covers constraint violations, connectivity loss and any other
    driver-level error. The original exception is chained as __cause__.
    """

    status_code = 500
    error_code = "STORAGE_FAILURE"


class AttributeDecodeError(StorageError):
    """Raised when a stored flattened attribute string is malformed."""

    def __init__(self, fragment: str) -> None:
        """Initialize attribute decode error.

        Args:
            fragment: The triple that could not be decoded.
        """
        super().__init__(
            f"Malformed attribute triple: {fragment!r}",
            details={"fragment": fragment},
        )

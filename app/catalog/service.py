"""Catalog service for product operations.

High-level service that combines catalog reads and writes with the role
check guarding every write.
"""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.catalog.queries import PaginationParams, ProductFilter
from app.catalog.reader import CatalogReader, PaginatedResult, ProductDetail, ProductSummary
from app.catalog.writer import CatalogWriter, ProductInput
from app.domain.value_objects import Principal, Role


class CatalogService:
    """Service for catalog operations.

    Reads are public. Writes require an admin principal and are refused
    before any statement runs otherwise.

    Example usage:
        service = CatalogService(async_session_factory)

        results = await service.list_products(
            ProductFilter(search="shirt"),
            PaginationParams(page=1, page_size=10),
        )
        product_id = await service.create_product(principal, product_input)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize service with a session factory.

        Args:
            session_factory: Factory for async sessions.
        """
        self.reader = CatalogReader(session_factory)
        self.writer = CatalogWriter(session_factory)

    async def list_products(
        self,
        filters: ProductFilter,
        pagination: PaginationParams,
    ) -> PaginatedResult[ProductSummary]:
        """List active products with filters and pagination."""
        return await self.reader.list_products(filters, pagination)

    async def get_product(self, slug: str) -> ProductDetail:
        """Get an active product by slug."""
        return await self.reader.get_by_slug(slug)

    async def get_product_by_id(self, principal: Principal, product_id: int) -> ProductDetail:
        """Get a product by id, including inactive ones; admin only."""
        principal.require_role(Role.ADMIN)
        return await self.reader.get_by_id(product_id)

    async def create_product(self, principal: Principal, data: ProductInput) -> int:
        """Create a product.

        Args:
            principal: Caller.
            data: Product to create.

        Returns:
            Generated product id.

        Raises:
            ForbiddenError: If the caller is not an admin.
        """
        principal.require_role(Role.ADMIN)
        return await self.writer.create_product(data)

    async def update_product(
        self,
        principal: Principal,
        product_id: int,
        fields: Mapping[str, Any],
    ) -> int:
        """Update a product; admin only."""
        principal.require_role(Role.ADMIN)
        return await self.writer.update_product(product_id, fields)

    async def delete_product(self, principal: Principal, product_id: int) -> int:
        """Delete a product; admin only."""
        principal.require_role(Role.ADMIN)
        return await self.writer.delete_product(product_id)

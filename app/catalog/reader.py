"""Catalog reads.

Hydrates product listings and product details from the relational schema.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.catalog.codec import AttributeValueRef, decode_attributes
from app.catalog.models import Product, ProductImage, ProductVariant
from app.catalog.queries import (
    PaginationParams,
    ProductFilter,
    compose_count,
    compose_listing,
    flattened_attributes,
)
from app.domain.exceptions import ProductNotFoundError, StorageError

T = TypeVar("T")

logger = structlog.get_logger()


# ============================================================================
# Read Models
# ============================================================================


@dataclass
class ProductFields:
    """Columns shared by every product view."""

    id: int
    name: str
    slug: str
    description: str | None
    price: Decimal
    discount_price: Decimal | None
    stock: int
    category_id: int | None
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def columns_from(cls, row: Mapping[str, Any]) -> dict[str, Any]:
        """Pick the product columns out of a result row mapping."""
        return {name: row[name] for name in cls.__dataclass_fields__}


@dataclass
class ProductSummary(ProductFields):
    """Product as shown in listings."""

    category_name: str | None = None
    primary_image: str | None = None


@dataclass
class ImageView:
    """Product image."""

    id: int
    image_url: str
    is_primary: bool


@dataclass
class VariantView:
    """Product variant with its decoded attributes."""

    id: int
    sku: str
    stock: int
    price_adjustment: Decimal
    attributes: dict[str, list[AttributeValueRef]] = field(default_factory=dict)


@dataclass
class ProductDetail(ProductFields):
    """Product with its images and variants."""

    images: list[ImageView] = field(default_factory=list)
    variants: list[VariantView] = field(default_factory=list)


@dataclass
class PaginatedResult(Generic[T]):
    """Paginated result container.

    Attributes:
        items: List of items.
        total: Total count.
        page: Current page.
        page_size: Items per page.
    """

    items: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Calculate total pages."""
        return (self.total + self.page_size - 1) // self.page_size


# ============================================================================
# Reader
# ============================================================================


class CatalogReader:
    """Reads products from the catalog.

    Every operation borrows one session from the factory and returns it
    when done, whether the read succeeded or not.

    Example usage:
        reader = CatalogReader(async_session_factory)
        page = await reader.list_products(
            ProductFilter(featured_only=True),
            PaginationParams(page=2, page_size=10),
        )
        detail = await reader.get_by_slug("linen-shirt")
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize reader.

        Args:
            session_factory: Factory for async sessions.
        """
        self.session_factory = session_factory

    async def list_products(
        self,
        filters: ProductFilter,
        pagination: PaginationParams,
    ) -> PaginatedResult[ProductSummary]:
        """List one page of active products.

        Args:
            filters: Listing criteria.
            pagination: Page to fetch.

        Returns:
            Page of product summaries with the total match count.

        Raises:
            StorageError: If the database fails.
        """
        try:
            async with self.session_factory() as session:
                result = await session.execute(compose_listing(filters, pagination))
                rows = result.mappings().all()
                total = (await session.execute(compose_count(filters))).scalar_one()
        except SQLAlchemyError as e:
            logger.error("Product listing failed", error=str(e))
            raise StorageError("Failed to list products") from e

        items = [
            ProductSummary(
                **ProductFields.columns_from(row),
                category_name=row["category_name"],
                primary_image=row["primary_image"],
            )
            for row in rows
        ]

        return PaginatedResult(
            items=items,
            total=total,
            page=pagination.page,
            page_size=pagination.page_size,
        )

    async def get_by_slug(self, slug: str) -> ProductDetail:
        """Get an active product by slug.

        Args:
            slug: Product slug.

        Returns:
            Product with images and variants.

        Raises:
            ProductNotFoundError: If no active product has this slug.
            StorageError: If the database fails.
        """
        query = select(Product).where(Product.slug == slug, Product.is_active.is_(True))
        detail = await self._hydrate(query)
        if detail is None:
            raise ProductNotFoundError(slug=slug)
        return detail

    async def get_by_id(self, product_id: int) -> ProductDetail:
        """Get a product by id, active or not.

        Args:
            product_id: Product id.

        Returns:
            Product with images and variants.

        Raises:
            ProductNotFoundError: If the product does not exist.
            StorageError: If the database fails.
        """
        detail = await self._hydrate(select(Product).where(Product.id == product_id))
        if detail is None:
            raise ProductNotFoundError(product_id=product_id)
        return detail

    async def _hydrate(self, query: Select) -> ProductDetail | None:
        """Load the first product matched by a query with its children."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(query.order_by(Product.id).limit(1))
                product = result.scalars().first()
                if product is None:
                    return None

                images = await session.execute(
                    select(ProductImage)
                    .where(ProductImage.product_id == product.id)
                    .order_by(ProductImage.id)
                )
                variants = await session.execute(
                    select(
                        ProductVariant,
                        flattened_attributes(ProductVariant.id).label("attributes"),
                    )
                    .where(ProductVariant.product_id == product.id)
                    .order_by(ProductVariant.id)
                )
                image_rows = images.scalars().all()
                variant_rows = variants.all()
        except SQLAlchemyError as e:
            logger.error("Product lookup failed", error=str(e))
            raise StorageError("Failed to load product") from e

        return ProductDetail(
            **{name: getattr(product, name) for name in ProductFields.__dataclass_fields__},
            images=[
                ImageView(id=i.id, image_url=i.image_url, is_primary=i.is_primary)
                for i in image_rows
            ],
            variants=[
                VariantView(
                    id=variant.id,
                    sku=variant.sku,
                    stock=variant.stock,
                    price_adjustment=variant.price_adjustment,
                    attributes=decode_attributes(flattened),
                )
                for variant, flattened in variant_rows
            ],
        )

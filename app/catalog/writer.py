"""Catalog writes.

Product creation spans the product, image, variant and variant attribute
link tables inside one transaction. Updates and deletes are single
statements.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import structlog
from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.catalog.models import Product, ProductImage, ProductVariant, VariantAttributeValue
from app.domain.exceptions import ProductNotFoundError, StorageError, ValidationFailedError

logger = structlog.get_logger()

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "slug",
        "description",
        "price",
        "discount_price",
        "category_id",
        "stock",
        "is_featured",
        "is_active",
    }
)

REQUIRED_PRODUCT_FIELDS = frozenset(
    {"name", "slug", "price", "stock", "is_featured", "is_active"}
)


# ============================================================================
# Write Models
# ============================================================================


@dataclass
class ImageInput:
    """Image descriptor for product creation."""

    url: str
    is_primary: bool = False


@dataclass
class VariantInput:
    """Variant descriptor for product creation.

    Attributes:
        sku: Variant SKU.
        stock: Variant stock.
        price_adjustment: Signed offset applied to the parent price.
        attribute_value_ids: Attribute values describing the variant.
            Duplicates are collapsed, keeping first-seen order.
    """

    sku: str
    stock: int = 0
    price_adjustment: Decimal = Decimal("0")
    attribute_value_ids: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.attribute_value_ids = list(dict.fromkeys(self.attribute_value_ids))


@dataclass
class ProductInput:
    """Everything needed to create a product."""

    name: str
    slug: str
    price: Decimal
    description: str | None = None
    discount_price: Decimal | None = None
    category_id: int | None = None
    stock: int = 0
    is_featured: bool = False
    is_active: bool = True
    images: list[ImageInput] = field(default_factory=list)
    variants: list[VariantInput] = field(default_factory=list)


# ============================================================================
# Writer
# ============================================================================


class CatalogWriter:
    """Writes products to the catalog.

    Example usage:
        writer = CatalogWriter(async_session_factory)
        product_id = await writer.create_product(
            ProductInput(
                name="Linen Shirt",
                slug="linen-shirt",
                price=Decimal("49.90"),
                images=[ImageInput(url="https://cdn/shirt.jpg", is_primary=True)],
                variants=[VariantInput(sku="LS-RED-M", stock=5, attribute_value_ids=[1, 4])],
            )
        )
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize writer.

        Args:
            session_factory: Factory for async sessions.
        """
        self.session_factory = session_factory

    async def create_product(self, data: ProductInput) -> int:
        """Create a product with its images, variants and attribute links.

        All rows are written in one transaction. On any failure the
        transaction is rolled back and nothing persists.

        Args:
            data: Product to create.

        Returns:
            Generated product id.

        Raises:
            StorageError: If any insert fails.
        """
        try:
            async with self.session_factory() as session, session.begin():
                product = Product(
                    name=data.name,
                    slug=data.slug,
                    description=data.description,
                    price=data.price,
                    discount_price=data.discount_price,
                    category_id=data.category_id,
                    stock=data.stock,
                    is_featured=data.is_featured,
                    is_active=data.is_active,
                )
                session.add(product)
                await session.flush()
                product_id = product.id

                for image in data.images:
                    session.add(
                        ProductImage(
                            product_id=product_id,
                            image_url=image.url,
                            is_primary=image.is_primary,
                        )
                    )
                await session.flush()

                for variant_input in data.variants:
                    variant = ProductVariant(
                        product_id=product_id,
                        sku=variant_input.sku,
                        stock=variant_input.stock,
                        price_adjustment=variant_input.price_adjustment,
                    )
                    session.add(variant)
                    await session.flush()

                    for attribute_value_id in variant_input.attribute_value_ids:
                        session.add(
                            VariantAttributeValue(
                                variant_id=variant.id,
                                attribute_value_id=attribute_value_id,
                            )
                        )
                        await session.flush()
        except SQLAlchemyError as e:
            logger.error("Product creation rolled back", slug=data.slug, error=str(e))
            raise StorageError(
                "Failed to create product",
                details={"slug": data.slug},
            ) from e

        logger.info(
            "Product created",
            product_id=product_id,
            slug=data.slug,
            images=len(data.images),
            variants=len(data.variants),
        )
        return product_id

    async def update_product(self, product_id: int, fields: Mapping[str, Any]) -> int:
        """Update product columns in place.

        Args:
            product_id: Product to update.
            fields: Columns to change. Only product columns listed in
                UPDATABLE_FIELDS are accepted.

        Returns:
            Number of affected rows.

        Raises:
            ValidationFailedError: If an unknown field is given, or a
                required column is set to None.
            ProductNotFoundError: If the product does not exist.
            StorageError: If the update fails.
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationFailedError(
                "Unknown product fields",
                details={"fields": sorted(unknown)},
            )

        nulls = sorted(
            name for name in REQUIRED_PRODUCT_FIELDS if name in fields and fields[name] is None
        )
        if nulls:
            raise ValidationFailedError(
                "Product fields cannot be null",
                details={"fields": nulls},
            )

        stmt = (
            update(Product)
            .where(Product.id == product_id)
            .values(**fields, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        affected = await self._execute(stmt, "update", product_id)

        logger.info("Product updated", product_id=product_id, fields=sorted(fields))
        return affected

    async def delete_product(self, product_id: int) -> int:
        """Delete a product.

        Images, variants and attribute links go with it through the
        ON DELETE CASCADE foreign keys.

        Args:
            product_id: Product to delete.

        Returns:
            Number of affected rows.

        Raises:
            ProductNotFoundError: If the product does not exist.
            StorageError: If the delete fails.
        """
        stmt = (
            delete(Product)
            .where(Product.id == product_id)
            .execution_options(synchronize_session=False)
        )
        affected = await self._execute(stmt, "delete", product_id)

        logger.info("Product deleted", product_id=product_id)
        return affected

    async def _execute(self, stmt: Any, action: str, product_id: int) -> int:
        """Run a single-statement write and return its row count."""
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Product {action} failed", product_id=product_id, error=str(e))
            raise StorageError(
                f"Failed to {action} product",
                details={"product_id": product_id},
            ) from e

        if result.rowcount == 0:
            raise ProductNotFoundError(product_id=product_id)
        return result.rowcount

"""SQLAlchemy models for the product catalog.

Defines products with their images and variants, the categories they
belong to, and the attribute reference data variants are linked to.
"""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Category(Base):
    """Product category.

    Attributes:
        id: Category identifier.
        name: Display name (unique).
        slug: URL-friendly identifier.
        description: Optional description.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    slug: Mapped[str | None] = mapped_column(String(120), nullable=True, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Category(id={self.id}, name={self.name})>"


class Product(Base):
    """Product entity in the catalog.

    Attributes:
        id: Product identifier.
        name: Product name.
        slug: URL-friendly identifier, unique across the catalog.
        description: Product description.
        price: Base price.
        discount_price: Optional reduced price; expected to be <= price.
        stock: Available quantity.
        category_id: Optional category reference.
        is_active: Whether the product is visible in the catalog.
        is_featured: Whether the product is featured.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    discount_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    # Relationships
    images: Mapped[list["ProductImage"]] = relationship(
        "ProductImage",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    variants: Mapped[list["ProductVariant"]] = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, slug={self.slug})>"


class ProductImage(Base):
    """Image attached to a product.

    Attributes:
        id: Image identifier.
        product_id: Owning product.
        image_url: Image location.
        is_primary: Whether this is the representative listing image.
    """

    __tablename__ = "product_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    product: Mapped["Product"] = relationship("Product", back_populates="images")


class ProductVariant(Base):
    """Purchasable configuration of a product (e.g. size and color).

    A variant is described by the attribute values linked to it through
    ``variant_attribute_values``.

    Attributes:
        id: Variant identifier.
        product_id: Parent product.
        sku: Stock Keeping Unit.
        stock: Available quantity for this variant.
        price_adjustment: Signed offset applied to the parent price.
    """

    __tablename__ = "product_variants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price_adjustment: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0")
    )

    product: Mapped["Product"] = relationship("Product", back_populates="variants")

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductVariant(id={self.id}, sku={self.sku})>"


class Attribute(Base):
    """Named axis of variation, e.g. ``color`` or ``size``."""

    __tablename__ = "attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    values: Mapped[list["AttributeValue"]] = relationship(
        "AttributeValue",
        back_populates="attribute",
    )

    __table_args__ = (
        CheckConstraint(
            "type NOT LIKE '%,%' AND type NOT LIKE '%:%'",
            name="ck_attributes_type_separators",
        ),
    )


class AttributeValue(Base):
    """Concrete value on an attribute axis, e.g. ``red``."""

    __tablename__ = "attribute_values"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    attribute_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attributes.id"),
        nullable=False,
        index=True,
    )
    value: Mapped[str] = mapped_column(String(100), nullable=False)

    attribute: Mapped["Attribute"] = relationship("Attribute", back_populates="values")

    __table_args__ = (
        UniqueConstraint("attribute_id", "value", name="uq_attribute_values_attribute_value"),
        CheckConstraint("value NOT LIKE '%,%'", name="ck_attribute_values_value_separator"),
    )


class VariantAttributeValue(Base):
    """Link between a variant and one of its attribute values."""

    __tablename__ = "variant_attribute_values"

    variant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("product_variants.id", ondelete="CASCADE"),
        primary_key=True,
    )
    attribute_value_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("attribute_values.id"),
        primary_key=True,
    )

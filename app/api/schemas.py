"""API schemas for the catalog API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.catalog.writer import REQUIRED_PRODUCT_FIELDS


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class MessageResponse(BaseModel):
    """Acknowledgment of a successful write."""

    message: str


class PaginationSchema(BaseModel):
    """Pagination metadata for listings."""

    total: int = Field(..., description="Total number of matching products")
    page: int = Field(..., description="Current page number (1-based)")
    limit: int = Field(..., description="Items per page")
    pages: int = Field(..., description="Total number of pages")


# ============================================================================
# Product Read Schemas
# ============================================================================


class AttributeValueSchema(BaseModel):
    """Attribute value linked to a variant."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    value: str


class ImageSchema(BaseModel):
    """Product image."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    image_url: str
    is_primary: bool


class VariantSchema(BaseModel):
    """Product variant with attributes grouped by type."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    sku: str
    stock: int
    price_adjustment: Decimal
    attributes: dict[str, list[AttributeValueSchema]] = Field(
        default_factory=dict,
        description="Attribute type mapped to the variant's values",
    )


class ProductBaseSchema(BaseModel):
    """Columns shared by product responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    slug: str
    description: str | None = None
    price: Decimal
    discount_price: Decimal | None = None
    stock: int
    category_id: int | None = None
    is_active: bool
    is_featured: bool
    created_at: datetime
    updated_at: datetime


class ProductSummarySchema(ProductBaseSchema):
    """Product in a listing."""

    category_name: str | None = None
    primary_image: str | None = None


class ProductDetailSchema(ProductBaseSchema):
    """Product with images and variants."""

    images: list[ImageSchema] = Field(default_factory=list)
    variants: list[VariantSchema] = Field(default_factory=list)


class ProductListResponse(BaseModel):
    """One page of products."""

    items: list[ProductSummarySchema]
    pagination: PaginationSchema


# ============================================================================
# Product Write Schemas
# ============================================================================


class ImageCreateSchema(BaseModel):
    """Image to attach to a new product."""

    url: str = Field(..., min_length=1, max_length=1000)
    is_primary: bool = False


class VariantCreateSchema(BaseModel):
    """Variant to create with a new product."""

    sku: str = Field(..., min_length=1, max_length=100)
    stock: int = Field(default=0, ge=0)
    price_adjustment: Decimal = Field(default=Decimal("0"))
    attribute_value_ids: list[int] = Field(
        default_factory=list,
        description="Attribute values describing the variant",
    )


class ProductCreateRequest(BaseModel):
    """Request to create a product."""

    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    price: Decimal = Field(..., ge=0)
    discount_price: Decimal | None = Field(default=None, ge=0)
    category_id: int | None = None
    stock: int = Field(default=0, ge=0)
    is_featured: bool = False
    is_active: bool = True
    images: list[ImageCreateSchema] = Field(default_factory=list)
    variants: list[VariantCreateSchema] = Field(default_factory=list)


class ProductUpdateRequest(BaseModel):
    """Partial product update. Only the fields sent are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0)
    discount_price: Decimal | None = Field(default=None, ge=0)
    category_id: int | None = None
    stock: int | None = Field(default=None, ge=0)
    is_featured: bool | None = None
    is_active: bool | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ProductUpdateRequest":
        """Refuse an explicit null for columns that cannot be empty."""
        nulls = sorted(
            name
            for name in self.model_fields_set & REQUIRED_PRODUCT_FIELDS
            if getattr(self, name) is None
        )
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self


class ProductCreatedResponse(BaseModel):
    """Response after creating a product."""

    message: str
    product_id: int

"""Product Catalog.

Provides listing, lookup and administration of products with their
images and attribute-described variants.
"""

from app.catalog.codec import AttributeValueRef, decode_attributes
from app.catalog.models import (
    Attribute,
    AttributeValue,
    Category,
    Product,
    ProductImage,
    ProductVariant,
    VariantAttributeValue,
)
from app.catalog.queries import PaginationParams, ProductFilter, compose_count, compose_listing
from app.catalog.reader import CatalogReader, PaginatedResult, ProductDetail, ProductSummary
from app.catalog.service import CatalogService
from app.catalog.writer import CatalogWriter, ImageInput, ProductInput, VariantInput

__all__ = [
    # Models
    "Attribute",
    "AttributeValue",
    "Category",
    "Product",
    "ProductImage",
    "ProductVariant",
    "VariantAttributeValue",
    # Codec
    "AttributeValueRef",
    "decode_attributes",
    # Queries
    "PaginationParams",
    "ProductFilter",
    "compose_count",
    "compose_listing",
    # Reader
    "CatalogReader",
    "PaginatedResult",
    "ProductDetail",
    "ProductSummary",
    # Writer
    "CatalogWriter",
    "ImageInput",
    "ProductInput",
    "VariantInput",
    # Service
    "CatalogService",
]

"""Query composition for catalog reads.

Builds SQLAlchemy Core statements for product listing. Filter values are
always carried as bound parameters; only the statement shape depends on
which criteria are present.
"""

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Select, String, and_, cast, func, or_, select
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from app.catalog.codec import FIELD_SEPARATOR, TRIPLE_SEPARATOR
from app.catalog.models import (
    Attribute,
    AttributeValue,
    Category,
    Product,
    ProductImage,
    VariantAttributeValue,
)


@dataclass
class ProductFilter:
    """Filter parameters for product listing.

    Attributes:
        category_id: Filter by category.
        featured_only: Restrict to featured products when True.
        search: Case-insensitive substring matched against name and description.
    """

    category_id: int | None = None
    featured_only: bool | None = None
    search: str | None = None


@dataclass
class PaginationParams:
    """Pagination parameters.

    Attributes:
        page: Page number (1-indexed).
        page_size: Items per page.
    """

    page: int = 1
    page_size: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.page_size < 1:
            raise ValueError("page_size must be >= 1")

    @property
    def offset(self) -> int:
        """Calculate offset from page number."""
        return (self.page - 1) * self.page_size

    @property
    def limit(self) -> int:
        """Get limit (alias for page_size)."""
        return self.page_size


# ============================================================================
# Attribute aggregation
# ============================================================================


class attribute_concat(FunctionElement):
    """Comma-joined aggregate of strings.

    Renders as ``group_concat`` (SQLite, MySQL) or ``string_agg``
    (PostgreSQL); both join with a comma.
    """

    type = String()
    name = "attribute_concat"
    inherit_cache = True


@compiles(attribute_concat)
def _compile_group_concat(element: attribute_concat, compiler: Any, **kw: Any) -> str:
    return "group_concat(%s)" % compiler.process(element.clauses, **kw)


@compiles(attribute_concat, "postgresql")
def _compile_string_agg(element: attribute_concat, compiler: Any, **kw: Any) -> str:
    return "string_agg(%s, '%s')" % (
        compiler.process(element.clauses, **kw),
        TRIPLE_SEPARATOR,
    )


def flattened_attributes(variant_id: ColumnElement[int]) -> ColumnElement[str]:
    """Correlated subquery yielding the flattened attributes of a variant.

    Args:
        variant_id: Column identifying the variant in the enclosing query.

    Returns:
        Scalar subquery producing ``"<id>:<type>:<value>,..."`` or NULL.
    """
    triple = (
        cast(AttributeValue.id, String)
        + FIELD_SEPARATOR
        + Attribute.type
        + FIELD_SEPARATOR
        + AttributeValue.value
    )
    return (
        select(attribute_concat(triple))
        .select_from(VariantAttributeValue)
        .join(AttributeValue, VariantAttributeValue.attribute_value_id == AttributeValue.id)
        .join(Attribute, AttributeValue.attribute_id == Attribute.id)
        .where(VariantAttributeValue.variant_id == variant_id)
        .scalar_subquery()
    )


# ============================================================================
# Listing
# ============================================================================


def primary_image_url() -> ColumnElement[str]:
    """Correlated subquery yielding a product's primary image url.

    Takes the first primary image by id when several are flagged.
    """
    return (
        select(ProductImage.image_url)
        .where(
            ProductImage.product_id == Product.id,
            ProductImage.is_primary.is_(True),
        )
        .order_by(ProductImage.id)
        .limit(1)
        .scalar_subquery()
    )


def filter_conditions(filters: ProductFilter) -> list[ColumnElement[bool]]:
    """Build the listing predicates.

    The active-only predicate always comes first; each present criterion
    adds one more condition to be joined with AND.

    Args:
        filters: Listing criteria.

    Returns:
        Conditions to conjoin.
    """
    conditions: list[ColumnElement[bool]] = [Product.is_active.is_(True)]

    if filters.category_id is not None:
        conditions.append(Product.category_id == filters.category_id)

    if filters.featured_only:
        conditions.append(Product.is_featured.is_(True))

    if filters.search:
        conditions.append(
            or_(
                Product.name.icontains(filters.search, autoescape=True),
                Product.description.icontains(filters.search, autoescape=True),
            )
        )

    return conditions


def compose_listing(filters: ProductFilter, pagination: PaginationParams) -> Select:
    """Compose the paginated product listing statement.

    Args:
        filters: Listing criteria.
        pagination: Page to fetch.

    Returns:
        Select yielding product columns plus ``category_name`` and
        ``primary_image``, newest first.
    """
    return (
        select(
            *Product.__table__.columns,
            Category.name.label("category_name"),
            primary_image_url().label("primary_image"),
        )
        .select_from(Product)
        .outerjoin(Category, Product.category_id == Category.id)
        .where(and_(*filter_conditions(filters)))
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(pagination.limit)
        .offset(pagination.offset)
    )


def compose_count(filters: ProductFilter) -> Select:
    """Compose the statement counting every product the listing can page through.

    Args:
        filters: Listing criteria.

    Returns:
        Select yielding a single integer.
    """
    return select(func.count(Product.id)).where(and_(*filter_conditions(filters)))

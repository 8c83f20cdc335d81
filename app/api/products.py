"""Product API endpoints.

Provides public product listing and lookup, and admin-only lookup by id,
creation, update and deletion.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.api.auth import get_principal
from app.api.schemas import (
    ErrorResponse,
    MessageResponse,
    PaginationSchema,
    ProductCreatedResponse,
    ProductCreateRequest,
    ProductDetailSchema,
    ProductListResponse,
    ProductSummarySchema,
    ProductUpdateRequest,
)
from app.catalog.queries import PaginationParams, ProductFilter
from app.catalog.service import CatalogService
from app.catalog.writer import ImageInput, ProductInput, VariantInput
from app.domain.value_objects import Principal
from app.infrastructure.config import settings
from app.infrastructure.database import get_session_factory

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_catalog_service(
    session_factory: Annotated[async_sessionmaker[AsyncSession], Depends(get_session_factory)],
) -> CatalogService:
    """Get catalog service bound to the application's session factory."""
    return CatalogService(session_factory)


# ============================================================================
# Converters
# ============================================================================


def request_to_input(payload: ProductCreateRequest) -> ProductInput:
    """Convert a create request into the writer's input."""
    return ProductInput(
        name=payload.name,
        slug=payload.slug,
        description=payload.description,
        price=payload.price,
        discount_price=payload.discount_price,
        category_id=payload.category_id,
        stock=payload.stock,
        is_featured=payload.is_featured,
        is_active=payload.is_active,
        images=[ImageInput(url=i.url, is_primary=i.is_primary) for i in payload.images],
        variants=[
            VariantInput(
                sku=v.sku,
                stock=v.stock,
                price_adjustment=v.price_adjustment,
                attribute_value_ids=v.attribute_value_ids,
            )
            for v in payload.variants
        ],
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "",
    response_model=ProductListResponse,
    summary="List products",
    description="List active products, newest first, with optional filters.",
)
async def list_products(
    service: Annotated[CatalogService, Depends(get_catalog_service)],
    category: Annotated[int | None, Query(description="Category id")] = None,
    featured: Annotated[bool | None, Query(description="Only featured products")] = None,
    search: Annotated[str | None, Query(description="Text in name or description")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.max_page_size)] = settings.default_page_size,
) -> ProductListResponse:
    """List one page of products."""
    result = await service.list_products(
        ProductFilter(category_id=category, featured_only=featured, search=search),
        PaginationParams(page=page, page_size=limit),
    )

    return ProductListResponse(
        items=[ProductSummarySchema.model_validate(item) for item in result.items],
        pagination=PaginationSchema(
            total=result.total,
            page=result.page,
            limit=result.page_size,
            pages=result.total_pages,
        ),
    )


@router.get(
    "/{slug}",
    response_model=ProductDetailSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Get product",
    description="Get an active product with its images and variants.",
)
async def get_product(
    slug: str,
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductDetailSchema:
    """Get a product by slug.

    Raises:
        ProductNotFoundError: If no active product has this slug.
    """
    product = await service.get_product(slug)
    return ProductDetailSchema.model_validate(product)


@router.get(
    "/id/{product_id}",
    response_model=ProductDetailSchema,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Get product by id",
    description="Get a product by id, active or not (admin only).",
)
async def get_product_by_id(
    product_id: int,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductDetailSchema:
    """Get any product by id, so admins can review inactive products."""
    product = await service.get_product_by_id(principal, product_id)
    return ProductDetailSchema.model_validate(product)


@router.post(
    "",
    response_model=ProductCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    summary="Create product",
    description="Create a product with its images and variants (admin only).",
)
async def create_product(
    payload: ProductCreateRequest,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> ProductCreatedResponse:
    """Create a product in one transaction."""
    product_id = await service.create_product(principal, request_to_input(payload))
    return ProductCreatedResponse(message="Product created", product_id=product_id)


@router.put(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Update product",
    description="Update the given product fields (admin only).",
)
async def update_product(
    product_id: int,
    payload: ProductUpdateRequest,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> MessageResponse:
    """Update a product."""
    await service.update_product(
        principal,
        product_id,
        payload.model_dump(exclude_unset=True),
    )
    return MessageResponse(message="Product updated")


@router.delete(
    "/{product_id}",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Delete product",
    description="Delete a product with its images and variants (admin only).",
)
async def delete_product(
    product_id: int,
    principal: Annotated[Principal, Depends(get_principal)],
    service: Annotated[CatalogService, Depends(get_catalog_service)],
) -> MessageResponse:
    """Delete a product."""
    await service.delete_product(principal, product_id)
    return MessageResponse(message="Product deleted")

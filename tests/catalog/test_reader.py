"""Tests for catalog reads."""

from dataclasses import replace
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.catalog.codec import AttributeValueRef
from app.catalog.queries import PaginationParams, ProductFilter
from app.catalog.reader import CatalogReader, PaginatedResult
from app.catalog.writer import CatalogWriter, ProductInput
from app.domain.exceptions import NotFoundError, ProductNotFoundError, StorageError


@pytest.fixture
def reader(session_factory) -> CatalogReader:
    """Create reader on the test database."""
    return CatalogReader(session_factory)


@pytest.fixture
def writer(session_factory) -> CatalogWriter:
    """Create writer used to populate the test database."""
    return CatalogWriter(session_factory)


async def _create_catalog(writer: CatalogWriter, product_input: ProductInput) -> dict[str, int]:
    """Populate a small catalog, oldest first."""
    ids = {}
    ids["linen-shirt"] = await writer.create_product(product_input)
    ids["wool-scarf"] = await writer.create_product(
        ProductInput(
            name="Wool Scarf",
            slug="wool-scarf",
            description="Warm knit, linen trim",
            price=Decimal("25.00"),
            category_id=1,
        )
    )
    ids["trail-runner"] = await writer.create_product(
        ProductInput(
            name="Trail Runner",
            slug="trail-runner",
            price=Decimal("120.00"),
            category_id=2,
            is_featured=True,
        )
    )
    ids["old-boot"] = await writer.create_product(
        ProductInput(
            name="Old Boot",
            slug="old-boot",
            price=Decimal("80.00"),
            category_id=2,
            is_active=False,
        )
    )
    return ids


class TestPaginatedResult:
    """Tests for PaginatedResult."""

    @pytest.mark.parametrize(
        "total,page_size,expected",
        [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 7, 4)],
    )
    def test_total_pages(self, total: int, page_size: int, expected: int) -> None:
        """Total pages rounds up."""
        result = PaginatedResult(items=[], total=total, page=1, page_size=page_size)
        assert result.total_pages == expected


class TestListProducts:
    """Tests for CatalogReader.list_products."""

    @pytest.mark.asyncio
    async def test_empty_catalog(self, reader, reference_data) -> None:
        """An empty catalog yields no items and zero total."""
        result = await reader.list_products(ProductFilter(), PaginationParams())

        assert result.items == []
        assert result.total == 0
        assert result.total_pages == 0

    @pytest.mark.asyncio
    async def test_active_products_newest_first(self, reader, writer, product_input) -> None:
        """Inactive products are hidden and newer products come first."""
        await _create_catalog(writer, product_input)

        result = await reader.list_products(ProductFilter(), PaginationParams())

        assert [p.slug for p in result.items] == ["trail-runner", "wool-scarf", "linen-shirt"]
        assert result.total == 3

    @pytest.mark.asyncio
    async def test_summary_carries_category_and_primary_image(
        self, reader, writer, product_input
    ) -> None:
        """Summaries include the category name and the primary image URL."""
        await writer.create_product(product_input)

        result = await reader.list_products(ProductFilter(), PaginationParams())
        summary = result.items[0]

        assert summary.category_name == "Clothing"
        assert summary.primary_image == "https://cdn.example.com/linen-front.jpg"
        assert summary.price == Decimal("49.90")
        assert summary.discount_price == Decimal("39.90")

    @pytest.mark.asyncio
    async def test_product_without_images_or_category(self, reader, writer, reference_data) -> None:
        """Missing category and images surface as None."""
        await writer.create_product(
            ProductInput(name="Plain Tee", slug="plain-tee", price=Decimal("9.99"))
        )

        summary = (await reader.list_products(ProductFilter(), PaginationParams())).items[0]

        assert summary.category_name is None
        assert summary.primary_image is None

    @pytest.mark.asyncio
    async def test_filter_by_category(self, reader, writer, product_input) -> None:
        """Only products of the category are returned and counted."""
        await _create_catalog(writer, product_input)

        result = await reader.list_products(ProductFilter(category_id=1), PaginationParams())

        assert [p.slug for p in result.items] == ["wool-scarf", "linen-shirt"]
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_filter_featured(self, reader, writer, product_input) -> None:
        """featured_only keeps featured products."""
        await _create_catalog(writer, product_input)

        result = await reader.list_products(
            ProductFilter(featured_only=True), PaginationParams()
        )

        assert [p.slug for p in result.items] == ["trail-runner", "linen-shirt"]
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_search_name_and_description(self, reader, writer, product_input) -> None:
        """Search matches name or description, ignoring case."""
        await _create_catalog(writer, product_input)

        result = await reader.list_products(ProductFilter(search="LINEN"), PaginationParams())

        assert [p.slug for p in result.items] == ["wool-scarf", "linen-shirt"]
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_search_with_sql_metacharacters(self, reader, writer, product_input) -> None:
        """Hostile search text is treated as data."""
        await _create_catalog(writer, product_input)

        result = await reader.list_products(
            ProductFilter(search="x' OR '1'='1"), PaginationParams()
        )

        assert result.items == []
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, reader, writer, reference_data) -> None:
        """% and _ in the search text are not wildcards."""
        await writer.create_product(
            ProductInput(name="100% Cotton Tee", slug="cotton-tee", price=Decimal("19.00"))
        )
        await writer.create_product(
            ProductInput(name="Silk Tie", slug="silk-tie", price=Decimal("35.00"))
        )

        percent = await reader.list_products(ProductFilter(search="%"), PaginationParams())
        underscore = await reader.list_products(ProductFilter(search="_"), PaginationParams())

        assert [p.slug for p in percent.items] == ["cotton-tee"]
        assert percent.total == 1
        assert underscore.items == []
        assert underscore.total == 0

    @pytest.mark.asyncio
    async def test_pagination(self, reader, writer, product_input) -> None:
        """Pages slice the ordered listing while the total stays the same."""
        for i in range(5):
            await writer.create_product(replace(product_input, slug=f"shirt-{i}", variants=[]))

        first = await reader.list_products(ProductFilter(), PaginationParams(page=1, page_size=2))
        third = await reader.list_products(ProductFilter(), PaginationParams(page=3, page_size=2))
        beyond = await reader.list_products(ProductFilter(), PaginationParams(page=4, page_size=2))

        assert [p.slug for p in first.items] == ["shirt-4", "shirt-3"]
        assert [p.slug for p in third.items] == ["shirt-0"]
        assert beyond.items == []
        assert first.total == third.total == beyond.total == 5
        assert first.total_pages == 3

    @pytest.mark.asyncio
    async def test_storage_failure(self, tmp_path: Path) -> None:
        """Database errors surface as StorageError."""
        engine = create_async_engine(
            f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}", poolclass=NullPool
        )
        reader = CatalogReader(async_sessionmaker(engine, class_=AsyncSession))

        with pytest.raises(StorageError) as exc_info:
            await reader.list_products(ProductFilter(), PaginationParams())

        assert exc_info.value.__cause__ is not None
        await engine.dispose()


class TestGetBySlug:
    """Tests for CatalogReader.get_by_slug."""

    @pytest.mark.asyncio
    async def test_returns_product_with_children(self, reader, writer, product_input) -> None:
        """Detail includes ordered images and variants with decoded attributes."""
        await writer.create_product(product_input)

        detail = await reader.get_by_slug("linen-shirt")

        assert detail.name == "Linen Shirt"
        assert detail.category_id == 1
        assert [i.image_url for i in detail.images] == [
            "https://cdn.example.com/linen-front.jpg",
            "https://cdn.example.com/linen-back.jpg",
        ]
        assert [i.is_primary for i in detail.images] == [True, False]
        assert [v.sku for v in detail.variants] == ["LS-RED-S", "LS-BLUE-M"]
        assert detail.variants[0].attributes == {
            "color": [AttributeValueRef(id=1, value="red")],
            "size": [AttributeValueRef(id=3, value="S")],
        }
        assert detail.variants[1].attributes == {
            "color": [AttributeValueRef(id=2, value="blue")],
            "size": [AttributeValueRef(id=4, value="M")],
        }
        assert detail.variants[1].price_adjustment == Decimal("2.50")

    @pytest.mark.asyncio
    async def test_variant_without_attributes(self, reader, writer, product_input) -> None:
        """A variant with no links decodes to an empty mapping."""
        product_input.variants[0].attribute_value_ids.clear()
        await writer.create_product(product_input)

        detail = await reader.get_by_slug("linen-shirt")

        assert detail.variants[0].attributes == {}

    @pytest.mark.asyncio
    async def test_unknown_slug(self, reader, reference_data) -> None:
        """An unknown slug raises ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError) as exc_info:
            await reader.get_by_slug("missing")

        assert exc_info.value.details == {"slug": "missing"}

    @pytest.mark.asyncio
    async def test_inactive_product_hidden(self, reader, writer, product_input) -> None:
        """Inactive products are not found by slug."""
        await writer.create_product(replace(product_input, is_active=False))

        with pytest.raises(NotFoundError):
            await reader.get_by_slug("linen-shirt")


class TestGetById:
    """Tests for CatalogReader.get_by_id."""

    @pytest.mark.asyncio
    async def test_inactive_product_found(self, reader, writer, product_input) -> None:
        """Lookup by id ignores the active flag."""
        product_id = await writer.create_product(replace(product_input, is_active=False))

        detail = await reader.get_by_id(product_id)

        assert detail.slug == "linen-shirt"
        assert detail.is_active is False

    @pytest.mark.asyncio
    async def test_unknown_id(self, reader, reference_data) -> None:
        """An unknown id raises ProductNotFoundError."""
        with pytest.raises(ProductNotFoundError):
            await reader.get_by_id(404)

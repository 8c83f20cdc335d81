"""Tests for reference data seeding."""

import pytest
from sqlalchemy import select

from app.catalog.models import Attribute, AttributeValue, Category
from app.catalog.seed import seed_reference_data, slugify
from app.domain.exceptions import ValidationFailedError


class TestSlugify:
    """Tests for slugify."""

    @pytest.mark.parametrize(
        "name,expected",
        [("Clothing", "clothing"), ("Home  Decor", "home-decor"), (" Bags ", "bags")],
    )
    def test_slugify(self, name: str, expected: str) -> None:
        assert slugify(name) == expected


class TestSeedReferenceData:
    """Tests for seed_reference_data."""

    @pytest.mark.asyncio
    async def test_seeds_defaults(self, session_factory) -> None:
        """Default categories, attributes and values are created."""
        created = await seed_reference_data(session_factory)

        assert created == {"categories": 3, "attributes": 2, "attribute_values": 9}

        async with session_factory() as session:
            slugs = (await session.execute(select(Category.slug))).scalars().all()
            types = (await session.execute(select(Attribute.type))).scalars().all()

        assert sorted(slugs) == ["accessories", "clothing", "shoes"]
        assert sorted(types) == ["color", "size"]

    @pytest.mark.asyncio
    async def test_second_run_creates_nothing(self, session_factory) -> None:
        """Seeding twice leaves the data as after the first run."""
        await seed_reference_data(session_factory)

        created = await seed_reference_data(session_factory)

        assert created == {"categories": 0, "attributes": 0, "attribute_values": 0}

    @pytest.mark.asyncio
    async def test_extends_existing_attribute(self, session_factory, reference_data) -> None:
        """New values are added to an existing attribute type."""
        created = await seed_reference_data(
            session_factory,
            categories=["Clothing", "Bags"],
            attributes={"color": ["red", "green"]},
        )

        assert created == {"categories": 1, "attributes": 0, "attribute_values": 1}

        async with session_factory() as session:
            colors = (
                await session.execute(
                    select(AttributeValue.value).where(AttributeValue.attribute_id == 1)
                )
            ).scalars().all()

        assert sorted(colors) == ["blue", "green", "red"]

    @pytest.mark.asyncio
    async def test_value_with_reserved_separator_rejected(self, session_factory) -> None:
        """A comma in a value is refused before anything is written."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await seed_reference_data(
                session_factory,
                categories=["Shoes"],
                attributes={"size": ["6", "6,5"]},
            )

        assert exc_info.value.details == {"attribute_type": "size", "value": "6,5"}
        async with session_factory() as session:
            assert (await session.execute(select(Category.id))).first() is None

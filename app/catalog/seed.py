"""Reference data seeding.

Categories and attribute values are shared reference data that products
and variants point at. Seeding is idempotent: rows that already exist are
left alone.
"""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.catalog.codec import check_encodable
from app.catalog.models import Attribute, AttributeValue, Category

logger = structlog.get_logger()

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "Clothing",
    "Shoes",
    "Accessories",
)

DEFAULT_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "color": ("black", "white", "red", "blue"),
    "size": ("XS", "S", "M", "L", "XL"),
}


def slugify(name: str) -> str:
    """Lowercase a name and join its words with hyphens."""
    return "-".join(name.lower().split())


async def seed_reference_data(
    session_factory: async_sessionmaker[AsyncSession],
    categories: Iterable[str] = DEFAULT_CATEGORIES,
    attributes: Mapping[str, Iterable[str]] = DEFAULT_ATTRIBUTES,
) -> dict[str, Any]:
    """Insert missing categories, attributes and attribute values.

    Args:
        session_factory: Factory for async sessions.
        categories: Category names.
        attributes: Attribute type mapped to its values.

    Returns:
        Counts of created rows.

    Raises:
        ValidationFailedError: If an attribute type or value contains a
            separator reserved by the flattened attribute encoding.
    """
    attributes = {t: list(values) for t, values in attributes.items()}
    for attribute_type, values in attributes.items():
        check_encodable(attribute_type)
        for value in values:
            check_encodable(attribute_type, value)

    created = {"categories": 0, "attributes": 0, "attribute_values": 0}

    async with session_factory() as session, session.begin():
        existing_categories = set(
            (await session.execute(select(Category.name))).scalars().all()
        )
        for name in categories:
            if name not in existing_categories:
                session.add(Category(name=name, slug=slugify(name)))
                existing_categories.add(name)
                created["categories"] += 1

        for attribute_type, values in attributes.items():
            attribute = (
                await session.execute(select(Attribute).where(Attribute.type == attribute_type))
            ).scalar_one_or_none()
            if attribute is None:
                attribute = Attribute(type=attribute_type)
                session.add(attribute)
                await session.flush()
                created["attributes"] += 1

            existing_values = set(
                (
                    await session.execute(
                        select(AttributeValue.value).where(
                            AttributeValue.attribute_id == attribute.id
                        )
                    )
                ).scalars().all()
            )
            for value in values:
                if value not in existing_values:
                    session.add(AttributeValue(attribute_id=attribute.id, value=value))
                    existing_values.add(value)
                    created["attribute_values"] += 1

    logger.info("Reference data seeded", **created)
    return created

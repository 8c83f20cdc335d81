"""Shared fixtures for catalog tests.

Every test gets its own SQLite database file. Async code reaches it
through aiosqlite; fixtures that seed or inspect rows use a plain
synchronous engine on the same file.
"""

from collections.abc import Callable, Iterator
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest
from jose import jwt
from sqlalchemy import Engine, create_engine, event, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from app.catalog.models import (
    Attribute,
    AttributeValue,
    Category,
    Product,
    ProductImage,
    ProductVariant,
    VariantAttributeValue,
)
from app.catalog.writer import ImageInput, ProductInput, VariantInput
from app.infrastructure.config import settings
from app.infrastructure.database import Base


def _configure_connection(dbapi_connection: Any, connection_record: Any) -> None:
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _begin_immediate(conn: Any) -> None:
    # Take the write lock up front so concurrent writers wait instead of failing.
    conn.exec_driver_sql("BEGIN IMMEDIATE")


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of the test database file."""
    return tmp_path / "catalog.db"


@pytest.fixture
def sync_engine(db_path: Path) -> Iterator[Engine]:
    """Synchronous engine with the catalog schema created."""
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(sync_engine: Engine, db_path: Path) -> async_sessionmaker[AsyncSession]:
    """Async session factory on the test database.

    NullPool keeps connections from outliving the event loop that opened them.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    event.listen(engine.sync_engine, "connect", _configure_connection)
    event.listen(engine.sync_engine, "begin", _begin_immediate)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def reference_data(sync_engine: Engine) -> dict[str, int]:
    """Categories, attributes and attribute values with fixed ids."""
    with Session(sync_engine) as session:
        session.add_all(
            [
                Category(id=1, name="Clothing", slug="clothing"),
                Category(id=2, name="Shoes", slug="shoes"),
                Attribute(id=1, type="color"),
                Attribute(id=2, type="size"),
            ]
        )
        session.flush()
        session.add_all(
            [
                AttributeValue(id=1, attribute_id=1, value="red"),
                AttributeValue(id=2, attribute_id=1, value="blue"),
                AttributeValue(id=3, attribute_id=2, value="S"),
                AttributeValue(id=4, attribute_id=2, value="M"),
            ]
        )
        session.commit()

    return {
        "clothing": 1,
        "shoes": 2,
        "red": 1,
        "blue": 2,
        "small": 3,
        "medium": 4,
    }


@pytest.fixture
def count_rows(sync_engine: Engine) -> Callable[[], dict[str, int]]:
    """Callable returning row counts of the product-owned tables."""
    tables = {
        "products": Product,
        "images": ProductImage,
        "variants": ProductVariant,
        "links": VariantAttributeValue,
    }

    def _count() -> dict[str, int]:
        with Session(sync_engine) as session:
            return {
                name: session.execute(select(func.count()).select_from(model)).scalar_one()
                for name, model in tables.items()
            }

    return _count


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def product_input(reference_data: dict[str, int]) -> ProductInput:
    """Product with one primary image and two variants."""
    return ProductInput(
        name="Linen Shirt",
        slug="linen-shirt",
        description="Breathable summer shirt",
        price=Decimal("49.90"),
        discount_price=Decimal("39.90"),
        category_id=reference_data["clothing"],
        stock=12,
        is_featured=True,
        images=[
            ImageInput(url="https://cdn.example.com/linen-front.jpg", is_primary=True),
            ImageInput(url="https://cdn.example.com/linen-back.jpg"),
        ],
        variants=[
            VariantInput(
                sku="LS-RED-S",
                stock=5,
                attribute_value_ids=[reference_data["red"], reference_data["small"]],
            ),
            VariantInput(
                sku="LS-BLUE-M",
                stock=7,
                price_adjustment=Decimal("2.50"),
                attribute_value_ids=[reference_data["blue"], reference_data["medium"]],
            ),
        ],
    )


# ============================================================================
# Token Fixtures
# ============================================================================


def _mint_token(subject: str, role: Any = None, **claims: Any) -> str:
    payload: dict[str, Any] = {"sub": subject, **claims}
    if role is not None:
        payload[settings.role_claim] = role
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithms_list[0])


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Authorization headers of an admin caller."""
    return {"Authorization": f"Bearer {_mint_token('auth0|admin', 'admin')}"}


@pytest.fixture
def client_headers() -> dict[str, str]:
    """Authorization headers of a regular customer."""
    return {"Authorization": f"Bearer {_mint_token('auth0|client', 'client')}"}


@pytest.fixture
def token_factory() -> Callable[..., str]:
    """Mint tokens signed with the configured secret.

    Called as ``token_factory(subject, role=None, **extra_claims)``.
    """
    return _mint_token

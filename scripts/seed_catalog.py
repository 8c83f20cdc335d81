#!/usr/bin/env python3
"""Seed catalog reference data script.

Creates the catalog tables when missing and inserts the categories,
attributes and attribute values products and variants refer to.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --category Clothing --category Bags
    python scripts/seed_catalog.py --attribute color=red,green --attribute size=S,M
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.catalog import models  # noqa: E402,F401
from app.catalog.seed import DEFAULT_ATTRIBUTES, DEFAULT_CATEGORIES, seed_reference_data  # noqa: E402
from app.infrastructure.database import Base, async_session_factory, engine  # noqa: E402


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def parse_attribute(raw: str) -> tuple[str, tuple[str, ...]]:
    """Parse ``type=value1,value2`` into its parts."""
    attribute_type, sep, values = raw.partition("=")
    if not sep or not attribute_type.strip():
        raise argparse.ArgumentTypeError(f"expected type=value1,value2, got {raw!r}")
    return attribute_type.strip(), tuple(v.strip() for v in values.split(",") if v.strip())


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed catalog reference data",
    )
    parser.add_argument(
        "--category",
        action="append",
        dest="categories",
        help="Category name (repeatable, defaults to the built-in list)",
    )
    parser.add_argument(
        "--attribute",
        action="append",
        dest="attributes",
        type=parse_attribute,
        help="Attribute as type=value1,value2 (repeatable, defaults to color and size)",
    )

    args = parser.parse_args()

    categories = args.categories or list(DEFAULT_CATEGORIES)
    attributes = dict(args.attributes) if args.attributes else DEFAULT_ATTRIBUTES

    print("=" * 60)
    print("Catalog Reference Data Seeder")
    print("=" * 60)

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed_reference_data(async_session_factory, categories, attributes)
    print(f"  Categories created: {result['categories']}")
    print(f"  Attributes created: {result['attributes']}")
    print(f"  Attribute values created: {result['attribute_values']}")

    await engine.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

"""Create catalog tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create category, product, image, variant and attribute tables."""
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('slug', sa.String(120), nullable=True, unique=True),
        sa.Column('description', sa.Text(), nullable=True),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('discount_price', sa.Numeric(10, 2), nullable=True),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('category_id', sa.Integer(),
                  sa.ForeignKey('categories.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true(), index=True),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)

    op.create_table(
        'product_images',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('image_url', sa.String(1000), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
    )

    op.create_table(
        'product_variants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('sku', sa.String(100), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('price_adjustment', sa.Numeric(10, 2), nullable=False, server_default='0'),
    )

    op.create_table(
        'attributes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('type', sa.String(50), nullable=False, unique=True),
        sa.CheckConstraint("type NOT LIKE '%,%' AND type NOT LIKE '%:%'",
                           name='ck_attributes_type_separators'),
    )

    op.create_table(
        'attribute_values',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('attribute_id', sa.Integer(),
                  sa.ForeignKey('attributes.id'), nullable=False, index=True),
        sa.Column('value', sa.String(100), nullable=False),
        sa.UniqueConstraint('attribute_id', 'value', name='uq_attribute_values_attribute_value'),
        sa.CheckConstraint("value NOT LIKE '%,%'", name='ck_attribute_values_value_separator'),
    )

    op.create_table(
        'variant_attribute_values',
        sa.Column('variant_id', sa.Integer(),
                  sa.ForeignKey('product_variants.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('attribute_value_id', sa.Integer(),
                  sa.ForeignKey('attribute_values.id'), primary_key=True),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('variant_attribute_values')
    op.drop_table('attribute_values')
    op.drop_table('attributes')
    op.drop_table('product_variants')
    op.drop_table('product_images')
    op.drop_index('ix_products_slug', table_name='products')
    op.drop_table('products')
    op.drop_table('categories')

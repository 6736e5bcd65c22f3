"""create warehouse tables

Revision ID: a1c4e7d20b11
Revises:
Create Date: 2026-01-12 10:15:42.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e7d20b11'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('categories',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('kind', sa.String(length=20), nullable=False),
                    sa.CheckConstraint("kind IN ('spare_parts', 'mo')", name='ck_categories_kind'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('name', 'kind', name='uq_categories_name_kind')
                    )
    op.create_index(op.f('ix_categories_kind'), 'categories', ['kind'], unique=False)

    op.create_table('subcategories',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('category_id', sa.Integer(), nullable=False),
                    sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('name', 'category_id', name='uq_subcategories_name_category')
                    )
    op.create_index(op.f('ix_subcategories_category_id'), 'subcategories', ['category_id'], unique=False)

    op.create_table('items',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('code', sa.String(length=100), nullable=True),
                    sa.Column('name', sa.String(length=255), nullable=False),
                    sa.Column('quantity', sa.Integer(), nullable=False),
                    sa.Column('unit', sa.String(length=20), nullable=False),
                    sa.Column('price', sa.DECIMAL(precision=14, scale=2), nullable=False),
                    sa.Column('supplier', sa.String(length=255), nullable=True),
                    sa.Column('ttn_number', sa.String(length=100), nullable=True),
                    sa.Column('last_movement_date', sa.Date(), nullable=True),
                    sa.Column('status', sa.String(length=20), nullable=False),
                    sa.Column('written_off_date', sa.Date(), nullable=True),
                    sa.Column('subcategory_id', sa.Integer(), nullable=False),
                    sa.ForeignKeyConstraint(['subcategory_id'], ['subcategories.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id'),
                    sa.UniqueConstraint('code')
                    )
    op.create_index(op.f('ix_items_subcategory_id'), 'items', ['subcategory_id'], unique=False)

    op.create_table('movements',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('item_id', sa.Integer(), nullable=False),
                    sa.Column('date', sa.Date(), nullable=False),
                    sa.Column('type', sa.String(length=20), nullable=False),
                    sa.Column('quantity', sa.Integer(), nullable=False),
                    sa.Column('price_per_unit', sa.DECIMAL(precision=14, scale=2), nullable=True),
                    sa.Column('supplier', sa.String(length=255), nullable=True),
                    sa.Column('ttn_number', sa.String(length=100), nullable=True),
                    sa.Column('notes', sa.Text(), nullable=True),
                    sa.CheckConstraint("type IN ('incoming', 'outgoing', 'transfer', 'write-off')", name='ck_movements_type'),
                    sa.CheckConstraint('quantity > 0', name='ck_movements_quantity_positive'),
                    sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_movements_item_id'), 'movements', ['item_id'], unique=False)
    op.create_index(op.f('ix_movements_date'), 'movements', ['date'], unique=False)

    # Журнал ручных корректировок количества
    op.create_table('item_quantity_corrections',
                    sa.Column('id', sa.Integer(), nullable=False),
                    sa.Column('item_id', sa.Integer(), nullable=False),
                    sa.Column('qty', sa.Integer(), nullable=False),
                    sa.Column('calculated_qty', sa.Integer(), nullable=False),
                    sa.Column('discrepancy', sa.Integer(), nullable=False),
                    sa.Column('method', sa.String(length=30), nullable=False),
                    sa.Column('movement_id', sa.Integer(), nullable=True),
                    sa.Column('comment', sa.Text(), nullable=True),
                    sa.Column('created_by', sa.String(), nullable=True),
                    sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
                    sa.ForeignKeyConstraint(['item_id'], ['items.id'], ondelete='CASCADE'),
                    sa.PrimaryKeyConstraint('id')
                    )
    op.create_index(op.f('ix_item_quantity_corrections_item_id'), 'item_quantity_corrections', ['item_id'], unique=False)
    op.create_index(op.f('ix_item_quantity_corrections_created_at'), 'item_quantity_corrections', ['created_at'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_item_quantity_corrections_created_at'), table_name='item_quantity_corrections')
    op.drop_index(op.f('ix_item_quantity_corrections_item_id'), table_name='item_quantity_corrections')
    op.drop_table('item_quantity_corrections')
    op.drop_index(op.f('ix_movements_date'), table_name='movements')
    op.drop_index(op.f('ix_movements_item_id'), table_name='movements')
    op.drop_table('movements')
    op.drop_index(op.f('ix_items_subcategory_id'), table_name='items')
    op.drop_table('items')
    op.drop_index(op.f('ix_subcategories_category_id'), table_name='subcategories')
    op.drop_table('subcategories')
    op.drop_index(op.f('ix_categories_kind'), table_name='categories')
    op.drop_table('categories')

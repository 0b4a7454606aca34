"""add_stock_locations

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0002'
down_revision: Union[str, Sequence[str], None] = '0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_QTY = sa.Numeric(precision=20, scale=4)


def upgrade() -> None:
    """Create stocks and stock_events tables."""
    op.create_table(
        'stocks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('quantity', _QTY, nullable=False),
        sa.Column('threshold', _QTY, nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('location'),
    )

    op.create_table(
        'stock_events',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('stock_id', sa.Uuid(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('load', 'dump', 'transfer', name='stockeventtype'),
            nullable=False,
        ),
        sa.Column('quantity', _QTY, nullable=False),
        sa.Column('from_location', sa.String(length=255), nullable=True),
        sa.Column('to_location', sa.String(length=255), nullable=True),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('sub_category', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['stock_id'], ['stocks.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_stock_events_stock', 'stock_events', ['stock_id'])


def downgrade() -> None:
    """Drop stock tables."""
    op.drop_index('ix_stock_events_stock', table_name='stock_events')
    op.drop_table('stock_events')
    op.drop_table('stocks')
    if op.get_bind().dialect.name == 'postgresql':
        op.execute("DROP TYPE IF EXISTS stockeventtype")

"""initial_ledger_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_MONEY = sa.Numeric(precision=20, scale=4)


def upgrade() -> None:
    """Create customer, inventory and account tables."""
    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('balance', _MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customers_name', 'customers', ['name'])
    op.create_index('ix_customers_category', 'customers', ['category'])

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'accounts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('balance', _MONEY, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'sales',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('quantity', _MONEY, nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('price_per_unit', _MONEY, nullable=False),
        sa.Column('total_amount', _MONEY, nullable=False),
        sa.Column('sub_category', sa.String(length=255), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_sales_customer', 'sales', ['customer_id'])
    op.create_index('ix_sales_date', 'sales', ['date'])

    op.create_table(
        'customer_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('customer_id', sa.Uuid(), nullable=False),
        sa.Column(
            'type',
            sa.Enum('sale', 'payment', 'discount', name='transactiontype'),
            nullable=False,
        ),
        sa.Column('amount', _MONEY, nullable=False),
        sa.Column('bags', sa.Integer(), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('sub_category', sa.String(length=255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('account_id', sa.Uuid(), nullable=True),
        sa.Column('related_sale_id', sa.Uuid(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.ForeignKeyConstraint(['related_sale_id'], ['sales.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_customer_transactions_customer', 'customer_transactions', ['customer_id'])
    op.create_index('ix_customer_transactions_date', 'customer_transactions', ['date'])

    op.create_table(
        'purchases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('product_id', sa.Uuid(), nullable=True),
        sa.Column('quantity', _MONEY, nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=False),
        sa.Column('price_per_unit', _MONEY, nullable=False),
        sa.Column('original_price', _MONEY, nullable=True),
        sa.Column('total_amount', _MONEY, nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('account_id', sa.Uuid(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_purchases_date', 'purchases', ['date'])

    op.create_table(
        'account_transactions',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('account_id', sa.Uuid(), nullable=False),
        sa.Column(
            'type',
            sa.Enum(
                'add-funds', 'remove-funds', 'transfer-in', 'transfer-out', 'expense', 'payment',
                name='accounttransactiontype',
            ),
            nullable=False,
        ),
        sa.Column('amount', _MONEY, nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('related_account_id', sa.Uuid(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
        sa.ForeignKeyConstraint(['account_id'], ['accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['related_account_id'], ['accounts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_account_transactions_account', 'account_transactions', ['account_id'])
    op.create_index('ix_account_transactions_date', 'account_transactions', ['date'])


def downgrade() -> None:
    """Drop every ledger table."""
    op.drop_index('ix_account_transactions_date', table_name='account_transactions')
    op.drop_index('ix_account_transactions_account', table_name='account_transactions')
    op.drop_table('account_transactions')
    op.drop_index('ix_purchases_date', table_name='purchases')
    op.drop_table('purchases')
    op.drop_index('ix_customer_transactions_date', table_name='customer_transactions')
    op.drop_index('ix_customer_transactions_customer', table_name='customer_transactions')
    op.drop_table('customer_transactions')
    op.drop_index('ix_sales_date', table_name='sales')
    op.drop_index('ix_sales_customer', table_name='sales')
    op.drop_table('sales')
    op.drop_table('accounts')
    op.drop_table('products')
    op.drop_index('ix_customers_category', table_name='customers')
    op.drop_index('ix_customers_name', table_name='customers')
    op.drop_table('customers')
    if op.get_bind().dialect.name == 'postgresql':
        op.execute("DROP TYPE IF EXISTS accounttransactiontype")
        op.execute("DROP TYPE IF EXISTS transactiontype")

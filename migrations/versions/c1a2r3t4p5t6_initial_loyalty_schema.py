"""Initial schema: customers, catalog, carts and points ledger.

Revision ID: c1a2r3t4p5t6
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'c1a2r3t4p5t6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create all CartPoints tables."""
    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('image_url', sa.String(500), nullable=True),
        sa.Column('category_id', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='SET NULL'),
        sa.CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
    )

    op.create_table(
        'point_earning_rules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('points_per_dollar', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], ondelete='CASCADE'),
        sa.CheckConstraint('points_per_dollar >= 0', name='ck_rules_points_per_dollar_non_negative'),
    )
    op.create_index(
        'ix_point_earning_rules_category_dates',
        'point_earning_rules',
        ['category_id', 'start_date', 'end_date']
    )

    op.create_table(
        'loyalty_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_updated', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('customer_id'),
        sa.CheckConstraint('points >= 0', name='ck_loyalty_accounts_points_non_negative'),
    )

    op.create_table(
        'point_transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('loyalty_account_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('points_earned', sa.Integer(), nullable=False),
        sa.Column('transaction_date', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['loyalty_account_id'], ['loyalty_accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id']),
        sa.CheckConstraint('points_earned >= 0', name='ck_point_transactions_points_non_negative'),
    )
    op.create_index(
        'ix_point_transactions_account_date',
        'point_transactions',
        ['loyalty_account_id', 'transaction_date']
    )

    op.create_table(
        'shopping_carts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('customer_id'),
    )

    op.create_table(
        'shopping_cart_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('cart_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['cart_id'], ['shopping_carts.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('cart_id', 'product_id', name='uq_shopping_cart_items_cart_product'),
        sa.CheckConstraint('quantity > 0', name='ck_shopping_cart_items_quantity_positive'),
    )


def downgrade():
    """Drop all CartPoints tables."""
    op.drop_table('shopping_cart_items')
    op.drop_table('shopping_carts')
    op.drop_index('ix_point_transactions_account_date', table_name='point_transactions')
    op.drop_table('point_transactions')
    op.drop_table('loyalty_accounts')
    op.drop_index('ix_point_earning_rules_category_dates', table_name='point_earning_rules')
    op.drop_table('point_earning_rules')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('customers')

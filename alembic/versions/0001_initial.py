"""create users, products and cart_items tables

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.CheckConstraint('price >= 0', name='ck_products_price_nonneg'),
        sa.CheckConstraint('stock >= 0', name='ck_products_stock_nonneg'),
    )
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'cart_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', sa.Uuid(), sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        # at most one line item per (user, product)
        sa.UniqueConstraint('user_id', 'product_id', name='uq_cart_user_product'),
        sa.CheckConstraint('quantity > 0', name='ck_cartitem_quantity_pos'),
    )
    op.create_index('ix_cart_items_user', 'cart_items', ['user_id'])


def downgrade():
    op.drop_index('ix_cart_items_user', table_name='cart_items')
    op.drop_table('cart_items')
    op.drop_index('ix_products_is_active', table_name='products')
    op.drop_table('products')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

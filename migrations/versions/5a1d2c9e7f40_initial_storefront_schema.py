"""initial storefront schema

Revision ID: 5a1d2c9e7f40
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5a1d2c9e7f40'
down_revision = None
branch_labels = None
depends_on = None

BIGINT = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def upgrade():
    op.create_table(
        'user_profile',
        sa.Column('uid', sa.String(length=32), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('is_disabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime()),
    )
    op.create_index('ix_user_profile_email', 'user_profile', ['email'], unique=True)

    op.create_table(
        'product',
        sa.Column('id', BIGINT, primary_key=True),
        sa.Column('seller_id', sa.String(length=32), sa.ForeignKey('user_profile.uid'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=20), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(length=512), nullable=False),
        sa.Column('created_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.CheckConstraint('stock >= 0', name='ck_product_stock_non_negative'),
        sa.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
    )
    op.create_index('ix_product_seller_category', 'product', ['seller_id', 'category'])

    op.create_table(
        'cart_line',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('customer_id', sa.String(length=32), sa.ForeignKey('user_profile.uid'), nullable=False),
        sa.Column('product_id', BIGINT, nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('added_at', sa.DateTime()),
        sa.Column('updated_at', sa.DateTime()),
        sa.Column('product_name', sa.String(length=100), nullable=False),
        sa.Column('product_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('product_image_url', sa.String(length=512)),
        sa.Column('product_category', sa.String(length=20)),
        sa.Column('product_seller_id', sa.String(length=32)),
        sa.UniqueConstraint('customer_id', 'product_id', name='uq_cart_line_customer_product'),
    )
    op.create_index('ix_cart_line_customer_id', 'cart_line', ['customer_id'])

    op.create_table(
        'order',
        sa.Column('id', BIGINT, primary_key=True),
        sa.Column('customer_id', sa.String(length=32), sa.ForeignKey('user_profile.uid'), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('idempotency_key', sa.String(length=128)),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
        sa.UniqueConstraint('customer_id', 'idempotency_key', name='uq_order_customer_idempotency'),
        sa.CheckConstraint("status IN ('pending', 'completed', 'cancelled')", name='ck_order_status'),
    )
    op.create_index('ix_order_customer_created', 'order', ['customer_id', 'created_at'])

    op.create_table(
        'order_line',
        sa.Column('id', BIGINT, primary_key=True),
        sa.Column('order_id', BIGINT, sa.ForeignKey('order.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', BIGINT, nullable=False),
        sa.Column('product_name', sa.String(length=100), nullable=False),
        sa.Column('product_image', sa.String(length=512)),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_at_purchase', sa.Numeric(12, 2), nullable=False),
        sa.Column('subtotal', sa.Numeric(12, 2), nullable=False),
    )


def downgrade():
    op.drop_table('order_line')
    op.drop_index('ix_order_customer_created', table_name='order')
    op.drop_table('order')
    op.drop_index('ix_cart_line_customer_id', table_name='cart_line')
    op.drop_table('cart_line')
    op.drop_index('ix_product_seller_category', table_name='product')
    op.drop_table('product')
    op.drop_index('ix_user_profile_email', table_name='user_profile')
    op.drop_table('user_profile')

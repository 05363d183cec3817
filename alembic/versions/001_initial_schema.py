"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create submitted_orders table
    op.create_table(
        'submitted_orders',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('order_id', sa.String(), nullable=False),
        sa.Column('cart_session', sa.String(), nullable=False),
        sa.Column('customer_name', sa.String(), nullable=False),
        sa.Column('customer_phone', sa.String(), nullable=False),
        sa.Column('order_type', sa.String(), nullable=False),
        sa.Column('total_price', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_submitted_orders_id'), 'submitted_orders', ['id'], unique=False)
    op.create_index(
        op.f('ix_submitted_orders_order_id'), 'submitted_orders', ['order_id'], unique=True
    )
    op.create_index(
        op.f('ix_submitted_orders_cart_session'), 'submitted_orders', ['cart_session'], unique=False
    )


def downgrade() -> None:
    op.drop_index(op.f('ix_submitted_orders_cart_session'), table_name='submitted_orders')
    op.drop_index(op.f('ix_submitted_orders_order_id'), table_name='submitted_orders')
    op.drop_index(op.f('ix_submitted_orders_id'), table_name='submitted_orders')
    op.drop_table('submitted_orders')

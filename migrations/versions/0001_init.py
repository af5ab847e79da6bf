"""tenants and stripe payment methods

Revision ID: 0001_init
Revises: 
Create Date: 2026-10-17 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('rent', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('move_in_date', sa.Date(), nullable=True),
        sa.Column('move_out_date', sa.Date(), nullable=True),
        sa.Column('rent_most_recent_payment_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tenants_email', 'tenants', ['email'])
    op.create_table('stripe_payment_methods',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('stripe_customer_id', sa.String(length=80), nullable=False),
        sa.Column('stripe_payment_method_id', sa.String(length=80), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_stripe_payment_methods_tenant_id', 'stripe_payment_methods', ['tenant_id'])

def downgrade():
    op.drop_index('ix_stripe_payment_methods_tenant_id', table_name='stripe_payment_methods')
    op.drop_table('stripe_payment_methods')
    op.drop_index('ix_tenants_email', table_name='tenants')
    op.drop_table('tenants')

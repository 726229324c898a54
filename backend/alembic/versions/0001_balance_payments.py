"""Warehouse parties, ledgers and balance payments

Revision ID: 0001_balance_payments
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_balance_payments'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('warehouses',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    for table, extra in (
        ('customers', []),
        ('suppliers', [sa.Column('company_name', sa.String(length=255), nullable=True)]),
    ):
        op.create_table(table,
            sa.Column('id', sa.String(length=36), nullable=False),
            sa.Column('name', sa.String(length=255), nullable=False),
            sa.Column('phone', sa.String(length=50), nullable=True),
            sa.Column('email', sa.String(length=255), nullable=True),
            sa.Column('address', sa.String(length=500), nullable=True),
            *extra,
            sa.Column('warehouses_id', sa.String(length=36), nullable=True),
            sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
            sa.ForeignKeyConstraint(['warehouses_id'], ['warehouses.id'], ondelete='SET NULL'),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f(f'ix_{table}_phone'), table, ['phone'], unique=False)
        op.create_index(op.f(f'ix_{table}_warehouses_id'), table, ['warehouses_id'], unique=False)

    op.create_table('sales',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('invoice_no', sa.String(length=100), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=True),
        sa.Column('warehouses_id', sa.String(length=36), nullable=True),
        sa.Column('grand_total', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('balance', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['warehouses_id'], ['warehouses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sales_invoice_no'), 'sales', ['invoice_no'], unique=True)
    op.create_index(op.f('ix_sales_customer_id'), 'sales', ['customer_id'], unique=False)
    op.create_index(op.f('ix_sales_warehouses_id'), 'sales', ['warehouses_id'], unique=False)

    op.create_table('purchases',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('reference_no', sa.String(length=100), nullable=False),
        sa.Column('supplier_id', sa.String(length=36), nullable=True),
        sa.Column('warehouses_id', sa.String(length=36), nullable=True),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('balance', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['warehouses_id'], ['warehouses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_purchases_reference_no'), 'purchases', ['reference_no'], unique=True)
    op.create_index(op.f('ix_purchases_supplier_id'), 'purchases', ['supplier_id'], unique=False)
    op.create_index(op.f('ix_purchases_warehouses_id'), 'purchases', ['warehouses_id'], unique=False)

    op.create_table('balance_payments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=True),
        sa.Column('supplier_id', sa.String(length=36), nullable=True),
        sa.Column('sale_id', sa.String(length=100), nullable=True),
        sa.Column('purchase_id', sa.String(length=100), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('receipt_no', sa.String(length=50), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('warehouses_id', sa.String(length=36), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id'], ),
        sa.ForeignKeyConstraint(['supplier_id'], ['suppliers.id'], ),
        sa.ForeignKeyConstraint(['sale_id'], ['sales.invoice_no'], ),
        sa.ForeignKeyConstraint(['purchase_id'], ['purchases.reference_no'], ),
        sa.ForeignKeyConstraint(['warehouses_id'], ['warehouses.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('receipt_no', name='uq_balance_payments_receipt_no'),
        sa.CheckConstraint('(customer_id IS NOT NULL) <> (supplier_id IS NOT NULL)', name='ck_balance_payments_one_party'),
        sa.CheckConstraint('NOT (sale_id IS NOT NULL AND purchase_id IS NOT NULL)', name='ck_balance_payments_one_ledger'),
        sa.CheckConstraint('amount > 0', name='ck_balance_payments_amount_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    for column in ('customer_id', 'supplier_id', 'sale_id', 'purchase_id', 'warehouses_id', 'created_at'):
        op.create_index(op.f(f'ix_balance_payments_{column}'), 'balance_payments', [column], unique=False)

    counters = op.create_table('receipt_counters',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('next_seq', sa.Integer(), nullable=False, server_default='1'),
        sa.UniqueConstraint('name', name='uq_receipt_counters_name'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_receipt_counters_id'), 'receipt_counters', ['id'], unique=False)
    op.create_index(op.f('ix_receipt_counters_name'), 'receipt_counters', ['name'], unique=False)
    # Seeded so concurrent first payments never race to create it
    op.bulk_insert(counters, [{'name': 'BALANCE_PAYMENT', 'next_seq': 1}])


def downgrade():
    op.drop_table('receipt_counters')
    op.drop_table('balance_payments')
    op.drop_table('purchases')
    op.drop_table('sales')
    op.drop_table('suppliers')
    op.drop_table('customers')
    op.drop_table('warehouses')

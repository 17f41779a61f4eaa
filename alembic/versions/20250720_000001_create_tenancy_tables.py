"""Create addresses, tenancies and rent_payments tables

Revision ID: 20250720_000001
Revises: None
Create Date: 2025-07-20

Initial schema. Dates are stored as 'yyyy-MM-dd HH:mm:ss' text and
booleans as 0/1 so existing database files stay readable.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20250720_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the three tables if they are not already there."""
    existing = set(sa.inspect(op.get_bind()).get_table_names())

    if 'addresses' not in existing:
        op.create_table(
            'addresses',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('title', sa.Text(), nullable=True),
            sa.Column('line1', sa.Text(), nullable=True),
            sa.Column('line2', sa.Text(), nullable=True),
            sa.Column('city', sa.Text(), nullable=True),
            sa.Column('state', sa.Text(), nullable=True),
            sa.Column('pinCode', sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
        )

    if 'tenancies' not in existing:
        op.create_table(
            'tenancies',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('name', sa.Text(), nullable=True),
            sa.Column('contact', sa.Text(), nullable=True),
            sa.Column('addressId', sa.Integer(), nullable=True),
            sa.Column('leaseStartDate', sa.Text(), nullable=True),
            sa.Column('leaseAgreementSigned', sa.Boolean(), nullable=True),
            sa.Column('agreementSignedDate', sa.Text(), nullable=True),
            sa.Column('advanceAmount', sa.Float(), nullable=True),
            sa.Column('agreedRent', sa.Float(), nullable=True),
            sa.Column('monthlyDueDate', sa.Integer(), nullable=True),
            sa.Column('comments', sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.ForeignKeyConstraint(['addressId'], ['addresses.id']),
            sa.CheckConstraint(
                '"monthlyDueDate" BETWEEN 1 AND 28',
                name='ck_tenancies_monthly_due_date'
            ),
        )

    if 'rent_payments' not in existing:
        op.create_table(
            'rent_payments',
            sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
            sa.Column('tenancyId', sa.Integer(), nullable=False),
            sa.Column('amount', sa.Float(), nullable=False),
            sa.Column('paidOn', sa.Text(), nullable=False),
            sa.Column('notes', sa.Text(), nullable=True),
            sa.PrimaryKeyConstraint('id'),
            sa.ForeignKeyConstraint(['tenancyId'], ['tenancies.id']),
        )
        # Latest-payment lookups filter by tenancy and sort by paidOn
        op.create_index(
            'ix_rent_payments_tenancy_paid_on',
            'rent_payments',
            ['tenancyId', 'paidOn']
        )


def downgrade() -> None:
    """Drop the tables."""
    op.drop_index('ix_rent_payments_tenancy_paid_on', table_name='rent_payments')
    op.drop_table('rent_payments')
    op.drop_table('tenancies')
    op.drop_table('addresses')

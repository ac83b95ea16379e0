"""initial_fleet_schema

Revision ID: 3f2b7c1d9e04
Revises:
Create Date: 2026-10-12 09:41:22.518306

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f2b7c1d9e04'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the fleet schema.

    Creates:
    - tenants, users, sessions
    - taxis, weekly_reports, expenses, bank_deposits

    Data Migration:
    - Seeds a "Default Tenant" (subdomain "default"), the first tenant id
    """
    # 1. tenants
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('subdomain', sa.String(length=100), nullable=False),
        sa.Column('logo', sa.Text(), nullable=True),
        sa.Column('settings', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_tenants_subdomain'), 'tenants', ['subdomain'], unique=True)
    op.create_index(op.f('ix_tenants_deleted_at'), 'tenants', ['deleted_at'], unique=False)

    # 2. users (permission is a signed 32-bit mask, admin stored as -1)
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('permission', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=255), nullable=False),
        sa.Column('last_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('phone'),
        sa.UniqueConstraint('tenant_id', 'email', name='uq_users_tenant_email')
    )
    op.create_index(op.f('ix_users_tenant_id'), 'users', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(op.f('ix_users_deleted_at'), 'users', ['deleted_at'], unique=False)

    # 3. sessions (one row per issued refresh token)
    op.create_table(
        'sessions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=1024), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token')
    )
    op.create_index(op.f('ix_sessions_user_id'), 'sessions', ['user_id'], unique=False)
    op.create_index(op.f('ix_sessions_expires_at'), 'sessions', ['expires_at'], unique=False)

    # 4. taxis
    op.create_table(
        'taxis',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('license_plate', sa.String(length=50), nullable=False),
        sa.Column('model', sa.String(length=255), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('color', sa.String(length=50), nullable=True),
        sa.Column('vin', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=11), nullable=False),
        sa.Column('assigned_driver_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['assigned_driver_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_taxis_tenant_id'), 'taxis', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_taxis_status'), 'taxis', ['status'], unique=False)
    op.create_index(op.f('ix_taxis_assigned_driver_id'), 'taxis', ['assigned_driver_id'], unique=False)
    op.create_index(op.f('ix_taxis_deleted_at'), 'taxis', ['deleted_at'], unique=False)

    # 5. weekly_reports (version is the optimistic concurrency counter)
    op.create_table(
        'weekly_reports',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('taxi_id', sa.Integer(), nullable=False),
        sa.Column('driver_id', sa.Integer(), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('earnings', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('total_expenses', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('status', sa.String(length=9), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('approved_by_id', sa.Integer(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['taxi_id'], ['taxis.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['driver_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['approved_by_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_weekly_reports_tenant_id'), 'weekly_reports', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_weekly_reports_taxi_id'), 'weekly_reports', ['taxi_id'], unique=False)
    op.create_index(op.f('ix_weekly_reports_driver_id'), 'weekly_reports', ['driver_id'], unique=False)
    op.create_index(op.f('ix_weekly_reports_week_start_date'), 'weekly_reports', ['week_start_date'], unique=False)
    op.create_index(op.f('ix_weekly_reports_status'), 'weekly_reports', ['status'], unique=False)
    op.create_index(op.f('ix_weekly_reports_deleted_at'), 'weekly_reports', ['deleted_at'], unique=False)
    op.create_index('ix_weekly_reports_tenant_week', 'weekly_reports', ['tenant_id', 'week_start_date'], unique=False)
    op.create_index('ix_weekly_reports_driver_week', 'weekly_reports', ['driver_id', 'week_start_date'], unique=False)

    # 6. expenses
    op.create_table(
        'expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('report_id', sa.Integer(), nullable=True),
        sa.Column('taxi_id', sa.Integer(), nullable=True),
        sa.Column('category', sa.String(length=11), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('receipt_url', sa.String(length=1024), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('created_by_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['report_id'], ['weekly_reports.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['taxi_id'], ['taxis.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['created_by_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_expenses_tenant_id'), 'expenses', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_expenses_report_id'), 'expenses', ['report_id'], unique=False)
    op.create_index(op.f('ix_expenses_taxi_id'), 'expenses', ['taxi_id'], unique=False)
    op.create_index(op.f('ix_expenses_category'), 'expenses', ['category'], unique=False)
    op.create_index(op.f('ix_expenses_date'), 'expenses', ['date'], unique=False)
    op.create_index(op.f('ix_expenses_deleted_at'), 'expenses', ['deleted_at'], unique=False)
    op.create_index('ix_expenses_tenant_date', 'expenses', ['tenant_id', 'date'], unique=False)

    # 7. bank_deposits
    op.create_table(
        'bank_deposits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('deposit_date', sa.Date(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('bank_account', sa.String(length=255), nullable=True),
        sa.Column('proof_url', sa.String(length=1024), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_bank_deposits_tenant_id'), 'bank_deposits', ['tenant_id'], unique=False)
    op.create_index(op.f('ix_bank_deposits_deposit_date'), 'bank_deposits', ['deposit_date'], unique=False)
    op.create_index(op.f('ix_bank_deposits_deleted_at'), 'bank_deposits', ['deleted_at'], unique=False)

    # 8. Seed the default tenant
    op.execute("""
        INSERT INTO tenants (name, subdomain, settings, created_at, updated_at)
        VALUES ('Default Tenant', 'default', '{}', CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
    """)


def downgrade() -> None:
    """Drop the fleet schema (reverse dependency order)."""
    op.drop_table('bank_deposits')
    op.drop_table('expenses')
    op.drop_table('weekly_reports')
    op.drop_table('taxis')
    op.drop_table('sessions')
    op.drop_table('users')
    op.drop_table('tenants')

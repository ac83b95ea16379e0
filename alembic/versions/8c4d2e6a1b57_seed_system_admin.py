"""seed_system_admin

Revision ID: 8c4d2e6a1b57
Revises: 3f2b7c1d9e04
Create Date: 2026-10-19 10:12:47.204118

"""
import logging
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.config import settings


# revision identifiers, used by Alembic.
revision: str = '8c4d2e6a1b57'
down_revision: Union[str, Sequence[str], None] = '3f2b7c1d9e04'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

logger = logging.getLogger("alembic.runtime.migration")

SYSTEM_SUBDOMAIN = 'system'
# 0xFFFFFFFF in the signed INTEGER column
ADMIN_STORED_PERMISSION = -1


def _system_tenant_id(connection) -> int | None:
    return connection.execute(
        sa.text("SELECT id FROM tenants WHERE subdomain = :subdomain"),
        {"subdomain": SYSTEM_SUBDOMAIN},
    ).scalar_one_or_none()


def upgrade() -> None:
    """
    Bootstrap the first administrator.

    Data Migration:
    - Creates the "System" tenant (subdomain "system") if missing
    - Creates an active admin user in it with ADMIN_EMAIL and the bcrypt
      ADMIN_PASSWORD_HASH from settings, unless that email already exists

    Without ADMIN_PASSWORD_HASH only the tenant is created; rerun with the
    hash set after `alembic downgrade 3f2b7c1d9e04`.
    """
    connection = op.get_bind()

    if _system_tenant_id(connection) is None:
        connection.execute(
            sa.text("""
                INSERT INTO tenants (name, subdomain, settings, created_at, updated_at)
                VALUES ('System', :subdomain, '{}', CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
            """),
            {"subdomain": SYSTEM_SUBDOMAIN},
        )

    if not settings.ADMIN_PASSWORD_HASH:
        logger.warning("ADMIN_PASSWORD_HASH is not set, no admin user created")
        return

    existing = connection.execute(
        sa.text("SELECT id FROM users WHERE email = :email"),
        {"email": settings.ADMIN_EMAIL},
    ).first()
    if existing is not None:
        logger.info("User %s already exists, admin not seeded", settings.ADMIN_EMAIL)
        return

    connection.execute(
        sa.text("""
            INSERT INTO users (
                tenant_id, email, password_hash, permission,
                first_name, last_name, active, created_at, updated_at
            )
            VALUES (
                :tenant_id, :email, :password_hash, :permission,
                'Admin', 'Admin', :active, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP
            )
        """),
        {
            "tenant_id": _system_tenant_id(connection),
            "email": settings.ADMIN_EMAIL,
            "password_hash": settings.ADMIN_PASSWORD_HASH,
            "permission": ADMIN_STORED_PERMISSION,
            "active": True,
        },
    )
    logger.info("Seeded admin user %s", settings.ADMIN_EMAIL)


def downgrade() -> None:
    """Remove the system tenant, its users and their sessions."""
    connection = op.get_bind()
    system_tenant_id = _system_tenant_id(connection)
    if system_tenant_id is None:
        return

    params = {"tenant_id": system_tenant_id}
    connection.execute(
        sa.text("""
            DELETE FROM sessions
            WHERE user_id IN (SELECT id FROM users WHERE tenant_id = :tenant_id)
        """),
        params,
    )
    connection.execute(sa.text("DELETE FROM users WHERE tenant_id = :tenant_id"), params)
    connection.execute(sa.text("DELETE FROM tenants WHERE id = :tenant_id"), params)

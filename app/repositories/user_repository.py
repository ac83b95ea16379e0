from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.user import User


class UserRepository:
    """Repository for User model operations"""

    def __init__(self, db: Session):
        self.db = db

    def _active(self):
        return self.db.query(User).filter(User.deleted_at.is_(None))

    def get_by_id(self, user_id: int) -> User | None:
        """Get user by internal ID"""
        return self._active().filter(User.id == user_id).first()

    def get_by_id_and_tenant(self, user_id: int, tenant_id: int) -> User | None:
        """
        Get user ensuring it belongs to the tenant (multi-tenant safety).

        Returns None if user doesn't exist or belongs to another tenant.
        """
        return self._active().filter(User.id == user_id, User.tenant_id == tenant_id).first()

    def get_by_email(self, email: str) -> User | None:
        """Get user by email (case-insensitive)"""
        return self._active().filter(func.lower(User.email) == email.lower()).first()

    def get_by_phone(self, phone: str) -> User | None:
        """Get user by phone number"""
        return self.db.query(User).filter(User.phone == phone).first()

    def get_all(self) -> list[User]:
        """Get all users across tenants"""
        return self._active().order_by(User.id).all()

    def get_by_tenant(self, tenant_id: int) -> list[User]:
        """Get all users for a tenant"""
        return self._active().filter(User.tenant_id == tenant_id).order_by(User.id).all()

    def create(self, user: User) -> User:
        """Create new user"""
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user

    def update(self, user: User) -> User:
        """Update existing user"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete(self, user: User) -> None:
        """Soft-delete user and drop all their sessions"""
        user.soft_delete()
        user.active = False
        user.sessions.clear()
        self.db.commit()

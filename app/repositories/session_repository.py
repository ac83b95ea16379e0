"""Repository for refresh-token sessions."""

from datetime import datetime, UTC

from sqlalchemy.orm import Session as DBSession

from app.models.session import Session


class SessionRepository:
    """Repository for Session model operations"""

    def __init__(self, db: DBSession):
        self.db = db

    def create(self, session: Session) -> Session:
        """Persist a new session for an issued refresh token"""
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return session

    def get_valid_by_token(self, token: str, now: datetime | None = None) -> Session | None:
        """
        Get the session for a refresh token if it has not expired.

        Expiry is compared in SQL; expired rows are left in place.
        """
        now = now or datetime.now(UTC)
        return (
            self.db.query(Session)
            .filter(Session.token == token, Session.expires_at > now)
            .first()
        )

    def delete_by_token(self, token: str) -> int:
        """
        Delete the session for a refresh token.

        Returns:
            Number of rows deleted (0 if already gone)
        """
        deleted = self.db.query(Session).filter(Session.token == token).delete()
        self.db.commit()
        return deleted

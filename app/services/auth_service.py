import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.orm import Session

from app.core.exceptions import (
    AccountInactiveException,
    DuplicateKeyException,
    InvalidCredentialsException,
    InvalidRefreshTokenException,
    InvalidTokenException,
)
from app.core.permissions import RoleMasks
from app.core.security import (
    REFRESH_TOKEN_TYPE,
    create_access_token,
    create_refresh_token,
    decode_jwt,
    extract_user_id,
    hash_password,
    verify_password,
)
from app.models.session import Session as UserSession
from app.models.user import User
from app.repositories.session_repository import SessionRepository
from app.repositories.user_repository import UserRepository
from app.schemas.auth_schemas import ProfileUpdate

logger = logging.getLogger(__name__)

TENANT_DELETED = "Tenant has been deleted"


@dataclass
class LoginResult:
    token: str
    refresh_token: str
    expires_at: datetime
    user: User


class AuthService:
    """
    Credential checks, token issuance and session revocation.

    Access tokens are stateless JWTs; refresh tokens are JWTs backed by a
    Session row so they can be revoked.
    """

    def __init__(self, db: Session, role_masks: RoleMasks):
        self.db = db
        self.role_masks = role_masks
        self.user_repo = UserRepository(db)
        self.session_repo = SessionRepository(db)

    def login(self, email: str, password: str) -> LoginResult:
        """
        Verify credentials and open a session.

        Raises:
            InvalidCredentialsException: Unknown email or wrong password (same message for both)
            AccountInactiveException: Account disabled or its tenant deleted
        """
        user = self.user_repo.get_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.info("Login failed for %s", email)
            raise InvalidCredentialsException()

        if not user.active:
            logger.info("Login refused for inactive user %s", user.id)
            raise AccountInactiveException()
        if user.tenant.deleted_at is not None:
            logger.info("Login refused for user %s of deleted tenant %s", user.id, user.tenant_id)
            raise AccountInactiveException(TENANT_DELETED)

        token, expires_at = create_access_token(user.id, user.email, user.permission)
        refresh_token, refresh_expires_at = create_refresh_token(user.id, user.permission)

        self.session_repo.create(
            UserSession(user_id=user.id, token=refresh_token, expires_at=refresh_expires_at)
        )

        logger.info(
            "User %s logged in (tenant=%s, role=%s)",
            user.id,
            user.tenant_id,
            self.role_masks.role_name(user.permission),
        )
        return LoginResult(
            token=token, refresh_token=refresh_token, expires_at=expires_at, user=user
        )

    def validate_token(self, token: str) -> User:
        """
        Validate an access token and return the live user behind it.

        The user is re-read from the database so deactivation and
        permission changes apply immediately.

        Raises:
            TokenExpiredException: Token past expiry
            InvalidTokenException: Bad signature, malformed, wrong type, unknown user
            AccountInactiveException: User deactivated or tenant deleted since issue
        """
        payload = decode_jwt(token)
        user = self.user_repo.get_by_id(extract_user_id(payload))
        if user is None:
            raise InvalidTokenException("User not found")
        if not user.active:
            raise AccountInactiveException()
        if user.tenant.deleted_at is not None:
            raise AccountInactiveException(TENANT_DELETED)
        return user

    def refresh(self, refresh_token: str) -> tuple[str, datetime]:
        """
        Issue a new access token from a live refresh session.

        The refresh token itself is not rotated and the session stays valid
        until it expires or the user logs out.

        Raises:
            InvalidRefreshTokenException: No unexpired session for this token
            AccountInactiveException: The session's user has been deactivated
        """
        session = self.session_repo.get_valid_by_token(refresh_token)
        if session is None:
            raise InvalidRefreshTokenException()

        # The session row is authoritative; the JWT still has to be ours
        try:
            decode_jwt(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        except InvalidTokenException:
            raise InvalidRefreshTokenException()

        user = self.user_repo.get_by_id(session.user_id)
        if user is None:
            raise InvalidRefreshTokenException()
        if not user.active:
            raise AccountInactiveException()
        if user.tenant.deleted_at is not None:
            raise AccountInactiveException(TENANT_DELETED)

        return create_access_token(user.id, user.email, user.permission)

    def logout(self, refresh_token: str) -> None:
        """Revoke a refresh token. Unknown tokens are ignored."""
        deleted = self.session_repo.delete_by_token(refresh_token)
        if deleted:
            logger.info("Session revoked")

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Let a user change their own name, phone or password.

        Raises:
            DuplicateKeyException: Phone number used by another user
        """
        if data.first_name is not None:
            user.first_name = data.first_name
        if data.last_name is not None:
            user.last_name = data.last_name
        if data.phone is not None and data.phone != user.phone:
            existing = self.user_repo.get_by_phone(data.phone)
            if existing is not None and existing.id != user.id:
                raise DuplicateKeyException("Phone number already exists")
            user.phone = data.phone
        if data.password is not None:
            user.password_hash = hash_password(data.password)

        return self.user_repo.update(user)

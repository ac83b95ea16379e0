import uuid
from datetime import datetime, timedelta, UTC

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from app.config import settings
from app.core.exceptions import InvalidTokenException, TokenExpiredException

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


def hash_password(password: str, cost: int | None = None) -> str:
    """Hash a password for storage (bcrypt, BCRYPT_COST rounds unless given)."""
    salt = bcrypt.gensalt(rounds=cost or settings.BCRYPT_COST)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against its bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: int, email: str, permission: int) -> tuple[str, datetime]:
    """
    Create a short-lived access token.

    Returns:
        Tuple of (encoded JWT, expiry)
    """
    now = datetime.now(UTC)
    expires_at = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {
        "sub": str(user_id),
        "email": email,
        "permission": permission,
        "type": ACCESS_TOKEN_TYPE,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM), expires_at


def create_refresh_token(user_id: int, permission: int) -> tuple[str, datetime]:
    """
    Create a long-lived refresh token.

    ``jti`` keeps tokens unique even when two are issued in the same second;
    the token text is the session key.

    Returns:
        Tuple of (encoded JWT, expiry)
    """
    now = datetime.now(UTC)
    expires_at = now + timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)
    payload = {
        "sub": str(user_id),
        "permission": permission,
        "type": REFRESH_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": expires_at,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM), expires_at


def decode_jwt(token: str, expected_type: str = ACCESS_TOKEN_TYPE) -> dict:
    """
    Decode and validate a JWT signed with SECRET_KEY.

    Args:
        token: Encoded JWT
        expected_type: Required value of the 'type' claim

    Returns:
        Decoded token payload with 'sub' (user id), 'permission', 'exp', etc.

    Raises:
        TokenExpiredException: If the token is past its expiry
        InvalidTokenException: If token invalid, malformed or of the wrong type
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except JWTError as e:
        raise InvalidTokenException(f"Invalid token: {str(e)}")

    # jose only checks exp when present
    if payload.get("exp") is None:
        raise InvalidTokenException("Token missing expiration")

    if payload.get("sub") is None:
        raise InvalidTokenException("Token missing user identifier")

    if payload.get("type") != expected_type:
        raise InvalidTokenException("Invalid token type")

    return payload


def extract_user_id(payload: dict) -> int:
    """Extract the numeric user id from a decoded token's 'sub' claim"""
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenException("Invalid user identifier in token")

class FleetManagerException(Exception):
    """Base exception for fleet manager"""

    pass


class UnauthorizedException(FleetManagerException):
    """Raised when the caller is not authenticated"""

    pass


class InvalidCredentialsException(UnauthorizedException):
    """Raised when email/password do not match. Never says which one failed."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class TokenExpiredException(UnauthorizedException):
    """Raised when a JWT is past its expiry"""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class InvalidTokenException(UnauthorizedException):
    """Raised for any other JWT validation failure"""

    pass


class InvalidRefreshTokenException(UnauthorizedException):
    """Raised when a refresh token has no live session"""

    def __init__(self, message: str = "Invalid refresh token"):
        super().__init__(message)


class AccountInactiveException(FleetManagerException):
    """Raised when a deactivated user tries to authenticate"""

    def __init__(self, message: str = "User account is inactive"):
        super().__init__(message)


class NotFoundException(FleetManagerException):
    """Raised when resource not found (including resources of another tenant)"""

    pass


class ForbiddenException(FleetManagerException):
    """Raised when an authenticated user lacks permission or is the wrong actor"""

    pass


class InvalidStateException(FleetManagerException):
    """Raised when a report lifecycle transition is not allowed from its current status"""

    pass


class DuplicateKeyException(FleetManagerException):
    """Raised when email, phone or subdomain is already taken"""

    pass


class ConflictException(FleetManagerException):
    """Raised when a record was modified concurrently"""

    pass


class ValidationException(FleetManagerException):
    """Raised for business logic validation errors"""

    pass

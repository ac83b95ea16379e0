from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.permissions import (
    ALL_PERMISSIONS,
    DEFAULT_DRIVER_MASK,
    DEFAULT_MANAGER_MASK,
    DEFAULT_MECHANIC_MASK,
    DEFAULT_OWNER_MASK,
    RoleMasks,
)


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str = "sqlite:///./fleet_manager.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # JWT Authentication
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    # Password hashing
    BCRYPT_COST: int = 12

    # Role permission masks (read once at startup)
    ADMIN_PERMISSION_MASK: int = ALL_PERMISSIONS
    OWNER_PERMISSION_MASK: int = DEFAULT_OWNER_MASK
    MANAGER_PERMISSION_MASK: int = DEFAULT_MANAGER_MASK
    MECHANIC_PERMISSION_MASK: int = DEFAULT_MECHANIC_MASK
    DRIVER_PERMISSION_MASK: int = DEFAULT_DRIVER_MASK

    # First admin, created by the seed migration when a hash is provided.
    # Generate with: python -c "import bcrypt; print(bcrypt.hashpw(b'...', bcrypt.gensalt()).decode())"
    ADMIN_EMAIL: str = "admin@fleet.local"
    ADMIN_PASSWORD_HASH: str = ""

    # Application
    APP_NAME: str = "Fleet Manager API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def role_masks(self) -> RoleMasks:
        """Immutable role-to-mask table built from the *_PERMISSION_MASK settings"""
        return RoleMasks(
            admin=self.ADMIN_PERMISSION_MASK,
            owner=self.OWNER_PERMISSION_MASK,
            manager=self.MANAGER_PERMISSION_MASK,
            mechanic=self.MECHANIC_PERMISSION_MASK,
            driver=self.DRIVER_PERMISSION_MASK,
        )


# Global settings instance
settings = Settings()

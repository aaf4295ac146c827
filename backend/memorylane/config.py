"""Configuration settings for Memory Lane backend."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Supabase
    supabase_url: str
    supabase_secret_key: str | None = None  # Backend/admin access
    # Legacy key, used when the secret key is not set
    supabase_service_role_key: str | None = None

    # JWT issued by the identity provider
    jwt_secret_key: str  # Required - no default for security
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 1 week

    # Media (Supabase Storage)
    media_bucket: str = "memory-media"
    media_url_expires_in: int = 60 * 60  # Seconds a resolved location stays valid
    upload_rate_limit: str = "30/minute"

    # Memory contract
    strict_variant_fields: bool = True  # Only the active type's fields are settable
    suggestion_limit: int = 3

    # App
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra env vars not in model


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Application configuration using environment variables.
"""
from functools import lru_cache
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "eco3-development-secret"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "eco3 API"
    debug: bool = False
    environment: str = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "./public"

    # Security
    jwt_secret: str = DEFAULT_JWT_SECRET
    algorithm: str = "HS256"
    access_token_expire_days: int = 7

    # Database
    database_url: str = "sqlite:///./eco3.db"

    # CORS (single allowed origin, the SPA dev server by default)
    frontend_url: str = "http://localhost:5173"

    # Rate limiting
    login_rate_limit: str = "5/minute"
    register_rate_limit: str = "3/minute"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Validate JWT secret on startup
settings = get_settings()
if settings.environment == "production" and settings.jwt_secret == DEFAULT_JWT_SECRET:
    raise ValueError(
        "JWT_SECRET must be set in production! "
        "Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\""
    )

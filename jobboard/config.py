import os

from pydantic_settings import BaseSettings, SettingsConfigDict

# Development fallbacks. Production deployments MUST override both secrets.
DEV_JWT_SECRET = "dev-jwt-secret-key-change-in-production"
DEV_JWT_REFRESH_SECRET = "dev-jwt-refresh-secret-key-change-in-production"

APP_ENV = os.getenv("APP_ENV", "development")


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=(".env", f".env.{APP_ENV}"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobboard.db"
    sql_echo: bool = False
    auto_create_tables: bool = False

    # Auth
    jwt_secret: str = DEV_JWT_SECRET
    jwt_refresh_secret: str = DEV_JWT_REFRESH_SECRET
    jwt_algorithm: str = "HS256"
    jwt_issuer: str = "job-board-api"
    jwt_audience: str = "job-board-users"
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7
    bcrypt_rounds: int = 12

    # Email
    email_mode: str = "dev"  # dev | prod
    sendgrid_api_key: str = ""
    email_from: str = "noreply@jobboard.com"

    # App
    debug: bool = False
    allowed_origins: str = ""  # comma-separated
    expose_error_details: bool = False

    def uses_dev_secrets(self) -> bool:
        """True while either JWT secret is still the development fallback."""
        return (
            self.jwt_secret == DEV_JWT_SECRET
            or self.jwt_refresh_secret == DEV_JWT_REFRESH_SECRET
        )


settings = Settings()

"""
Configuration settings for the Flower Shop API.

Loads environment variables from .env file and provides typed configuration.
"""

from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    ENVIRONMENT: str = Field(
        default="development", description="'production' enables secure cross-site cookies"
    )
    PORT: int = Field(default=4000, description="Port used when run as a script")

    # CORS Configuration
    FRONTEND_URL: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins",
    )

    # Security Configuration
    JWT_SECRET: str = Field(default="secret", description="Secret key for JWT")
    ACCESS_TOKEN_EXPIRE_DAYS: int = Field(
        default=7, description="Identity token and cookie lifetime in days"
    )
    AUTH_COOKIE_NAME: str = Field(default="auth", description="Name of the session cookie")
    ADMIN_EMAILS: str = Field(
        default="", description="Comma-separated list of administrator emails"
    )
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable slowapi limits")

    # Storage Configuration
    DATA_DIR: str = Field(
        default="./data",
        description="Directory holding users.json, cart.json and passwords.json",
    )
    CATALOG_PATH: str = Field(
        default="./db.json", description="Static flower catalog document"
    )

    # Telegram Configuration
    TELEGRAM_API_URL: str = Field(
        default="https://api.telegram.org", description="Telegram Bot API base URL"
    )
    TELEGRAM_BOT_TOKEN: str | None = Field(
        default=None, description="Bot used for contact form messages"
    )
    TG_BOT_TOKEN_ORDER: str | None = Field(
        default=None, description="Bot used for checkout order messages"
    )
    TELEGRAM_CHAT_ID: str | None = Field(
        default=None, description="Chat that receives contact and order messages"
    )
    TELEGRAM_TIMEOUT: float = Field(
        default=10.0, description="Telegram request timeout in seconds"
    )

    # Logging Configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def admin_emails(self) -> List[str]:
        return [email.strip() for email in self.ADMIN_EMAILS.split(",") if email.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [url.strip() for url in self.FRONTEND_URL.split(",") if url.strip()]


# Global settings instance
settings = Settings()

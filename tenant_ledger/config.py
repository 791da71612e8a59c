"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Tenant Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "4000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./ledger.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Multi-tenancy: header carrying the organization id
    ORG_HEADER: str = os.getenv("ORG_HEADER", "x-org-id")

    # Authentication
    JWT_SECRET: str = os.getenv(
        "JWT_SECRET", "change-me-to-a-long-random-secret-value"
    )
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Audit records that could not be written are kept in memory up to this size
    AUDIT_DEAD_LETTER_SIZE: int = int(os.getenv("AUDIT_DEAD_LETTER_SIZE", "1000"))


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()

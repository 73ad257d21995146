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
    APP_NAME: str = "Treasury Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/treasury_ledger"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Auth: tokens are issued by the site's session layer and only
    # verified here.
    AUTH_SECRET: str = os.getenv("AUTH_SECRET", "dev-secret-change-me")
    AUTH_ALGORITHM: str = os.getenv("AUTH_ALGORITHM", "HS256")
    ADMIN_ROLES: frozenset[str] = frozenset(
        role.strip()
        for role in os.getenv("ADMIN_ROLES", "admin,admin-main").split(",")
        if role.strip()
    )

    # Ledger
    LEDGER_ALLOW_OVERDRAFT: bool = (
        os.getenv("LEDGER_ALLOW_OVERDRAFT", "true").lower() == "true"
    )
    LEDGER_RECENT_ENTRIES: int = int(os.getenv("LEDGER_RECENT_ENTRIES", "20"))

    # Environments where the ledger may be wiped
    RESETTABLE_ENVIRONMENTS: frozenset[str] = frozenset({"development", "test"})


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()

import os
from dataclasses import dataclass, field
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _get_bool(env_name: str, default: bool = False) -> bool:
    val = os.getenv(env_name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "y", "on"}


@dataclass
class Settings:
    # App
    APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
    APP_PORT: int = int(os.getenv("APP_PORT", "8000"))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Database (SQLite file by default; any async SQLAlchemy URL works)
    DB_URL: str = os.getenv("DB_URL", "sqlite+aiosqlite:///./shop.db")
    DB_ECHO: bool = _get_bool("DB_ECHO", False)
    # Seconds a SQLite writer waits for the lock before giving up
    DB_BUSY_TIMEOUT: float = float(os.getenv("DB_BUSY_TIMEOUT", "5"))
    # Upper bound for a single unit of work
    TX_TIMEOUT_SECONDS: float = float(os.getenv("TX_TIMEOUT_SECONDS", "10"))

    # Orders
    DEFAULT_SHIPPING: Decimal = field(default_factory=lambda: Decimal(os.getenv("DEFAULT_SHIPPING", "49.99")))
    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "5"))

    # Auth
    JWT_SECRET: str = os.getenv("JWT_SECRET", "changeme")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES_MINUTES: int = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))


settings = Settings()

"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./pricereports.db"
    ENVIRONMENT: str = "development"
    VERSION: str = "1.0.0"
    PORT: int = 3000
    LOG_LEVEL: Optional[str] = None

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Rate limiting (per client address, POST /reports only)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT: str = "9/15 seconds"

    # Ingestion bounds
    MAX_REPORTS_PER_BATCH: int = 100
    PRICE_MIN: float = -1
    PRICE_MAX: float = 100_000

    # Dedup lookback window (hours)
    LOOKBACK_HOURS: float = 8

    # Read pagination
    PAGE_SIZE: int = 10_000
    MAX_PAGE: int = 100

    # Reporter fingerprint key; empty means plain SHA-256
    FINGERPRINT_SALT: str = ""

    # Outbound collaborators
    NOTIFY_WEBHOOK_URL: Optional[str] = None
    GEOLOOKUP_URL: str = "http://ip-api.com/json/{address}"
    OUTBOUND_TIMEOUT_SECONDS: float = 5.0

    class Config:
        env_file = ".env"


settings = Settings()

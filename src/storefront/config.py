"""Application settings read from the environment.

Domain infrastructure (databases, brokers, event store) is configured in
``domain.toml``; these settings cover the HTTP layer and pricing rules.
"""

import os
from functools import lru_cache

from pydantic import BaseModel, Field


class Settings(BaseModel):
    jwt_secret_key: str = "storefront-development-secret-change-me"
    jwt_issuer: str = "storefront"
    jwt_audience: str = "storefront-clients"
    jwt_expiration_minutes: int = Field(60, gt=0)
    bcrypt_rounds: int = Field(12, ge=4, le=31)

    tax_rate: float = Field(0.18, ge=0)
    free_shipping_threshold: float = Field(500.0, ge=0)
    flat_shipping_cost: float = Field(50.0, ge=0)
    low_stock_threshold: int = Field(10, ge=0)

    rate_limit_per_minute: int = Field(100, gt=0)
    cors_origins: list[str] = ["*"]


_ENV_KEYS = {
    "jwt_secret_key": "JWT_SECRET_KEY",
    "jwt_issuer": "JWT_ISSUER",
    "jwt_audience": "JWT_AUDIENCE",
    "jwt_expiration_minutes": "JWT_EXPIRATION_MINUTES",
    "bcrypt_rounds": "BCRYPT_ROUNDS",
    "tax_rate": "TAX_RATE",
    "free_shipping_threshold": "FREE_SHIPPING_THRESHOLD",
    "flat_shipping_cost": "FLAT_SHIPPING_COST",
    "low_stock_threshold": "LOW_STOCK_THRESHOLD",
    "rate_limit_per_minute": "RATE_LIMIT_PER_MINUTE",
}


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    values = {field: os.environ[key] for field, key in _ENV_KEYS.items() if os.getenv(key)}

    origins = os.getenv("CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]

    return Settings(**values)


@lru_cache
def get_settings() -> Settings:
    return load_settings()

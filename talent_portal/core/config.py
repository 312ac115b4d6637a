"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "talent_portal"
    mongodb_timeout_ms: int = 5000

    # JWT Auth - the signing key is process-wide, never derived from user data
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7

    # Password hashing cost (bcrypt log rounds)
    bcrypt_rounds: int = 12

    # Rate limiting (requests per window, per client address)
    register_rate_limit: int = 3
    login_rate_limit: int = 5
    rate_limit_window_seconds: int = 15 * 60

    # App
    app_name: str = "Talent Portal"
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"
    frontend_url: str = "http://localhost:5173"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """FRONTEND_URL may hold several comma-separated origins."""
        return [origin.strip() for origin in self.frontend_url.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()

"""
Application configuration loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file = ".env",
        env_file_encoding = "utf-8",
        populate_by_name = True
    )

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./samudra.db", alias="DATABASE_URL")

    # Application
    app_name: str = Field(default="Samudra Ledger", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    port: int = Field(default=8000, alias="PORT")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    cors_origins: List[str] = Field(default=["*"], alias="CORS_ORIGINS")

    # Auth collaborator
    auth_provider: str = Field(default="local", alias="AUTH_PROVIDER")
    supabase_url: str = Field(default="", alias="SUPABASE_URL")
    supabase_service_role_key: str = Field(default="", alias="SUPABASE_SERVICE_ROLE_KEY")
    nccr_verifier_allowlist: List[str] = Field(
        default=[
            "nccr.admin@gov.in",
            "verifier1@nccr.gov.in",
            "verifier2@nccr.gov.in",
            "climate.officer@nccr.gov.in",
            "blue.carbon@nccr.gov.in",
        ],
        alias="NCCR_VERIFIER_ALLOWLIST"
    )

    # File store collaborator
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")

    # Pricing
    credit_price_usd: float = Field(default=15.0, alias="CREDIT_PRICE_USD")
    usd_inr_rate: float = Field(default=83.0, alias="USD_INR_RATE")
    platform_fee_percent: float = Field(default=0.10, alias="PLATFORM_FEE_PERCENT")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

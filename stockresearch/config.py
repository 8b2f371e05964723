"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central settings pulled from .env / environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Provider credentials
    fmp_api_key: SecretStr | None = None
    finnhub_api_key: SecretStr | None = None
    alpha_vantage_api_key: SecretStr | None = Field(
        None,
        validation_alias=AliasChoices(
            "alpha_vantage_api_key", "ALPHA_VANTAGE_API_KEY", "ALPHA_VANTAGE"
        ),
    )
    fred_api_key: SecretStr | None = None
    """Only needed for /api/historical-prices?dataSource=FRED."""
    api_ninjas_api_key: SecretStr | None = None
    """Only needed for /api/earnings-calendar."""

    # Provider endpoints
    fmp_base_url: str = "https://financialmodelingprep.com"
    finnhub_base_url: str = "https://finnhub.io/api/v1"
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    cnn_base_url: str = "https://production.dataviz.cnn.io"
    fred_base_url: str = "https://api.stlouisfed.org/fred"
    api_ninjas_base_url: str = "https://api.api-ninjas.com/v1"

    # Timeouts (milliseconds)
    provider_timeout_ms: int = 10_000
    historical_prices_timeout_ms: int = 15_000

    # Dividend history window, in calendar years before the current one
    dividend_history_years: int = 6

    # App
    app_env: str = "development"
    app_version: str = "0.1.0"
    log_level: str = "INFO"

    # FastAPI
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Security Headers
    enable_security_headers: bool = True
    allowed_origins: str = "*"
    """Comma-separated list of allowed CORS origins. Use '*' only in development."""


settings = Settings()

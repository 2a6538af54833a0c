"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "fintrack-gateway"
    log_level: str = "INFO"

    # Health targets
    emergency_fund_target_months: int = 6

    # Default expected annual returns (%) when a holding does not carry its own
    default_sip_return: float = 12.0
    default_stock_return: float = 15.0
    default_mutual_fund_return: float = 12.0
    default_portfolio_return: float = 12.0

    # Projection horizons (years)
    net_worth_projection_years: int = 30
    portfolio_projection_years: int = 10


settings = Settings()

"""Configuration for the loyalty ledger service."""

import logging
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = ConfigDict(
        env_prefix="LOYALTY_",
        env_file=".env",
        extra="ignore",
    )

    # API Settings
    app_title: str = "Loyalty Ledger API"
    app_version: str = "1.0.0"
    root_path: str = ""
    cors_origins: list[str] = ["*"]
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # Header carrying the transaction sender on mutating routes
    caller_header: str = "X-Caller"

    log_level: str = "INFO"


settings = Settings()


def get_settings() -> Settings:
    return settings


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

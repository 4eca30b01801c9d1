"""
Application configuration using Pydantic Settings
"""

from typing import Literal
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # API Settings
    api_title: str = "Tracking Number Generator"
    api_description: str = "Tracking number generation API"
    api_version: str = "1.0.0"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    log_file: str = ""  # empty = console only
    log_file_max_bytes: int = 5 * 1024 * 1024
    log_file_backup_count: int = 2

    # Generation Settings
    max_generation_attempts: int = 10

    # Uniqueness Store Settings
    store_backend: Literal["memory", "sql", "json"] = "sql"
    database_url: str = "sqlite:///data/tracking_numbers.db"
    database_timeout: float = 5.0  # seconds, passed to the driver
    database_echo: bool = False
    json_store_path: str = "data/tracking_numbers.json"
    json_store_lock_timeout: float = 5.0

    # Security Settings
    rate_limit_calls: int = 600
    rate_limit_period: int = 60

    @field_validator("max_generation_attempts")
    @classmethod
    def check_attempts(cls, v: int) -> int:
        """The retry loop needs at least one attempt to terminate with a result."""
        if v < 1:
            raise ValueError("max_generation_attempts must be >= 1")
        return v

    @field_validator("store_backend", mode="before")
    @classmethod
    def normalize_backend(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()

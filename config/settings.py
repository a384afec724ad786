"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values can also be placed in a .env file at the project root.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application settings
    app_name: str = "Japanese Properties API"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = False

    # Server settings (PORT is what most hosting platforms inject)
    host: str = "0.0.0.0"
    port: int = 3000
    cors_allowed_origins: List[str] = ["*"]

    # Upload settings
    max_upload_bytes: int = 10 * 1024 * 1024
    id_base: int = 1

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"


# Singleton instance
settings = Settings()

"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from enum import Enum

from pydantic_settings import BaseSettings


class ImageMode(str, Enum):
    """How product images are acquired."""

    URL = "url"
    UPLOAD = "upload"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False
    cors_origins: list[str] = ["*"]

    # Database
    database_url: str = "postgresql+asyncpg://catalog:catalog_dev_password@db:5432/catalog"

    # Images
    image_mode: ImageMode = ImageMode.URL
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()

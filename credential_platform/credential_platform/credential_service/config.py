"""
Configuration management for the credential service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Credential service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "/app/logs"

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./app.db"

    # Token signing secret; unset falls back to the built-in default
    JWT_SECRET: Optional[str] = None

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )


# Global settings instance
settings = Settings()

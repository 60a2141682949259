"""
Configuration management for the Member Service
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Member Service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"

    # Store Configuration
    DATABASE_URL: str = "sqlite:///./member.db"
    DB_POOL_SIZE: int = 10
    DB_SERVER_SELECTION_TIMEOUT_SECONDS: float = 30.0
    DB_CONNECT_TIMEOUT_SECONDS: float = 30.0
    DB_RECONNECT_DELAY_SECONDS: float = 5.0
    # None keeps retrying for the lifetime of the process
    DB_RECONNECT_MAX_ATTEMPTS: Optional[int] = None

    # Token Configuration
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


# Global settings instance
settings = Settings()

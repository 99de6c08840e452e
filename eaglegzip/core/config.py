# core/config.py
"""
Configuration settings for the Eagle gzip middleware.
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized settings for the gzip middleware.
    All settings can be overridden by environment variables (see .env.example).
    """
    # --- Compression ---
    GZIP_ENABLED: bool = True
    GZIP_LEVEL: int = -1  # zlib default compression

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- Server (CLI) ---
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    @field_validator("LOG_LEVEL")
    def normalize_log_level(cls, v):
        return v.upper()

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()

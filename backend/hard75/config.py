"""Application configuration from environment variables."""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    database_url: str = "sqlite:///./hard75.db"

    # Auth
    secret_key: str = "dev-secret-key-change-in-prod"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Frontend
    frontend_url: str = "http://localhost:5173"

    # Challenge defaults
    challenge_length_days: int = 75
    default_cycle_length: int = 28
    default_pms_window_length: int = 7
    default_water_goal_liters: float = 3.8
    default_pms_water_goal_liters: float = 3.0

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    # App settings
    app_name: str = "75 Hard PMS-Safe"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

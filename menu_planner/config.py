"""Configuration management for Menu Planner."""

from pydantic import Field
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Gemini
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_api_base: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout: float = 60.0  # seconds

    # Retry policy
    retry_max_attempts: int = Field(3, ge=1)
    retry_base_delay: float = Field(1.0, ge=0)  # seconds
    retry_multiplier: float = Field(2.0, ge=1)

    # Prompt context
    planner_region: str = "Madrid, Spain"
    planner_cuisine: str = "Mediterranean"
    output_language: str = "Spanish (Spain)"

    # Service
    log_level: str = "INFO"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""
Configuration management for Medlas
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "Medlas"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENV: str = "development"

    # API
    API_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite:///./medlas.db"
    DATABASE_ECHO: bool = False

    # LLM Configuration (OpenAI-compatible chat completions endpoint)
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://api.cerebras.ai/v1"
    LLM_MODEL: str = "llama3.1-8b"
    LLM_TEMPERATURE: float = 0.4
    LLM_MAX_TOKENS: int = 2048
    LLM_TIMEOUT_SECONDS: float = 20.0

    # Network reachability probe
    NETWORK_CHECK_URL: str = "https://www.google.com/generate_204"
    NETWORK_CHECK_TIMEOUT: float = 3.0

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:8081"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


class CareConfig:
    """Domain constants for scheduling, adherence and insights"""

    # Scheduling
    SLOT_TOLERANCE_MINUTES: int = 30
    FOOD_SEPARATION_MINUTES: int = 30
    DEFAULT_DOSE_TIME: str = "09:00"

    # Adherence
    ADHERENCE_WINDOW_DAYS: int = 7
    ADHERENCE_WARNING_THRESHOLD: float = 80.0

    # Insights
    POLYPHARMACY_THRESHOLD: int = 5
    MISS_PATTERN_MIN_COUNT: int = 3


settings = get_settings()
care_config = CareConfig()

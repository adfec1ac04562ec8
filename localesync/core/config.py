"""
Application configuration using Pydantic Settings
"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""
    
    # App
    APP_NAME: str = "LocaleSync"
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    
    # Database
    DATABASE_URL: str = Field(default="sqlite:///./localesync.db")
    
    # Redis (task queue + per-record locks)
    REDIS_URL: str = Field(default="redis://localhost:6379")
    
    # Locales
    AVAILABLE_LOCALES: List[str] = ["en", "es", "fr"]
    DEFAULT_LOCALE: str = "en"
    
    # Translator backend: passthrough, google
    TRANSLATOR_BACKEND: str = "passthrough"
    GOOGLE_TRANSLATE_API_KEY: str | None = None
    TRANSLATOR_TIMEOUT: float = 30.0
    
    # Task queue backend: memory, redis
    TASK_QUEUE_BACKEND: str = "memory"
    TASK_QUEUE_NAME: str = "localesync:tasks"
    TASK_MAX_ATTEMPTS: int = 5
    
    # Per-record locks (seconds)
    LOCK_TIMEOUT: float = 60.0
    LOCK_BLOCKING_TIMEOUT: float = 30.0
    
    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()

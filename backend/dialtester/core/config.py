"""
Application configuration management using Pydantic settings.

Both the gateway API and the recorder client read from the same
``Settings``; values come from the environment or a local ``.env`` file.
"""
import json
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application
    APP_NAME: str = "Emotional Dial Tester"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: Literal["local", "test", "staging", "production"] = "local"

    # Gateway API
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Store
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/dial_tester"
    DB_POOL_SIZE: int = Field(default=10, ge=1)
    DB_MAX_OVERFLOW: int = Field(default=20, ge=0)

    # Logging and monitoring
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    ENABLE_METRICS: bool = True

    # Recorder client
    GATEWAY_URL: str = "http://localhost:8000/api"
    GATEWAY_TIMEOUT: float = Field(default=10.0, gt=0)
    SAMPLE_THROTTLE_MS: int = Field(default=100, ge=0)
    TIMER_TICK_SECONDS: float = Field(default=1.0, gt=0)
    WRITE_QUEUE_MAXSIZE: int = Field(default=1000, ge=0)  # 0 means unbounded

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a JSON array or a comma-separated string of origins."""
        if not isinstance(v, str):
            return v
        if v.strip().startswith('['):
            return json.loads(v)
        return [origin.strip() for origin in v.split(',') if origin.strip()]

    @field_validator('API_PREFIX', 'GATEWAY_URL')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip('/')

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


settings = Settings()

"""
Single source of truth for application configuration.
All settings are typed and loaded from environment variables.
"""
from functools import lru_cache
from typing import Literal
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_KEY = "peopleDatabase"


class Settings(BaseSettings):
    """
    Application settings.

    - All settings have sensible defaults for local use
    - DATABASE_URL="memory://" keeps records in process memory only
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    # === Server ===
    HOST: str = Field(default="127.0.0.1", description="Bind address for `cli.py serve`")
    PORT: int = Field(default=8000, ge=1, le=65535)
    DEBUG: bool = Field(default=False, description="Expose exception details in 500 responses")
    ALLOWED_ORIGINS: list[str] = Field(
        default=["http://localhost:8000", "http://127.0.0.1:8000"],
        description="CORS allowed origins"
    )

    # === Logging ===
    LOG_LEVEL: str = Field(default="INFO", description="Root log level")

    # === Storage ===
    DATABASE_URL: str = Field(
        default="sqlite:///./data/people.db",
        description="SQLite database path, or memory:// for a throwaway store"
    )
    STORAGE_KEY: str = Field(
        default=DEFAULT_STORAGE_KEY,
        min_length=1,
        description="Slot key holding the serialized people collection"
    )

    # === Records ===
    ID_STRATEGY: Literal["uuid", "counter"] = Field(
        default="uuid",
        description="How new record ids are generated"
    )
    DATE_FORMAT: str = Field(
        default="%m/%d/%Y",
        description="strftime format for the createdAt column"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.strip().upper()

    @property
    def uses_memory_storage(self) -> bool:
        """Check if records live only in process memory."""
        return self.DATABASE_URL.startswith("memory://")


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    This is the single entry point for all configuration.
    The LRU cache ensures we only parse env vars once.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Force reload settings from environment.
    Useful for testing or when env vars change at runtime.
    """
    get_settings.cache_clear()
    return get_settings()

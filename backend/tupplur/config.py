"""
Application configuration loaded from environment variables.
"""
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Super-user secret, required to manage collections
    super_user_key: str | None = None

    # Key-value backend selection
    kv_backend: Literal["mongo", "redis"] = "mongo"

    # MongoDB
    mongo_uri: str = "mongodb://mongodb:27017"
    mongo_db_name: str = "tupplur"
    mongo_kv_collection: str = "kv"

    # Redis
    redis_host: str = "redis"
    redis_port: int = 6379
    redis_namespace: str = "tupplur"

    # Server
    port: int = 3333
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

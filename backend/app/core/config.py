from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    PROJECT_NAME: str = "Team Availability API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "local"
    LOG_LEVEL: str = "INFO"
    # Keep the database in the project root so every entry point shares one file
    DATABASE_URL: str = "sqlite:///../availability.db"
    SECRET_KEY: str = "changeme"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    OAUTH_STATE_EXPIRE_MINUTES: int = 10
    JWT_ALGORITHM: str = "HS256"
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8080",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8080",
    ]

    # Battle.net OAuth application
    BNET_CLIENT_ID: str = ""
    BNET_CLIENT_SECRET: str = ""
    BNET_REDIRECT_URI: str = "http://localhost:8080/api/v1/auth/callback/battlenet"
    BNET_REGION: str = "us"

    # Rate limiting for the login endpoints
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    AUTH_RATE_LIMIT: str = "20/minute"

    # Seed Monday..Sunday 19:00 and 21:00 on startup
    SEED_DEFAULT_TIME_SLOTS: bool = True

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: List[str] | str) -> List[str]:
        """Allow both comma-separated strings and list inputs."""
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

from functools import lru_cache
from typing import Annotated, List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"


class Settings(BaseSettings):
    """Application settings read from the environment and .env"""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Required: startup fails when these are missing
    turnstile_secret: str = Field(min_length=1)
    jwt_secret: str = Field(min_length=1)

    users_file: str = "users.json"
    todos_file: str = "todos.json"
    turnstile_verify_url: str = TURNSTILE_VERIFY_URL
    turnstile_timeout: float = Field(default=10.0, gt=0)
    jwt_expire_hours: int = Field(default=72, gt=0)
    require_auth: bool = False
    cors_origins: Annotated[List[str], NoDecode] = ["http://localhost:3000"]
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value):
        # CORS_ORIGINS is a comma separated list
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_file")
    @classmethod
    def empty_log_file_is_unset(cls, value: Optional[str]) -> Optional[str]:
        return value or None


def load_settings() -> Settings:
    """
    Build settings from environment variables

    Returns:
        Settings instance

    Raises:
        pydantic.ValidationError: If a required secret is missing or a value is malformed
    """
    return Settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached settings - used as FastAPI dependency"""
    return load_settings()

"""
Centralized configuration management with Pydantic validation.
Single source of truth for environment variables and settings.
"""
from functools import lru_cache
from typing import Annotated, List, Literal, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with validation and environment variable loading."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Application
    app_name: str = "AEO Snippet Compare"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # OpenRouter
    openrouter_api_key: Optional[str] = None
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "openai/gpt-4-turbo"
    openrouter_referer: Optional[str] = None
    openrouter_title: Optional[str] = None

    # Sampling
    llm_temperature: float = Field(default=0.25, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=900, gt=0)
    llm_timeout_seconds: float = Field(default=60.0, gt=0)

    # Response shaping
    max_result_chars: int = Field(default=40000, gt=0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "text"

    # CORS
    cors_origins: Annotated[List[str], NoDecode] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse comma-separated CORS origins from environment variable."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("openrouter_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("openrouter_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Enforce stricter validation in production environment."""
        if self.environment == "production" and self.debug:
            raise ValueError("DEBUG must be False in production")
        return self

    @property
    def has_api_key(self) -> bool:
        return bool(self.openrouter_api_key)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def is_production() -> bool:
    return get_settings().environment == "production"

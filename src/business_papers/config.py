"""Application configuration."""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central application configuration with sane defaults."""

    model_config = SettingsConfigDict(env_prefix="BUSINESS_PAPERS_", case_sensitive=False)

    database_url: str = Field(
        "sqlite:///./business_papers.db",
        description="SQLAlchemy-compatible connection string for the local store.",
    )
    language: Literal["en", "fr"] = Field(
        "en",
        description="Language used for fiscal labels and generated breakdown lines.",
    )
    default_tax_rate: float = Field(
        0.0,
        ge=0,
        le=100,
        description="Tax rate in percent applied when a document does not carry one.",
    )
    log_level: str = Field(
        "INFO",
        description="Root log level configured at application start.",
    )
    expose_docs: bool = Field(
        False,
        description="Expose interactive API documentation endpoints.",
    )
    allowed_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost",
            "http://localhost:5173",
            "http://127.0.0.1",
            "http://127.0.0.1:5173",
        ],
        description="Origins allowed to perform CORS requests.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: Any) -> str:
        return str(value).strip().upper()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_comma_separated(cls, value: Any):
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value


@lru_cache
def get_settings() -> Settings:
    """Return memoized settings instance."""

    return Settings()

from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_CORS_ORIGINS = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://localhost:5175",
]


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.lower() in {"1", "true", "t", "yes", "y", "on"}


def _as_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class AppSettings(BaseModel):
    """Runtime configuration for the book API."""

    environment: Literal["development", "production", "test"] = Field(default="production", alias="APP_ENV")
    store_backend: Literal["memory", "sqlalchemy"] = Field(default="memory", alias="BOOK_STORE_BACKEND")
    database_url: str = Field(default="sqlite://", alias="DATABASE_URL")
    seed_books: bool = Field(default=True, alias="SEED_BOOKS")
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS), alias="CORS_ORIGINS")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: Literal["console", "json"] = Field(default="console", alias="LOG_FORMAT")
    host: str = Field(default="0.0.0.0", alias="API_HOST")
    port: int = Field(default=3001, alias="API_PORT", ge=1, le=65535)

    model_config = {"populate_by_name": True}

    @field_validator("environment", "store_backend", "log_format", mode="before")
    @classmethod
    def _normalize_choice(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str | None) -> str:
        if not value:
            return "INFO"
        return value.strip().upper()

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_app_settings() -> AppSettings:
    """Load application configuration from the environment (and `.env`)."""
    load_dotenv()
    return AppSettings(
        environment=os.getenv("APP_ENV", "production"),
        store_backend=os.getenv("BOOK_STORE_BACKEND", "memory"),
        database_url=os.getenv("DATABASE_URL", "sqlite://"),
        seed_books=_as_bool(os.getenv("SEED_BOOKS"), default=True),
        cors_origins=_as_list(os.getenv("CORS_ORIGINS"), DEFAULT_CORS_ORIGINS),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "console"),
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "3001")),
    )

"""
TaskQuest — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from taskquest/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_STORE_BACKENDS = {"sqlite", "json", "memory"}


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Persistence: "sqlite" | "json" | "memory"
    STORE_BACKEND: str = "sqlite"
    DATABASE_PATH: str = "data/taskquest.db"
    JSON_STORE_PATH: str = "data/taskquest.json"

    # Gamification
    POINTS_PER_TASK: int = 10
    POINTS_PER_LEVEL: int = 500

    # Suggestions
    MAX_SUGGESTIONS: int = 3
    SUPPRESS_IF_CATEGORY_PRESENT: bool = False

    # Background refresh of today's tasks
    REFRESH_INTERVAL_MINUTES: int = 5

    # Task templates (optional, best-effort fetch)
    TEMPLATE_BASE_URL: str = ""
    TEMPLATE_DIR: str = ""
    TEMPLATE_CATEGORIES: list[str] = ["meals", "study", "cleaning"]

    TIMEZONE: str = "UTC"

    @field_validator("STORE_BACKEND", mode="before")
    @classmethod
    def parse_backend(cls, v: str) -> str:
        backend = str(v).strip().lower()
        if backend not in _STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {sorted(_STORE_BACKENDS)}")
        return backend

    @field_validator("TEMPLATE_CATEGORIES", mode="before")
    @classmethod
    def parse_categories(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [c.strip().lower() for c in v.split(",") if c.strip()]
        return []

    @field_validator("SUPPRESS_IF_CATEGORY_PRESENT", mode="before")
    @classmethod
    def parse_flag(cls, v: str | bool) -> bool:
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in {"1", "true", "yes", "on"}

    @field_validator("POINTS_PER_LEVEL", "REFRESH_INTERVAL_MINUTES")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than zero")
        return v

    @field_validator("POINTS_PER_TASK", "MAX_SUGGESTIONS")
    @classmethod
    def must_not_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            STORE_BACKEND=os.getenv("STORE_BACKEND", "sqlite"),
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/taskquest.db"),
            JSON_STORE_PATH=os.getenv("JSON_STORE_PATH", "data/taskquest.json"),
            POINTS_PER_TASK=os.getenv("POINTS_PER_TASK", "10"),
            POINTS_PER_LEVEL=os.getenv("POINTS_PER_LEVEL", "500"),
            MAX_SUGGESTIONS=os.getenv("MAX_SUGGESTIONS", "3"),
            SUPPRESS_IF_CATEGORY_PRESENT=os.getenv("SUPPRESS_IF_CATEGORY_PRESENT", "false"),
            REFRESH_INTERVAL_MINUTES=os.getenv("REFRESH_INTERVAL_MINUTES", "5"),
            TEMPLATE_BASE_URL=os.getenv("TEMPLATE_BASE_URL", ""),
            TEMPLATE_DIR=os.getenv("TEMPLATE_DIR", ""),
            TEMPLATE_CATEGORIES=os.getenv("TEMPLATE_CATEGORIES", "meals,study,cleaning"),
            TIMEZONE=os.getenv("TIMEZONE", "UTC"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env:\n{exc}", file=sys.stderr)
        sys.exit(1)


# Singleton — imported by all other modules as:
#   from taskquest.config import settings
settings = _load_settings()

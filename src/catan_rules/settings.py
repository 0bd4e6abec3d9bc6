"""
Script settings loaded from environment variables (and a local .env file).
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


class Settings:
    """Environment-driven defaults for the simulation scripts."""

    LOG_LEVEL: str = os.getenv("CATAN_LOG_LEVEL", "INFO").upper()
    VICTORY_POINTS: int = _int_env("CATAN_VICTORY_POINTS", 10)
    SEED: str | None = os.getenv("CATAN_SEED") or None
    MAX_TURNS: int = _int_env("CATAN_MAX_TURNS", 500)


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, level or settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

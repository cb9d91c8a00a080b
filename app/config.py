"""
Config loader for the server bootstrap.
Reads the process environment (optionally seeded from .env); the port is
resolved once per process and passed through untouched.
"""

from __future__ import annotations
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Union
from dotenv import load_dotenv


DEFAULT_PORT = 8080

Port = Union[str, int]

# Level names both logging and uvicorn accept
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


@dataclass
class Settings:
    """Process settings loaded from environment variables (.env)."""
    port: Port = DEFAULT_PORT
    host: str = "0.0.0.0"
    log_level: str = "INFO"


def resolve_port(environ: Optional[Mapping[str, str]] = None) -> Port:
    """Return PORT as provided, or 8080 when it is unset or empty.

    The value is not parsed or validated here; a bad value is rejected by
    the bind, not by configuration.
    """
    env = os.environ if environ is None else environ
    return env.get("PORT") or DEFAULT_PORT


def normalize_log_level(value: Optional[str]) -> str:
    """Map LOG_LEVEL onto a name logging and uvicorn both understand, else INFO."""
    level = (value or "").strip().upper()
    level = LOG_LEVEL_ALIASES.get(level, level)
    return level if level in LOG_LEVELS else "INFO"


def load_settings() -> Settings:
    """Load settings from .env and the environment, applying defaults when absent."""
    # Variables already set in the environment take precedence over .env
    load_dotenv()
    return Settings(
        port=resolve_port(),
        host=os.getenv("HOST") or "0.0.0.0",
        log_level=normalize_log_level(os.getenv("LOG_LEVEL", "INFO")),
    )

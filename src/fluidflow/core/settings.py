"""Runtime configuration and the logger factory.

Configuration is a pydantic-settings model read once per process:

1. Real environment variables win.
2. Otherwise `.env`, `.env.local` and `.env.<env>` files in the working
   directory are consulted, in that order.

Everything that touches the outside world is configured here: where the flow
store lives, which Gemini model answers, how long a round trip may take and
where the HTTP server binds. The controller, the CLI and the API all read
the same cached instance through :func:`load_settings`.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


class Settings(BaseSettings):
    """Typed configuration for fluidflow.

    Attributes
    ----------
    environment : EnvName
        `FLUID_ENV`; reported by `/health`.
    log_level : LogLevelName
        `LOG_LEVEL`; case-insensitive on input.
    google_api_key : str | None
        `GOOGLE_API_KEY`. Without it every chat turn ends in the apology path.
    model_alias : str
        `FLUID_MODEL`; an alias from :data:`fluidflow.llm.models.MODEL_REGISTRY`
        or a raw Gemini model id.
    store_path : Path
        `FLUID_STORE_PATH`; the single JSON document holding all flows.
    gateway_timeout : float
        `FLUID_GATEWAY_TIMEOUT`; seconds before a pending turn is abandoned.
    host, port :
        `FLUID_HOST` / `FLUID_PORT` for the development server.
    """

    environment: EnvName = Field(default="dev", alias="FLUID_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    google_api_key: str | None = Field(default=None, alias="GOOGLE_API_KEY")
    model_alias: str = Field(default="flow", alias="FLUID_MODEL")
    store_path: Path = Field(default=Path(".fluid") / "store.json", alias="FLUID_STORE_PATH")
    gateway_timeout: float = Field(default=120.0, gt=0, alias="FLUID_GATEWAY_TIMEOUT")
    host: str = Field(default="127.0.0.1", alias="FLUID_HOST")
    port: int = Field(default=8000, ge=1, le=65535, alias="FLUID_PORT")

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @property
    def is_dev(self) -> bool:
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        return self.environment == "test"

    @property
    def has_api_key(self) -> bool:
        return bool(self.google_api_key)

    def log_level_numeric(self) -> int:
        """Map `log_level` onto the stdlib numeric level."""
        return logging.getLevelName(self.log_level)  # type: ignore[no-any-return]


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build the process-wide `Settings` once.

    Tests that change `os.environ` call `load_settings.cache_clear()` first.
    """
    os.environ.setdefault("FLUID_ENV", "dev")
    return Settings()


settings: Settings = load_settings()


def get_logger(name: str = "fluidflow") -> logging.Logger:
    """Return a named logger with one stream handler at the configured level.

    Loggers do not propagate, so importing fluidflow into a host application
    never doubles its log lines.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger


__all__ = ["Settings", "EnvName", "LogLevelName", "LOG_FORMAT", "load_settings", "settings", "get_logger"]

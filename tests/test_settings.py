"""Tests for `fluidflow.core.settings`.

Each test that touches the environment clears the `load_settings` cache
before and after, so later tests see a fresh instance.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from fluidflow.core.settings import Settings, get_logger, load_settings, settings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def fresh_settings() -> Generator[None, None, None]:
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


def test_module_singleton_is_typed() -> None:
    assert isinstance(settings, Settings)
    assert settings.gateway_timeout > 0


def test_environment_and_level_from_env(monkeypatch: Any) -> None:
    monkeypatch.setenv("FLUID_ENV", "test")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = load_settings()

    assert s.is_test and not s.is_dev
    assert s.log_level == "DEBUG"
    assert s.log_level_numeric() == logging.DEBUG


def test_store_model_and_timeout_from_env(monkeypatch: Any, tmp_path: Path) -> None:
    monkeypatch.setenv("FLUID_STORE_PATH", str(tmp_path / "flows.json"))
    monkeypatch.setenv("FLUID_GATEWAY_TIMEOUT", "7.5")
    monkeypatch.setenv("FLUID_MODEL", "pro")
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)

    s = load_settings()

    assert s.store_path == tmp_path / "flows.json"
    assert s.gateway_timeout == 7.5
    assert s.model_alias == "pro"
    assert s.has_api_key is False


def test_loggers_follow_configured_level(monkeypatch: Any) -> None:
    monkeypatch.setenv("LOG_LEVEL", "ERROR")

    logger = get_logger("fluidflow.tests.settings")

    assert logger.level == logging.ERROR
    assert len(logger.handlers) == 1
    assert logger.propagate is False

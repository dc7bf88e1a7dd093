"""HTTP interface for fluidflow (FastAPI)."""

from __future__ import annotations

from .app import create_app, get_app

__all__ = ["create_app", "get_app"]

"""Core package initializer for fluidflow.

Downstream code imports the concrete modules directly, e.g.:
    from fluidflow.core.settings import settings, get_logger
    from fluidflow.core.controller import ConversationController
"""

from __future__ import annotations

__all__ = ["__doc__"]

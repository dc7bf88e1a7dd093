from __future__ import annotations

from . import chat, flows

__all__ = ["chat", "flows"]

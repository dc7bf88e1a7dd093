from __future__ import annotations

from .client import GeminiClient
from .gateway import ChatSession, Gateway, GatewayReply, GeminiChatSession, GeminiGateway
from .models import (
    DEFAULT_ALIAS,
    MODEL_REGISTRY,
    ModelConfig,
    all_models,
    get_model,
)

__all__ = [
    "ModelConfig",
    "MODEL_REGISTRY",
    "DEFAULT_ALIAS",
    "get_model",
    "all_models",
    "GeminiClient",
    "Gateway",
    "ChatSession",
    "GatewayReply",
    "GeminiGateway",
    "GeminiChatSession",
]

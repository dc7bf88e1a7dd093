# -----------------------------------------------------------------------------
# A tiny, in-process model registry used by the Gemini client.
#
# The registry gives us a single place to:
#   - declare human-friendly aliases (e.g. "flow", "pro")
#   - pin them to concrete Gemini model IDs
#   - keep default sampling parameters (temperature, max_tokens)
#   - attach a base URL that can still be overridden from the environment
#
# It is pure-Python and side-effect free so the CLI, the API and tests can
# import it anywhere.
# -----------------------------------------------------------------------------
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """Configuration for a single Gemini model.

    Parameters
    ----------
    name:
        Provider model identifier, e.g. ``"gemini-2.5-flash"``.
    base_url:
        Base URL of the ``generateContent`` API. ``GOOGLE_API_BASE_URL``
        overrides it at request time.
    max_tokens:
        Default ``maxOutputTokens`` for a turn.
    temperature:
        Default sampling temperature.
    """

    name: str
    base_url: str = GEMINI_BASE_URL
    max_tokens: int = 8192
    temperature: float = 0.7


#: Logical aliases -> model configs. Application code should use the aliases.
MODEL_REGISTRY: dict[str, ModelConfig] = {
    # Default conversational model: fast turns with tool calling.
    "flow": ModelConfig(name="gemini-2.5-flash"),
    # Slower, more careful planning and architecture work.
    "pro": ModelConfig(name="gemini-2.5-pro", max_tokens=16384, temperature=0.5),
    # Cheap model for smoke runs.
    "lite": ModelConfig(name="gemini-2.5-flash-lite", max_tokens=4096, temperature=0.4),
}

DEFAULT_ALIAS = "flow"


def get_model(alias_or_name: str) -> ModelConfig:
    """Resolve an alias; an unknown value is treated as a raw Gemini model id."""
    key = alias_or_name.strip()
    if key in MODEL_REGISTRY:
        return MODEL_REGISTRY[key]
    if not key:
        return MODEL_REGISTRY[DEFAULT_ALIAS]
    return ModelConfig(name=key)


def all_models() -> Mapping[str, ModelConfig]:
    """Return a read-only view of the registry (for ``--help`` listings)."""
    return dict(MODEL_REGISTRY)


__all__ = ["ModelConfig", "MODEL_REGISTRY", "DEFAULT_ALIAS", "GEMINI_BASE_URL", "get_model", "all_models"]

"""Artifact contract: addressable generated content shown beside the chat.

Types
-----
Known types are ``code``, ``document``, ``plan`` and ``diagram``. The model
sometimes says ``mermaid`` for a diagram; that alias is normalised. Any other
string is kept as-is since tool arguments are only checked for presence.
"""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, Field, field_validator

ARTIFACT_TYPES: Final[tuple[str, ...]] = ("code", "document", "plan", "diagram")
_TYPE_ALIASES: Final[dict[str, str]] = {"mermaid": "diagram"}


class Artifact(BaseModel):
    """A generated content unit owned by exactly one flow."""

    id: str = Field(description="Unique within the owning flow, e.g. 'artifact-3f9c0a1b2d4e'.")
    title: str
    type: str = Field(description="One of code/document/plan/diagram, other values kept verbatim.")
    content: str
    language: str | None = Field(default=None, description="Language tag for code artifacts.")

    @field_validator("type")
    @classmethod
    def _normalise_type(cls, v: str) -> str:
        key = v.strip().lower()
        return _TYPE_ALIASES.get(key, key)

    @property
    def display_language(self) -> str:
        """Language hint a renderer should use for fenced display."""
        if self.language:
            return self.language
        return "mermaid" if self.type == "diagram" else "plaintext"


__all__ = ["Artifact", "ARTIFACT_TYPES"]

# -----------------------------------------------------------------------------
# A small, synchronous client for the Google Gemini `generateContent` API.
#
#   - reads the API key / base URL from the environment
#   - resolves logical aliases -> concrete model IDs via the registry
#   - sends a full multi-turn `contents` list with a system instruction and
#     function declarations, and returns the raw decoded response
#
# Only the standard library (`urllib.request`) is used for HTTP. Unit tests
# mock the internal `_post()` method so no real HTTP calls happen during CI.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import os
import urllib.error
import urllib.request
from collections.abc import Mapping, MutableMapping, Sequence
from dataclasses import dataclass
from typing import Any

from fluidflow.core.errors import GatewayError

from .models import DEFAULT_ALIAS, ModelConfig, get_model


@dataclass(slots=True)
class GeminiClient:
    """Thin wrapper over ``POST /models/{model}:generateContent``.

    Parameters
    ----------
    api_key:
        Google API key sent as ``x-goog-api-key``.
    model_alias:
        Alias looked up in the model registry, e.g. ``"flow"``.
    timeout_seconds:
        Socket timeout for the underlying HTTP request.
    """

    api_key: str
    model_alias: str = DEFAULT_ALIAS
    timeout_seconds: float = 120.0

    @classmethod
    def from_env(cls, model_alias: str = DEFAULT_ALIAS, timeout_seconds: float = 120.0) -> GeminiClient:
        """Construct a client from ``GOOGLE_API_KEY``."""
        return cls(
            api_key=os.getenv("GOOGLE_API_KEY", ""),
            model_alias=model_alias,
            timeout_seconds=timeout_seconds,
        )

    @property
    def model(self) -> ModelConfig:
        return get_model(self.model_alias)

    def generate_content(
        self,
        contents: Sequence[Mapping[str, Any]],
        *,
        system_instruction: str | None = None,
        tools: Sequence[Mapping[str, Any]] | None = None,
    ) -> dict[str, Any]:
        """Run one ``generateContent`` request and return the decoded body.

        Raises
        ------
        GatewayError
            If the API key is missing or the HTTP request fails.
        """
        if not self.api_key:
            raise GatewayError("Missing GOOGLE_API_KEY; cannot call Google Gemini models.")

        config = self.model
        base_url = (os.getenv("GOOGLE_API_BASE_URL") or config.base_url).rstrip("/")
        url = f"{base_url}/models/{config.name}:generateContent"

        payload: MutableMapping[str, Any] = {
            "contents": list(contents),
            "generationConfig": {
                "temperature": config.temperature,
                "maxOutputTokens": config.max_tokens,
            },
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        if tools:
            payload["tools"] = [{"functionDeclarations": list(tools)}]

        headers: dict[str, str] = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        return self._post(url=url, headers=headers, payload=payload)

    # --------------------------------------------------------------------- #
    # Internal helpers (test seams)
    # --------------------------------------------------------------------- #
    def _post(
        self,
        *,
        url: str,
        headers: Mapping[str, str],
        payload: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Perform an HTTP POST request and decode the JSON response.

        This is the seam unit tests patch to return stubbed responses
        without any network I/O.
        """
        body = json.dumps(payload).encode("utf-8")
        request = urllib.request.Request(
            url=url,
            data=body,
            headers=dict(headers),
            method="POST",
        )

        try:
            with urllib.request.urlopen(request, timeout=self.timeout_seconds) as resp:
                raw = resp.read()
        except urllib.error.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise GatewayError(f"Gemini HTTP error {exc.code}: {exc.reason}; body={detail!r}") from exc
        except (urllib.error.URLError, TimeoutError) as exc:
            raise GatewayError(f"Gemini network error: {exc}") from exc

        try:
            decoded: dict[str, Any] = json.loads(raw.decode("utf-8"))
        except json.JSONDecodeError as exc:
            raise GatewayError("Failed to decode Gemini response as JSON") from exc

        return decoded


__all__ = ["GeminiClient"]

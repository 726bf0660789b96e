# src/chetana/services/gemini.py
"""HTTP client for the hosted generative language API."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from chetana.core.settings import settings

logger = logging.getLogger(__name__)


class ChatServiceError(RuntimeError):
    """The language model could not produce a response."""


class ChatServiceDisabledError(ChatServiceError):
    """No API key is configured for the language model."""


@dataclass(frozen=True)
class GeminiConfig:
    """Immutable configuration for language model calls."""

    api_key: str | None
    model: str
    base_url: str
    timeout_seconds: float
    temperature: float
    top_k: int
    top_p: float
    max_output_tokens: int


def load_gemini_config() -> GeminiConfig:
    """Build configuration object from global settings."""
    return GeminiConfig(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url.rstrip("/"),
        timeout_seconds=settings.gemini_timeout_seconds,
        temperature=settings.gemini_temperature,
        top_k=settings.gemini_top_k,
        top_p=settings.gemini_top_p,
        max_output_tokens=settings.gemini_max_output_tokens,
    )


class GeminiClient:
    """Thin wrapper over the ``generateContent`` REST endpoint."""

    def __init__(
        self,
        config: GeminiConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or load_gemini_config()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.config.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise ChatServiceDisabledError("Language model API key is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    def _payload(self, prompt: str) -> dict[str, Any]:
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": self.config.max_output_tokens,
            },
        }

    @staticmethod
    def _extract_text(body: dict[str, Any]) -> str:
        try:
            parts = body["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as exc:
            raise ChatServiceError("Language model returned no candidates") from exc
        text = "".join(part.get("text", "") for part in parts if isinstance(part, dict))
        if not text.strip():
            raise ChatServiceError("Language model returned an empty response")
        return text.strip()

    async def generate(self, prompt: str) -> str:
        """Send ``prompt`` and return the generated text."""
        client = await self._ensure_client()
        try:
            response = await client.post(
                f"/models/{self.config.model}:generateContent",
                params={"key": self.config.api_key},
                json=self._payload(prompt),
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise ChatServiceError(
                f"Language model responded with {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ChatServiceError(f"Language model request failed: {exc}") from exc
        except ValueError as exc:
            raise ChatServiceError("Language model returned invalid JSON") from exc
        return self._extract_text(body)

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""
        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


_client: GeminiClient | None = None


def get_gemini_client() -> GeminiClient:
    """Return the shared language model client."""
    global _client
    if _client is None:
        _client = GeminiClient()
    return _client

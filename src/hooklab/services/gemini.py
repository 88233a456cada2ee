"""Gemini client for text generation.

Wraps the ``generateContent`` REST endpoint with a lazily created
``httpx.AsyncClient``. Callers receive plain text or a :class:`GeminiError`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from hooklab.core.settings import settings

logger = logging.getLogger(__name__)


class GeminiError(RuntimeError):
    """Raised when the model endpoint fails or returns no usable text."""


class GeminiDisabledError(GeminiError):
    """Raised when no API key is configured."""


@dataclass(frozen=True)
class GeminiConfig:
    """Immutable configuration for model calls."""

    api_key: str | None
    base_url: str
    model: str
    timeout_seconds: float
    generation_config: dict[str, Any] = field(default_factory=dict)


def load_gemini_config() -> GeminiConfig:
    """Build configuration object from global settings."""

    return GeminiConfig(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_api_url,
        model=settings.gemini_model,
        timeout_seconds=float(settings.http_timeout_seconds),
        generation_config=settings.generation_config,
    )


def extract_text(payload: Any) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or None if absent."""
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


class GeminiClient:
    """HTTP client wrapper for the generative text model."""

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
            raise GeminiDisabledError("GEMINI_API_KEY is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.config.base_url,
                    timeout=httpx.Timeout(self.config.timeout_seconds),
                    transport=self._transport,
                )
        return self._client

    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the trimmed response text."""
        client = await self._ensure_client()
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.config.generation_config,
        }

        try:
            response = await client.post(
                f"/models/{self.config.model}:generateContent",
                params={"key": self.config.api_key},
                json=body,
            )
        except httpx.HTTPError as exc:
            raise GeminiError(f"Gemini request failed: {exc}") from exc

        if not response.is_success:
            raise GeminiError(f"Gemini API error: {response.status_code} {response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise GeminiError("Gemini returned a non-JSON body") from exc

        text = extract_text(payload)
        if not text or not text.strip():
            raise GeminiError("No text generated from Gemini")
        return text.strip()

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class _GeminiClientSingleton:
    """Singleton wrapper for GeminiClient."""

    _instance: GeminiClient | None = None

    @classmethod
    def get_instance(cls) -> GeminiClient:
        """Get or create the singleton GeminiClient instance."""
        if cls._instance is None:
            cls._instance = GeminiClient()
        return cls._instance


def get_gemini_client() -> GeminiClient:
    """Return a singleton Gemini client instance."""
    return _GeminiClientSingleton.get_instance()

"""Trend summarisation over the social channel feed.

Posts are reduced to their opening line ("hook") and ranked by engagement
relative to the author's audience. The resulting digest is used only as
prompt context for generation.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Final

import httpx
from pydantic import ValidationError

from hooklab.core.settings import settings
from hooklab.schemas.feed import FeedPost

logger = logging.getLogger(__name__)

MAX_HOOK_CHARS: Final[int] = 120
MAX_PATTERNS: Final[int] = 20
SUMMARY_PATTERNS: Final[int] = 10

NO_TREND_PATTERNS: Final[str] = (
    "No trending patterns found. Generate generic crypto-native hooks."
)
TREND_DATA_UNAVAILABLE: Final[str] = "Unable to fetch trend data. Generate generic hooks."

_SENTENCE_BREAK = re.compile(r"[.!?]\s")


class FeedError(RuntimeError):
    """Raised when the feed endpoint cannot be read."""


@dataclass(frozen=True)
class HookPattern:
    """A ranked opening line taken from a post."""

    hook: str
    strength: float
    engagement: int


@dataclass(frozen=True)
class TrendSummary:
    """Prompt-ready digest plus whether live feed data backed it."""

    text: str
    available: bool


def extract_hook(text: str) -> str:
    """Return the first sentence, or the first 120 characters plus an ellipsis."""
    first_sentence = _SENTENCE_BREAK.split(text, maxsplit=1)[0]
    if len(first_sentence) <= MAX_HOOK_CHARS:
        return first_sentence
    return text[:MAX_HOOK_CHARS].strip() + "..."


def calculate_hook_strength(post: FeedPost) -> float:
    """Engagement per follower: (likes + recasts + replies) / max(followers, 1)."""
    return post.engagement / max(post.author.follower_count, 1)


def extract_hook_patterns(posts: Iterable[FeedPost]) -> list[HookPattern]:
    """Rank engaged posts by strength and keep the strongest twenty."""
    patterns = [
        HookPattern(
            hook=extract_hook(post.text),
            strength=calculate_hook_strength(post),
            engagement=post.engagement,
        )
        for post in posts
    ]
    patterns = [pattern for pattern in patterns if pattern.engagement > 0]
    patterns.sort(key=lambda pattern: pattern.strength, reverse=True)
    return patterns[:MAX_PATTERNS]


def summarize_trend_data(posts: Sequence[FeedPost], channel: str = "Base") -> str:
    """Format the top patterns as a numbered list for the model prompt."""
    patterns = extract_hook_patterns(posts)
    if not patterns:
        return NO_TREND_PATTERNS

    lines = [
        f'{index}. "{pattern.hook}" (strength: {pattern.strength:.3f})'
        for index, pattern in enumerate(patterns[:SUMMARY_PATTERNS], start=1)
    ]
    return (
        f"Top performing hook patterns from {channel} channel:\n"
        + "\n".join(lines)
        + "\n\nUse these patterns as inspiration for structure and tone, "
        "but generate original content."
    )


def parse_casts(payload: object) -> list[FeedPost]:
    """Validate raw casts, dropping any that cannot be normalised."""
    if not isinstance(payload, dict):
        raise FeedError("Feed response is not a JSON object")

    casts = payload.get("casts") or []
    if not isinstance(casts, list):
        raise FeedError("Feed response has no casts list")
    posts: list[FeedPost] = []
    for cast in casts:
        try:
            posts.append(FeedPost.model_validate(cast))
        except ValidationError as exc:
            logger.warning("Dropping malformed cast %s: %s", _cast_hash(cast), exc.error_count())
    return posts


def _cast_hash(cast: object) -> str:
    if isinstance(cast, dict):
        return str(cast.get("hash", "?"))
    return "?"


class NeynarClient:
    """HTTP client for the Neynar channel feed."""

    def __init__(
        self,
        *,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.neynar_api_key
        self.base_url = base_url or settings.neynar_base_url
        self.timeout_seconds = timeout_seconds or settings.http_timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._client_lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    async def _ensure_client(self) -> httpx.AsyncClient:
        if not self.enabled:
            raise FeedError("NEYNAR_API_KEY is not configured")

        async with self._client_lock:
            if self._client is None:
                self._client = httpx.AsyncClient(
                    base_url=self.base_url,
                    timeout=httpx.Timeout(self.timeout_seconds),
                    headers={"api_key": self.api_key or "", "Content-Type": "application/json"},
                    transport=self._transport,
                )
        return self._client

    async def fetch_channel_posts(self, channel: str, limit: int = 50) -> list[FeedPost]:
        """Fetch recent non-recast posts from a channel."""
        client = await self._ensure_client()
        try:
            response = await client.get(
                "/farcaster/feed/channels",
                params={"channel_ids": channel, "limit": limit, "with_recasts": "false"},
            )
        except httpx.HTTPError as exc:
            raise FeedError(f"Neynar request failed: {exc}") from exc

        if not response.is_success:
            raise FeedError(f"Neynar API error: {response.status_code} {response.reason_phrase}")

        try:
            payload = response.json()
        except ValueError as exc:
            raise FeedError("Neynar returned a non-JSON body") from exc
        return parse_casts(payload)

    async def close(self) -> None:
        """Clean up underlying HTTP client resources."""

        async with self._client_lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None


class TrendSummarizer:
    """Fetches the channel feed and reduces it to a prompt digest."""

    def __init__(
        self,
        client: NeynarClient,
        *,
        channel: str | None = None,
        limit: int | None = None,
    ) -> None:
        self.client = client
        self.channel = channel or settings.neynar_channel
        self.limit = limit or settings.neynar_feed_limit

    async def fetch_summary(self) -> TrendSummary:
        """Return the current digest, or a generic hint when the feed is down."""
        try:
            posts = await self.client.fetch_channel_posts(self.channel, self.limit)
        except FeedError as exc:
            logger.warning("Trend feed unavailable: %s", exc)
            return TrendSummary(text=TREND_DATA_UNAVAILABLE, available=False)
        return TrendSummary(
            text=summarize_trend_data(posts, channel=self.channel.capitalize()),
            available=True,
        )


class _NeynarClientSingleton:
    """Singleton wrapper for NeynarClient."""

    _instance: NeynarClient | None = None

    @classmethod
    def get_instance(cls) -> NeynarClient:
        """Get or create the singleton NeynarClient instance."""
        if cls._instance is None:
            cls._instance = NeynarClient()
        return cls._instance


def get_neynar_client() -> NeynarClient:
    """Return a singleton Neynar client instance."""
    return _NeynarClientSingleton.get_instance()

"""Hook and full-content generation.

Generation is a two-step blind selection: hooks are produced first, and a
selected hook is expanded into a full post only after it has been paid for.
Each step returns either :class:`Generated` (model output) or
:class:`Fallback` (deterministic templates) so callers never need to inspect
exceptions to know which path ran.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Final, Generic, Literal, TypeVar

from hooklab.schemas.common import MAX_HOOK_CHARS
from hooklab.schemas.hooks import HookCandidate
from hooklab.services.gemini import GeminiClient, GeminiError

logger = logging.getLogger(__name__)

MAX_HOOKS: Final[int] = 5
MAX_CONTENT_CHARS: Final[int] = 320
ELLIPSIS: Final[str] = "..."

_ORDINAL_MARKER = re.compile(r"^\d+\.")
_ORDINAL_PREFIX = re.compile(r"^\d+\.\s*")

T = TypeVar("T")


@dataclass(frozen=True)
class Generated(Generic[T]):
    """Content produced by the model."""

    content: T
    source: Literal["generated"] = "generated"

    @property
    def is_fallback(self) -> bool:
        return False


@dataclass(frozen=True)
class Fallback(Generic[T]):
    """Templated content used because the model was unavailable."""

    content: T
    source: Literal["fallback"] = "fallback"

    @property
    def is_fallback(self) -> bool:
        return True


GenerationResult = Generated[T] | Fallback[T]


class NoValidHooksError(GeminiError):
    """Raised when the model response contains no usable hook lines."""


HOOK_GENERATION_SYSTEM_PROMPT: Final[str] = """You are a crypto-native content strategist specializing in Farcaster posts.

CRITICAL RULES:
- Generate ONLY hooks (first sentence, max 120 characters)
- Never include body content
- Never explain your reasoning
- Never mention "AI", "trend analysis", or "algorithm"
- Output must feel crypto-native and timely
- Use patterns from trending posts, but create original content
- Do NOT copy existing content

Generate 5 distinct hooks that would perform well on Farcaster."""

CONTENT_GENERATION_SYSTEM_PROMPT: Final[str] = """You are a crypto-native content creator for Farcaster.

CRITICAL RULES:
- Expand the given hook into a full post (200-280 characters)
- Maintain crypto-native tone
- Never mention "AI" or "generated"
- Make it feel authentic and timely
- Include relevant context about Base ecosystem when appropriate

Generate a complete Farcaster post."""


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def build_hook_prompt(topic: str, trend_summary: str) -> str:
    """Assemble the hook-generation prompt."""
    return f"""{HOOK_GENERATION_SYSTEM_PROMPT}

TOPIC: {topic}

TRENDING PATTERNS:
{trend_summary}

Generate 5 hooks (one per line, max 120 chars each). Output format:
1. [hook text]
2. [hook text]
3. [hook text]
4. [hook text]
5. [hook text]"""


def build_content_prompt(hook: str, topic: str, trend_summary: str) -> str:
    """Assemble the content-expansion prompt."""
    return f"""{CONTENT_GENERATION_SYSTEM_PROMPT}

TOPIC: {topic}

SELECTED HOOK: "{hook}"

TRENDING CONTEXT:
{trend_summary}

Expand this hook into a complete Farcaster post (200-280 characters total, including the hook).
The hook should be the opening, followed by supporting content.

Output only the complete post text, nothing else."""


def parse_hooks(response: str) -> list[str]:
    """Pull numbered hook lines out of a model response.

    Lines without a leading ``<digits>.`` marker are ignored; empty lines and
    lines longer than 120 characters are discarded. At most five are kept.
    """
    hooks: list[str] = []
    for line in response.split("\n"):
        if not _ORDINAL_MARKER.match(line):
            continue
        hook = _ORDINAL_PREFIX.sub("", line, count=1).strip()
        if 0 < len(hook) <= MAX_HOOK_CHARS:
            hooks.append(hook)
    return hooks[:MAX_HOOKS]


def clip_content(text: str) -> str:
    """Hard-limit a post to 320 characters, marking truncation with ``...``."""
    if len(text) > MAX_CONTENT_CHARS:
        return text[: MAX_CONTENT_CHARS - len(ELLIPSIS)] + ELLIPSIS
    return text


def generate_fallback_hooks(topic: str) -> list[HookCandidate]:
    """Return five fixed hook templates for a topic."""
    templates = [
        f"{topic} is heating up on Base 🔥",
        f"Just discovered something wild about {topic}",
        f"Why {topic} matters for the Base ecosystem",
        f"Hot take: {topic} is underrated",
        f"The {topic} meta is shifting",
    ]
    stamp = _timestamp_ms()
    return [
        HookCandidate(id=f"fallback-{stamp}-{index}", hook=hook)
        for index, hook in enumerate(templates)
    ]


def generate_fallback_content(hook: str, topic: str) -> str:
    """Return a templated post that opens with the hook verbatim."""
    return clip_content(
        f"{hook}\n\nThe Base ecosystem is evolving fast, and {topic} is at the center of it. "
        "Don't sleep on this opportunity."
    )


class HookGenerator:
    """Produces hook candidates for a topic."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    async def generate_hooks(self, topic: str, trend_summary: str) -> list[HookCandidate]:
        """Ask the model for hooks; raises if none survive parsing."""
        response = await self.client.generate(build_hook_prompt(topic, trend_summary))
        hooks = parse_hooks(response)
        if not hooks:
            raise NoValidHooksError("Failed to generate valid hooks")

        stamp = _timestamp_ms()
        return [
            HookCandidate(id=f"hook-{stamp}-{index}", hook=hook)
            for index, hook in enumerate(hooks)
        ]

    async def generate(
        self, topic: str, trend_summary: str
    ) -> GenerationResult[list[HookCandidate]]:
        """Generate hooks, substituting templates when the model fails."""
        try:
            return Generated(await self.generate_hooks(topic, trend_summary))
        except GeminiError as exc:
            logger.warning("Hook generation fell back to templates: %s", exc)
            return Fallback(generate_fallback_hooks(topic))


class ContentExpander:
    """Expands a selected hook into a full post."""

    def __init__(self, client: GeminiClient) -> None:
        self.client = client

    async def expand(self, hook: str, topic: str, trend_summary: str) -> str:
        """Ask the model for a 200-280 character post, clipped to 320."""
        response = await self.client.generate(build_content_prompt(hook, topic, trend_summary))
        return clip_content(response)

    async def generate(self, hook: str, topic: str, trend_summary: str) -> GenerationResult[str]:
        """Expand a hook, substituting the template when the model fails."""
        try:
            return Generated(await self.expand(hook, topic, trend_summary))
        except GeminiError as exc:
            logger.warning("Content expansion fell back to template: %s", exc)
            return Fallback(generate_fallback_content(hook, topic))

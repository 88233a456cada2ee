"""Hook generation schemas."""
from __future__ import annotations

from typing import Literal

from .common import CamelModel, NonBlankStr, TopicText


class HookCandidate(CamelModel):
    """A teaser line offered for blind selection."""

    id: str
    hook: str


class HookGenerateRequest(CamelModel):
    """Request body for generating hook candidates."""

    topic: TopicText
    wallet_address: NonBlankStr | None = None


class HookGenerateResponse(CamelModel):
    """Hook candidates plus the gate state that produced them."""

    success: bool = True
    hooks: list[HookCandidate]
    trend_data_available: bool
    source: Literal["generated", "fallback"]
    is_premium: bool | None = None
    remaining_credits: int | None = None

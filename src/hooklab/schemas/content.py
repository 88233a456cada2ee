"""Full-content reveal schemas."""
from __future__ import annotations

from typing import Literal

from .common import CamelModel, HookText, NonBlankStr, TopicText


class ContentGenerateRequest(CamelModel):
    """Request body for revealing the full post behind a selected hook."""

    selected_hook: HookText
    topic: TopicText
    wallet_address: NonBlankStr


class ContentGenerateResponse(CamelModel):
    """Expanded post returned after a credited selection."""

    success: bool = True
    hook: str
    full_content: str
    source: Literal["generated", "fallback"]
    is_premium: bool
    remaining_credits: int
    usage_logged: bool

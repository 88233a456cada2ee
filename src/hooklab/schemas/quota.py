"""Quota schemas."""
from __future__ import annotations

from .common import CamelModel, NonBlankStr


class QuotaConsumeRequest(CamelModel):
    """Request body for spending one credit."""

    wallet_address: NonBlankStr
    selected_hook: str | None = None
    topic: str | None = None


class QuotaResponse(CamelModel):
    """Current balance; -1 means unlimited (premium)."""

    is_premium: bool
    remaining_credits: int


class QuotaConsumeResponse(QuotaResponse):
    """Balance after a consume call."""

    success: bool = True
    message: str
    usage_logged: bool = False


class InsufficientQuotaResponse(CamelModel):
    """Body of the 403 returned when the free tier is exhausted."""

    error: str = "Insufficient quota"
    is_premium: bool = False
    remaining_credits: int = 0
    message: str = "Subscribe to get unlimited access"
    subscribe_url: str

"""Premium subscription schemas."""
from __future__ import annotations

from .common import CamelModel, NonBlankStr


class PremiumVerifyRequest(CamelModel):
    """Request body for refreshing a wallet's premium record."""

    wallet_address: NonBlankStr


class PremiumStatusResponse(CamelModel):
    """On-chain premium state for a wallet."""

    success: bool = True
    is_premium: bool
    expiry_timestamp: int
    expiry_date: str | None
    expiry_label: str
    expiry_active: bool


class MonthlyPriceResponse(CamelModel):
    """Current subscription price in wei."""

    monthly_price_wei: int

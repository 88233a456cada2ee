# src/hooklab/schemas/__init__.py
"""
Pydantic schemas for API request/response models and upstream payloads.

These schemas define the structure of API data for serialization and validation.
"""

from .content import ContentGenerateRequest, ContentGenerateResponse
from .feed import FeedAuthor, FeedPost, FeedReactions, FeedReplies
from .hooks import HookCandidate, HookGenerateRequest, HookGenerateResponse
from .premium import MonthlyPriceResponse, PremiumStatusResponse, PremiumVerifyRequest
from .quota import (
    InsufficientQuotaResponse,
    QuotaConsumeRequest,
    QuotaConsumeResponse,
    QuotaResponse,
)

__all__ = [
    "ContentGenerateRequest", "ContentGenerateResponse",
    "FeedAuthor", "FeedPost", "FeedReactions", "FeedReplies",
    "HookCandidate", "HookGenerateRequest", "HookGenerateResponse",
    "MonthlyPriceResponse", "PremiumStatusResponse", "PremiumVerifyRequest",
    "InsufficientQuotaResponse", "QuotaConsumeRequest", "QuotaConsumeResponse", "QuotaResponse",
]

# src/hooklab/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .content import router as content_router
from .hooks import router as hooks_router
from .premium import router as premium_router
from .quota import router as quota_router

__all__ = [
    "content_router",
    "hooks_router",
    "premium_router",
    "quota_router",
]

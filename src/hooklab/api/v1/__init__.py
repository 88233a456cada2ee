# src/hooklab/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    content_router,
    hooks_router,
    premium_router,
    quota_router,
)

__all__ = [
    "content_router",
    "hooks_router",
    "premium_router",
    "quota_router",
]

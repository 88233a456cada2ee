# src/hooklab/models/__init__.py
"""SQLAlchemy models for the HookLab application."""

from .quota import Quota
from .usage_log import UsageLog
from .user import User

__all__ = [
    "Quota",
    "UsageLog",
    "User",
]

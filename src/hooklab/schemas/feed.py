"""Boundary models for social feed payloads.

Casts arrive as loosely-typed JSON; these models default missing counters and
normalise nulls before anything downstream sees them.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class FeedAuthor(BaseModel):
    """Author metadata attached to a cast."""

    model_config = ConfigDict(extra="ignore")

    username: str = ""
    display_name: str | None = None
    follower_count: int = 1

    @field_validator("follower_count", mode="before")
    @classmethod
    def _default_followers(cls, value: Any) -> Any:
        # Zero or missing follower counts are treated as one follower.
        return value or 1


class FeedReactions(BaseModel):
    """Reaction counters for a cast."""

    model_config = ConfigDict(extra="ignore")

    likes_count: int = 0
    recasts_count: int = 0

    @field_validator("likes_count", "recasts_count", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return value or 0


class FeedReplies(BaseModel):
    """Reply counter for a cast."""

    model_config = ConfigDict(extra="ignore")

    count: int = 0

    @field_validator("count", mode="before")
    @classmethod
    def _none_to_zero(cls, value: Any) -> Any:
        return value or 0


class FeedPost(BaseModel):
    """A single post (cast) from the channel feed."""

    model_config = ConfigDict(extra="ignore")

    hash: str = ""
    text: str
    author: FeedAuthor = FeedAuthor()
    reactions: FeedReactions = FeedReactions()
    replies: FeedReplies = FeedReplies()
    timestamp: str | None = None

    @field_validator("author", "reactions", "replies", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def engagement(self) -> int:
        """Total likes, recasts and replies."""
        return self.reactions.likes_count + self.reactions.recasts_count + self.replies.count

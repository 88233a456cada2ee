"""Shared Pydantic schemas and field types for the API."""
from __future__ import annotations

from typing import Annotated, Final

from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

MAX_HOOK_CHARS: Final[int] = 120
# Longest fallback template plus a topic of this length still fits in a hook.
MAX_TOPIC_CHARS: Final[int] = 80

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
HookText = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_HOOK_CHARS)
]
TopicText = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=MAX_TOPIC_CHARS)
]


class CamelModel(BaseModel):
    """Base model exposing camelCase keys on the wire.

    Snake-case field names are still accepted on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

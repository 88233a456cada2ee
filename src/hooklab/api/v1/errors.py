"""Translate gate failures into HTTP errors."""

from fastapi import HTTPException, status

from hooklab.core.settings import settings
from hooklab.schemas.quota import InsufficientQuotaResponse
from hooklab.services.gating import FailureKind, GateOutcome


def insufficient_quota() -> HTTPException:
    """403 carrying the subscribe call-to-action."""
    body = InsufficientQuotaResponse(subscribe_url=settings.subscribe_url)
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=body.model_dump(by_alias=True),
    )


def raise_for_failure(outcome: GateOutcome) -> None:
    """Raise the HTTP error matching a FAILED outcome; no-op otherwise."""
    if outcome.failure is None:
        return
    if outcome.failure.kind is FailureKind.INSUFFICIENT_QUOTA:
        raise insufficient_quota()
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=outcome.failure.message,
    )

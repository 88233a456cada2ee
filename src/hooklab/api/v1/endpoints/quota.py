# src/hooklab/api/v1/endpoints/quota.py
"""Quota endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from hooklab.api.v1.dependencies import LedgerDep, OracleDep
from hooklab.api.v1.errors import insufficient_quota
from hooklab.schemas.quota import QuotaConsumeRequest, QuotaConsumeResponse, QuotaResponse
from hooklab.services.quota import (
    UNLIMITED_CREDITS,
    InsufficientQuotaError,
    QuotaLedger,
    QuotaLedgerError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quota", tags=["quota"])

WalletQuery = Annotated[str, Query(alias="walletAddress", min_length=1)]


def _ledger_unavailable(exc: QuotaLedgerError) -> HTTPException:
    logger.error("Quota ledger error: %s", exc)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Quota service unavailable, please retry",
    )


@router.get("", response_model=QuotaResponse)
async def get_quota(
    wallet_address: WalletQuery,
    ledger: LedgerDep,
    oracle: OracleDep,
) -> QuotaResponse:
    """Return the wallet's remaining credits, or -1 for premium wallets."""
    premium = await oracle.check(wallet_address)
    if premium.is_premium:
        return QuotaResponse(is_premium=True, remaining_credits=UNLIMITED_CREDITS)

    try:
        credits = ledger.get_quota(wallet_address)
    except QuotaLedgerError as exc:
        raise _ledger_unavailable(exc) from exc
    return QuotaResponse(is_premium=False, remaining_credits=credits)


@router.post("", response_model=QuotaConsumeResponse)
async def consume_quota(
    request: QuotaConsumeRequest,
    ledger: LedgerDep,
    oracle: OracleDep,
) -> QuotaConsumeResponse:
    """Spend one credit for a free-tier wallet; premium wallets are not charged."""
    premium = await oracle.check(request.wallet_address)
    if premium.is_premium:
        usage_logged = _log_usage(ledger, request)
        return QuotaConsumeResponse(
            is_premium=True,
            remaining_credits=UNLIMITED_CREDITS,
            message="Premium user - unlimited access",
            usage_logged=usage_logged,
        )

    try:
        credits = ledger.deduct(request.wallet_address)
    except InsufficientQuotaError as exc:
        raise insufficient_quota() from exc
    except QuotaLedgerError as exc:
        raise _ledger_unavailable(exc) from exc

    usage_logged = _log_usage(ledger, request)
    return QuotaConsumeResponse(
        is_premium=False,
        remaining_credits=credits,
        message=f"Quota deducted. {credits} credits remaining.",
        usage_logged=usage_logged,
    )


def _log_usage(ledger: QuotaLedger, request: QuotaConsumeRequest) -> bool:
    if not (request.selected_hook and request.topic):
        return False
    try:
        ledger.log_usage(request.wallet_address, request.topic, request.selected_hook)
    except QuotaLedgerError as exc:
        logger.warning("Usage log failed for %s: %s", request.wallet_address, exc)
        return False
    return True

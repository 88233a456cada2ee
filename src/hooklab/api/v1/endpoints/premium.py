# src/hooklab/api/v1/endpoints/premium.py
"""Premium subscription endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from sqlalchemy.exc import SQLAlchemyError

from hooklab.api.v1.dependencies import OracleDep, SessionDep
from hooklab.schemas.premium import (
    MonthlyPriceResponse,
    PremiumStatusResponse,
    PremiumVerifyRequest,
)
from hooklab.services.premium import (
    PremiumStatus,
    format_expiry_date,
    is_expiry_active,
    mirror_premium_status,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/premium", tags=["premium"])

WalletQuery = Annotated[str, Query(alias="walletAddress", min_length=1)]


def _to_response(premium: PremiumStatus) -> PremiumStatusResponse:
    return PremiumStatusResponse(
        is_premium=premium.is_premium,
        expiry_timestamp=premium.expiry_timestamp,
        expiry_date=premium.expiry_date,
        expiry_label=format_expiry_date(premium.expiry_timestamp),
        expiry_active=is_expiry_active(premium.expiry_timestamp),
    )


@router.get("/verify", response_model=PremiumStatusResponse)
async def get_premium_status(wallet_address: WalletQuery, oracle: OracleDep) -> PremiumStatusResponse:
    """Read the wallet's subscription state from the contract."""
    return _to_response(await oracle.check(wallet_address))


@router.post("/verify", response_model=PremiumStatusResponse)
async def verify_premium(
    request: PremiumVerifyRequest,
    oracle: OracleDep,
    db: SessionDep,
) -> PremiumStatusResponse:
    """Read the contract and refresh the stored premium record."""
    premium = await oracle.check(request.wallet_address)
    if premium.read_ok:
        try:
            mirror_premium_status(db, premium)
        except SQLAlchemyError as exc:
            logger.warning("Could not mirror premium status for %s: %s", request.wallet_address, exc)
    return _to_response(premium)


@router.get("/price", response_model=MonthlyPriceResponse)
async def get_monthly_price(oracle: OracleDep) -> MonthlyPriceResponse:
    """Return the monthly subscription price in wei."""
    return MonthlyPriceResponse(monthly_price_wei=await oracle.monthly_price())

"""Shared API dependencies wiring services to request scope."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from hooklab.db.session import get_db
from hooklab.services.gating import GatingWorkflow
from hooklab.services.gemini import GeminiClient, get_gemini_client
from hooklab.services.generation import ContentExpander, HookGenerator
from hooklab.services.premium import PremiumOracle, get_premium_oracle
from hooklab.services.quota import QuotaLedger
from hooklab.services.trends import NeynarClient, TrendSummarizer, get_neynar_client

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def get_oracle_dep() -> PremiumOracle:
    """Return the shared premium oracle."""
    return get_premium_oracle()


def get_gemini_dep() -> GeminiClient:
    """Return the shared model client."""
    return get_gemini_client()


def get_feed_dep() -> NeynarClient:
    """Return the shared feed client."""
    return get_neynar_client()


OracleDep = Annotated[PremiumOracle, Depends(get_oracle_dep)]
GeminiDep = Annotated[GeminiClient, Depends(get_gemini_dep)]
FeedDep = Annotated[NeynarClient, Depends(get_feed_dep)]


def get_ledger(db: SessionDep) -> QuotaLedger:
    """Return a quota ledger bound to the request session."""
    return QuotaLedger(db)


LedgerDep = Annotated[QuotaLedger, Depends(get_ledger)]


def get_workflow(
    db: SessionDep,
    ledger: LedgerDep,
    oracle: OracleDep,
    gemini: GeminiDep,
    feed: FeedDep,
) -> GatingWorkflow:
    """Assemble the gating workflow for one request."""
    return GatingWorkflow(
        db=db,
        oracle=oracle,
        hook_generator=HookGenerator(gemini),
        content_expander=ContentExpander(gemini),
        trends=TrendSummarizer(feed),
        ledger=ledger,
    )


WorkflowDep = Annotated[GatingWorkflow, Depends(get_workflow)]

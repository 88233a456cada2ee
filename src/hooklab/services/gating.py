"""Premium and quota gating around generation.

Each request walks a small state machine::

    CHECKING_PREMIUM -> PREMIUM_PATH | QUOTA_PATH -> GENERATING -> DONE
                                   (any) -> FAILED

The hooks phase only checks the balance; the reveal phase spends a credit
before the full post is expanded, then logs usage best-effort.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hooklab.schemas.hooks import HookCandidate
from hooklab.services.generation import (
    ContentExpander,
    Fallback,
    GenerationResult,
    HookGenerator,
)
from hooklab.services.premium import OracleError, PremiumOracle, mirror_premium_status
from hooklab.services.quota import (
    UNLIMITED_CREDITS,
    InsufficientQuotaError,
    QuotaLedger,
    QuotaLedgerError,
)
from hooklab.services.trends import TrendSummarizer, TrendSummary

logger = logging.getLogger(__name__)


class GateState(Enum):
    """States of a single gated generation request."""

    CHECKING_PREMIUM = "checking_premium"
    PREMIUM_PATH = "premium_path"
    QUOTA_PATH = "quota_path"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


class Phase(Enum):
    """Step of the blind-selection flow a request belongs to."""

    HOOKS = "hooks"
    REVEAL = "reveal"


class FailureKind(Enum):
    """Why a request ended in FAILED."""

    INSUFFICIENT_QUOTA = "insufficient_quota"
    UPSTREAM = "upstream"


@dataclass
class GateFailure:
    """Terminal failure with a user-facing message."""

    kind: FailureKind
    message: str

    @property
    def user_actionable(self) -> bool:
        return self.kind is FailureKind.INSUFFICIENT_QUOTA


@dataclass
class GateOutcome:
    """Everything a caller needs to render the result of a gated request."""

    phase: Phase
    state: GateState = GateState.CHECKING_PREMIUM
    transitions: list[GateState] = field(default_factory=lambda: [GateState.CHECKING_PREMIUM])
    is_premium: bool = False
    remaining_credits: int | None = None
    result: GenerationResult[Any] | None = None
    trend: TrendSummary | None = None
    failure: GateFailure | None = None
    usage_logged: bool = False

    def advance(self, state: GateState) -> None:
        self.state = state
        self.transitions.append(state)

    def fail(self, kind: FailureKind, message: str) -> GateOutcome:
        self.failure = GateFailure(kind=kind, message=message)
        self.advance(GateState.FAILED)
        return self

    @property
    def ok(self) -> bool:
        return self.state is GateState.DONE

    @property
    def is_fallback(self) -> bool:
        return isinstance(self.result, Fallback)


class GatingWorkflow:
    """Orchestrates oracle, ledger, generators and usage logging."""

    def __init__(
        self,
        *,
        db: Session,
        oracle: PremiumOracle,
        hook_generator: HookGenerator,
        content_expander: ContentExpander,
        trends: TrendSummarizer,
        ledger: QuotaLedger | None = None,
    ) -> None:
        self.db = db
        self.oracle = oracle
        self.hook_generator = hook_generator
        self.content_expander = content_expander
        self.trends = trends
        self.ledger = ledger or QuotaLedger(db)

    async def check_premium(self, wallet_address: str) -> bool:
        """Read premium status; any failure means free tier."""
        try:
            status = await self.oracle.check(wallet_address)
        except OracleError as exc:
            logger.warning("Premium check failed for %s, using free tier: %s", wallet_address, exc)
            return False

        if status.read_ok:
            try:
                mirror_premium_status(self.db, status)
            except SQLAlchemyError as exc:
                logger.warning("Could not mirror premium status for %s: %s", wallet_address, exc)
        return status.is_premium

    async def _gate(self, outcome: GateOutcome, wallet_address: str, *, spend: bool) -> bool:
        """Run the premium and quota steps. Returns False once FAILED."""
        outcome.is_premium = await self.check_premium(wallet_address)
        if outcome.is_premium:
            outcome.advance(GateState.PREMIUM_PATH)
            outcome.remaining_credits = UNLIMITED_CREDITS
            return True

        outcome.advance(GateState.QUOTA_PATH)
        try:
            if spend:
                outcome.remaining_credits = self.ledger.deduct(wallet_address)
            else:
                outcome.remaining_credits = self.ledger.get_quota(wallet_address)
                if outcome.remaining_credits <= 0:
                    raise InsufficientQuotaError(wallet_address)
        except InsufficientQuotaError:
            outcome.remaining_credits = 0
            outcome.fail(FailureKind.INSUFFICIENT_QUOTA, "Subscribe to get unlimited access")
            return False
        except QuotaLedgerError as exc:
            logger.error("Quota ledger unavailable for %s: %s", wallet_address, exc)
            outcome.fail(FailureKind.UPSTREAM, "Quota service unavailable, please retry")
            return False
        return True

    async def generate_hooks(self, topic: str, wallet_address: str | None = None) -> GateOutcome:
        """Produce hook candidates; the balance is checked but not spent."""
        outcome = GateOutcome(phase=Phase.HOOKS)
        if wallet_address is not None:
            if not await self._gate(outcome, wallet_address, spend=False):
                return outcome

        outcome.advance(GateState.GENERATING)
        outcome.trend = await self.trends.fetch_summary()
        outcome.result = await self.hook_generator.generate(topic, outcome.trend.text)
        outcome.advance(GateState.DONE)
        return outcome

    async def reveal(self, wallet_address: str, topic: str, selected_hook: str) -> GateOutcome:
        """Spend a credit (unless premium), expand the hook and log usage."""
        outcome = GateOutcome(phase=Phase.REVEAL)
        if not await self._gate(outcome, wallet_address, spend=True):
            return outcome

        outcome.advance(GateState.GENERATING)
        outcome.trend = await self.trends.fetch_summary()
        outcome.result = await self.content_expander.generate(
            selected_hook, topic, outcome.trend.text
        )
        outcome.advance(GateState.DONE)

        # Not atomic with the deduction above; a failed log keeps the spent credit.
        try:
            self.ledger.log_usage(wallet_address, topic, selected_hook)
            outcome.usage_logged = True
        except QuotaLedgerError as exc:
            logger.warning("Usage log failed for %s: %s", wallet_address, exc)
        return outcome


def hooks_of(outcome: GateOutcome) -> list[HookCandidate]:
    """Return hook candidates from a completed hooks-phase outcome."""
    if outcome.phase is not Phase.HOOKS or outcome.result is None:
        raise ValueError("Outcome does not carry hook candidates")
    return list(outcome.result.content)

# src/hooklab/services/quota.py
"""Free-tier credit ledger keyed by wallet address."""

from __future__ import annotations

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from hooklab.core.settings import settings
from hooklab.db.time import utcnow
from hooklab.models import Quota, UsageLog

logger = logging.getLogger(__name__)

UNLIMITED_CREDITS = -1


class QuotaLedgerError(RuntimeError):
    """Raised when the ledger store cannot be read or written."""


class InsufficientQuotaError(QuotaLedgerError):
    """Raised when a wallet has no credits left to spend."""

    def __init__(self, wallet_address: str) -> None:
        super().__init__("Insufficient quota")
        self.wallet_address = wallet_address


def normalize_wallet(wallet_address: str) -> str:
    """Return the canonical ledger key for a wallet address."""
    return wallet_address.strip().lower()


class QuotaLedger:
    """Read, spend and log credits for wallets.

    Deductions and usage logs are independent writes; a failed log never
    restores a spent credit.
    """

    def __init__(self, db: Session, *, default_credits: int | None = None) -> None:
        self.db = db
        self.default_credits = (
            settings.default_credits if default_credits is None else default_credits
        )

    def _get_or_create(self, wallet: str) -> Quota:
        quota = (
            self.db.query(Quota)
            .filter(Quota.wallet_address == wallet)
            .populate_existing()
            .first()
        )
        if quota is not None:
            return quota

        quota = Quota(wallet_address=wallet, remaining_credits=self.default_credits)
        self.db.add(quota)
        try:
            self.db.commit()
        except IntegrityError:
            # Another request created the row first.
            self.db.rollback()
            quota = self.db.query(Quota).filter(Quota.wallet_address == wallet).one()
        return quota

    def get_quota(self, wallet_address: str) -> int:
        """Return the remaining credits, creating the record on first access."""
        wallet = normalize_wallet(wallet_address)
        try:
            return int(self._get_or_create(wallet).remaining_credits)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise QuotaLedgerError(f"Failed to read quota: {exc}") from exc

    def deduct(self, wallet_address: str) -> int:
        """Spend one credit and return the new balance.

        The decrement is a single conditional UPDATE so concurrent requests
        can never spend the same credit twice or drive the balance negative.
        The returned balance is the one this UPDATE wrote.

        Raises:
            InsufficientQuotaError: If the balance is already zero.
            QuotaLedgerError: If the store fails.
        """
        wallet = normalize_wallet(wallet_address)
        try:
            self._get_or_create(wallet)
            result = self.db.execute(
                update(Quota)
                .where(Quota.wallet_address == wallet, Quota.remaining_credits > 0)
                .values(
                    remaining_credits=Quota.remaining_credits - 1,
                    updated_at=utcnow(),
                )
                .returning(Quota.remaining_credits)
                .execution_options(synchronize_session=False)
            )
            balance = result.scalar_one_or_none()
            if balance is None:
                self.db.rollback()
                raise InsufficientQuotaError(wallet)
            self.db.commit()
            return int(balance)
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise QuotaLedgerError(f"Failed to deduct quota: {exc}") from exc

    def log_usage(self, wallet_address: str, topic: str, selected_hook: str) -> UsageLog:
        """Append a usage event."""
        entry = UsageLog(
            wallet_address=normalize_wallet(wallet_address),
            topic=topic,
            selected_hook=selected_hook,
        )
        try:
            self.db.add(entry)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise QuotaLedgerError(f"Failed to log usage: {exc}") from exc
        return entry

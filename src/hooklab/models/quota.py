# src/hooklab/models/quota.py
"""Free-tier credit balances."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from hooklab.db.session import Base
from hooklab.db.time import utcnow


class Quota(Base):
    """Remaining free credits for a wallet."""

    __tablename__ = "quotas"
    __table_args__ = (
        CheckConstraint("remaining_credits >= 0", name="ck_quotas_credits_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    wallet_address: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    remaining_credits: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

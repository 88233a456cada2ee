"""Engine and session factory for the ledger store."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hooklab.core.settings import settings


class Base(DeclarativeBase):
    """Declarative base for quota, premium and usage tables."""


# Models register themselves on Base.metadata at import time.
import hooklab.models  # noqa: E402,F401


def build_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine, adjusting pool options for SQLite.

    In-memory SQLite lives on a single connection, so it gets a StaticPool
    shared across threads; every other URL uses the default pool with
    pre-ping.
    """
    options: dict[str, Any] = {"echo": echo}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return create_engine(url, **options)


engine = build_engine(settings.effective_database_url, echo=settings.sql_debug)

SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Generator[Session, None, None]:
    """Request-scoped session; uncommitted work is rolled back on error."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables() -> None:
    Base.metadata.create_all(bind=engine)

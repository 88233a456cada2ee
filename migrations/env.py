"""Alembic environment for the HookLab ledger tables."""
from __future__ import annotations

import os
import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import engine_from_config, pool

SRC_ROOT = Path(__file__).resolve().parents[1] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from hooklab.core.settings import settings  # noqa: E402
from hooklab.db.session import Base  # noqa: E402

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# ALEMBIC_URL wins over alembic.ini, which wins over the app settings.
database_url = os.getenv("ALEMBIC_URL") or config.get_main_option("sqlalchemy.url")
if not database_url:
    database_url = settings.database_url_sync
config.set_main_option("sqlalchemy.url", database_url)

target_metadata = Base.metadata


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def _configure_kwargs(url: str) -> dict:
    # SQLite cannot ALTER constraints in place; batch mode recreates tables.
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "render_as_batch": _is_sqlite(url),
    }


def run_migrations_offline() -> None:
    """Emit SQL for the ledger schema without a live connection."""
    context.configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_kwargs(database_url),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **_configure_kwargs(database_url))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()

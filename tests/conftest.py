# tests/conftest.py
from __future__ import annotations

import json
import os
from collections.abc import Iterator
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

from hooklab.api.v1 import dependencies as deps
from hooklab.db.session import Base, build_engine
from hooklab.db.session import get_db as app_get_session
from hooklab.main import app as fastapi_app
from hooklab.models import Quota
from hooklab.services.gemini import GeminiClient, GeminiConfig
from hooklab.services.premium import OracleError, PremiumOracle
from hooklab.services.quota import QuotaLedger, normalize_wallet
from hooklab.services.trends import NeynarClient

FIVE_HOOKS = "\n".join(
    [
        "Here are your hooks:",
        "1. Base gas just hit a new low and nobody noticed",
        "2. The onchain summer playbook nobody is talking about",
        "3. I bridged $50 to Base and this happened",
        "4. Stop farming points. Start building reputation.",
        "5. Three Base apps that quietly hit 10k users",
    ]
)


@pytest.fixture(scope="session")
def engine() -> Iterator[Engine]:
    ledger_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=ledger_engine)
    yield ledger_engine
    ledger_engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    """Session whose committed rows are wiped after each test."""
    session = Session(bind=engine, autoflush=False, expire_on_commit=False)
    yield session
    session.close()
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def ledger(db_session: Session) -> QuotaLedger:
    return QuotaLedger(db_session, default_credits=5)


@pytest.fixture()
def set_balance(db_session: Session, ledger: QuotaLedger):
    """Force a wallet's balance to a given value."""

    def _set(wallet: str, credits: int) -> None:
        ledger.get_quota(wallet)
        quota = db_session.query(Quota).filter(
            Quota.wallet_address == normalize_wallet(wallet)
        ).one()
        quota.remaining_credits = credits
        db_session.commit()

    return _set


class FakeOracle(PremiumOracle):
    """Oracle whose contract reads come from in-memory tables."""

    def __init__(self) -> None:
        super().__init__(
            rpc_url="http://rpc.invalid",
            contract_address="0x" + "11" * 20,
        )
        self.premium: dict[str, bool] = {}
        self.expiries: dict[str, int] = {}
        self.failing: set[str] = set()
        self.price: int | None = None
        self.reads: list[str] = []

    def _lookup(self, address: str) -> str:
        key = normalize_wallet(address)
        self.reads.append(key)
        if key in self.failing:
            raise OracleError("rpc unavailable")
        return key

    async def is_premium_active(self, address: str) -> bool:
        return self.premium.get(self._lookup(address), False)

    async def expiry(self, address: str) -> int:
        return self.expiries.get(self._lookup(address), 0)

    async def _call(self, function_name: str, *args: Any) -> Any:
        if function_name == "MONTHLY_PRICE" and self.price is not None:
            return self.price
        raise OracleError(f"{function_name} read failed: rpc unavailable")


class ModelStub:
    """Answers generateContent calls with canned text or an error status."""

    def __init__(self) -> None:
        self.text: str = FIVE_HOOKS
        self.status_code: int = 200
        self.prompts: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.prompts.append(body["contents"][0]["parts"][0]["text"])
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": {"message": "boom"}})
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": self.text}]}}]},
        )


class FeedStub:
    """Serves a channel feed payload or an error status."""

    def __init__(self) -> None:
        self.casts: list[dict[str, Any]] = []
        self.status_code: int = 200
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"message": "unavailable"})
        return httpx.Response(200, json={"casts": self.casts})


def make_cast(
    text: str,
    *,
    likes: int = 0,
    recasts: int = 0,
    replies: int = 0,
    followers: int | None = 100,
    cast_hash: str = "0xabc",
) -> dict[str, Any]:
    return {
        "hash": cast_hash,
        "text": text,
        "author": {
            "username": "alice",
            "display_name": "Alice",
            "follower_count": followers,
        },
        "reactions": {"likes_count": likes, "recasts_count": recasts},
        "replies": {"count": replies},
        "timestamp": "2026-10-01T12:00:00Z",
    }


@pytest.fixture()
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture()
def model() -> ModelStub:
    return ModelStub()


@pytest.fixture()
def gemini(model: ModelStub) -> GeminiClient:
    config = GeminiConfig(
        api_key="test-key",
        base_url="http://gemini.test/v1beta",
        model="gemini-pro",
        timeout_seconds=5.0,
        generation_config={"temperature": 0.9},
    )
    return GeminiClient(config, transport=httpx.MockTransport(model.handler))


@pytest.fixture()
def feed_stub() -> FeedStub:
    return FeedStub()


@pytest.fixture()
def feed(feed_stub: FeedStub) -> NeynarClient:
    return NeynarClient(
        api_key="neynar-key",
        base_url="http://neynar.test/v2",
        transport=httpx.MockTransport(feed_stub.handler),
    )


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def override_collaborators(
    app: FastAPI,
    oracle: FakeOracle,
    gemini: GeminiClient,
    feed: NeynarClient,
) -> Iterator[None]:
    """Swap the oracle, model and feed clients for test doubles."""
    overrides = {
        deps.get_oracle_dep: lambda: oracle,
        deps.get_gemini_dep: lambda: gemini,
        deps.get_feed_dep: lambda: feed,
    }
    app.dependency_overrides.update(overrides)
    try:
        yield
    finally:
        for dependency in overrides:
            app.dependency_overrides.pop(dependency, None)


@pytest.fixture()
def client(app: FastAPI, override_collaborators: None) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client

# tests/v1/test_hooks_api.py
"""Tests for the hook generation endpoint."""

from fastapi import status

from tests.conftest import make_cast


def test_generate_hooks_anonymous(client, model) -> None:
    """Without a wallet no gate runs and hooks come back camelCased."""
    response = client.post("/api/v1/hooks/generate", json={"topic": "Base"})
    assert response.status_code == status.HTTP_200_OK

    data = response.json()
    assert data["success"] is True
    assert data["source"] == "generated"
    assert data["trendDataAvailable"] is True
    assert len(data["hooks"]) == 5
    assert set(data["hooks"][0]) == {"id", "hook"}
    assert data["remainingCredits"] is None
    assert "TOPIC: Base" in model.prompts[0]


def test_generate_hooks_uses_trend_digest(client, model, feed_stub) -> None:
    feed_stub.casts = [make_cast("Base fees are tiny. Here is proof", likes=40, recasts=5)]

    response = client.post("/api/v1/hooks/generate", json={"topic": "Base"})

    assert response.status_code == status.HTTP_200_OK
    assert '"Base fees are tiny"' in model.prompts[0]


def test_generate_hooks_checks_balance_without_spending(client, ledger) -> None:
    response = client.post(
        "/api/v1/hooks/generate",
        json={"topic": "DeFi", "walletAddress": "0xAAA"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["isPremium"] is False
    assert data["remainingCredits"] == 5
    assert ledger.get_quota("0xAAA") == 5


def test_generate_hooks_exhausted_wallet_gets_403(client, set_balance, model) -> None:
    set_balance("0xAAA", 0)

    response = client.post(
        "/api/v1/hooks/generate",
        json={"topic": "DeFi", "walletAddress": "0xAAA"},
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN
    detail = response.json()["detail"]
    assert detail["error"] == "Insufficient quota"
    assert detail["remainingCredits"] == 0
    assert detail["subscribeUrl"]
    assert model.prompts == []


def test_generate_hooks_falls_back_when_model_fails(client, model) -> None:
    model.status_code = 500

    response = client.post("/api/v1/hooks/generate", json={"topic": "NFTs"})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["source"] == "fallback"
    assert all("NFTs" in item["hook"] for item in data["hooks"])


def test_generate_hooks_reports_missing_trend_data(client, feed_stub) -> None:
    feed_stub.status_code = 502
    response = client.post("/api/v1/hooks/generate", json={"topic": "Base"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["trendDataAvailable"] is False


def test_generate_hooks_rejects_blank_topic(client) -> None:
    response = client.post("/api/v1/hooks/generate", json={"topic": "   "})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_generate_hooks_survives_malformed_feed(client, feed_stub) -> None:
    feed_stub.casts = {"unexpected": "shape"}

    response = client.post("/api/v1/hooks/generate", json={"topic": "Base"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["trendDataAvailable"] is False


def test_generate_hooks_rejects_overlong_topic(client) -> None:
    response = client.post("/api/v1/hooks/generate", json={"topic": "t" * 81})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

# tests/v1/test_quota_api.py
"""Tests for quota endpoints."""

from fastapi import status

from hooklab.models import UsageLog


def test_get_quota_for_new_wallet(client) -> None:
    response = client.get("/api/v1/quota", params={"walletAddress": "0xNEW"})
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"isPremium": False, "remainingCredits": 5}


def test_get_quota_for_premium_wallet(client, oracle) -> None:
    oracle.premium["0xppp"] = True
    response = client.get("/api/v1/quota", params={"walletAddress": "0xPPP"})
    assert response.json() == {"isPremium": True, "remainingCredits": -1}


def test_get_quota_requires_wallet(client) -> None:
    response = client.get("/api/v1/quota")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_consume_quota_logs_when_hook_given(client, db_session) -> None:
    response = client.post(
        "/api/v1/quota",
        json={"walletAddress": "0xAAA", "selectedHook": "gm Base", "topic": "Base"},
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["remainingCredits"] == 4
    assert data["message"] == "Quota deducted. 4 credits remaining."
    assert data["usageLogged"] is True
    assert db_session.query(UsageLog).count() == 1


def test_consume_quota_without_hook_skips_log(client, db_session) -> None:
    response = client.post("/api/v1/quota", json={"walletAddress": "0xAAA"})
    assert response.json()["usageLogged"] is False
    assert db_session.query(UsageLog).count() == 0


def test_consume_quota_at_zero_is_forbidden(client, set_balance, ledger) -> None:
    set_balance("0xDDD", 0)

    response = client.post("/api/v1/quota", json={"walletAddress": "0xDDD"})

    assert response.status_code == status.HTTP_403_FORBIDDEN
    detail = response.json()["detail"]
    assert detail["error"] == "Insufficient quota"
    assert detail["isPremium"] is False
    assert ledger.get_quota("0xDDD") == 0


def test_consume_quota_premium_is_free(client, oracle, ledger) -> None:
    oracle.premium["0xppp"] = True

    response = client.post("/api/v1/quota", json={"walletAddress": "0xPPP"})

    data = response.json()
    assert data["remainingCredits"] == -1
    assert data["message"] == "Premium user - unlimited access"
    assert ledger.get_quota("0xPPP") == 5

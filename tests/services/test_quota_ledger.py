"""Tests for the quota ledger."""

import pytest
from sqlalchemy import update
from sqlalchemy.exc import OperationalError

from hooklab.models import Quota, UsageLog
from hooklab.services.quota import (
    InsufficientQuotaError,
    QuotaLedger,
    QuotaLedgerError,
    normalize_wallet,
)


def test_first_access_grants_default_credits(ledger: QuotaLedger, db_session) -> None:
    assert ledger.get_quota("0xNEW") == 5
    assert db_session.query(Quota).count() == 1
    # A second read does not create another record.
    assert ledger.get_quota("0xnew") == 5
    assert db_session.query(Quota).count() == 1


def test_default_credits_is_configurable(db_session) -> None:
    assert QuotaLedger(db_session, default_credits=2).get_quota("0xabc") == 2


def test_wallet_keys_are_case_insensitive() -> None:
    assert normalize_wallet("  0xAbCd ") == "0xabcd"


def test_deduct_decrements_by_one(ledger: QuotaLedger, set_balance) -> None:
    set_balance("0xCCC", 3)
    assert ledger.deduct("0xCCC") == 2
    assert ledger.get_quota("0xCCC") == 2


def test_deduct_at_zero_fails_and_keeps_balance(ledger: QuotaLedger, set_balance) -> None:
    set_balance("0xDDD", 0)
    with pytest.raises(InsufficientQuotaError) as excinfo:
        ledger.deduct("0xDDD")
    assert str(excinfo.value) == "Insufficient quota"
    assert ledger.get_quota("0xDDD") == 0


def test_scenario_last_credit_then_refused(ledger: QuotaLedger, set_balance) -> None:
    set_balance("0xAAA", 1)
    assert ledger.deduct("0xAAA") == 0
    with pytest.raises(InsufficientQuotaError):
        ledger.deduct("0xAAA")
    assert ledger.get_quota("0xAAA") == 0


def test_credits_never_go_negative(ledger: QuotaLedger) -> None:
    spent = 0
    for _ in range(8):
        try:
            ledger.deduct("0xEEE")
            spent += 1
        except InsufficientQuotaError:
            pass
    assert spent == 5
    assert ledger.get_quota("0xEEE") == 0


def test_stale_reader_cannot_overspend(ledger: QuotaLedger, db_session, set_balance) -> None:
    set_balance("0xFFF", 1)
    # A second ledger sharing the store reads the balance before either writes.
    other = QuotaLedger(db_session, default_credits=5)
    assert other.get_quota("0xFFF") == 1

    assert ledger.deduct("0xFFF") == 0
    with pytest.raises(InsufficientQuotaError):
        other.deduct("0xFFF")


def test_log_usage_appends(ledger: QuotaLedger, db_session) -> None:
    ledger.log_usage("0xAAA", "DeFi", "Hot take: DeFi is underrated")
    ledger.log_usage("0xAAA", "DeFi", "The DeFi meta is shifting")

    rows = db_session.query(UsageLog).order_by(UsageLog.id).all()
    assert [row.selected_hook for row in rows] == [
        "Hot take: DeFi is underrated",
        "The DeFi meta is shifting",
    ]
    assert rows[0].wallet_address == "0xaaa"
    assert rows[0].created_at is not None


def test_log_usage_failure_does_not_refund(ledger: QuotaLedger, db_session, mocker) -> None:
    assert ledger.deduct("0xAAA") == 4
    mocker.patch.object(
        db_session,
        "commit",
        side_effect=OperationalError("INSERT", {}, Exception("disk full")),
    )
    with pytest.raises(QuotaLedgerError):
        ledger.log_usage("0xAAA", "DeFi", "hook")
    mocker.stopall()

    assert ledger.get_quota("0xAAA") == 4
    assert db_session.query(UsageLog).count() == 0


def test_store_failure_is_wrapped(ledger: QuotaLedger, db_session, mocker) -> None:
    mocker.patch.object(
        db_session,
        "query",
        side_effect=OperationalError("SELECT", {}, Exception("connection lost")),
    )
    with pytest.raises(QuotaLedgerError) as excinfo:
        ledger.get_quota("0xAAA")
    assert not isinstance(excinfo.value, InsufficientQuotaError)


def test_deduct_returns_balance_written_by_its_own_update(
    ledger: QuotaLedger, db_session, engine, set_balance, mocker
) -> None:
    set_balance("0xAAA", 5)
    commit = db_session.commit

    def commit_then_other_spend() -> None:
        commit()
        with engine.begin() as conn:
            conn.execute(
                update(Quota)
                .where(Quota.wallet_address == "0xaaa")
                .values(remaining_credits=Quota.remaining_credits - 1)
            )

    mocker.patch.object(db_session, "commit", side_effect=commit_then_other_spend)
    assert ledger.deduct("0xAAA") == 4
    mocker.stopall()

    assert ledger.get_quota("0xAAA") == 3

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.exceptions import PersistenceFailure
from services.history_service import WinnerHistoryLedger, append_winner, read_winners


def test_append_and_read_in_order(ledger):
    ledger.append("alice", 3, "sig-1")
    ledger.append("bob", 4, None)

    records = ledger.read_all()

    assert [r.participant_id for r in records] == ["alice", "bob"]
    assert records[0].transfer_receipt == "sig-1"
    assert records[1].transfer_receipt is None
    assert records[1].series_win_count == 4
    assert all(r.timestamp > 0 for r in records)


def test_empty_receipt_is_stored_as_null(session_factory):
    db = session_factory()
    try:
        append_winner(db, "carol", 3, "")
        (record,) = read_winners(db)
        assert record.transfer_receipt is None
    finally:
        db.close()


def test_append_failure_raises_persistence_failure():
    # no tables created on this engine
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    ledger = WinnerHistoryLedger(sessionmaker(bind=engine))

    with pytest.raises(PersistenceFailure):
        ledger.append("alice", 3, "sig-1")

    with pytest.raises(PersistenceFailure):
        ledger.read_all()

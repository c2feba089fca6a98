"""
Winner history service.

Append-only ledger of series winners, persisted through SQLAlchemy so
the spectator API can serve the authoritative record straight from the
database.
"""
import time
from typing import Callable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.exceptions import PersistenceFailure
from database import SessionLocal, transactional
from models import WinnerRecord


@transactional
def append_winner(
    db: Session,
    participant_id: str,
    series_win_count: int,
    transfer_receipt: Optional[str] = None,
    timestamp: Optional[float] = None,
) -> WinnerRecord:
    record = WinnerRecord(
        participant_id=participant_id,
        series_win_count=series_win_count,
        transfer_receipt=transfer_receipt or None,
        timestamp=timestamp if timestamp is not None else time.time(),
    )
    db.add(record)
    db.flush()
    return record


def read_winners(db: Session) -> List[WinnerRecord]:
    """Every winner record, oldest first."""
    return (
        db.query(WinnerRecord)
        .order_by(WinnerRecord.id)
        .all()
    )


class WinnerHistoryLedger:
    """Session-owning wrapper used by the series controller."""

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def append(
        self,
        participant_id: str,
        series_win_count: int,
        transfer_receipt: Optional[str] = None,
    ) -> WinnerRecord:
        db = self.session_factory()
        try:
            record = append_winner(db, participant_id, series_win_count, transfer_receipt)
            db.refresh(record)
            db.expunge(record)
            return record
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to record winner {participant_id}: {e}") from e
        finally:
            db.close()

    def read_all(self) -> List[WinnerRecord]:
        db = self.session_factory()
        try:
            records = read_winners(db)
            for record in records:
                db.expunge(record)
            return records
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Failed to read winner history: {e}") from e
        finally:
            db.close()

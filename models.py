"""
資料模型

- WinnerRecord：系列賽冠軍紀錄（append-only，寫入後不再修改）
- 列舉：FeedbackSymbol、SeriesPhase、ParticipantStatus、TransferStatus
"""
import enum
import time

from sqlalchemy import Column, String, Integer, Float

from database import Base


class FeedbackSymbol(str, enum.Enum):
    """單一字母的比對結果"""
    EXACT = "🟩"
    PRESENT = "🟨"
    ABSENT = "⬜"


class SeriesPhase(str, enum.Enum):
    """系列賽狀態"""
    ACTIVE = "ACTIVE"
    ROUND_EVALUATING = "ROUND_EVALUATING"
    ENDING = "ENDING"


class ParticipantStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransferStatus(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"


class WinnerRecord(Base):
    __tablename__ = "winner_records"

    # 自動遞增，同時代表寫入順序
    id = Column(Integer, primary_key=True, autoincrement=True)
    participant_id = Column(String(128), nullable=False, index=True)
    series_win_count = Column(Integer, nullable=False)
    timestamp = Column(Float, nullable=False, default=time.time)
    # 轉帳失敗時為 NULL
    transfer_receipt = Column(String(256), nullable=True)

    def __repr__(self):
        return (
            f"<WinnerRecord participant={self.participant_id} "
            f"wins={self.series_win_count} receipt={self.transfer_receipt}>"
        )

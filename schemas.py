"""
Pydantic schemas

- 外部服務的資料格式（參賽者名單、猜測回覆、轉帳結果）
- 觀戰 API 的 response model
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, AliasChoices

from models import ParticipantStatus, TransferStatus


# ============ 外部服務 ============

class ParticipantEntry(BaseModel):
    """名單服務回傳的一筆參賽者資料"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", "subscriber", "participant_id"))
    endpoint: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("endpoint", "recipient")
    )
    status: str = ParticipantStatus.ACTIVE.value

    @property
    def is_reachable(self) -> bool:
        return self.status == ParticipantStatus.ACTIVE.value and bool(self.endpoint)


class GuessReply(BaseModel):
    guess: str


class TransferResult(BaseModel):
    status: TransferStatus
    receipt: Optional[str] = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == TransferStatus.SUCCESS and bool(self.receipt)


# ============ 觀戰 API ============

class BoardStateResponse(BaseModel):
    guesses: List[str]
    feedback: List[str]
    guess_count: int
    complete: bool
    won_round: bool


class PlayerBoardResponse(BaseModel):
    participant_id: str
    board: BoardStateResponse
    wins: int
    history: List[bool]


class GameStateResponse(BaseModel):
    round_number: int
    round_start_time: float
    round_duration: float
    phase: str
    last_word: Optional[str] = None
    last_winner: Optional[str] = None
    win_counts: Dict[str, int]
    players: List[PlayerBoardResponse]


class PlayerHistoryResponse(BaseModel):
    participant_id: str
    results: List[bool]


class PlayerCountResponse(BaseModel):
    player_count: int


class WinnerRecordResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    participant_id: str
    series_win_count: int
    timestamp: float
    transfer_receipt: Optional[str] = None


class WinnersResponse(BaseModel):
    winners: List[WinnerRecordResponse]

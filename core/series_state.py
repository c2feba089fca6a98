"""
SeriesState：一個系列賽的完整遊戲狀態

只由 SeriesController 持有與修改；系列賽結束時整個換掉
"""
import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Set

from core.board_store import BoardStateStore
from models import SeriesPhase


@dataclass
class SeriesState:
    current_word: str
    board_states: BoardStateStore
    last_word: Optional[str] = None
    round_start_time: float = field(default_factory=time.time)
    win_counts: Dict[str, int] = field(default_factory=dict)
    round_winners: Set[str] = field(default_factory=set)
    round_number: int = 1
    active: bool = True
    phase: SeriesPhase = SeriesPhase.ACTIVE

    @classmethod
    def fresh(cls, word: str, max_guesses: int) -> "SeriesState":
        return cls(current_word=word, board_states=BoardStateStore(max_guesses))

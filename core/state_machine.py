"""
系列賽狀態機：集中管理所有狀態轉換

ACTIVE -> ROUND_EVALUATING -> ACTIVE（下一回合）
                           -> ENDING（產生冠軍）

ENDING 是終點：系列賽結束後由 SeriesController 建立全新的 SeriesState（ACTIVE）
"""
import logging

from core.exceptions import InvalidStateTransition
from models import SeriesPhase

logger = logging.getLogger(__name__)


class SeriesStateMachine:
    TRANSITIONS = {
        SeriesPhase.ACTIVE: {SeriesPhase.ROUND_EVALUATING},
        SeriesPhase.ROUND_EVALUATING: {SeriesPhase.ACTIVE, SeriesPhase.ENDING},
        SeriesPhase.ENDING: set(),
    }

    @classmethod
    def can_transition(cls, current: SeriesPhase, new: SeriesPhase) -> bool:
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def transition(cls, state, new_phase: SeriesPhase):
        """
        轉換 SeriesState 的狀態

        參數：
            state: SeriesState
            new_phase: 目標狀態

        返回：
            同一個 state（已更新）

        異常：
            InvalidStateTransition: 不允許的轉換
        """
        current = state.phase
        if not cls.can_transition(current, new_phase):
            raise InvalidStateTransition(
                f"Cannot transition series from {current.value} to {new_phase.value}"
            )

        state.phase = new_phase
        state.active = new_phase != SeriesPhase.ENDING
        logger.debug(
            f"Series phase {current.value} -> {new_phase.value} (round {state.round_number})"
        )
        return state

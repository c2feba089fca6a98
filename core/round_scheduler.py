"""
Round Scheduler：驅動單一回合的計時器與 guess cycle

一個回合內有兩個計時器：
1. round timer：單次，ROUND_DURATION 後結束回合
2. guess cycle：每 GUESS_INTERVAL 向所有 active 參賽者推播 BoardState 並收集猜測

回合在以下任一條件先發生時結束：
- round timer 到期
- 所有 BoardState 都已完成（贏了或用完次數）

結束時兩個計時器都會被取消並確認結束，run_round 才會返回
"""
import asyncio
import enum
import logging
from typing import List, Optional

from core.exceptions import DirectoryUnavailable
from core.locks import RoundLock
from core.series_state import SeriesState
from core.timers import TimerSlots
from schemas import ParticipantEntry
from services.evaluator_service import (
    feedback_to_string,
    is_winning_feedback,
    score,
    validate_guess,
)

logger = logging.getLogger(__name__)

ROUND_TIMER = "round_timer"
GUESS_CYCLE = "guess_cycle"
COMPLETION_WATCH = "completion_watch"


class RoundEndReason(str, enum.Enum):
    TIMEOUT = "timeout"
    ALL_COMPLETE = "all_complete"


class RoundScheduler:
    def __init__(
        self,
        directory,
        participant_client,
        round_duration: float,
        guess_interval: float,
        word_length: int,
        participant_timeout: float = 8.0,
    ):
        self.directory = directory
        self.participant_client = participant_client
        self.round_duration = round_duration
        self.guess_interval = guess_interval
        self.word_length = word_length
        self.participant_timeout = participant_timeout
        self.timers = TimerSlots()
        self.round_lock = RoundLock()

    async def run_round(self, state: SeriesState) -> RoundEndReason:
        """
        跑完一整個回合

        流程：
        1. 取得回合鎖（上一回合的計時器必須已經取消）
        2. 建立 round timer 與 guess cycle
        3. 等待 timer 到期或全員完成
        4. 取消所有計時器並等待結束

        返回：
            RoundEndReason
        """
        async with self.round_lock.hold(state.round_number):
            completed = asyncio.Event()
            logger.info(
                f"Round {state.round_number} started "
                f"(duration={self.round_duration}s, interval={self.guess_interval}s)"
            )

            round_timer = await self.timers.arm(ROUND_TIMER, asyncio.sleep(self.round_duration))
            watch = await self.timers.arm(COMPLETION_WATCH, completed.wait())
            await self.timers.arm(GUESS_CYCLE, self._guess_cycle_loop(state, completed))

            try:
                await asyncio.wait(
                    {round_timer.task, watch.task},
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                await self.cancel_timers()

            reason = RoundEndReason.ALL_COMPLETE if completed.is_set() else RoundEndReason.TIMEOUT
            logger.info(
                f"Round {state.round_number} ended ({reason.value}), "
                f"winners={sorted(state.round_winners)}"
            )
            return reason

    async def cancel_timers(self) -> None:
        await self.timers.cancel_all()

    async def _guess_cycle_loop(self, state: SeriesState, completed: asyncio.Event) -> None:
        while True:
            try:
                await self.run_guess_cycle(state, completed)
            except Exception as e:
                # 單次 cycle 失敗不能讓回合卡住，等下一個 cycle 或 round timer
                logger.error(f"Guess cycle failed in round {state.round_number}: {e}", exc_info=True)

            if completed.is_set():
                return
            await asyncio.sleep(self.guess_interval)

    async def run_guess_cycle(self, state: SeriesState, completed: Optional[asyncio.Event] = None) -> int:
        """
        執行一次 guess cycle

        - 每次都重新向名單服務取得參賽者
        - 同時推播給所有 active 且有 endpoint 的參賽者
        - 個別參賽者失敗只記 log，不影響其他人（all-settled）

        返回：
            本次 cycle 記錄的猜測數
        """
        try:
            roster = await self.directory.list_active()
        except DirectoryUnavailable as e:
            logger.warning(f"Round {state.round_number}: roster unavailable, skipping cycle: {e}")
            return 0

        targets: List[ParticipantEntry] = [p for p in roster if p.is_reachable]
        if not targets:
            logger.debug(f"Round {state.round_number}: no active participants")
            return 0

        results = await asyncio.gather(
            *(self._poll_participant(state, participant, completed) for participant in targets),
            return_exceptions=True,
        )

        recorded = 0
        for participant, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning(f"Participant {participant.id} skipped this cycle: {result!r}")
            elif result:
                recorded += 1
        return recorded

    async def _poll_participant(
        self,
        state: SeriesState,
        participant: ParticipantEntry,
        completed: Optional[asyncio.Event],
    ) -> bool:
        board = state.board_states.peek(participant.id)
        # client 端也有 timeout，這裡再保證整個呼叫有上限
        raw_guess = await asyncio.wait_for(
            self.participant_client.request_guess(participant, board, state.round_number),
            timeout=self.participant_timeout,
        )

        if raw_guess is None:
            return False

        guess = validate_guess(raw_guess, self.word_length)
        if guess is None:
            logger.info(f"Discarding invalid guess {raw_guess!r} from {participant.id}")
            return False

        if state.board_states.peek(participant.id).complete:
            return False

        return self.apply_guess(state, participant.id, guess, completed)

    def apply_guess(
        self,
        state: SeriesState,
        participant_id: str,
        guess: str,
        completed: Optional[asyncio.Event] = None,
    ) -> bool:
        """
        評分並記錄一次已驗證的猜測

        返回：
            True 如果有記錄（BoardState 未完成時）
        """
        feedback = score(guess, state.current_word)
        won = is_winning_feedback(feedback)
        recorded = state.board_states.record(participant_id, guess, feedback_to_string(feedback), won)
        if not recorded:
            return False

        logger.info(
            f"Round {state.round_number}: {participant_id} guessed {guess} -> {feedback_to_string(feedback)}"
        )
        if won:
            state.round_winners.add(participant_id)
            logger.info(f"Round {state.round_number}: {participant_id} solved the word")

        if completed is not None and state.board_states.all_complete():
            completed.set()
        return True

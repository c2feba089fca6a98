"""
Series Controller：管理系列賽的完整生命週期

職責：
1. 建立系列賽（新題目、空白 BoardState、勝場歸零）
2. 每回合結束後計算勝場，決定下一回合或結束系列賽
3. 系列賽結束時發獎勵、寫冠軍紀錄，然後開新的系列賽
4. 提供觀戰用的查詢（勝負紀錄、參賽人數）

原則：
- SeriesState 只在這裡被替換，所有階段變更經過 SeriesStateMachine
- 外部副作用（轉帳、寫紀錄）失敗都不能讓遊戲停下來
"""
import asyncio
import logging
import time
from typing import Callable, List, Optional

from core.exceptions import GameNotStarted, PersistenceFailure
from core.round_scheduler import RoundEndReason, RoundScheduler
from core.series_state import SeriesState
from core.state_machine import SeriesStateMachine
from models import SeriesPhase, TransferStatus
from schemas import TransferResult
from services.standings_service import (
    build_player_history,
    credit_round_winners,
    determine_series_winner,
)
from services.word_service import select_random_word

logger = logging.getLogger(__name__)


class SeriesController:
    def __init__(
        self,
        scheduler: RoundScheduler,
        ledger,
        distributor,
        wins_needed: int,
        reward_amount: float,
        max_guesses: int,
        word_picker: Callable[[], str] = select_random_word,
    ):
        self.scheduler = scheduler
        self.ledger = ledger
        self.distributor = distributor
        self.wins_needed = wins_needed
        self.reward_amount = reward_amount
        self.max_guesses = max_guesses
        self.word_picker = word_picker

        self.state: Optional[SeriesState] = None
        self.last_winner: Optional[str] = None
        self.series_count = 0
        self._loop_task: Optional[asyncio.Task] = None

    # ============ 生命週期 ============

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start_series(self) -> SeriesState:
        """建立全新的系列賽狀態（round 1、勝場歸零、新題目）"""
        self.state = SeriesState.fresh(self.word_picker(), self.max_guesses)
        self.series_count += 1
        logger.info(f"Series {self.series_count} started")
        return self.state

    async def start(self) -> None:
        """啟動遊戲主迴圈（已在跑時不做任何事）"""
        if self.running:
            logger.warning("Game loop already running, ignoring start()")
            return
        if self.state is None or self.state.phase == SeriesPhase.ENDING:
            self.start_series()
        self._loop_task = asyncio.create_task(self.run_forever(), name="series-loop")

    async def stop(self) -> None:
        if self._loop_task is not None:
            self._loop_task.cancel()
            await asyncio.wait({self._loop_task})
            self._loop_task = None
        await self.scheduler.cancel_timers()
        logger.info("Game loop stopped")

    async def aclose(self) -> None:
        await self.stop()
        for collaborator in (self.scheduler.directory, self.scheduler.participant_client, self.distributor):
            aclose = getattr(collaborator, "aclose", None)
            if aclose is not None:
                await aclose()

    async def run_forever(self) -> None:
        while True:
            try:
                await self.play_round()
            except Exception as e:
                # 寧可重開系列賽也不能讓遊戲永久停止
                logger.error(f"Unexpected error in game loop, restarting series: {e}", exc_info=True)
                await self.scheduler.cancel_timers()
                self.start_series()

    async def play_round(self) -> Optional[str]:
        """跑一個回合並處理結果；返回系列賽冠軍（如果有）"""
        state = self.require_state()
        reason = await self.scheduler.run_round(state)
        return await self.finish_round(reason)

    # ============ 狀態轉換 ============

    async def finish_round(self, reason: Optional[RoundEndReason] = None) -> Optional[str]:
        """
        回合結束處理

        流程：
        1. ACTIVE -> ROUND_EVALUATING
        2. 本回合贏家勝場 +1，清空 round_winners
        3. 判定冠軍：
           - 有唯一冠軍 -> ENDING，發獎勵、寫紀錄、開新系列賽
           - 沒有（包含平手）-> 下一回合

        返回：
            冠軍 ID；沒有冠軍時回傳 None
        """
        state = self.require_state()
        SeriesStateMachine.transition(state, SeriesPhase.ROUND_EVALUATING)

        state.last_word = state.current_word
        credit_round_winners(state.win_counts, state.round_winners)
        state.round_winners.clear()
        logger.info(
            f"Round {state.round_number} evaluated ({reason.value if reason else 'manual'}), "
            f"win counts={state.win_counts}"
        )

        winner = determine_series_winner(state.win_counts, self.wins_needed)
        if winner is not None:
            SeriesStateMachine.transition(state, SeriesPhase.ENDING)
            await self.end_series(winner)
            return winner

        self.start_next_round()
        return None

    def start_next_round(self) -> SeriesState:
        state = self.require_state()
        SeriesStateMachine.transition(state, SeriesPhase.ACTIVE)
        state.current_word = self.word_picker()
        state.round_start_time = time.time()
        state.round_number += 1
        state.board_states.reset_all()
        return state

    async def end_series(self, winner_id: str) -> TransferResult:
        """
        系列賽結束

        順序固定：
        1. 取消所有計時器
        2. 發獎勵（只嘗試一次）
        3. 不論轉帳結果都寫冠軍紀錄（失敗時 receipt 為空）
        4. 開始新的系列賽

        遊戲迴圈在轉帳途中被取消時，3、4 仍會完成後才把取消往外傳
        """
        state = self.require_state()
        wins = state.win_counts.get(winner_id, 0)
        logger.info(f"Series won by {winner_id} with {wins} wins")

        result = None
        try:
            await self.scheduler.cancel_timers()
            result = await self.distributor.transfer(winner_id, self.reward_amount)
        except Exception as e:
            logger.error(f"Reward transfer for {winner_id} failed: {e}", exc_info=True)
            result = TransferResult(status=TransferStatus.ERROR, message=str(e))
        finally:
            if result is None:
                logger.warning(f"Reward transfer for {winner_id} interrupted, recording without receipt")
                result = TransferResult(status=TransferStatus.ERROR, message="transfer interrupted")
            await self._record_winner(winner_id, wins, result)
            self.last_winner = winner_id
            self.start_series()
        return result

    async def _record_winner(self, winner_id: str, wins: int, result: TransferResult) -> None:
        receipt = result.receipt if result.succeeded else None
        try:
            # SQLAlchemy commit 是同步的，丟到 thread 避免卡住計時器
            await asyncio.to_thread(self.ledger.append, winner_id, wins, receipt)
        except PersistenceFailure as e:
            logger.error(f"Winner record for {winner_id} was not persisted: {e}", exc_info=True)

    # ============ 查詢 ============

    def require_state(self) -> SeriesState:
        if self.state is None:
            raise GameNotStarted("No series in progress")
        return self.state

    def player_history(self, participant_id: str) -> List[bool]:
        state = self.require_state()
        return build_player_history(state.win_counts.get(participant_id, 0), state.round_number)

    async def player_count(self) -> int:
        return await self.scheduler.directory.count_active()

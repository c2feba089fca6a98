"""
並發控制工具

整個遊戲跑在單一 event loop 上，狀態變更不會平行執行；
但 await 之間仍可能交錯，所以「回合」本身需要互斥：

- 同一時間只能有一個回合在跑（不會有兩組計時器同時操作狀態）
- 下一個回合必須等上一個回合的計時器確認取消後才能開始
"""
import asyncio
import logging
from contextlib import asynccontextmanager

logger = logging.getLogger(__name__)


class RoundLock:
    """
    回合互斥鎖

    範例：
        async with round_lock.hold(round_number):
            # 建立計時器、等待回合結束、取消計時器
            ...

    注意：
        - 鎖被佔用時會等待（不會直接失敗），和 DB 的 nowait=False 同樣語意
        - 必須在鎖內完成計時器取消，離開 context 時才算回合真正結束
    """

    def __init__(self):
        # 第一次使用時才建立，綁定到當下的 event loop
        self._lock = None
        self.holder = None

    def locked(self) -> bool:
        return self._lock is not None and self._lock.locked()

    @asynccontextmanager
    async def hold(self, round_number: int):
        if self._lock is None:
            self._lock = asyncio.Lock()
        if self._lock.locked():
            logger.warning(
                f"Round {round_number} waiting for round {self.holder} to release its timers"
            )
        async with self._lock:
            self.holder = round_number
            try:
                yield
            finally:
                self.holder = None

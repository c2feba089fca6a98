"""
可取消的排程 handle

每個計時器（round timer、guess cycle）都放在一個具名 slot：
- arm()：先取消並等待舊的 task 真正結束，才建立新的 task
- cancel() / cancel_all()：取消並等待結束

確保同一時間每個 slot 最多只有一個 task，不會留下孤兒 callback
去操作已經過期的回合狀態
"""
import asyncio
import logging
from typing import Coroutine, Dict, List, Optional

logger = logging.getLogger(__name__)


class ScheduledTask:
    """包一個 asyncio.Task，提供明確的取消語意"""

    def __init__(self, name: str, task: asyncio.Task):
        self.name = name
        self.task = task

    @property
    def done(self) -> bool:
        return self.task.done()

    def cancel(self) -> None:
        if not self.task.done():
            self.task.cancel()

    async def cancel_and_wait(self) -> None:
        """
        取消並等待 task 結束

        從 task 自己內部呼叫時只送出取消，不等待（避免等待自己）
        """
        self.cancel()
        if self.task is asyncio.current_task():
            return
        # asyncio.wait 不會把 task 的 CancelledError 往外丟，
        # 但外層被取消時仍會正常傳遞
        await asyncio.wait({self.task})


class TimerSlots:
    def __init__(self):
        self._slots: Dict[str, ScheduledTask] = {}

    def get(self, name: str) -> Optional[ScheduledTask]:
        return self._slots.get(name)

    def active_names(self) -> List[str]:
        return [name for name, handle in self._slots.items() if not handle.done]

    async def arm(self, name: str, coro: Coroutine) -> ScheduledTask:
        await self.cancel(name)
        handle = ScheduledTask(name, asyncio.create_task(coro, name=name))
        self._slots[name] = handle
        return handle

    async def cancel(self, name: str) -> None:
        handle = self._slots.pop(name, None)
        if handle is not None:
            await handle.cancel_and_wait()
            logger.debug(f"Timer '{name}' cancelled")

    async def cancel_all(self) -> None:
        for name in list(self._slots):
            await self.cancel(name)

"""
定时器调度

延时转换通过调度器安排在单线程事件循环上，不阻塞进程.
"""

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

__all__ = ['TimerHandle', 'Scheduler', 'AsyncioScheduler', 'ManualScheduler']


class TimerHandle(Protocol):
    """可取消的定时器句柄"""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """调度器协议"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """delay秒后调用callback"""
        ...


class AsyncioScheduler:
    """基于asyncio事件循环的调度器"""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)


class _ManualHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    手动推进的调度器

    用于测试：调用advance()推进虚拟时间并按到期顺序触发定时器.
    """

    def __init__(self):
        self._now = 0.0
        self._seq = itertools.count()
        self._timers: List[Tuple[float, int, _ManualHandle, Callable[[], None]]] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """未取消且未触发的定时器数量"""
        return sum(1 for _, _, handle, _ in self._timers if not handle.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualHandle:
        handle = _ManualHandle()
        heapq.heappush(self._timers, (self._now + delay, next(self._seq), handle, callback))
        return handle

    def advance(self, seconds: float = 0.0) -> int:
        """
        推进虚拟时间

        Returns:
            int: 触发的定时器数量
        """
        target = self._now + seconds
        fired = 0
        while self._timers and self._timers[0][0] <= target:
            due, _, handle, callback = heapq.heappop(self._timers)
            self._now = max(self._now, due)
            if handle.cancelled:
                continue
            fired += 1
            callback()
        self._now = target
        return fired

    def run_all(self, limit: int = 10000) -> int:
        """不断触发到期最早的定时器直到队列为空"""
        fired = 0
        while self.pending and fired < limit:
            next_due = min(due for due, _, handle, _ in self._timers if not handle.cancelled)
            fired += self.advance(next_due - self._now)
        return fired

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Optional


class Clock(ABC):
    """Time source for the poller. Substituted with a virtual clock in tests."""

    @abstractmethod
    def now_ms(self) -> int:
        """Current time as epoch milliseconds."""

    @abstractmethod
    async def sleep(self, duration_ms: int, stop_event: Optional[asyncio.Event] = None) -> bool:
        """
        Suspend for duration_ms.

        Returns:
            True if the stop event was set before the duration elapsed.
        """


class SystemClock(Clock):
    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000

    async def sleep(self, duration_ms: int, stop_event: Optional[asyncio.Event] = None) -> bool:
        seconds = max(duration_ms, 0) / 1000.0

        if stop_event is None:
            await asyncio.sleep(seconds)
            return False

        if stop_event.is_set():
            return True

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=seconds)
            return True
        except asyncio.TimeoutError:
            return False

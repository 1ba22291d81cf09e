from __future__ import annotations

import time
from typing import Callable, Protocol


class Clock(Protocol):
    def now_ms(self) -> int:
        """Current absolute time as epoch milliseconds."""


class TickSource(Protocol):
    """Periodic callback driver with a fixed interval.

    Performs no scheduling correction; consumers must derive time from the
    clock on every callback.
    """

    @property
    def is_active(self) -> bool: ...

    def start(self, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class SystemClock:
    def now_ms(self) -> int:
        return int(time.time() * 1000)

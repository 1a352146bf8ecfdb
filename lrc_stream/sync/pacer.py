from __future__ import annotations

import threading
import time
from typing import Callable


class WallClockPacer:
    """
    Holds each entry back until its timestamp, measured on the wall clock
    from the first wait (or an explicit start()).
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], object] = time.sleep,
    ):
        self.clock = clock
        self.sleep = sleep
        self._t0: float | None = None

    def start(self) -> None:
        self._t0 = self.clock()

    def elapsed_ms(self) -> int:
        if self._t0 is None:
            return 0
        return int((self.clock() - self._t0) * 1000)

    def wait_until(self, t_ms: int, stop: threading.Event | None = None) -> bool:
        """
        Block until t_ms has elapsed. Returns False if `stop` was set
        before the deadline.
        """
        if self._t0 is None:
            self.start()
        delay = t_ms / 1000 - (self.clock() - self._t0)
        if delay <= 0:
            return not (stop and stop.is_set())
        if stop is not None:
            return not stop.wait(delay)
        self.sleep(delay)
        return True

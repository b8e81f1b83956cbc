# app/timer.py
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        ...


class SystemClock:
    """Wall clock in epoch seconds."""

    def now(self) -> float:
        return time.time()

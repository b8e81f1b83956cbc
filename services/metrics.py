# services/metrics.py
from __future__ import annotations
from collections import deque
import bisect
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class LiveMetrics:
    elapsed_seconds: float = 0.0
    correct_count: int = 0
    typed_count: int = 0
    wpm: float = 0.0
    accuracy: float = 100.0
    remaining_seconds: Optional[float] = None


def count_correct_chars(typed: str, target: str) -> int:
    """Positional matches over the overlap of typed and target."""
    return sum(1 for a, b in zip(typed, target) if a == b)


def compute_wpm(correct_chars: int, elapsed_seconds: float) -> float:
    # WPM = (correct_chars / 5) / (elapsed_minutes)
    if elapsed_seconds <= 0:
        return 0.0
    return (correct_chars / 5.0) / (elapsed_seconds / 60.0)


def compute_accuracy(correct_chars: int, typed_chars: int) -> float:
    if typed_chars <= 0:
        return 100.0
    return max(0.0, min(100.0, 100.0 * correct_chars / typed_chars))


def compute_remaining(elapsed_seconds: float, duration_seconds: Optional[float]) -> Optional[float]:
    if duration_seconds is None:
        return None
    return max(duration_seconds - elapsed_seconds, 0.0)


def compute_live_metrics(
    typed: str,
    target: str,
    elapsed_seconds: float,
    duration_seconds: Optional[float] = None,
) -> LiveMetrics:
    elapsed = max(0.0, elapsed_seconds)
    correct = count_correct_chars(typed, target)
    return LiveMetrics(
        elapsed_seconds=elapsed,
        correct_count=correct,
        typed_count=len(typed),
        wpm=compute_wpm(correct, elapsed),
        accuracy=compute_accuracy(correct, len(typed)),
        remaining_seconds=compute_remaining(elapsed, duration_seconds),
    )


class WpmTrace:
    """
    Rolling (elapsed, wpm) samples taken on every tick, used for the
    WPM-over-time graph on the result screen.
    """

    def __init__(self, maxlen: int = 3600):
        self._times: deque[float] = deque(maxlen=maxlen)
        self._values: deque[float] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._times)

    def clear(self):
        self._times.clear()
        self._values.clear()

    def add(self, metrics: LiveMetrics):
        # a zero-elapsed sample carries no information
        if metrics.elapsed_seconds <= 0:
            return
        if self._times and metrics.elapsed_seconds <= self._times[-1]:
            return
        self._times.append(metrics.elapsed_seconds)
        self._values.append(metrics.wpm)

    def series(self) -> Tuple[List[float], List[float]]:
        return list(self._times), list(self._values)


def instant_wpm_series(
    times: Sequence[float],
    cumulative_wpms: Sequence[float],
    window_seconds: float = 2.0,
) -> List[float]:
    """
    Convert a cumulative-average WPM series (what WpmTrace records) into WPM
    measured over a trailing window of ``window_seconds``.
    """
    n = len(times)
    if n == 0 or n != len(cumulative_wpms) or window_seconds <= 0:
        return [0.0] * len(cumulative_wpms)

    # estimated correct characters typed by each sample
    chars = [w * 5.0 * max(0.0, t) / 60.0 for t, w in zip(times, cumulative_wpms)]
    ts = list(times)
    out = []
    for i in range(n):
        j = bisect.bisect_left(ts, times[i] - window_seconds)
        base = chars[j - 1] if j > 0 else 0.0
        span = times[i] - (ts[j - 1] if j > 0 else 0.0)
        span = max(span, 1e-6)
        out.append(max(0.0, chars[i] - base) / 5.0 / (span / 60.0))
    return out


def smooth_wpm(
    times: Sequence[float],
    wpms: Sequence[float],
    tau_seconds: float = 2.5,
) -> List[float]:
    """Time-aware exponential smoothing; output has the same length as the input."""
    if not times or len(times) != len(wpms):
        return list(wpms)
    smoothed = [wpms[0]]
    for i in range(1, len(times)):
        dt = max(1e-6, times[i] - times[i - 1])
        alpha = 1.0 - math.exp(-dt / float(tau_seconds))
        smoothed.append(alpha * wpms[i] + (1.0 - alpha) * smoothed[-1])
    return smoothed

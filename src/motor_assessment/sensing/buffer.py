"""Per-phase sample and tap accumulation."""

from __future__ import annotations

from collections import deque

import numpy as np

from .samples import MotionSample, smooth_axes


class SampleBuffer:
    """
    Append-only sample log for the active phase.

    Owns two containers: the unbounded analysis log and a bounded projection
    for the live trace. Both are cleared together by ``reset``; truncation of
    the projection never touches the analysis log.
    """

    def __init__(self, display_capacity: int = 100, smoothing: float = 0.8):
        self.display_capacity = display_capacity
        self.smoothing = smoothing
        self._samples: list[MotionSample] = []
        self._display: deque[MotionSample] = deque(maxlen=display_capacity)

    def append(self, sample: MotionSample) -> None:
        self._samples.append(sample)
        self._display.append(sample)

    def snapshot(self) -> list[MotionSample]:
        """Every sample since the last reset, in arrival order."""
        return list(self._samples)

    def reset(self) -> None:
        self._samples.clear()
        self._display.clear()

    def recent_window(self, n: int) -> list[MotionSample]:
        """Last ``n`` samples of the live projection."""
        if n <= 0:
            return []
        return list(self._display)[-n:]

    def display_trace(self) -> np.ndarray:
        """Smoothed (N, 3) axes of the live projection."""
        return smooth_axes(list(self._display), self.smoothing)

    @property
    def last_timestamp(self) -> int | None:
        return self._samples[-1].timestamp if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)


class TapLog:
    """Elapsed-seconds of each tap since test start."""

    def __init__(self) -> None:
        self._times: list[float] = []

    def append(self, elapsed_seconds: float) -> None:
        self._times.append(float(elapsed_seconds))

    def snapshot(self) -> list[float]:
        return list(self._times)

    def reset(self) -> None:
        self._times.clear()

    def __len__(self) -> int:
        return len(self._times)

"""
Frequency Estimation
====================

Rate estimation for short, noisy motion streams. Two interchangeable
methods: local-maxima peak counting with a minimum peak separation, and
zero-crossing counting on the mean-centered signal.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)


class FrequencyMethod(Enum):
    """Frequency estimation algorithm."""

    PEAK = "peak"
    ZERO_CROSSING = "zero_crossing"


DEFAULT_MIN_SAMPLES = {
    FrequencyMethod.PEAK: 50,
    FrequencyMethod.ZERO_CROSSING: 20,
}


def count_peaks(values: Sequence[float] | np.ndarray, min_peak_distance: int = 5) -> int:
    """
    Count local maxima separated by more than ``min_peak_distance`` samples.

    A point is a local maximum when it is strictly greater than both
    neighbours. A maximum within ``min_peak_distance`` samples of the last
    accepted peak is treated as a noise double count.
    """
    x = np.asarray(values, dtype=float)
    peak_count = 0
    last_peak = -1

    for i in range(1, len(x) - 1):
        if x[i] > x[i - 1] and x[i] > x[i + 1]:
            if last_peak == -1 or (i - last_peak) > min_peak_distance:
                peak_count += 1
                last_peak = i

    return peak_count


def count_zero_crossings(values: Sequence[float] | np.ndarray) -> int:
    """Count sign changes of the mean-centered signal."""
    x = np.asarray(values, dtype=float)
    if x.size < 2:
        return 0
    positive = (x - np.mean(x)) > 0
    return int(np.count_nonzero(positive[:-1] != positive[1:]))


def elapsed_seconds(timestamps_ms: Sequence[int] | np.ndarray) -> float:
    """Span between first and last timestamp, in seconds."""
    if len(timestamps_ms) < 2:
        return 0.0
    return (float(timestamps_ms[-1]) - float(timestamps_ms[0])) / 1000.0


class FrequencyEstimator:
    """Convert event counts over a window into a rate in Hz."""

    def __init__(
        self,
        method: FrequencyMethod | str = FrequencyMethod.ZERO_CROSSING,
        min_samples: int | None = None,
        min_peak_distance: int = 5,
    ):
        """
        Initialize estimator.

        Args:
            method: Peak counting or zero-crossing counting
            min_samples: Samples required for a meaningful estimate
                (defaults depend on the method)
            min_peak_distance: Peak separation in samples (peak method only)
        """
        self.method = FrequencyMethod(method)
        self.min_samples = (
            DEFAULT_MIN_SAMPLES[self.method] if min_samples is None else min_samples
        )
        self.min_peak_distance = min_peak_distance

    def estimate(self, values: Sequence[float] | np.ndarray, duration: float) -> float:
        """
        Estimate frequency of ``values`` recorded over ``duration`` seconds.

        Returns 0.0 for too few samples or a non-positive duration.
        """
        if len(values) < self.min_samples:
            logger.debug("Frequency: %d samples below minimum %d", len(values), self.min_samples)
            return 0.0
        if duration <= 0:
            return 0.0

        if self.method is FrequencyMethod.PEAK:
            return count_peaks(values, self.min_peak_distance) / duration

        # Two crossings per full cycle
        return (count_zero_crossings(values) / 2.0) / duration

    def estimate_from_timestamps(
        self,
        values: Sequence[float] | np.ndarray,
        timestamps_ms: Sequence[int] | np.ndarray,
    ) -> float:
        """Estimate using the first/last timestamp span as duration."""
        return self.estimate(values, elapsed_seconds(timestamps_ms))


def estimate_frequency(
    values: Sequence[float] | np.ndarray,
    duration: float,
    method: FrequencyMethod | str = FrequencyMethod.ZERO_CROSSING,
) -> float:
    """
    Convenience function to estimate frequency.

    Args:
        values: Signal samples
        duration: Recording span (s)
        method: "peak" or "zero_crossing"

    Returns:
        Frequency in Hz
    """
    return FrequencyEstimator(method).estimate(values, duration)

"""
Finger Tapping Analysis
=======================

Reduce the tap times of one timed tapping phase to rate, regularity and
fatigue metrics and a weighted 0-100 score. Slow or decaying tapping is
the bradykinesia signal of the test.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import numpy as np

from ..core.config import TappingConfig
from ..core.types import Hand

logger = logging.getLogger(__name__)

# Window edges are exclusive; absorbs float drift in evenly spaced taps
_EDGE_EPS = 1e-9


class TappingGrade(Enum):
    """Grade derived from the tapping score."""

    NORMAL = "Normal"
    MILD = "Mild Impairment"
    MODERATE = "Moderate Impairment"
    SIGNIFICANT = "Significant Impairment"
    SEVERE = "Severe Impairment"


@dataclass(frozen=True)
class TappingResult:
    """Tapping phase metrics."""

    hand: Hand
    tap_count: int
    duration: float  # s

    # Rate
    average_frequency: float  # Hz
    peak_frequency: float  # Hz, best sliding window

    # Regularity, 0-1
    consistency: float
    rhythm_stability: float

    # Fatigue, 0-1
    fatigue_index: float

    # Timing of peak performance
    acceleration_phase: float  # s from start
    deceleration_phase: float  # s to end

    rhythmicity: float  # 0-100, closeness to the expected rate

    score: float  # 0-100
    grade: TappingGrade

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hand": self.hand.value,
            "tap_count": self.tap_count,
            "duration": self.duration,
            "average_frequency": self.average_frequency,
            "peak_frequency": self.peak_frequency,
            "consistency": self.consistency,
            "rhythm_stability": self.rhythm_stability,
            "fatigue_index": self.fatigue_index,
            "acceleration_phase": self.acceleration_phase,
            "deceleration_phase": self.deceleration_phase,
            "rhythmicity": self.rhythmicity,
            "score": self.score,
            "grade": self.grade.value,
        }


def _clamp(value: float, low: float, high: float) -> float:
    return float(min(high, max(low, value)))


def interval_consistency(tap_times: Sequence[float] | np.ndarray) -> float:
    """
    1 - coefficient of variation of the inter-tap intervals, in [0, 1].

    0 with fewer than two taps or a non-positive mean interval.
    """
    t = np.asarray(tap_times, dtype=float)
    if t.size < 2:
        return 0.0

    intervals = np.diff(t)
    mean_interval = float(np.mean(intervals))
    if mean_interval <= 0:
        return 0.0

    cv = float(np.std(intervals)) / mean_interval
    return _clamp(1.0 - cv, 0.0, 1.0)


def window_tap_counts(tap_times: Sequence[float] | np.ndarray, window: float) -> np.ndarray:
    """Number of taps in [t_i, t_i + window) for each tap i."""
    t = np.asarray(tap_times, dtype=float)
    if t.size == 0 or window <= 0:
        return np.zeros(0, dtype=int)
    ends = np.searchsorted(t, t + window - _EDGE_EPS, side="left")
    return ends - np.arange(t.size)


def peak_tap_rate(tap_times: Sequence[float] | np.ndarray, window: float) -> tuple[float, int]:
    """
    Highest sliding-window tap rate and the tap index where it starts.

    Only windows holding more than one tap count. Returns (0.0, -1) when no
    window qualifies.
    """
    counts = window_tap_counts(tap_times, window)
    valid = counts > 1
    if not np.any(valid):
        return 0.0, -1

    masked = np.where(valid, counts, 0)
    best = int(np.argmax(masked))
    return float(masked[best]) / window, best


def fatigue_index(tap_times: Sequence[float] | np.ndarray, min_taps_per_third: int = 2) -> float:
    """
    Relative rate drop from the first to the last third of the taps.

    Each third holds floor(n / 3) taps and its rate is
    (count - 1) / (last - first). Returns 0 when undefined.
    """
    t = np.asarray(tap_times, dtype=float)
    third = t.size // 3
    if third < max(2, min_taps_per_third):
        return 0.0

    first = t[:third]
    last = t[t.size - third:]
    first_duration = float(first[-1] - first[0])
    last_duration = float(last[-1] - last[0])
    if first_duration <= 0 or last_duration <= 0:
        return 0.0

    first_freq = (third - 1) / first_duration
    last_freq = (third - 1) / last_duration
    if first_freq <= 0:
        return 0.0

    return _clamp((first_freq - last_freq) / first_freq, 0.0, 1.0)


def tapping_score(
    average_frequency: float,
    consistency: float,
    peak_frequency: float,
    fatigue: float,
    config: TappingConfig | None = None,
) -> float:
    """Weighted 0-100 tapping score."""
    config = config or TappingConfig()

    freq_score = min(100.0, average_frequency * config.frequency_scale)
    consistency_score = consistency * 100.0
    peak_score = min(100.0, peak_frequency * config.peak_scale)
    fatigue_score = max(0.0, (1.0 - fatigue) * 100.0)

    score = (
        config.frequency_weight * freq_score
        + config.consistency_weight * consistency_score
        + config.peak_weight * peak_score
        + config.fatigue_weight * fatigue_score
    )
    return _clamp(score, 0.0, 100.0)


def grade_for_score(score: float, config: TappingConfig | None = None) -> TappingGrade:
    """Step grade from a tapping score."""
    config = config or TappingConfig()
    if score >= config.normal_threshold:
        return TappingGrade.NORMAL
    if score >= config.mild_threshold:
        return TappingGrade.MILD
    if score >= config.moderate_threshold:
        return TappingGrade.MODERATE
    if score >= config.significant_threshold:
        return TappingGrade.SIGNIFICANT
    return TappingGrade.SEVERE


class TappingAnalyzer:
    """Analyze one tapping phase."""

    def __init__(self, config: TappingConfig | None = None):
        self.config = config or TappingConfig()

    def analyze(
        self,
        tap_times: Sequence[float],
        hand: Hand,
        duration: float | None = None,
    ) -> TappingResult:
        """
        Analyze tap times.

        Args:
            tap_times: Seconds since test start, one per tap
            hand: Hand under test
            duration: Test length (s); defaults to the configured duration

        Returns:
            TappingResult
        """
        if duration is None:
            duration = self.config.duration_seconds

        t = np.sort(np.asarray(tap_times, dtype=float))
        n = int(t.size)

        if n < self.config.min_taps or duration <= 0:
            logger.warning(
                "Tapping (%s): %d taps over %.1fs is insufficient, returning zero result",
                hand.value,
                n,
                duration,
            )
            return self._empty_result(hand, n, max(0.0, duration))

        average_frequency = n / duration
        consistency = interval_consistency(t)
        peak_frequency, peak_idx = peak_tap_rate(t, self.config.window_seconds)
        fatigue = fatigue_index(t, self.config.min_taps_per_third)

        if peak_idx >= 0:
            acceleration_phase = float(t[peak_idx])
            deceleration_phase = max(0.0, duration - acceleration_phase)
        else:
            acceleration_phase = 0.0
            deceleration_phase = 0.0

        rhythmicity = max(
            0.0,
            100.0 - abs(average_frequency - self.config.optimal_frequency) * self.config.rhythmicity_slope,
        )

        score = tapping_score(average_frequency, consistency, peak_frequency, fatigue, self.config)

        return TappingResult(
            hand=hand,
            tap_count=n,
            duration=float(duration),
            average_frequency=float(average_frequency),
            peak_frequency=peak_frequency,
            consistency=consistency,
            rhythm_stability=consistency,
            fatigue_index=fatigue,
            acceleration_phase=acceleration_phase,
            deceleration_phase=deceleration_phase,
            rhythmicity=float(rhythmicity),
            score=score,
            grade=grade_for_score(score, self.config),
        )

    def _empty_result(self, hand: Hand, tap_count: int, duration: float) -> TappingResult:
        """Zeroed result for insufficient taps."""
        return TappingResult(
            hand=hand,
            tap_count=tap_count,
            duration=duration,
            average_frequency=0.0,
            peak_frequency=0.0,
            consistency=0.0,
            rhythm_stability=0.0,
            fatigue_index=0.0,
            acceleration_phase=0.0,
            deceleration_phase=0.0,
            rhythmicity=0.0,
            score=0.0,
            grade=TappingGrade.SEVERE,
        )


def analyze_tapping(
    tap_times: Sequence[float],
    hand: Hand = Hand.RIGHT,
    duration: float | None = None,
) -> TappingResult:
    """
    Convenience function to analyze a tapping phase.

    Args:
        tap_times: Seconds since test start
        hand: Hand under test
        duration: Test length (s)

    Returns:
        TappingResult
    """
    analyzer = TappingAnalyzer()
    return analyzer.analyze(tap_times, hand, duration)

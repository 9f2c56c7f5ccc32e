"""
Tremor Analysis
===============

Quantify tremor from the accelerometer samples of one held-still phase:
per-axis amplitude, dominant axis, magnitude statistics, oscillation
frequency, gyroscope stability and a severity bucket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

import numpy as np

from ..core.config import TremorConfig
from ..core.types import Hand
from ..sensing.samples import MotionSample, axes, magnitudes
from .frequency import FrequencyEstimator, elapsed_seconds

logger = logging.getLogger(__name__)


class Axis(Enum):
    """Accelerometer axis."""

    X = "X"
    Y = "Y"
    Z = "Z"


class TremorSeverity(Enum):
    """Severity bucket of mean tremor amplitude."""

    NONE = "None"
    MINIMAL = "Minimal"
    MILD = "Mild"
    MODERATE = "Moderate"
    SEVERE = "Severe"
    VERY_SEVERE = "Very Severe"


class TremorType(Enum):
    """Frequency-based tremor label."""

    PHYSIOLOGICAL = "Physiological"
    PATHOLOGICAL = "Pathological"
    MINIMAL = "Minimal"


@dataclass(frozen=True)
class TremorResult:
    """Tremor phase metrics."""

    hand: Hand
    sample_count: int
    duration: float  # s

    # Frequency
    frequency: float  # Hz

    # Amplitude (magnitude statistics)
    amplitude: float
    max_amplitude: float
    amplitude_variability: float

    # Per-axis mean absolute acceleration
    x_axis_amplitude: float
    y_axis_amplitude: float
    z_axis_amplitude: float
    dominant_axis: Axis

    severity: TremorSeverity
    has_tremor: bool

    gyro_stability: float  # 0-100
    tremor_type: TremorType
    data_quality: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hand": self.hand.value,
            "sample_count": self.sample_count,
            "duration": self.duration,
            "frequency": self.frequency,
            "amplitude": self.amplitude,
            "max_amplitude": self.max_amplitude,
            "amplitude_variability": self.amplitude_variability,
            "x_axis_amplitude": self.x_axis_amplitude,
            "y_axis_amplitude": self.y_axis_amplitude,
            "z_axis_amplitude": self.z_axis_amplitude,
            "dominant_axis": self.dominant_axis.value,
            "severity": self.severity.value,
            "has_tremor": self.has_tremor,
            "gyro_stability": self.gyro_stability,
            "tremor_type": self.tremor_type.value,
            "data_quality": self.data_quality,
        }


def classify_severity(amplitude: float, config: TremorConfig | None = None) -> TremorSeverity:
    """Step classification of mean amplitude."""
    config = config or TremorConfig()
    if amplitude >= config.very_severe_threshold:
        return TremorSeverity.VERY_SEVERE
    if amplitude >= config.severe_threshold:
        return TremorSeverity.SEVERE
    if amplitude >= config.moderate_threshold:
        return TremorSeverity.MODERATE
    if amplitude >= config.mild_threshold:
        return TremorSeverity.MILD
    if amplitude >= config.minimal_threshold:
        return TremorSeverity.MINIMAL
    return TremorSeverity.NONE


def dominant_axis(x_amp: float, y_amp: float, z_amp: float) -> Axis:
    """Axis with the largest amplitude; ties go to X, then Y."""
    if x_amp >= y_amp and x_amp >= z_amp:
        return Axis.X
    if y_amp >= z_amp:
        return Axis.Y
    return Axis.Z


def classify_tremor_type(frequency: float) -> TremorType:
    """Label tremor by frequency band."""
    if frequency > 8.0:
        return TremorType.PHYSIOLOGICAL
    if 0.0 < frequency < 6.0:
        return TremorType.PATHOLOGICAL
    return TremorType.MINIMAL


def gyro_stability(samples: Sequence[MotionSample], scale: float = 2.0) -> float:
    """
    0-100 steadiness from mean absolute rotation rate.

    Samples without rotation data read as motionless.
    """
    if not samples:
        return 100.0
    totals = [s.rotation.total if s.rotation is not None else 0.0 for s in samples]
    return float(max(0.0, 100.0 - float(np.mean(totals)) * scale))


class TremorAnalyzer:
    """Analyze one tremor phase."""

    def __init__(self, config: TremorConfig | None = None):
        self.config = config or TremorConfig()
        self.estimator = FrequencyEstimator(
            self.config.frequency_method,
            min_samples=(
                self.config.peak_min_samples
                if self.config.frequency_method == "peak"
                else self.config.min_samples
            ),
            min_peak_distance=self.config.min_peak_distance,
        )

    def analyze(self, samples: Sequence[MotionSample], hand: Hand) -> TremorResult:
        """
        Analyze the full sample set of a tremor phase.

        Args:
            samples: Samples in time order
            hand: Hand under test

        Returns:
            TremorResult
        """
        n = len(samples)
        if n < self.config.min_samples:
            logger.warning(
                "Tremor (%s): %d samples below minimum %d, returning zero result",
                hand.value,
                n,
                self.config.min_samples,
            )
            return self._empty_result(hand, n)

        xyz = np.abs(axes(samples))
        x_amp, y_amp, z_amp = (float(v) for v in np.mean(xyz, axis=0))

        mags = magnitudes(samples)
        amplitude = float(np.mean(mags))
        max_amplitude = float(np.max(mags))
        variability = float(np.std(mags))

        duration = self._duration(samples)
        frequency = self.estimator.estimate(mags, duration)

        return TremorResult(
            hand=hand,
            sample_count=n,
            duration=duration,
            frequency=float(frequency),
            amplitude=amplitude,
            max_amplitude=max_amplitude,
            amplitude_variability=variability,
            x_axis_amplitude=x_amp,
            y_axis_amplitude=y_amp,
            z_axis_amplitude=z_amp,
            dominant_axis=dominant_axis(x_amp, y_amp, z_amp),
            severity=classify_severity(amplitude, self.config),
            has_tremor=amplitude > self.config.tremor_threshold,
            gyro_stability=gyro_stability(samples, self.config.gyro_stability_scale),
            tremor_type=classify_tremor_type(frequency),
            data_quality="High" if n > self.config.high_quality_samples else "Moderate",
        )

    def _duration(self, samples: Sequence[MotionSample]) -> float:
        """Timestamp span, or sample count over the nominal rate."""
        span = elapsed_seconds([s.timestamp for s in samples])
        if span > 0:
            return span
        return len(samples) / self.config.sampling_rate

    def _empty_result(self, hand: Hand, sample_count: int) -> TremorResult:
        """Zeroed result for insufficient samples."""
        return TremorResult(
            hand=hand,
            sample_count=sample_count,
            duration=0.0,
            frequency=0.0,
            amplitude=0.0,
            max_amplitude=0.0,
            amplitude_variability=0.0,
            x_axis_amplitude=0.0,
            y_axis_amplitude=0.0,
            z_axis_amplitude=0.0,
            dominant_axis=Axis.X,
            severity=TremorSeverity.NONE,
            has_tremor=False,
            gyro_stability=100.0,
            tremor_type=TremorType.MINIMAL,
            data_quality="Insufficient",
        )


def analyze_tremor(samples: Sequence[MotionSample], hand: Hand = Hand.RIGHT) -> TremorResult:
    """
    Convenience function to analyze a tremor phase.

    Args:
        samples: Samples in time order
        hand: Hand under test

    Returns:
        TremorResult
    """
    analyzer = TremorAnalyzer()
    return analyzer.analyze(samples, hand)

"""Pytest fixtures for motor-assessment tests."""

from __future__ import annotations

import tempfile
from pathlib import Path

import pytest

from motor_assessment.analysis.tapping import TappingResult, grade_for_score
from motor_assessment.analysis.tremor import (
    Axis,
    TremorResult,
    TremorType,
    classify_severity,
)
from motor_assessment.core.config import Settings
from motor_assessment.core.types import Hand
from motor_assessment.sensing.samples import MotionSample
from motor_assessment.sensing.synthetic import SyntheticMotionSource
from motor_assessment.session.record import SessionRecord


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def settings() -> Settings:
    """Default settings."""
    return Settings()


@pytest.fixture
def even_taps() -> list[float]:
    """100 taps every 0.2 s, covering a 20 s test."""
    return [i * 0.2 for i in range(100)]


@pytest.fixture
def still_samples() -> list[MotionSample]:
    """200 motionless samples at 50 Hz."""
    return [MotionSample(0.0, 0.0, 0.0, timestamp=i * 20) for i in range(200)]


@pytest.fixture
def tremor_samples() -> list[MotionSample]:
    """10 s of a 5 Hz tremor along X."""
    source = SyntheticMotionSource(
        sampling_rate=50.0, tremor_frequency=5.0, amplitude=0.05, axis="x", seed=7
    )
    return source.read(500)


@pytest.fixture
def tapping_factory():
    """Build TappingResult objects with only the interesting fields set."""

    def make(
        hand: Hand = Hand.LEFT,
        score: float = 80.0,
        average_frequency: float = 5.0,
        fatigue_index: float = 0.0,
        rhythmicity: float = 100.0,
    ) -> TappingResult:
        return TappingResult(
            hand=hand,
            tap_count=int(average_frequency * 20),
            duration=20.0,
            average_frequency=average_frequency,
            peak_frequency=average_frequency,
            consistency=0.9,
            rhythm_stability=0.9,
            fatigue_index=fatigue_index,
            acceleration_phase=0.0,
            deceleration_phase=20.0,
            rhythmicity=rhythmicity,
            score=score,
            grade=grade_for_score(score),
        )

    return make


@pytest.fixture
def tremor_factory():
    """Build TremorResult objects with only the interesting fields set."""

    def make(
        hand: Hand = Hand.LEFT,
        amplitude: float = 0.01,
        frequency: float = 0.0,
        gyro_stability: float = 100.0,
    ) -> TremorResult:
        return TremorResult(
            hand=hand,
            sample_count=500,
            duration=10.0,
            frequency=frequency,
            amplitude=amplitude,
            max_amplitude=amplitude * 2,
            amplitude_variability=amplitude / 4,
            x_axis_amplitude=amplitude,
            y_axis_amplitude=0.0,
            z_axis_amplitude=0.0,
            dominant_axis=Axis.X,
            severity=classify_severity(amplitude),
            has_tremor=amplitude > 0.02,
            gyro_stability=gyro_stability,
            tremor_type=TremorType.MINIMAL,
            data_quality="High",
        )

    return make


@pytest.fixture
def complete_record(tapping_factory, tremor_factory) -> SessionRecord:
    """Both hands tested, strong and tremor-free."""
    return SessionRecord(
        left_tapping=tapping_factory(Hand.LEFT, score=82.0),
        right_tapping=tapping_factory(Hand.RIGHT, score=85.0),
        left_tremor=tremor_factory(Hand.LEFT),
        right_tremor=tremor_factory(Hand.RIGHT),
    )

"""Tests for sensing module."""

from __future__ import annotations

import json

import numpy as np
import pytest

from motor_assessment.core.exceptions import SampleFormatError
from motor_assessment.sensing import (
    MotionSample,
    RotationRate,
    SampleBuffer,
    SyntheticMotionSource,
    TapLog,
    load_samples,
    load_tap_times,
    smooth_axes,
    synthetic_tap_times,
)


class TestMotionSample:
    """Tests for MotionSample."""

    def test_magnitude(self):
        """Test magnitude is derived from the axes."""
        sample = MotionSample(3.0, 4.0, 0.0, timestamp=0)

        assert sample.magnitude == pytest.approx(5.0)

    def test_from_acceleration_missing_values(self):
        """Test missing axes and rotation read as zero."""
        sample = MotionSample.from_acceleration(None, 2.0, None, 10, beta=1.5)

        assert sample.x == 0.0
        assert sample.magnitude == pytest.approx(2.0)
        assert sample.rotation == RotationRate(0.0, 1.5, 0.0)

    def test_no_rotation(self):
        """Test rotation stays None without gyroscope fields."""
        assert MotionSample.from_acceleration(1, 1, 1, 0).rotation is None

    def test_from_dict_recomputes_magnitude(self):
        """Test a stored magnitude is ignored."""
        sample = MotionSample.from_dict({"x": 0.0, "y": 0.6, "z": 0.8, "magnitude": 9.0, "timestamp": 5})

        assert sample.magnitude == pytest.approx(1.0)
        assert sample.timestamp == 5

    def test_to_dict(self):
        """Test dictionary conversion."""
        data = MotionSample(0.1, 0.0, 0.0, 20, RotationRate(1.0, -2.0, 0.5)).to_dict()

        assert data["timestamp"] == 20
        assert data["rotation"]["beta"] == -2.0

    def test_rotation_total(self):
        """Test absolute rotation sum."""
        assert RotationRate(1.0, -2.0, 0.5).total == pytest.approx(3.5)


class TestSmoothing:
    """Tests for the display low-pass filter."""

    def test_step_response(self):
        """Test the first-order recurrence on a constant input."""
        samples = [MotionSample(1.0, 0.0, 0.0, i) for i in range(3)]

        smoothed = smooth_axes(samples, weight=0.8)

        assert smoothed[:, 0] == pytest.approx([0.8, 0.96, 0.992])

    def test_weight_one_is_identity(self):
        """Test full weight leaves the signal unchanged."""
        samples = [MotionSample(float(i), -float(i), 0.5, i) for i in range(5)]

        smoothed = smooth_axes(samples, weight=1.0)

        assert np.allclose(smoothed, [[s.x, s.y, s.z] for s in samples])

    def test_empty(self):
        """Test empty input."""
        assert smooth_axes([]).shape == (0, 3)


class TestSampleBuffer:
    """Tests for SampleBuffer and TapLog."""

    def test_display_truncation_keeps_analysis_log(self):
        """Test the bounded projection never trims the analysis log."""
        buffer = SampleBuffer(display_capacity=10)
        for i in range(25):
            buffer.append(MotionSample(0.0, 0.0, 0.0, i))

        assert len(buffer) == 25
        assert len(buffer.snapshot()) == 25
        assert len(buffer.recent_window(100)) == 10
        assert buffer.recent_window(3)[-1].timestamp == 24
        assert buffer.display_trace().shape == (10, 3)

    def test_reset_clears_both(self):
        """Test reset empties the log and the projection."""
        buffer = SampleBuffer()
        buffer.append(MotionSample(0.0, 0.0, 0.0, 1))
        buffer.reset()

        assert len(buffer) == 0
        assert buffer.recent_window(10) == []
        assert buffer.last_timestamp is None

    def test_snapshot_is_a_copy(self):
        """Test later appends do not alter an earlier snapshot."""
        buffer = SampleBuffer()
        buffer.append(MotionSample(0.0, 0.0, 0.0, 1))
        snapshot = buffer.snapshot()
        buffer.append(MotionSample(0.0, 0.0, 0.0, 2))

        assert len(snapshot) == 1

    def test_tap_log(self):
        """Test tap log accumulation and reset."""
        log = TapLog()
        log.append(0.5)
        log.append(1)

        assert log.snapshot() == [0.5, 1.0]
        log.reset()
        assert len(log) == 0


class TestSynthetic:
    """Tests for the synthetic sources."""

    def test_timestamps(self):
        """Test samples are spaced at the sampling interval."""
        source = SyntheticMotionSource(sampling_rate=50.0, start_timestamp=1000)

        samples = source.read(5) + source.read(5)

        assert [s.timestamp for s in samples] == [1000 + 20 * i for i in range(10)]

    def test_seeded(self):
        """Test identical seeds give identical samples."""
        a = SyntheticMotionSource(seed=3).read(20)
        b = SyntheticMotionSource(seed=3).read(20)

        assert [s.x for s in a] == [s.x for s in b]

    def test_stream_length(self):
        """Test stream covers the requested seconds."""
        source = SyntheticMotionSource(sampling_rate=50.0)

        assert len(list(source.stream(2.0))) == 100

    def test_unknown_axis(self):
        """Test invalid axis raises."""
        with pytest.raises(ValueError):
            SyntheticMotionSource(axis="w")

    def test_tap_times_steady(self):
        """Test steady tapping stays inside the window."""
        taps = synthetic_tap_times(4.0, 20.0)

        assert len(taps) == 79
        assert taps[0] == 0.25
        assert all(0 < t < 20.0 for t in taps)

    def test_tap_times_slowdown(self):
        """Test slowdown lengthens the last intervals."""
        taps = synthetic_tap_times(5.0, 20.0, slowdown=0.5)
        intervals = np.diff(taps)

        assert intervals[-1] > intervals[0]

    def test_tap_times_invalid(self):
        """Test non-positive rate gives no taps."""
        assert synthetic_tap_times(0.0, 20.0) == []


class TestLoaders:
    """Tests for JSON recording loaders."""

    def test_load_samples_wrapped(self, temp_dir):
        """Test the samples envelope."""
        path = temp_dir / "samples.json"
        path.write_text(json.dumps({"samples": [{"x": 0.1, "y": 0.0, "z": 0.0, "timestamp": 0}]}))

        samples = load_samples(path)

        assert len(samples) == 1
        assert samples[0].magnitude == pytest.approx(0.1)

    def test_load_samples_malformed(self, temp_dir):
        """Test a sample without timestamp raises."""
        path = temp_dir / "samples.json"
        path.write_text(json.dumps([{"x": 0.1}]))

        with pytest.raises(SampleFormatError, match="index 0"):
            load_samples(path)

    def test_load_invalid_json(self, temp_dir):
        """Test broken JSON raises."""
        path = temp_dir / "samples.json"
        path.write_text("{not json")

        with pytest.raises(SampleFormatError):
            load_samples(path)

    def test_load_missing_file(self, temp_dir):
        """Test a missing file raises."""
        with pytest.raises(FileNotFoundError):
            load_tap_times(temp_dir / "absent.json")

    def test_load_tap_times_sorted(self, temp_dir):
        """Test tap times are returned in order."""
        path = temp_dir / "taps.json"
        path.write_text(json.dumps({"taps": [0.6, 0.2, 0.4]}))

        assert load_tap_times(path) == [0.2, 0.4, 0.6]

    def test_load_tap_times_non_numeric(self, temp_dir):
        """Test non-numeric taps raise."""
        path = temp_dir / "taps.json"
        path.write_text(json.dumps(["a", "b"]))

        with pytest.raises(SampleFormatError):
            load_tap_times(path)

"""
Synthetic Motion Source
=======================

Seeded stand-ins for the motion sensor and the tap button, used when no
device is available and for reproducible demos.
"""

from __future__ import annotations

import math
from typing import Iterator

import numpy as np

from .samples import MotionSample, RotationRate

_AXIS_INDEX = {"x": 0, "y": 1, "z": 2}


class SyntheticMotionSource:
    """Generate tremor-like acceleration samples at a fixed rate."""

    def __init__(
        self,
        sampling_rate: float = 50.0,
        tremor_frequency: float = 5.0,
        amplitude: float = 0.05,
        noise: float = 0.003,
        rotation_scale: float = 2.0,
        axis: str = "x",
        seed: int = 42,
        start_timestamp: int = 0,
    ):
        """
        Initialize source.

        Args:
            sampling_rate: Samples per second
            tremor_frequency: Oscillation frequency (Hz)
            amplitude: Mean acceleration along the tremor axis
            noise: Gaussian noise std on every axis
            rotation_scale: Peak rotation rate (deg/s)
            axis: Axis carrying the oscillation ("x", "y" or "z")
            seed: Random seed
            start_timestamp: Timestamp of the first sample (ms)
        """
        if axis not in _AXIS_INDEX:
            raise ValueError(f"Unknown axis: {axis}")
        self.sampling_rate = sampling_rate
        self.tremor_frequency = tremor_frequency
        self.amplitude = amplitude
        self.noise = noise
        self.rotation_scale = rotation_scale
        self.axis = axis
        self.start_timestamp = start_timestamp
        self._rng = np.random.default_rng(seed)
        self._cursor = 0

    def read(self, n_samples: int) -> list[MotionSample]:
        """Return the next ``n_samples`` samples."""
        if n_samples <= 0:
            return []

        idx = np.arange(n_samples, dtype=float) + self._cursor
        t = idx / float(self.sampling_rate)
        phase = 2.0 * math.pi * self.tremor_frequency * t

        data = self._rng.normal(0.0, self.noise, size=(n_samples, 3))
        # Offset oscillation keeps the magnitude at the tremor frequency
        data[:, _AXIS_INDEX[self.axis]] += self.amplitude * (1.0 + 0.5 * np.sin(phase))

        rot = self.rotation_scale * np.stack(
            [np.sin(phase), np.cos(phase), 0.5 * np.sin(2.0 * phase)], axis=1
        )
        timestamps = self.start_timestamp + np.round(idx * 1000.0 / self.sampling_rate)

        self._cursor += n_samples
        return [
            MotionSample(
                x=float(row[0]),
                y=float(row[1]),
                z=float(row[2]),
                timestamp=int(ts),
                rotation=RotationRate(float(r[0]), float(r[1]), float(r[2])),
            )
            for row, r, ts in zip(data, rot, timestamps)
        ]

    def stream(self, seconds: float) -> Iterator[MotionSample]:
        """Yield samples covering ``seconds`` of recording."""
        yield from self.read(int(seconds * self.sampling_rate))


def synthetic_tap_times(
    rate: float,
    duration: float,
    slowdown: float = 0.0,
    jitter: float = 0.0,
    seed: int = 42,
) -> list[float]:
    """
    Tap times for a tapping phase.

    Args:
        rate: Initial tapping rate (Hz)
        duration: Test length (s)
        slowdown: Fractional rate loss reached at the end of the test
        jitter: Std of gaussian noise added to each interval (s)
        seed: Random seed

    Returns:
        Increasing elapsed times within [0, duration)
    """
    if rate <= 0 or duration <= 0:
        return []

    rng = np.random.default_rng(seed)
    times: list[float] = []
    t = 1.0 / rate
    while t < duration:
        times.append(t)
        current = rate * max(0.05, 1.0 - slowdown * t / duration)
        interval = 1.0 / current
        if jitter > 0:
            interval = max(0.05, interval + rng.normal(0.0, jitter))
        t += interval
    return times

"""
Motion Samples
==============

Immutable accelerometer/gyroscope samples as delivered by the platform
motion sensor, plus the display-side low-pass filter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
from scipy import signal


@dataclass(frozen=True)
class RotationRate:
    """Gyroscope rotation rate (deg/s)."""

    alpha: float = 0.0
    beta: float = 0.0
    gamma: float = 0.0

    @property
    def total(self) -> float:
        """Sum of absolute rotation rates."""
        return abs(self.alpha) + abs(self.beta) + abs(self.gamma)


@dataclass(frozen=True)
class MotionSample:
    """
    One linear acceleration reading.

    Acceleration is expected with gravity removed. ``magnitude`` is always
    derived from the three axes.
    """

    x: float
    y: float
    z: float
    timestamp: int  # ms
    rotation: RotationRate | None = None
    magnitude: float = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "magnitude", math.sqrt(self.x**2 + self.y**2 + self.z**2))

    @classmethod
    def from_acceleration(
        cls,
        x: float,
        y: float,
        z: float,
        timestamp: int,
        alpha: float | None = None,
        beta: float | None = None,
        gamma: float | None = None,
    ) -> MotionSample:
        """Build a sample from raw sensor fields, missing values read as 0."""
        rotation = None
        if alpha is not None or beta is not None or gamma is not None:
            rotation = RotationRate(alpha or 0.0, beta or 0.0, gamma or 0.0)
        return cls(
            x=float(x or 0.0),
            y=float(y or 0.0),
            z=float(z or 0.0),
            timestamp=int(timestamp),
            rotation=rotation,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data: dict[str, Any] = {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "magnitude": self.magnitude,
            "timestamp": self.timestamp,
        }
        if self.rotation is not None:
            data["rotation"] = {
                "alpha": self.rotation.alpha,
                "beta": self.rotation.beta,
                "gamma": self.rotation.gamma,
            }
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MotionSample:
        """Create from dictionary; a stored magnitude is recomputed."""
        rotation = data.get("rotation") or {}
        return cls.from_acceleration(
            data.get("x", 0.0),
            data.get("y", 0.0),
            data.get("z", 0.0),
            data["timestamp"],
            alpha=rotation.get("alpha"),
            beta=rotation.get("beta"),
            gamma=rotation.get("gamma"),
        )


def magnitudes(samples: Sequence[MotionSample]) -> np.ndarray:
    """Magnitude sequence as a float array."""
    return np.array([s.magnitude for s in samples], dtype=float)


def axes(samples: Sequence[MotionSample]) -> np.ndarray:
    """(N, 3) array of x, y, z."""
    if not samples:
        return np.zeros((0, 3), dtype=float)
    return np.array([(s.x, s.y, s.z) for s in samples], dtype=float)


def smooth_axes(samples: Sequence[MotionSample], weight: float = 0.8) -> np.ndarray:
    """
    First-order low-pass of each axis.

    y[n] = weight * x[n] + (1 - weight) * y[n-1], starting from rest.

    Args:
        samples: Samples in time order
        weight: Weight of the newest reading (1.0 disables smoothing)

    Returns:
        (N, 3) smoothed axes
    """
    raw = axes(samples)
    if raw.shape[0] == 0:
        return raw
    return signal.lfilter([weight], [1.0, -(1.0 - weight)], raw, axis=0)

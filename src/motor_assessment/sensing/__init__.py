"""Sensor sample types, phase buffers and sample sources."""

from .buffer import SampleBuffer, TapLog
from .io import load_samples, load_tap_times
from .samples import MotionSample, RotationRate, axes, magnitudes, smooth_axes
from .synthetic import SyntheticMotionSource, synthetic_tap_times

__all__ = [
    "MotionSample",
    "RotationRate",
    "SampleBuffer",
    "SyntheticMotionSource",
    "TapLog",
    "axes",
    "load_samples",
    "load_tap_times",
    "magnitudes",
    "smooth_axes",
    "synthetic_tap_times",
]

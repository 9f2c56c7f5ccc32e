"""Load recorded samples and taps from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..core.exceptions import SampleFormatError
from .samples import MotionSample


def _read_json(path: str | Path) -> Any:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Recording not found: {path}")
    try:
        with path.open("r", encoding="utf-8-sig") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise SampleFormatError(f"Invalid JSON in {path}: {exc}") from exc


def load_samples(path: str | Path) -> list[MotionSample]:
    """
    Load motion samples.

    Accepts a list of sample objects or ``{"samples": [...]}``.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("samples")
    if not isinstance(data, list):
        raise SampleFormatError(f"Expected a list of samples in {path}")

    samples = []
    for i, item in enumerate(data):
        try:
            samples.append(MotionSample.from_dict(item))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise SampleFormatError(f"Malformed sample at index {i} in {path}") from exc
    return samples


def load_tap_times(path: str | Path) -> list[float]:
    """
    Load tap times (seconds since test start).

    Accepts a list of numbers or ``{"taps": [...]}``.
    """
    data = _read_json(path)
    if isinstance(data, dict):
        data = data.get("taps")
    if not isinstance(data, list):
        raise SampleFormatError(f"Expected a list of tap times in {path}")

    try:
        times = [float(t) for t in data]
    except (TypeError, ValueError) as exc:
        raise SampleFormatError(f"Tap times must be numbers in {path}") from exc
    return sorted(times)

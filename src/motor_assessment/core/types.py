"""Enums shared by the analysis and session layers."""

from __future__ import annotations

from enum import Enum


class Hand(Enum):
    """Hand under test."""

    LEFT = "Left"
    RIGHT = "Right"


class PhaseKind(Enum):
    """Kind of timed test phase."""

    TAPPING = "Tapping"
    TREMOR = "Tremor"

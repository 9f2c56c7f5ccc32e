"""
Exceptions raised by the motor assessment package.

Insufficient data, zero durations and out-of-sequence sensor events are
never raised; they resolve to zeroed results or dropped events. Only misuse
of the configuration or the phase-control API surfaces as an exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import Hand, PhaseKind


class MotorAssessmentError(Exception):
    """Base exception for all motor assessment errors."""

    def __init__(
        self,
        message: str,
        *,
        hand: Hand | None = None,
        kind: PhaseKind | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.hand = hand
        self.kind = kind

    def __str__(self) -> str:
        base_message = super().__str__()

        details = []
        if self.hand is not None:
            details.append(f"hand: {self.hand.value}")
        if self.kind is not None:
            details.append(f"phase: {self.kind.value}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class ConfigurationError(MotorAssessmentError):
    """Invalid or unknown configuration values."""


class PhaseStateError(MotorAssessmentError):
    """Illegal phase-control transition."""


class DuplicateResultError(PhaseStateError):
    """A result for this hand and phase kind was already recorded."""


class SampleFormatError(MotorAssessmentError):
    """Malformed sample or tap input."""

"""Per-session store of phase results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..analysis.tapping import TappingResult
from ..analysis.tremor import TremorResult
from ..core.exceptions import DuplicateResultError
from ..core.types import Hand, PhaseKind

PhaseResult = Union[TappingResult, TremorResult]

_FIELDS = {
    (Hand.LEFT, PhaseKind.TAPPING): "left_tapping",
    (Hand.RIGHT, PhaseKind.TAPPING): "right_tapping",
    (Hand.LEFT, PhaseKind.TREMOR): "left_tremor",
    (Hand.RIGHT, PhaseKind.TREMOR): "right_tremor",
}


@dataclass
class SessionRecord:
    """Results keyed by hand and phase kind, each written at most once."""

    left_tapping: TappingResult | None = None
    right_tapping: TappingResult | None = None
    left_tremor: TremorResult | None = None
    right_tremor: TremorResult | None = None

    def get(self, hand: Hand, kind: PhaseKind) -> PhaseResult | None:
        return getattr(self, _FIELDS[(hand, kind)])

    def has(self, hand: Hand, kind: PhaseKind) -> bool:
        return self.get(hand, kind) is not None

    def store(self, hand: Hand, kind: PhaseKind, result: PhaseResult) -> None:
        """Record a phase result; a second write for the same pair is rejected."""
        expected = TappingResult if kind is PhaseKind.TAPPING else TremorResult
        if not isinstance(result, expected):
            raise TypeError(f"Expected {expected.__name__} for {kind.value} phase")
        if self.has(hand, kind):
            raise DuplicateResultError("Result already recorded", hand=hand, kind=kind)
        setattr(self, _FIELDS[(hand, kind)], result)

    def tapping(self, hand: Hand) -> TappingResult | None:
        return self.get(hand, PhaseKind.TAPPING)

    def tremor(self, hand: Hand) -> TremorResult | None:
        return self.get(hand, PhaseKind.TREMOR)

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, name) is not None for name in _FIELDS.values())

    def reset(self) -> None:
        for name in _FIELDS.values():
            setattr(self, name, None)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            name: (result.to_dict() if result is not None else None)
            for name, result in ((n, getattr(self, n)) for n in _FIELDS.values())
        }

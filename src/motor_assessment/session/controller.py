"""
Test Session Controller
=======================

Finite-state machine for the timed test phases of one assessment session.

States: IDLE -> {TAPPING_ACTIVE | TREMOR_ACTIVE}(hand) -> RESULTS(hand, kind)
-> next phase. Sample and tap ingestion is O(1) and only accepted while the
matching phase is active. Stopping a phase (timer expiry or explicit) halts
ingestion, snapshots the buffers, runs the analyzer synchronously, records
the result and publishes it, in that order.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..analysis.scoring import ClinicalScorer, SessionSummary
from ..analysis.tapping import TappingAnalyzer
from ..analysis.tremor import TremorAnalyzer
from ..core.config import Settings
from ..core.exceptions import ConfigurationError, DuplicateResultError, PhaseStateError
from ..core.types import Hand, PhaseKind
from ..sensing.buffer import SampleBuffer, TapLog
from ..sensing.samples import MotionSample
from .record import PhaseResult, SessionRecord

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Hand, PhaseKind, PhaseResult], None]

STANDARD_PROTOCOL: tuple[tuple[PhaseKind, Hand], ...] = (
    (PhaseKind.TAPPING, Hand.LEFT),
    (PhaseKind.TREMOR, Hand.LEFT),
    (PhaseKind.TAPPING, Hand.RIGHT),
    (PhaseKind.TREMOR, Hand.RIGHT),
)


class PhaseState(Enum):
    """Controller state tag."""

    IDLE = "idle"
    TAPPING_ACTIVE = "tapping_active"
    TREMOR_ACTIVE = "tremor_active"
    RESULTS = "results"


@dataclass(frozen=True)
class ActivePhase:
    """The phase currently accepting input."""

    kind: PhaseKind
    hand: Hand
    duration: float  # s
    started_at: float  # clock seconds


@dataclass(frozen=True)
class PhaseProgress:
    """Countdown state reported on each timer tick."""

    kind: PhaseKind
    hand: Hand
    elapsed: float
    remaining: float
    percent: float
    finished: bool = False
    result: PhaseResult | None = None


class TestSessionController:
    """Drive the timed phases and hand finished windows to the analyzers."""

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        settings: Settings | None = None,
        on_result: ResultCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
        protocol: tuple[tuple[PhaseKind, Hand], ...] = STANDARD_PROTOCOL,
    ):
        """
        Initialize controller.

        Args:
            settings: Durations, thresholds and weights
            on_result: Called once per finished phase with (hand, kind, result)
            clock: Seconds source for phase timing
            protocol: Phase order used by ``start_next_phase``
        """
        self.settings = settings or Settings()
        self.on_result = on_result
        self.clock = clock
        self.protocol = protocol

        self.tapping_analyzer = TappingAnalyzer(self.settings.tapping)
        self.tremor_analyzer = TremorAnalyzer(self.settings.tremor)
        self.scorer = ClinicalScorer(self.settings.scoring)

        self.record = SessionRecord()
        self.samples = SampleBuffer(
            display_capacity=self.settings.display.live_window,
            smoothing=self.settings.display.smoothing,
        )
        self.taps = TapLog()

        self._state = PhaseState.IDLE
        self._active: ActivePhase | None = None
        self._last_finished: tuple[Hand, PhaseKind] | None = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> PhaseState:
        return self._state

    @property
    def active_phase(self) -> ActivePhase | None:
        return self._active

    @property
    def last_finished(self) -> tuple[Hand, PhaseKind] | None:
        """(hand, kind) shown in the RESULTS state."""
        return self._last_finished

    @property
    def is_active(self) -> bool:
        return self._active is not None

    @property
    def tap_count(self) -> int:
        return len(self.taps)

    def _now(self, now: float | None) -> float:
        return self.clock() if now is None else now

    # ------------------------------------------------------------------
    # Phase control
    # ------------------------------------------------------------------

    def start_phase(
        self,
        kind: PhaseKind,
        hand: Hand,
        duration_seconds: float | None = None,
        now: float | None = None,
    ) -> ActivePhase:
        """Open a timed phase; buffers are cleared before any input is accepted."""
        if self._active is not None:
            raise PhaseStateError(
                "Cannot start a phase while another is active",
                hand=self._active.hand,
                kind=self._active.kind,
            )
        if self.record.has(hand, kind):
            raise DuplicateResultError("Phase already completed this session", hand=hand, kind=kind)

        if duration_seconds is None:
            duration_seconds = (
                self.settings.tapping.duration_seconds
                if kind is PhaseKind.TAPPING
                else self.settings.tremor.duration_seconds
            )
        if duration_seconds <= 0:
            raise ConfigurationError("Phase duration must be positive", hand=hand, kind=kind)

        self.samples.reset()
        self.taps.reset()

        self._active = ActivePhase(
            kind=kind,
            hand=hand,
            duration=float(duration_seconds),
            started_at=self._now(now),
        )
        self._state = (
            PhaseState.TAPPING_ACTIVE if kind is PhaseKind.TAPPING else PhaseState.TREMOR_ACTIVE
        )
        logger.info("Started %s phase for %s hand (%.1fs)", kind.value, hand.value, duration_seconds)
        return self._active

    def stop_phase(self, now: float | None = None) -> PhaseResult | None:
        """
        Close the active phase and publish its result.

        Returns None when no phase is active.
        """
        if self._active is None:
            logger.debug("stop_phase ignored: no active phase")
            return None

        elapsed = self._now(now) - self._active.started_at
        return self._finish(elapsed)

    def tick(self, now: float | None = None) -> PhaseProgress | None:
        """Timer event; stops the phase once its duration has elapsed."""
        phase = self._active
        if phase is None:
            return None

        elapsed = max(0.0, self._now(now) - phase.started_at)
        if elapsed >= phase.duration:
            result = self._finish(elapsed)
            return PhaseProgress(
                kind=phase.kind,
                hand=phase.hand,
                elapsed=phase.duration,
                remaining=0.0,
                percent=100.0,
                finished=True,
                result=result,
            )

        return PhaseProgress(
            kind=phase.kind,
            hand=phase.hand,
            elapsed=elapsed,
            remaining=phase.duration - elapsed,
            percent=elapsed / phase.duration * 100.0,
        )

    def _finish(self, elapsed: float) -> PhaseResult:
        phase = self._active
        assert phase is not None

        # 1) halt ingestion
        self._active = None
        self._state = PhaseState.RESULTS
        self._last_finished = (phase.hand, phase.kind)

        expired = elapsed >= phase.duration

        # 2) snapshot, 3) analyze
        if phase.kind is PhaseKind.TAPPING:
            duration = phase.duration if expired else elapsed
            result: PhaseResult = self.tapping_analyzer.analyze(
                self.taps.snapshot(), phase.hand, duration
            )
        else:
            result = self.tremor_analyzer.analyze(self.samples.snapshot(), phase.hand)

        # 4) record and publish
        self.record.store(phase.hand, phase.kind, result)
        logger.info(
            "Finished %s phase for %s hand (%s, %.1fs)",
            phase.kind.value,
            phase.hand.value,
            "expired" if expired else "stopped",
            min(elapsed, phase.duration),
        )
        if self.on_result is not None:
            self.on_result(phase.hand, phase.kind, result)
        return result

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    def on_motion_sample(self, sample: MotionSample) -> bool:
        """Accept a sensor sample; returns False when it was dropped."""
        if self._state is not PhaseState.TREMOR_ACTIVE:
            logger.debug("Dropped sample at %d: no tremor phase active", sample.timestamp)
            return False

        last = self.samples.last_timestamp
        if last is not None and sample.timestamp < last:
            logger.debug("Dropped out-of-order sample at %d (last %d)", sample.timestamp, last)
            return False

        self.samples.append(sample)
        return True

    def on_tap(self, now: float | None = None) -> bool:
        """Record a tap; returns False when it was dropped."""
        phase = self._active
        if phase is None or phase.kind is not PhaseKind.TAPPING:
            logger.debug("Dropped tap: no tapping phase active")
            return False

        elapsed = self._now(now) - phase.started_at
        if elapsed < 0 or elapsed > phase.duration:
            logger.debug("Dropped tap at %.3fs outside the %.1fs window", elapsed, phase.duration)
            return False

        self.taps.append(elapsed)
        return True

    # ------------------------------------------------------------------
    # Protocol and output
    # ------------------------------------------------------------------

    def next_pending_phase(self) -> tuple[PhaseKind, Hand] | None:
        """First protocol step without a recorded result."""
        for kind, hand in self.protocol:
            if not self.record.has(hand, kind):
                return kind, hand
        return None

    def start_next_phase(self, now: float | None = None) -> ActivePhase:
        pending = self.next_pending_phase()
        if pending is None:
            raise PhaseStateError("All protocol phases are complete")
        kind, hand = pending
        return self.start_phase(kind, hand, now=now)

    def live_window(self, n: int | None = None) -> list[MotionSample]:
        """Most recent samples for the live trace."""
        return self.samples.recent_window(n or self.settings.display.live_window)

    def get_session_summary(self) -> SessionSummary:
        return self.scorer.summarize(self.record)

    def restart(self) -> None:
        """Discard every result and return to IDLE."""
        self._active = None
        self._last_finished = None
        self.samples.reset()
        self.taps.reset()
        self.record.reset()
        self._state = PhaseState.IDLE
        logger.info("Session restarted")

"""
Simulated Session Runner
========================

Play the standard four-phase protocol through a ``TestSessionController``
using the seeded synthetic sources and a virtual clock, so a full session
completes instantly and reproducibly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from ..analysis.scoring import SessionSummary
from ..core.config import Settings
from ..core.types import Hand, PhaseKind
from ..sensing.synthetic import SyntheticMotionSource, synthetic_tap_times
from .controller import TestSessionController

logger = logging.getLogger(__name__)

EventCallback = Callable[[dict[str, Any]], None]


@dataclass
class SimulatedHand:
    """Motor behaviour of one simulated hand."""

    tap_rate: float = 5.5  # Hz
    slowdown: float = 0.1
    jitter: float = 0.01  # s
    tremor_amplitude: float = 0.03
    tremor_frequency: float = 5.0  # Hz
    tremor_axis: str = "x"


DEFAULT_PROFILES = {
    Hand.LEFT: SimulatedHand(tap_rate=5.0, slowdown=0.15, tremor_amplitude=0.03),
    Hand.RIGHT: SimulatedHand(tap_rate=6.0, slowdown=0.05, tremor_amplitude=0.015),
}


class VirtualClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


def _emit(event_cb: EventCallback | None, event: str, **payload: Any) -> None:
    if not event_cb:
        return
    event_cb({"event": event, **payload})


def _phase_events(
    kind: PhaseKind,
    profile: SimulatedHand,
    duration: float,
    sampling_rate: float,
    start: float,
    seed: int,
) -> list[tuple[float, int, Any]]:
    """Inputs and one-second ticks ordered by time; inputs precede a tick at the same instant."""
    events: list[tuple[float, int, Any]] = []

    if kind is PhaseKind.TAPPING:
        taps = synthetic_tap_times(
            profile.tap_rate, duration, slowdown=profile.slowdown, jitter=profile.jitter, seed=seed
        )
        events.extend((start + t, 0, None) for t in taps)
    else:
        source = SyntheticMotionSource(
            sampling_rate=sampling_rate,
            tremor_frequency=profile.tremor_frequency,
            amplitude=profile.tremor_amplitude,
            axis=profile.tremor_axis,
            seed=seed,
            start_timestamp=int(round(start * 1000)),
        )
        events.extend(
            (start + (s.timestamp - source.start_timestamp) / 1000.0, 0, s)
            for s in source.stream(duration)
        )

    second = 1
    while second < duration:
        events.append((start + second, 1, None))
        second += 1
    events.append((start + duration, 1, None))

    events.sort(key=lambda e: (e[0], e[1]))
    return events


def run_simulated_session(
    settings: Settings | None = None,
    profiles: dict[Hand, SimulatedHand] | None = None,
    seed: int = 42,
    event_cb: EventCallback | None = None,
) -> SessionSummary:
    """
    Run every protocol phase against synthetic input.

    Args:
        settings: Controller settings
        profiles: Per-hand simulated behaviour
        seed: Base random seed
        event_cb: Receives ``{"event": ..., **payload}`` progress dicts

    Returns:
        SessionSummary of the completed session
    """
    settings = settings or Settings()
    profiles = {**DEFAULT_PROFILES, **(profiles or {})}
    clock = VirtualClock()

    controller = TestSessionController(
        settings,
        on_result=lambda hand, kind, result: _emit(
            event_cb, "phase_complete", hand=hand.value, kind=kind.value, result=result.to_dict()
        ),
        clock=clock,
    )

    _emit(event_cb, "session_start", phases=[(k.value, h.value) for k, h in controller.protocol])

    step = 0
    while (pending := controller.next_pending_phase()) is not None:
        kind, hand = pending
        phase = controller.start_next_phase()
        _emit(event_cb, "phase_start", hand=hand.value, kind=kind.value, duration=phase.duration)

        events = _phase_events(
            kind,
            profiles[hand],
            phase.duration,
            settings.tremor.sampling_rate,
            phase.started_at,
            seed + step,
        )
        for at, tag, payload in events:
            clock.now = at
            if tag == 0:
                if kind is PhaseKind.TAPPING:
                    controller.on_tap()
                else:
                    controller.on_motion_sample(payload)
                continue

            progress = controller.tick()
            if progress is None:
                break
            _emit(
                event_cb,
                "phase_tick",
                hand=hand.value,
                kind=kind.value,
                remaining=progress.remaining,
                percent=progress.percent,
            )
            if progress.finished:
                break

        if controller.is_active:
            controller.stop_phase()
        step += 1

    summary = controller.get_session_summary()
    logger.info("Simulated session complete: %s", summary.overall_status.value)
    _emit(event_cb, "session_complete", summary=summary.to_dict())
    return summary

"""Session state machine, result record and simulated runs."""

from .controller import (
    STANDARD_PROTOCOL,
    ActivePhase,
    PhaseProgress,
    PhaseState,
    TestSessionController,
)
from .record import PhaseResult, SessionRecord
from .runner import DEFAULT_PROFILES, SimulatedHand, VirtualClock, run_simulated_session

__all__ = [
    "STANDARD_PROTOCOL",
    "ActivePhase",
    "DEFAULT_PROFILES",
    "PhaseProgress",
    "PhaseResult",
    "PhaseState",
    "SessionRecord",
    "SimulatedHand",
    "TestSessionController",
    "VirtualClock",
    "run_simulated_session",
]

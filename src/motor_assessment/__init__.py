"""Hand Motor Assessment: finger tapping and resting tremor.

A toolkit for timed hand motor tests driven by a motion sensor and a tap
button: per-phase tapping and tremor analysis, bilateral clinical scoring,
a session state machine and Markdown reporting.
"""

__version__ = "0.1.0"

from motor_assessment.analysis import (
    ClinicalScorer,
    SessionSummary,
    TappingAnalyzer,
    TappingResult,
    TremorAnalyzer,
    TremorResult,
)
from motor_assessment.core import Hand, PhaseKind, Settings, get_settings
from motor_assessment.sensing import MotionSample
from motor_assessment.session import SessionRecord, TestSessionController, run_simulated_session

__all__ = [
    "ClinicalScorer",
    "Hand",
    "MotionSample",
    "PhaseKind",
    "SessionRecord",
    "SessionSummary",
    "Settings",
    "TappingAnalyzer",
    "TappingResult",
    "TestSessionController",
    "TremorAnalyzer",
    "TremorResult",
    "__version__",
    "get_settings",
    "run_simulated_session",
]

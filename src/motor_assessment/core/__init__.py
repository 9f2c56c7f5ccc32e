"""Core infrastructure modules."""

from .config import (
    DisplayConfig,
    ScoringConfig,
    Settings,
    TappingConfig,
    TremorConfig,
    get_settings,
    reload_settings,
)
from .exceptions import (
    ConfigurationError,
    DuplicateResultError,
    MotorAssessmentError,
    PhaseStateError,
    SampleFormatError,
)
from .types import Hand, PhaseKind

__all__ = [
    "ConfigurationError",
    "DisplayConfig",
    "DuplicateResultError",
    "Hand",
    "MotorAssessmentError",
    "PhaseKind",
    "PhaseStateError",
    "SampleFormatError",
    "ScoringConfig",
    "Settings",
    "TappingConfig",
    "TremorConfig",
    "get_settings",
    "reload_settings",
]

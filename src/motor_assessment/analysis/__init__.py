"""Analysis modules.

Execution order:
1) frequency estimation (shared)
2) tapping or tremor analysis per phase
3) clinical scoring per session
"""

from .frequency import (
    FrequencyEstimator,
    FrequencyMethod,
    count_peaks,
    count_zero_crossings,
    elapsed_seconds,
    estimate_frequency,
)
from .scoring import (
    BilateralComparison,
    ClinicalScorer,
    HandAssessment,
    HandCategory,
    OverallStatus,
    SessionSummary,
)
from .tapping import (
    TappingAnalyzer,
    TappingGrade,
    TappingResult,
    analyze_tapping,
    fatigue_index,
    grade_for_score,
    interval_consistency,
    peak_tap_rate,
    tapping_score,
)
from .tremor import (
    Axis,
    TremorAnalyzer,
    TremorResult,
    TremorSeverity,
    TremorType,
    analyze_tremor,
    classify_severity,
    dominant_axis,
)

__all__ = [
    "FrequencyEstimator",
    "FrequencyMethod",
    "count_peaks",
    "count_zero_crossings",
    "elapsed_seconds",
    "estimate_frequency",
    "TappingAnalyzer",
    "TappingGrade",
    "TappingResult",
    "analyze_tapping",
    "fatigue_index",
    "grade_for_score",
    "interval_consistency",
    "peak_tap_rate",
    "tapping_score",
    "Axis",
    "TremorAnalyzer",
    "TremorResult",
    "TremorSeverity",
    "TremorType",
    "analyze_tremor",
    "classify_severity",
    "dominant_axis",
    "BilateralComparison",
    "ClinicalScorer",
    "HandAssessment",
    "HandCategory",
    "OverallStatus",
    "SessionSummary",
]

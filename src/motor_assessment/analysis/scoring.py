"""
Clinical Scoring
================

Combine tapping and tremor results into per-hand assessments, a bilateral
comparison, dominant-hand prediction, an overall status and plain-language
recommendations. Outputs are heuristic indicators, not a diagnosis.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..core.config import ScoringConfig
from ..core.types import Hand
from .tapping import TappingResult
from .tremor import TremorResult

if TYPE_CHECKING:
    from ..session.record import SessionRecord

logger = logging.getLogger(__name__)

UNKNOWN_HAND = "Unknown"

NORMAL_RANGE_MESSAGES = (
    "Motor performance is within normal range for both hands.",
    "Repeat the assessment periodically to monitor for changes.",
)


class OverallStatus(Enum):
    """Session-level classification."""

    NORMAL = "Normal"
    MILD_ISSUES = "Mild Issues"
    NEEDS_ATTENTION = "Needs Attention"
    INCOMPLETE = "Incomplete"


class HandCategory(Enum):
    """Category of the single-hand composite score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


@dataclass(frozen=True)
class BilateralComparison:
    """Left/right differences."""

    tapping_frequency_difference: float  # Hz
    tremor_amplitude_difference: float
    tremor_frequency_difference: float  # Hz
    stability_difference: float  # gyro stability points
    tapping_asymmetry: bool
    amplitude_asymmetry: bool

    @property
    def significant_asymmetry(self) -> bool:
        return self.tapping_asymmetry or self.amplitude_asymmetry

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "tapping_frequency_difference": self.tapping_frequency_difference,
            "tremor_amplitude_difference": self.tremor_amplitude_difference,
            "tremor_frequency_difference": self.tremor_frequency_difference,
            "stability_difference": self.stability_difference,
            "tapping_asymmetry": self.tapping_asymmetry,
            "amplitude_asymmetry": self.amplitude_asymmetry,
            "significant_asymmetry": self.significant_asymmetry,
        }


@dataclass(frozen=True)
class HandAssessment:
    """Single-hand view combining one hand's tapping and tremor phases."""

    hand: Hand
    score: float  # 0-100
    category: HandCategory
    interpretation: str

    tapping_frequency: float
    rhythmicity: float
    tremor_frequency: float
    tremor_amplitude: float
    gyro_stability: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "hand": self.hand.value,
            "score": self.score,
            "category": self.category.value,
            "interpretation": self.interpretation,
            "tapping_frequency": self.tapping_frequency,
            "rhythmicity": self.rhythmicity,
            "tremor_frequency": self.tremor_frequency,
            "tremor_amplitude": self.tremor_amplitude,
            "gyro_stability": self.gyro_stability,
        }


@dataclass
class SessionSummary:
    """Everything the results screen displays."""

    record: SessionRecord
    dominant_hand: str
    dominance_confidence: float | None
    overall_status: OverallStatus
    average_tapping_score: float | None
    any_tremor: bool | None
    bilateral: BilateralComparison | None
    recommendations: list[str]
    has_findings: bool
    hand_assessments: dict[Hand, HandAssessment] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "record": self.record.to_dict(),
            "dominant_hand": self.dominant_hand,
            "dominance_confidence": self.dominance_confidence,
            "overall_status": self.overall_status.value,
            "average_tapping_score": self.average_tapping_score,
            "any_tremor": self.any_tremor,
            "bilateral": self.bilateral.to_dict() if self.bilateral else None,
            "recommendations": list(self.recommendations),
            "has_findings": self.has_findings,
            "hand_assessments": {
                hand.value: assessment.to_dict()
                for hand, assessment in self.hand_assessments.items()
            },
        }


class ClinicalScorer:
    """Derive session-level findings from recorded phase results."""

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    # ------------------------------------------------------------------
    # Bilateral
    # ------------------------------------------------------------------

    def compare_bilateral(self, record: SessionRecord) -> BilateralComparison | None:
        """Left/right differences; None unless all four results exist."""
        if not record.is_complete:
            return None

        left_tap, right_tap = record.left_tapping, record.right_tapping
        left_tremor, right_tremor = record.left_tremor, record.right_tremor

        freq_diff = abs(left_tap.average_frequency - right_tap.average_frequency)
        amp_diff = abs(left_tremor.amplitude - right_tremor.amplitude)

        return BilateralComparison(
            tapping_frequency_difference=freq_diff,
            tremor_amplitude_difference=amp_diff,
            tremor_frequency_difference=abs(left_tremor.frequency - right_tremor.frequency),
            stability_difference=abs(left_tremor.gyro_stability - right_tremor.gyro_stability),
            tapping_asymmetry=freq_diff > self.config.tapping_frequency_asymmetry,
            amplitude_asymmetry=amp_diff > self.config.tremor_amplitude_asymmetry,
        )

    def predict_dominant_hand(self, record: SessionRecord) -> str:
        """Hand with the higher tapping score; ties go right."""
        if record.left_tapping is None or record.right_tapping is None:
            return UNKNOWN_HAND
        if record.left_tapping.score > record.right_tapping.score:
            return Hand.LEFT.value
        return Hand.RIGHT.value

    def dominance_confidence(self, record: SessionRecord) -> float | None:
        """0-100 confidence, 100 at equal tapping scores and falling 2 points per score of gap."""
        if record.left_tapping is None or record.right_tapping is None:
            return None
        gap = abs(record.left_tapping.score - record.right_tapping.score)
        return 100.0 - min(100.0, gap * 2.0)

    # ------------------------------------------------------------------
    # Status and recommendations
    # ------------------------------------------------------------------

    def overall_status(self, record: SessionRecord) -> OverallStatus:
        if not record.is_complete:
            return OverallStatus.INCOMPLETE

        average = (record.left_tapping.score + record.right_tapping.score) / 2.0
        tremor = record.left_tremor.has_tremor or record.right_tremor.has_tremor

        if average >= self.config.normal_average_score and not tremor:
            return OverallStatus.NORMAL
        if average >= self.config.mild_average_score and not tremor:
            return OverallStatus.MILD_ISSUES
        return OverallStatus.NEEDS_ATTENTION

    def recommendations(
        self,
        record: SessionRecord,
        bilateral: BilateralComparison | None = None,
    ) -> tuple[list[str], bool]:
        """
        Ordered findings and whether any alert was raised.

        Checks low tapping score, tremor presence and high fatigue per hand,
        then frequency and amplitude asymmetry. Without findings the normal
        range message set is returned instead.
        """
        findings: list[str] = []
        hands = (Hand.LEFT, Hand.RIGHT)

        for hand in hands:
            tapping = record.tapping(hand)
            if tapping is not None and tapping.score < self.config.low_tapping_score:
                findings.append(
                    f"{hand.value} hand tapping score is low ({tapping.score:.0f}/100); "
                    "slowed or irregular tapping may indicate reduced motor function."
                )

        for hand in hands:
            tremor = record.tremor(hand)
            if tremor is not None and tremor.has_tremor:
                findings.append(
                    f"{hand.value} hand shows {tremor.severity.value.lower()} tremor "
                    f"(mean amplitude {tremor.amplitude:.3f}); consider clinical follow-up."
                )

        for hand in hands:
            tapping = record.tapping(hand)
            if tapping is not None and tapping.fatigue_index > self.config.high_fatigue_index:
                findings.append(
                    f"{hand.value} hand tapping slowed by {tapping.fatigue_index:.0%} "
                    "over the test, suggesting motor fatigue."
                )

        if bilateral is not None:
            if bilateral.tapping_asymmetry:
                findings.append(
                    "Tapping speed differs between hands by "
                    f"{bilateral.tapping_frequency_difference:.1f} Hz; "
                    "marked asymmetry can accompany one-sided motor slowing."
                )
            if bilateral.amplitude_asymmetry:
                findings.append(
                    "Tremor amplitude differs between hands by "
                    f"{bilateral.tremor_amplitude_difference:.3f}; "
                    "one-sided tremor should be reviewed by a clinician."
                )

        if not findings:
            return list(NORMAL_RANGE_MESSAGES), False
        return findings, True

    # ------------------------------------------------------------------
    # Single-hand view
    # ------------------------------------------------------------------

    def interpret(
        self,
        tapping_frequency: float,
        tremor_frequency: float,
        tremor_amplitude: float,
        stability: float | None = None,
    ) -> str:
        """Free-text interpretation of one hand's tapping and tremor metrics."""
        cfg = self.config

        if tapping_frequency < cfg.severe_bradykinesia_hz:
            text = (
                "Severe bradykinesia detected - significantly reduced movement speed. "
                "Consider neurological assessment."
            )
        elif tapping_frequency < cfg.bradykinesia_hz:
            text = (
                "Bradykinesia detected - reduced movement speed. "
                "Suggests mild to moderate motor slowness."
            )
        elif (
            0.0 < tremor_frequency < cfg.pathological_max_hz
            and tremor_amplitude > cfg.pathological_amplitude
        ):
            text = (
                "Possible pathological tremor (resting or essential tremor characteristics). "
                "Consult a physician for further evaluation."
            )
        elif (
            cfg.pathological_max_hz <= tremor_frequency <= cfg.physiological_max_hz
            and tremor_amplitude < cfg.pathological_amplitude
        ):
            text = (
                "Physiological tremor detected - within normal range, "
                "usually not clinically significant."
            )
        elif tremor_amplitude > cfg.significant_amplitude:
            text = "Significant tremor amplitude detected. Further clinical assessment recommended."
        else:
            text = "Normal motor function, good tapping rate and minimal tremor detected."

        if stability is not None and stability < cfg.stability_alert:
            text += f" Reduced hand stability (gyro stability {stability:.0f}%)."

        return text

    def category_for_score(self, score: float) -> HandCategory:
        if score >= self.config.excellent_threshold:
            return HandCategory.EXCELLENT
        if score >= self.config.good_threshold:
            return HandCategory.GOOD
        if score >= self.config.fair_threshold:
            return HandCategory.FAIR
        return HandCategory.POOR

    def assess_hand(self, tapping: TappingResult, tremor: TremorResult) -> HandAssessment:
        """Composite score, category and interpretation for one hand."""
        cfg = self.config

        frequency_score = min(100.0, tapping.average_frequency * cfg.hand_frequency_scale)
        tremor_frequency_score = max(0.0, 100.0 - tremor.frequency * cfg.tremor_frequency_penalty)
        tremor_amplitude_score = max(0.0, 100.0 - tremor.amplitude * cfg.tremor_amplitude_penalty)

        score = (
            frequency_score * cfg.hand_frequency_weight
            + tapping.rhythmicity * cfg.hand_rhythmicity_weight
            + tremor.gyro_stability * cfg.hand_stability_weight
            + tremor_frequency_score * cfg.hand_tremor_frequency_weight
            + tremor_amplitude_score * cfg.hand_tremor_amplitude_weight
        )
        score = min(100.0, max(0.0, score))

        return HandAssessment(
            hand=tapping.hand,
            score=score,
            category=self.category_for_score(score),
            interpretation=self.interpret(
                tapping.average_frequency,
                tremor.frequency,
                tremor.amplitude,
                tremor.gyro_stability,
            ),
            tapping_frequency=tapping.average_frequency,
            rhythmicity=tapping.rhythmicity,
            tremor_frequency=tremor.frequency,
            tremor_amplitude=tremor.amplitude,
            gyro_stability=tremor.gyro_stability,
        )

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def summarize(self, record: SessionRecord) -> SessionSummary:
        """Build the final results structure for a session record."""
        bilateral = self.compare_bilateral(record)
        recommendations, has_findings = self.recommendations(record, bilateral)

        average_score = None
        any_tremor = None
        if record.is_complete:
            average_score = (record.left_tapping.score + record.right_tapping.score) / 2.0
            any_tremor = record.left_tremor.has_tremor or record.right_tremor.has_tremor

        assessments = {}
        for hand in (Hand.LEFT, Hand.RIGHT):
            tapping, tremor = record.tapping(hand), record.tremor(hand)
            if tapping is not None and tremor is not None:
                assessments[hand] = self.assess_hand(tapping, tremor)

        status = self.overall_status(record)
        logger.info(
            "Session summary: status=%s, findings=%d",
            status.value,
            len(recommendations) if has_findings else 0,
        )

        return SessionSummary(
            record=record,
            dominant_hand=self.predict_dominant_hand(record),
            dominance_confidence=self.dominance_confidence(record),
            overall_status=status,
            average_tapping_score=average_score,
            any_tremor=any_tremor,
            bilateral=bilateral,
            recommendations=recommendations,
            has_findings=has_findings,
            hand_assessments=assessments,
        )

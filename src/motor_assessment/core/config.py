"""Configuration management with dataclasses and YAML loading."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


@dataclass
class TappingConfig:
    """Finger tapping test and scoring parameters."""

    duration_seconds: float = 20.0
    window_seconds: float = 3.0  # sliding window for peak rate
    min_taps: int = 2
    min_taps_per_third: int = 2

    # Weighted score
    frequency_weight: float = 0.30
    consistency_weight: float = 0.25
    peak_weight: float = 0.25
    fatigue_weight: float = 0.20
    frequency_scale: float = 12.0
    peak_scale: float = 8.0

    # Grade thresholds (score >= threshold)
    normal_threshold: float = 70.0
    mild_threshold: float = 50.0
    moderate_threshold: float = 30.0
    significant_threshold: float = 15.0

    # Rhythmicity around the expected tapping rate
    optimal_frequency: float = 5.0
    rhythmicity_slope: float = 15.0

    @property
    def weights(self) -> tuple[float, float, float, float]:
        return (
            self.frequency_weight,
            self.consistency_weight,
            self.peak_weight,
            self.fatigue_weight,
        )


@dataclass
class TremorConfig:
    """Tremor test and severity parameters."""

    duration_seconds: float = 10.0
    sampling_rate: float = 50.0  # Hz, nominal sensor rate
    min_samples: int = 20
    frequency_method: str = "zero_crossing"
    min_peak_distance: int = 5  # samples
    peak_min_samples: int = 50

    # Severity thresholds on mean magnitude (amplitude >= threshold)
    minimal_threshold: float = 0.02
    mild_threshold: float = 0.04
    moderate_threshold: float = 0.08
    severe_threshold: float = 0.15
    very_severe_threshold: float = 0.25
    tremor_threshold: float = 0.02  # has_tremor when amplitude exceeds this

    gyro_stability_scale: float = 2.0
    high_quality_samples: int = 50


@dataclass
class ScoringConfig:
    """Bilateral comparison, status and interpretation thresholds."""

    tapping_frequency_asymmetry: float = 1.5  # Hz
    tremor_amplitude_asymmetry: float = 0.03
    low_tapping_score: float = 50.0
    high_fatigue_index: float = 0.3
    normal_average_score: float = 70.0
    mild_average_score: float = 50.0
    stability_alert: float = 60.0

    # Single-hand interpretation
    severe_bradykinesia_hz: float = 1.0
    bradykinesia_hz: float = 3.0
    pathological_max_hz: float = 6.0
    physiological_max_hz: float = 12.0
    pathological_amplitude: float = 0.25
    significant_amplitude: float = 0.5

    # Single-hand composite score
    hand_frequency_weight: float = 0.3
    hand_rhythmicity_weight: float = 0.2
    hand_stability_weight: float = 0.3
    hand_tremor_frequency_weight: float = 0.1
    hand_tremor_amplitude_weight: float = 0.1
    hand_frequency_scale: float = 20.0
    tremor_frequency_penalty: float = 10.0
    tremor_amplitude_penalty: float = 200.0

    excellent_threshold: float = 90.0
    good_threshold: float = 75.0
    fair_threshold: float = 60.0

    @property
    def hand_weights(self) -> tuple[float, float, float, float, float]:
        return (
            self.hand_frequency_weight,
            self.hand_rhythmicity_weight,
            self.hand_stability_weight,
            self.hand_tremor_frequency_weight,
            self.hand_tremor_amplitude_weight,
        )


@dataclass
class DisplayConfig:
    """Live trace projection."""

    live_window: int = 100
    smoothing: float = 0.8


_SECTIONS: dict[str, type] = {
    "tapping": TappingConfig,
    "tremor": TremorConfig,
    "scoring": ScoringConfig,
    "display": DisplayConfig,
}


@dataclass
class Settings:
    """Main application settings."""

    tapping: TappingConfig = field(default_factory=TappingConfig)
    tremor: TremorConfig = field(default_factory=TremorConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> Settings:
        """Load settings from YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file must contain a mapping: {path}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create Settings from dictionary."""
        unknown = set(data) - set(_SECTIONS)
        if unknown:
            raise ConfigurationError(f"Unknown settings sections: {', '.join(sorted(unknown))}")

        sections = {}
        for name, section_cls in _SECTIONS.items():
            values = data.get(name) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"Settings section '{name}' must be a mapping")
            allowed = {f.name for f in fields(section_cls)}
            bad_keys = set(values) - allowed
            if bad_keys:
                raise ConfigurationError(
                    f"Unknown keys in '{name}' section: {', '.join(sorted(bad_keys))}"
                )
            sections[name] = section_cls(**values)

        settings = cls(**sections)
        try:
            settings.validate()
        except TypeError as e:
            raise ConfigurationError(f"Invalid settings value type: {e}") from e
        return settings

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to dictionary."""
        return asdict(self)

    def validate(self) -> None:
        """Reject values the analyzers cannot work with."""
        if self.tapping.duration_seconds <= 0 or self.tremor.duration_seconds <= 0:
            raise ConfigurationError("Test durations must be positive")
        if self.tapping.window_seconds <= 0:
            raise ConfigurationError("Tapping window must be positive")
        if self.tremor.sampling_rate <= 0:
            raise ConfigurationError("Sampling rate must be positive")
        if self.tremor.frequency_method not in {"zero_crossing", "peak"}:
            raise ConfigurationError(
                f"Unsupported frequency method: {self.tremor.frequency_method}"
            )
        if not math.isclose(sum(self.tapping.weights), 1.0, abs_tol=1e-6):
            raise ConfigurationError("Tapping score weights must sum to 1")
        if not math.isclose(sum(self.scoring.hand_weights), 1.0, abs_tol=1e-6):
            raise ConfigurationError("Hand composite weights must sum to 1")
        if self.display.live_window <= 0:
            raise ConfigurationError("Live window must hold at least one sample")
        if not 0.0 < self.display.smoothing <= 1.0:
            raise ConfigurationError("Display smoothing must be in (0, 1]")

    def to_yaml(self, path: str | Path) -> Path:
        """Write settings to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        return path


# Global settings instance
_settings: Settings | None = None


def get_settings(config_path: str | Path | None = None) -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        if config_path is None:
            # Default config paths to check
            for candidate in [
                Path("config/settings.yaml"),
                Path.home() / ".config/motor-assessment/settings.yaml",
            ]:
                if candidate.exists():
                    config_path = candidate
                    break

        _settings = Settings.from_yaml(config_path) if config_path else Settings()

    return _settings


def reload_settings(config_path: str | Path | None = None) -> Settings:
    """Force reload settings from file."""
    global _settings
    _settings = None
    return get_settings(config_path)

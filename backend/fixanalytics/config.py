"""
Analysis configuration.

Every threshold used by the derivation pipeline lives here so the differing
constants found across log variants can be chosen per invocation instead of
being baked into the classifiers. Defaults can be overridden through
FIXANALYTICS_* environment variables.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


DEFAULT_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M:%S"
DEFAULT_EXPECTED_INTERVAL_S = 3.0
DEFAULT_GAP_MULTIPLIER = 2.0
DEFAULT_DRIFT_TOLERANCE_S = 1.0
DEFAULT_SPEED_THRESHOLD_KMH = 5.0
DEFAULT_SHARP_TURN_DEG = 45.0
DEFAULT_HIGH_SPEED_KMH = 50.0
DEFAULT_MIN_STOP_RUN_LENGTH = 3
DEFAULT_JITTER_CEILING_S = 60.0

# Gap severity ladder, as multiples of the expected interval
DEFAULT_SEVERITY_THRESHOLDS = (2.5, 3.5, 5.0)  # medium, high, critical


@dataclass(frozen=True)
class FieldSchema:
    """Column names of a raw fix record."""

    timestamp: str = "Transmitted Time"
    latitude: str = "Latitude"
    longitude: str = "Longitude"
    altitude: str = "Altitude"
    heading: str = "Direction"
    satellites: str = "Satellites"


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Thresholds and formats for one pipeline invocation.

    Attributes:
        timestamp_format: strptime format of the timestamp column
        expected_interval_s: nominal transmission period
        gap_multiplier: a time gap above expected * multiplier is a Gap
        drift_tolerance_s: allowed |gap - expected| before flagging Drift
        speed_threshold_kmh: above this a sample is moving
        sharp_turn_deg: heading delta above this is a sharp turn
        high_speed_kmh: above this a sample is high speed
        min_stop_run_length: stationary runs longer than this are stops
        jitter_sanity_ceiling_s: gaps above this are excluded from jitter
        severity_thresholds: (medium, high, critical) gap/expected ratios
        fields: column names of the raw records
    """

    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT
    expected_interval_s: float = DEFAULT_EXPECTED_INTERVAL_S
    gap_multiplier: float = DEFAULT_GAP_MULTIPLIER
    drift_tolerance_s: float = DEFAULT_DRIFT_TOLERANCE_S
    speed_threshold_kmh: float = DEFAULT_SPEED_THRESHOLD_KMH
    sharp_turn_deg: float = DEFAULT_SHARP_TURN_DEG
    high_speed_kmh: float = DEFAULT_HIGH_SPEED_KMH
    min_stop_run_length: int = DEFAULT_MIN_STOP_RUN_LENGTH
    jitter_sanity_ceiling_s: float = DEFAULT_JITTER_CEILING_S
    severity_thresholds: tuple[float, float, float] = DEFAULT_SEVERITY_THRESHOLDS
    fields: FieldSchema = field(default_factory=FieldSchema)

    def __post_init__(self):
        if not self.timestamp_format:
            raise ValueError("timestamp_format must not be empty")
        if self.expected_interval_s <= 0:
            raise ValueError("expected_interval_s must be positive")
        if self.gap_multiplier <= 1.0:
            raise ValueError("gap_multiplier must be greater than 1")
        if self.drift_tolerance_s < 0:
            raise ValueError("drift_tolerance_s must not be negative")
        if self.speed_threshold_kmh < 0 or self.high_speed_kmh < 0:
            raise ValueError("speed thresholds must not be negative")
        if not 0 <= self.sharp_turn_deg <= 180:
            raise ValueError("sharp_turn_deg must be within [0, 180]")
        if self.min_stop_run_length < 0:
            raise ValueError("min_stop_run_length must not be negative")
        if self.jitter_sanity_ceiling_s <= 0:
            raise ValueError("jitter_sanity_ceiling_s must be positive")

        thresholds = tuple(float(t) for t in self.severity_thresholds)
        if len(thresholds) != 3:
            raise ValueError("severity_thresholds needs (medium, high, critical)")
        if not thresholds[0] < thresholds[1] < thresholds[2]:
            raise ValueError("severity_thresholds must be strictly ascending")
        object.__setattr__(self, "severity_thresholds", thresholds)

    def with_overrides(self, **overrides) -> "AnalysisConfig":
        """Return a copy with the given non-None fields replaced."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        return replace(self, **changes)

    @classmethod
    def from_env(cls, fields: Optional[FieldSchema] = None) -> "AnalysisConfig":
        """Build a configuration from FIXANALYTICS_* environment variables."""
        return cls(
            timestamp_format=os.getenv("FIXANALYTICS_TIMESTAMP_FORMAT", DEFAULT_TIMESTAMP_FORMAT),
            expected_interval_s=_env_float("FIXANALYTICS_EXPECTED_INTERVAL_S", DEFAULT_EXPECTED_INTERVAL_S),
            gap_multiplier=_env_float("FIXANALYTICS_GAP_MULTIPLIER", DEFAULT_GAP_MULTIPLIER),
            drift_tolerance_s=_env_float("FIXANALYTICS_DRIFT_TOLERANCE_S", DEFAULT_DRIFT_TOLERANCE_S),
            speed_threshold_kmh=_env_float("FIXANALYTICS_SPEED_THRESHOLD_KMH", DEFAULT_SPEED_THRESHOLD_KMH),
            sharp_turn_deg=_env_float("FIXANALYTICS_SHARP_TURN_DEG", DEFAULT_SHARP_TURN_DEG),
            high_speed_kmh=_env_float("FIXANALYTICS_HIGH_SPEED_KMH", DEFAULT_HIGH_SPEED_KMH),
            min_stop_run_length=_env_int("FIXANALYTICS_MIN_STOP_RUN_LENGTH", DEFAULT_MIN_STOP_RUN_LENGTH),
            jitter_sanity_ceiling_s=_env_float("FIXANALYTICS_JITTER_CEILING_S", DEFAULT_JITTER_CEILING_S),
            fields=fields or FieldSchema(),
        )

    def to_dict(self) -> dict:
        return {
            "timestamp_format": self.timestamp_format,
            "expected_interval_s": self.expected_interval_s,
            "gap_multiplier": self.gap_multiplier,
            "drift_tolerance_s": self.drift_tolerance_s,
            "speed_threshold_kmh": self.speed_threshold_kmh,
            "sharp_turn_deg": self.sharp_turn_deg,
            "high_speed_kmh": self.high_speed_kmh,
            "min_stop_run_length": self.min_stop_run_length,
            "jitter_sanity_ceiling_s": self.jitter_sanity_ceiling_s,
            "severity_thresholds": list(self.severity_thresholds),
            "fields": {
                "timestamp": self.fields.timestamp,
                "latitude": self.fields.latitude,
                "longitude": self.fields.longitude,
                "altitude": self.fields.altitude,
                "heading": self.fields.heading,
                "satellites": self.fields.satellites,
            },
        }

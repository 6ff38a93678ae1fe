"""
Per-domain summaries reduced from an enriched sample sequence.

Each summary is recomputed whenever the input changes and carries no
identity of its own. Empty input produces all-zero summaries.
"""

from dataclasses import asdict, dataclass, field

from fixanalytics.models.telemetry import StopPeriod


SPEED_BUCKETS = ("0-10", "10-30", "30-50", "50+")
MOVEMENT_TYPES = ("Stationary", "Slow Movement", "Normal Movement", "Fast Movement")
COMPASS_DIRECTIONS = ("North", "Northeast", "East", "Southeast", "South", "Southwest", "West", "Northwest")


def _zero_counts(keys) -> dict[str, int]:
    return {k: 0 for k in keys}


@dataclass
class MotionSummary:
    """Motion behaviour: moving/stationary split, turns, stops, speed profile."""

    total_points: int = 0
    moving_points: int = 0
    stationary_points: int = 0
    moving_percentage: float = 0.0
    stationary_percentage: float = 0.0
    sharp_turns: int = 0
    high_speed_points: int = 0
    stop_periods_count: int = 0
    stop_periods: list[StopPeriod] = field(default_factory=list)
    speed_distribution: dict[str, int] = field(default_factory=lambda: _zero_counts(SPEED_BUCKETS))
    avg_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0
    avg_heading_delta_deg: float = 0.0
    max_heading_delta_deg: float = 0.0
    avg_acceleration_kmh_per_s: float = 0.0
    max_acceleration_kmh_per_s: float = 0.0
    total_distance_m: float = 0.0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["stop_periods"] = [p.to_dict() for p in self.stop_periods]
        return data


@dataclass
class SignalSummary:
    """GNSS signal view: satellites, quality classes, positional drift."""

    total_points: int = 0
    avg_satellites: float = 0.0
    min_satellites: int = 0
    max_satellites: int = 0
    weak_signals: int = 0
    strong_signals: int = 0
    quality_distribution: dict[str, int] = field(
        default_factory=lambda: _zero_counts(("Excellent", "Good", "Fair", "Poor"))
    )
    avg_accuracy_m: float = 0.0
    drift_points: int = 0
    avg_drift_m: float = 0.0
    max_drift_m: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TemporalSummary:
    """Transmission timing: gaps, drift, jitter, reliability."""

    total_packets: int = 0
    total_time_s: float = 0.0
    avg_interval_s: float = 0.0
    max_gap_s: float = 0.0
    min_gap_s: float = 0.0
    gaps: int = 0
    drifts: int = 0
    normal_intervals: int = 0
    packet_loss_rate: float = 0.0
    drift_rate: float = 0.0
    severity_counts: dict[str, int] = field(
        default_factory=lambda: _zero_counts(("Medium", "High", "Critical"))
    )
    jitter_s: float = 0.0
    jitter_cv_percent: float = 0.0
    reliability: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DailySummary:
    """Samples of one calendar date."""

    date: str
    point_count: int = 0
    total_distance_m: float = 0.0
    avg_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SpatioTemporalSummary:
    """Trip view: distance over time, altitude, headings, per-day split."""

    total_points: int = 0
    duration_min: float = 0.0
    total_distance_m: float = 0.0
    total_distance_km: float = 0.0
    avg_speed_kmh: float = 0.0
    max_speed_kmh: float = 0.0
    min_altitude_m: float = 0.0
    max_altitude_m: float = 0.0
    altitude_range_m: float = 0.0
    movement_types: dict[str, int] = field(default_factory=lambda: _zero_counts(MOVEMENT_TYPES))
    direction_counts: dict[str, int] = field(default_factory=lambda: _zero_counts(COMPASS_DIRECTIONS))
    avg_satellites: float = 0.0
    signal_quality: str = "Poor"
    daily: list[DailySummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["daily"] = [d.to_dict() for d in self.daily]
        return data


@dataclass
class AnalysisSummary:
    """One summary per analysis domain."""

    motion: MotionSummary = field(default_factory=MotionSummary)
    signal: SignalSummary = field(default_factory=SignalSummary)
    temporal: TemporalSummary = field(default_factory=TemporalSummary)
    spatio_temporal: SpatioTemporalSummary = field(default_factory=SpatioTemporalSummary)

    def to_dict(self) -> dict:
        return {
            "motion": self.motion.to_dict(),
            "signal": self.signal.to_dict(),
            "temporal": self.temporal.to_dict(),
            "spatio_temporal": self.spatio_temporal.to_dict(),
        }

"""
Aggregate reducer.

Folds an enriched sample sequence into one summary per analysis domain.
Every reduction is a sum, count or extremum over the sequence; averages over
an empty selection are 0.
"""

from collections.abc import Sequence

import numpy as np

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.summary import (
    AnalysisSummary,
    DailySummary,
    MotionSummary,
    SignalSummary,
    SpatioTemporalSummary,
    TemporalSummary,
    SPEED_BUCKETS,
)
from fixanalytics.models.telemetry import GapSeverity, Sample
from fixanalytics.services.motion import find_stop_periods, movement_type
from fixanalytics.services.signal import is_strong_signal, is_weak_signal, quality_for_mean
from fixanalytics.services.temporal import aggregate_reliability, jitter
from fixanalytics.utils.geo import compass_direction

# Below this a transition counts as stationary for positional drift (1 m/s)
STATIONARY_DRIFT_KMH = 3.6

# Inclusive upper bounds (km/h) of SPEED_BUCKETS; above the last is "50+"
SPEED_BUCKET_EDGES = (10.0, 30.0, 50.0)


def _mean(values) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def _max(values) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.max(np.asarray(values, dtype=np.float64)))


def _min(values) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.min(np.asarray(values, dtype=np.float64)))


def _percent(count: int, total: int) -> float:
    return count / total * 100.0 if total > 0 else 0.0


def speed_bucket(speed_kmh: float) -> str:
    """Bucket label; a speed on an edge belongs to the lower bucket."""
    for edge, label in zip(SPEED_BUCKET_EDGES, SPEED_BUCKETS):
        if speed_kmh <= edge:
            return label
    return SPEED_BUCKETS[-1]


def summarize_motion(samples: Sequence[Sample], config: AnalysisConfig) -> MotionSummary:
    summary = MotionSummary()
    total = len(samples)
    if total == 0:
        return summary

    moving = sum(1 for s in samples if s.is_moving)
    stop_periods = find_stop_periods(samples, config)

    for s in samples:
        summary.speed_distribution[speed_bucket(s.speed_kmh)] += 1

    speeds = [s.speed_kmh for s in samples if s.speed_kmh > 0]
    deltas = [s.heading_delta_deg for s in samples if s.heading_delta_deg > 0]
    accelerations = [s.acceleration_kmh_per_s for s in samples]

    summary.total_points = total
    summary.moving_points = moving
    summary.stationary_points = total - moving
    summary.moving_percentage = _percent(moving, total)
    summary.stationary_percentage = _percent(total - moving, total)
    summary.sharp_turns = sum(1 for s in samples if s.is_sharp_turn)
    summary.high_speed_points = sum(1 for s in samples if s.is_high_speed)
    summary.stop_periods = stop_periods
    summary.stop_periods_count = len(stop_periods)
    summary.avg_speed_kmh = _mean(speeds)
    summary.max_speed_kmh = _max(speeds)
    summary.avg_heading_delta_deg = _mean(deltas)
    summary.max_heading_delta_deg = _max(deltas)
    summary.avg_acceleration_kmh_per_s = _mean(accelerations)
    summary.max_acceleration_kmh_per_s = _max(accelerations)
    summary.total_distance_m = float(sum(s.distance_m for s in samples))
    return summary


def summarize_signal(samples: Sequence[Sample]) -> SignalSummary:
    summary = SignalSummary()
    total = len(samples)
    if total == 0:
        return summary

    satellites = [s.satellites for s in samples]
    for s in samples:
        summary.quality_distribution[s.signal_quality.value] += 1

    # Positional drift: movement recorded while effectively stationary
    drift = [
        s.distance_m for s in samples[1:]
        if s.speed_kmh < STATIONARY_DRIFT_KMH
    ]
    drifting = [d for d in drift if d > 0]

    summary.total_points = total
    summary.avg_satellites = _mean(satellites)
    summary.min_satellites = int(min(satellites))
    summary.max_satellites = int(max(satellites))
    summary.weak_signals = sum(1 for n in satellites if is_weak_signal(n))
    summary.strong_signals = sum(1 for n in satellites if is_strong_signal(n))
    summary.avg_accuracy_m = _mean([s.estimated_accuracy_m for s in samples])
    summary.drift_points = len(drifting)
    summary.avg_drift_m = _mean(drifting)
    summary.max_drift_m = _max(drift)
    return summary


def summarize_temporal(samples: Sequence[Sample], config: AnalysisConfig) -> TemporalSummary:
    """
    Timing statistics over the transitions (every sample after the first).

    Gap, drift and normal counts partition the transitions.
    """
    summary = TemporalSummary()
    total = len(samples)
    if total == 0:
        return summary

    summary.total_packets = total
    transitions = samples[1:]
    if not transitions:
        summary.reliability = 100.0
        return summary

    n = len(transitions)
    time_gaps = [s.time_gap_s for s in transitions]
    total_time = (samples[-1].timestamp - samples[0].timestamp).total_seconds()

    summary.total_time_s = total_time
    summary.avg_interval_s = total_time / n
    summary.max_gap_s = _max(time_gaps)
    summary.min_gap_s = _min(time_gaps)
    summary.gaps = sum(1 for s in transitions if s.is_gap)
    summary.drifts = sum(1 for s in transitions if s.is_drift)
    summary.normal_intervals = n - summary.gaps - summary.drifts
    summary.packet_loss_rate = _percent(summary.gaps, n)
    summary.drift_rate = _percent(summary.drifts, n)

    for s in transitions:
        if s.gap_severity is not GapSeverity.NONE:
            summary.severity_counts[s.gap_severity.value] += 1

    summary.jitter_s, summary.jitter_cv_percent = jitter(time_gaps, config.jitter_sanity_ceiling_s)
    summary.reliability = aggregate_reliability([s.reliability_score for s in transitions])
    return summary


def summarize_days(samples: Sequence[Sample]) -> list[DailySummary]:
    """
    Group samples by calendar date, in order of first appearance.

    A transition contributes distance and speed to a day only when both of
    its fixes fall on that day.
    """
    days: dict[str, DailySummary] = {}
    speeds: dict[str, list[float]] = {}

    previous_date = None
    for s in samples:
        date = s.timestamp.date().isoformat()
        if date not in days:
            days[date] = DailySummary(date=date)
            speeds[date] = []

        day = days[date]
        day.point_count += 1
        same_day = previous_date == date
        if same_day:
            day.total_distance_m += s.distance_m
        speeds[date].append(s.speed_kmh if same_day else 0.0)
        previous_date = date

    for date, day in days.items():
        day.avg_speed_kmh = _mean(speeds[date])
        day.max_speed_kmh = _max(speeds[date])

    return list(days.values())


def summarize_spatio_temporal(samples: Sequence[Sample]) -> SpatioTemporalSummary:
    summary = SpatioTemporalSummary()
    total = len(samples)
    if total == 0:
        return summary

    duration_s = max((samples[-1].timestamp - samples[0].timestamp).total_seconds(), 0.0)
    distance_m = float(sum(s.distance_m for s in samples))
    altitudes = [s.altitude for s in samples]
    avg_satellites = _mean([s.satellites for s in samples])

    for s in samples:
        summary.movement_types[movement_type(s.speed_kmh)] += 1
        summary.direction_counts[compass_direction(s.heading)] += 1

    summary.total_points = total
    summary.duration_min = duration_s / 60.0
    summary.total_distance_m = distance_m
    summary.total_distance_km = distance_m / 1000.0
    summary.avg_speed_kmh = (distance_m / 1000.0) / (duration_s / 3600.0) if duration_s > 0 else 0.0
    summary.max_speed_kmh = _max([s.speed_kmh for s in samples])
    summary.min_altitude_m = _min(altitudes)
    summary.max_altitude_m = _max(altitudes)
    summary.altitude_range_m = summary.max_altitude_m - summary.min_altitude_m
    summary.avg_satellites = avg_satellites
    summary.signal_quality = quality_for_mean(avg_satellites).value
    summary.daily = summarize_days(samples)
    return summary


def summarize(samples: Sequence[Sample], config: AnalysisConfig) -> AnalysisSummary:
    """Build every domain summary for a sample sequence."""
    return AnalysisSummary(
        motion=summarize_motion(samples, config),
        signal=summarize_signal(samples),
        temporal=summarize_temporal(samples, config),
        spatio_temporal=summarize_spatio_temporal(samples),
    )

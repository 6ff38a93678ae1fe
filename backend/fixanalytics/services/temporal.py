"""
Temporal integrity classification.

Each inter-sample time gap is compared with the expected transmission
interval:
- Gap: the interval is longer than expected * gap_multiplier (lost data)
- Drift: the interval deviates from expected by more than the tolerance
- Normal: otherwise

The reliability score is 0 for a gap or any deviation past the gap margin,
100 for an interval within tolerance, and banded by the relative deviation
for drift. It never increases as the deviation grows.
"""

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.telemetry import GapClass, GapSeverity

# (maximum relative deviation, score), applied to drifting intervals
DRIFT_SCORE_BANDS = (
    (0.25, 90.0),
    (0.5, 75.0),
    (1.0, 50.0),
)
SEVERE_DRIFT_SCORE = 25.0


@dataclass(frozen=True)
class IntervalClassification:
    """Temporal classification of a single interval."""

    gap_class: GapClass
    gap_severity: GapSeverity
    reliability_score: float
    is_gap: bool
    is_drift: bool


FIRST_INTERVAL = IntervalClassification(
    gap_class=GapClass.NORMAL,
    gap_severity=GapSeverity.NONE,
    reliability_score=100.0,
    is_gap=False,
    is_drift=False,
)


def is_gap(time_gap_s: float, config: AnalysisConfig) -> bool:
    return time_gap_s > config.expected_interval_s * config.gap_multiplier


def is_drift(time_gap_s: float, config: AnalysisConfig) -> bool:
    return abs(time_gap_s - config.expected_interval_s) > config.drift_tolerance_s


def drift_ratio(time_gap_s: float, config: AnalysisConfig) -> float:
    """Relative deviation |gap - expected| / expected."""
    return abs(time_gap_s - config.expected_interval_s) / config.expected_interval_s


def gap_severity(time_gap_s: float, config: AnalysisConfig) -> GapSeverity:
    medium, high, critical = config.severity_thresholds
    ratio = time_gap_s / config.expected_interval_s
    if ratio > critical:
        return GapSeverity.CRITICAL
    if ratio > high:
        return GapSeverity.HIGH
    if ratio > medium:
        return GapSeverity.MEDIUM
    return GapSeverity.NONE


def reliability_score(time_gap_s: float, config: AnalysisConfig) -> float:
    """
    Per-interval reliability in [0, 100].

    Any deviation beyond the gap margin, expected * (gap_multiplier - 1),
    scores 0 on either side before the drift tolerance is consulted. This
    keeps the score a non-increasing function of the deviation alone even
    when the tolerance is wider than the gap margin.
    """
    if is_gap(time_gap_s, config):
        return 0.0
    deviation = abs(time_gap_s - config.expected_interval_s)
    if deviation > config.expected_interval_s * (config.gap_multiplier - 1.0):
        return 0.0
    if not is_drift(time_gap_s, config):
        return 100.0

    ratio = drift_ratio(time_gap_s, config)
    for limit, score in DRIFT_SCORE_BANDS:
        if ratio <= limit:
            return score
    return SEVERE_DRIFT_SCORE


def classify_interval(time_gap_s: float, config: AnalysisConfig) -> IntervalClassification:
    gap = is_gap(time_gap_s, config)
    drift = is_drift(time_gap_s, config)

    if gap:
        gap_class = GapClass.GAP
    elif drift:
        gap_class = GapClass.DRIFT
    else:
        gap_class = GapClass.NORMAL

    return IntervalClassification(
        gap_class=gap_class,
        gap_severity=gap_severity(time_gap_s, config),
        reliability_score=reliability_score(time_gap_s, config),
        is_gap=gap,
        is_drift=drift,
    )


def jitter(time_gaps_s: Sequence[float], ceiling_s: float) -> tuple[float, float]:
    """
    Timing jitter of a sequence of intervals.

    Intervals above the sanity ceiling (outages) and negative intervals are
    left out so a single long outage does not dominate the statistic.

    Returns:
        Tuple of (standard deviation in seconds, coefficient of variation in %)
    """
    gaps = np.asarray([g for g in time_gaps_s if 0 <= g <= ceiling_s], dtype=np.float64)
    if len(gaps) == 0:
        return 0.0, 0.0

    std = float(np.std(gaps))
    mean = float(np.mean(gaps))
    cv = std / mean * 100.0 if mean > 0 else 0.0
    return std, cv


def aggregate_reliability(scores: Sequence[float]) -> float:
    """Arithmetic mean of per-interval reliability scores (0 when empty)."""
    if len(scores) == 0:
        return 0.0
    return float(np.mean(np.asarray(scores, dtype=np.float64)))

"""
Geospatial metrics deriver.

A single left fold over the ordered fixes. The accumulator holds the
previous fix and the previous sample, which is the whole lookback window:
Sample[i] depends only on Fix[i], Fix[i-1] and Sample[i-1].
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Optional

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.raw import ErrorKind, Fix
from fixanalytics.models.telemetry import Sample
from fixanalytics.services.motion import classify_motion
from fixanalytics.services.signal import estimate_signal
from fixanalytics.services.temporal import FIRST_INTERVAL, classify_interval
from fixanalytics.utils.geo import haversine_distance, heading_delta


@dataclass(frozen=True)
class _Accumulator:
    previous_fix: Fix
    previous_sample: Sample


def speed_kmh(distance_m: float, elapsed_s: float) -> float:
    """Speed over a transition; 0 when no time has elapsed."""
    if elapsed_s <= 0:
        return 0.0
    return (distance_m / 1000.0) / (elapsed_s / 3600.0)


def derive_sample(
    fix: Fix,
    index: int,
    acc: Optional[_Accumulator],
    config: AnalysisConfig,
) -> Sample:
    """Build Sample[index] from its fix and the previous step."""
    quality, accuracy = estimate_signal(fix.satellites)

    if acc is None:
        flags = classify_motion(0.0, 0.0, config)
        return Sample(
            fix=fix,
            index=index,
            is_moving=flags.is_moving,
            is_sharp_turn=flags.is_sharp_turn,
            is_high_speed=flags.is_high_speed,
            signal_quality=quality,
            estimated_accuracy_m=accuracy,
            gap_class=FIRST_INTERVAL.gap_class,
            gap_severity=FIRST_INTERVAL.gap_severity,
            reliability_score=FIRST_INTERVAL.reliability_score,
        )

    prev = acc.previous_fix
    elapsed = (fix.timestamp - prev.timestamp).total_seconds()
    distance = haversine_distance(prev.latitude, prev.longitude, fix.latitude, fix.longitude)
    speed = speed_kmh(distance, elapsed)

    # Acceleration needs two prior samples
    acceleration = 0.0
    if index >= 2 and elapsed > 0:
        acceleration = (speed - acc.previous_sample.speed_kmh) / elapsed

    delta = heading_delta(prev.heading, fix.heading)
    flags = classify_motion(speed, delta, config)
    interval = classify_interval(elapsed, config)

    diagnostics = ()
    if elapsed <= 0:
        diagnostics = (ErrorKind.NON_MONOTONIC_TIMESTAMP,)

    return Sample(
        fix=fix,
        index=index,
        distance_m=distance,
        speed_kmh=speed,
        acceleration_kmh_per_s=acceleration,
        heading_delta_deg=delta,
        time_gap_s=elapsed,
        is_moving=flags.is_moving,
        is_sharp_turn=flags.is_sharp_turn,
        is_high_speed=flags.is_high_speed,
        signal_quality=quality,
        estimated_accuracy_m=accuracy,
        gap_class=interval.gap_class,
        gap_severity=interval.gap_severity,
        reliability_score=interval.reliability_score,
        diagnostics=diagnostics,
    )


def iter_samples(fixes: Iterable[Fix], config: AnalysisConfig) -> Iterator[Sample]:
    """Lazily derive samples; stop consuming to stop the computation."""
    acc: Optional[_Accumulator] = None
    for index, fix in enumerate(fixes):
        sample = derive_sample(fix, index, acc, config)
        acc = _Accumulator(previous_fix=fix, previous_sample=sample)
        yield sample


def derive_samples(fixes: Iterable[Fix], config: AnalysisConfig) -> list[Sample]:
    return list(iter_samples(fixes, config))

"""
Motion behaviour classification.

Per-sample flags come from the speed and heading delta; stop periods are
found by scanning the moving flags of the whole sequence.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.telemetry import Sample, StopPeriod

# (upper bound km/h, label), for the trip view
MOVEMENT_TYPE_LADDER = (
    (1.0, "Stationary"),
    (5.0, "Slow Movement"),
    (15.0, "Normal Movement"),
)
FASTEST_MOVEMENT_TYPE = "Fast Movement"


@dataclass(frozen=True)
class MotionFlags:
    is_moving: bool
    is_sharp_turn: bool
    is_high_speed: bool


def classify_motion(speed_kmh: float, heading_delta_deg: float, config: AnalysisConfig) -> MotionFlags:
    return MotionFlags(
        is_moving=speed_kmh > config.speed_threshold_kmh,
        is_sharp_turn=heading_delta_deg > config.sharp_turn_deg,
        is_high_speed=speed_kmh > config.high_speed_kmh,
    )


def movement_type(speed_kmh: float) -> str:
    for upper, label in MOVEMENT_TYPE_LADDER:
        if speed_kmh < upper:
            return label
    return FASTEST_MOVEMENT_TYPE


def find_stop_periods(samples: Sequence[Sample], config: AnalysisConfig) -> list[StopPeriod]:
    """
    Segment the sequence into stop periods.

    A stop period is a maximal run of consecutive non-moving samples longer
    than config.min_stop_run_length. A run still open at the end of the
    sequence counts as well.
    """
    periods: list[StopPeriod] = []
    run_start = None

    for i, sample in enumerate(samples):
        if not sample.is_moving:
            if run_start is None:
                run_start = i
            continue
        if run_start is not None:
            _close_run(samples, run_start, i - 1, config, periods)
            run_start = None

    if run_start is not None:
        _close_run(samples, run_start, len(samples) - 1, config, periods)

    return periods


def _close_run(
    samples: Sequence[Sample],
    start: int,
    end: int,
    config: AnalysisConfig,
    periods: list[StopPeriod],
) -> None:
    length = end - start + 1
    if length <= config.min_stop_run_length:
        return
    elapsed = (samples[end].timestamp - samples[start].timestamp).total_seconds()
    periods.append(StopPeriod(
        start_index=start,
        end_index=end,
        length=length,
        duration_s=length * config.expected_interval_s,
        elapsed_s=max(elapsed, 0.0),
    ))

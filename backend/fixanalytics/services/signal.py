"""
Signal quality estimation from the satellite count.

Both mappings are piecewise-constant lookups with inclusive lower bounds, so
a boundary count belongs to the better bucket.
"""

from fixanalytics.models.telemetry import SignalQuality

# (minimum satellites, class), best first
QUALITY_LADDER = (
    (10, SignalQuality.EXCELLENT),
    (8, SignalQuality.GOOD),
    (6, SignalQuality.FAIR),
)

# (minimum satellites, estimated horizontal accuracy in meters)
ACCURACY_LADDER = (
    (12, 2.0),
    (10, 5.0),
    (8, 10.0),
    (6, 15.0),
)
WORST_ACCURACY_M = 25.0

WEAK_SIGNAL_BELOW = 8
STRONG_SIGNAL_FROM = 10


def signal_quality(satellites: float) -> SignalQuality:
    for minimum, quality in QUALITY_LADDER:
        if satellites >= minimum:
            return quality
    return SignalQuality.POOR


def estimated_accuracy(satellites: float) -> float:
    """Estimated horizontal accuracy (meters) for a satellite count."""
    for minimum, accuracy in ACCURACY_LADDER:
        if satellites >= minimum:
            return accuracy
    return WORST_ACCURACY_M


def estimate_signal(satellites: int) -> tuple[SignalQuality, float]:
    return signal_quality(satellites), estimated_accuracy(satellites)


def is_weak_signal(satellites: int) -> bool:
    return satellites < WEAK_SIGNAL_BELOW


def is_strong_signal(satellites: int) -> bool:
    return satellites >= STRONG_SIGNAL_FROM


def quality_for_mean(avg_satellites: float) -> SignalQuality:
    """Trip-level class from the mean satellite count."""
    return signal_quality(avg_satellites)

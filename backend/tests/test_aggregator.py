"""
Tests for the aggregate reducer.
"""

from datetime import datetime, timedelta

import pytest
from numpy.testing import assert_allclose

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.raw import Fix
from fixanalytics.services.aggregator import (
    speed_bucket,
    summarize,
    summarize_days,
    summarize_signal,
)
from fixanalytics.services.deriver import derive_samples
from fixanalytics.services.motion import classify_motion

T0 = datetime(2025, 7, 29, 6, 0, 0)


@pytest.fixture
def config():
    return AnalysisConfig()


@pytest.fixture
def trip(config):
    """
    Five fixes walking north ~11.1 m per step.

    Intervals are 3, 3, 10, 3 s, so the third transition is a gap and the
    slow transition through it falls below the moving threshold.
    """
    times = [0, 3, 6, 16, 19]
    headings = [0.0, 90.0, 180.0, 270.0, 350.0]
    satellites = [10, 8, 6, 4, 12]
    altitudes = [100.0, 105.0, 110.0, 95.0, 100.0]
    fixes = [
        Fix(
            timestamp=T0 + timedelta(seconds=t),
            latitude=17.0 + k * 1e-4,
            longitude=78.0,
            altitude=altitudes[k],
            heading=headings[k],
            satellites=satellites[k],
            row=k,
        )
        for k, t in enumerate(times)
    ]
    return derive_samples(fixes, config)


class TestSpeedBucket:
    @pytest.mark.parametrize("speed,expected", [
        (0.0, "0-10"),
        (10.0, "0-10"),
        (10.01, "10-30"),
        (30.0, "10-30"),
        (30.01, "30-50"),
        (50.0, "30-50"),
        (50.01, "50+"),
        (180.0, "50+"),
    ])
    def test_bucket(self, speed, expected):
        assert speed_bucket(speed) == expected

    @pytest.mark.parametrize("speed", [49.9, 50.0, 50.01, 75.0])
    def test_top_bucket_matches_high_speed_flag(self, config, speed):
        """Only high-speed samples land in the top bucket."""
        is_top = speed_bucket(speed) == "50+"
        assert is_top == classify_motion(speed, 0.0, config).is_high_speed


class TestEmptyInput:
    """Empty input reduces to all-zero summaries."""

    def test_all_zero(self, config):
        summary = summarize([], config)

        assert summary.motion.total_points == 0
        assert summary.motion.avg_speed_kmh == 0.0
        assert sum(summary.motion.speed_distribution.values()) == 0
        assert summary.signal.avg_satellites == 0.0
        assert summary.temporal.total_packets == 0
        assert summary.temporal.reliability == 0.0
        assert summary.spatio_temporal.total_distance_m == 0.0
        assert summary.spatio_temporal.daily == []

    def test_single_sample_reliability(self, config):
        fix = Fix(timestamp=T0, latitude=17.0, longitude=78.0)
        summary = summarize(derive_samples([fix], config), config)

        assert summary.temporal.total_packets == 1
        assert summary.temporal.gaps == 0
        assert summary.temporal.reliability == 100.0


class TestMotionSummary:
    def test_counts(self, trip, config):
        motion = summarize(trip, config).motion

        assert motion.total_points == 5
        assert motion.moving_points == 3
        assert motion.stationary_points == 2
        assert_allclose(motion.moving_percentage, 60.0)
        assert motion.speed_distribution == {"0-10": 2, "10-30": 3, "30-50": 0, "50+": 0}
        assert sum(motion.speed_distribution.values()) == motion.total_points

    def test_turns(self, trip, config):
        motion = summarize(trip, config).motion

        assert motion.sharp_turns == 4
        assert_allclose(motion.avg_heading_delta_deg, 87.5)
        assert motion.max_heading_delta_deg == 90.0

    def test_speed_profile(self, trip, config):
        motion = summarize(trip, config).motion
        positive = [s.speed_kmh for s in trip if s.speed_kmh > 0]

        assert_allclose(motion.avg_speed_kmh, sum(positive) / len(positive))
        assert_allclose(motion.max_speed_kmh, max(positive))
        assert_allclose(motion.total_distance_m, sum(s.distance_m for s in trip))
        assert motion.stop_periods_count == 0


class TestSignalSummary:
    def test_distribution(self, trip):
        signal = summarize_signal(trip)

        assert signal.quality_distribution == {"Excellent": 2, "Good": 1, "Fair": 1, "Poor": 1}
        assert_allclose(signal.avg_accuracy_m, 11.4)
        assert_allclose(signal.avg_satellites, 8.0)
        assert (signal.min_satellites, signal.max_satellites) == (4, 12)
        assert signal.weak_signals == 2
        assert signal.strong_signals == 2

    def test_no_drift_while_moving(self, trip):
        signal = summarize_signal(trip)
        assert signal.drift_points == 0
        assert signal.max_drift_m == 0.0

    def test_stationary_drift(self, config):
        fixes = [
            Fix(timestamp=T0 + timedelta(seconds=3 * k), latitude=17.0 + (k % 2) * 1e-5, longitude=78.0, satellites=6)
            for k in range(5)
        ]
        signal = summarize_signal(derive_samples(fixes, config))

        assert signal.drift_points == 4
        assert 1.0 < signal.avg_drift_m < 1.2
        assert_allclose(signal.max_drift_m, signal.avg_drift_m)


class TestTemporalSummary:
    def test_gap_accounting(self, trip, config):
        temporal = summarize(trip, config).temporal

        assert temporal.total_packets == 5
        assert temporal.gaps == 1
        assert temporal.drifts == 0
        assert temporal.gaps + temporal.drifts + temporal.normal_intervals == 4
        assert temporal.severity_counts == {"Medium": 1, "High": 0, "Critical": 0}
        assert_allclose(temporal.packet_loss_rate, 25.0)
        assert_allclose(temporal.reliability, 75.0)

    def test_timing(self, trip, config):
        temporal = summarize(trip, config).temporal

        assert temporal.total_time_s == 19.0
        assert_allclose(temporal.avg_interval_s, 4.75)
        assert temporal.max_gap_s == 10.0
        assert temporal.min_gap_s == 3.0
        assert_allclose(temporal.jitter_s, 3.0311, atol=1e-4)
        assert_allclose(temporal.jitter_cv_percent, 63.81, atol=1e-2)


class TestSpatioTemporalSummary:
    def test_trip_view(self, trip, config):
        view = summarize(trip, config).spatio_temporal

        assert view.total_points == 5
        assert_allclose(view.duration_min, 19.0 / 60.0)
        assert view.altitude_range_m == 15.0
        assert view.avg_satellites == 8.0
        assert view.signal_quality == "Good"
        assert view.direction_counts["North"] == 2
        assert view.direction_counts["East"] == 1
        assert view.movement_types == {
            "Stationary": 1,
            "Slow Movement": 1,
            "Normal Movement": 3,
            "Fast Movement": 0,
        }
        assert_allclose(view.total_distance_km * 1000.0, view.total_distance_m)

    def test_daily_split(self, config):
        times = [
            datetime(2025, 7, 29, 23, 59, 54),
            datetime(2025, 7, 29, 23, 59, 57),
            datetime(2025, 7, 30, 0, 0, 0),
            datetime(2025, 7, 30, 0, 0, 3),
        ]
        fixes = [Fix(timestamp=t, latitude=17.0 + k * 1e-4, longitude=78.0) for k, t in enumerate(times)]
        samples = derive_samples(fixes, config)

        days = summarize_days(samples)

        assert [d.date for d in days] == ["2025-07-29", "2025-07-30"]
        assert [d.point_count for d in days] == [2, 2]
        # The midnight transition belongs to neither day
        assert_allclose(days[0].total_distance_m, samples[1].distance_m)
        assert_allclose(days[1].total_distance_m, samples[3].distance_m)
        assert_allclose(days[1].max_speed_kmh, samples[3].speed_kmh)

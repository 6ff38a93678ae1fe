"""
Sample data generator for testing.

Generates realistic-looking fix logs in the tracker CSV format
(Transmitted Time, Latitude, Longitude, Altitude, Direction, Satellites).
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import numpy as np

from fixanalytics.config import DEFAULT_TIMESTAMP_FORMAT

CSV_HEADER = "Transmitted Time,Latitude,Longitude,Altitude,Direction,Satellites"


def _write_csv(output_path: Path, rows: list[str]) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        f.write("\n".join([CSV_HEADER] + rows) + "\n")
    return output_path


def _format_row(
    t: datetime,
    lat: float,
    lon: float,
    alt: float,
    heading: float,
    satellites: int,
    timestamp_format: str,
) -> str:
    return (
        f"{t.strftime(timestamp_format)},"
        f"{lat:.7f},"
        f"{lon:.7f},"
        f"{alt:.1f},"
        f"{heading:.1f},"
        f"{satellites}"
    )


def generate_patrol_log(
    output_path: Path,
    n_fixes: int = 200,
    interval_s: float = 3.0,
    start: Optional[datetime] = None,
    center_lat: float = 17.726,
    center_lon: float = 78.256,
    loop_radius_m: float = 400.0,
    stop_every: int = 50,
    stop_length: int = 8,
    gap_every: int = 37,
    gap_factor: float = 4.0,
    seed: int = 0,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> Path:
    """
    Generate a vehicle patrolling a circular route.

    The vehicle halts for `stop_length` fixes every `stop_every` fixes, and
    every `gap_every`-th transmission arrives `gap_factor` intervals late.
    """
    rng = np.random.default_rng(seed)
    start = start or datetime(2025, 7, 29, 6, 0, 0)

    meters_per_deg_lat = 111000
    meters_per_deg_lon = 111000 * np.cos(np.radians(center_lat))

    rows = []
    t = start
    angle = 0.0
    angular_step = 2 * np.pi / max(n_fixes - 1, 1)

    for i in range(n_fixes):
        stopped = stop_every > 0 and (i % stop_every) >= stop_every - stop_length
        if i > 0 and not stopped:
            angle += angular_step

        x = loop_radius_m * np.cos(angle) + rng.normal(0, 0.5)
        y = loop_radius_m * np.sin(angle) + rng.normal(0, 0.5)
        lat = center_lat + y / meters_per_deg_lat
        lon = center_lon + x / meters_per_deg_lon

        # Tangent of a counter-clockwise circle, as a compass heading
        heading = (np.degrees(np.arctan2(-np.sin(angle), np.cos(angle))) + 360.0) % 360.0
        altitude = 540.0 + 5.0 * np.sin(angle) + rng.normal(0, 0.3)
        satellites = int(np.clip(rng.normal(9, 2), 3, 14))

        rows.append(_format_row(t, lat, lon, altitude, heading, satellites, timestamp_format))

        step = interval_s
        if gap_every > 0 and (i + 1) % gap_every == 0:
            step = interval_s * gap_factor
        t = t + timedelta(seconds=step)

    return _write_csv(output_path, rows)


def generate_static_log(
    output_path: Path,
    n_fixes: int = 120,
    interval_s: float = 3.0,
    jitter_s: float = 0.4,
    start: Optional[datetime] = None,
    lat: float = 17.726,
    lon: float = 78.256,
    satellites: int = 6,
    seed: int = 0,
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
) -> Path:
    """
    Generate a stationary receiver with noisy position and timing jitter.

    Timestamps are whole seconds, so the jitter shows up as occasional
    one-second drifts.
    """
    rng = np.random.default_rng(seed)
    start = start or datetime(2025, 7, 29, 6, 0, 0)

    rows = []
    elapsed = 0.0
    for _ in range(n_fixes):
        t = start + timedelta(seconds=round(elapsed))
        noisy_lat = lat + rng.normal(0, 3e-6)
        noisy_lon = lon + rng.normal(0, 3e-6)
        rows.append(_format_row(t, noisy_lat, noisy_lon, 540.0, 0.0, satellites, timestamp_format))
        elapsed += interval_s + rng.normal(0, jitter_s)

    return _write_csv(output_path, rows)


def generate_test_data_set(output_folder: Path) -> list[Path]:
    """Generate a set of test data files."""
    output_folder.mkdir(parents=True, exist_ok=True)

    return [
        generate_patrol_log(output_folder / "log_001_patrol.csv"),
        generate_patrol_log(
            output_folder / "log_002_patrol_lossy.csv",
            gap_every=11,
            gap_factor=6.0,
            seed=1,
        ),
        generate_static_log(output_folder / "log_003_static.csv"),
    ]


if __name__ == "__main__":
    # Generate test data when run directly
    output = Path("./data/logs")
    files = generate_test_data_set(output)
    print(f"Generated {len(files)} test files in {output}")
    for f in files:
        print(f"  - {f.name}")

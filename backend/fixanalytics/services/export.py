"""
Export of enriched samples to tabular formats.
"""

from collections.abc import Sequence

import pandas as pd

from fixanalytics.models.telemetry import Sample

SAMPLE_COLUMNS = [
    "index",
    "row",
    "timestamp",
    "latitude",
    "longitude",
    "altitude",
    "heading",
    "satellites",
    "distance_m",
    "speed_kmh",
    "acceleration_kmh_per_s",
    "heading_delta_deg",
    "time_gap_s",
    "is_moving",
    "is_sharp_turn",
    "is_high_speed",
    "signal_quality",
    "estimated_accuracy_m",
    "gap_class",
    "gap_severity",
    "reliability_score",
    "diagnostics",
]


def samples_to_frame(samples: Sequence[Sample]) -> pd.DataFrame:
    """One row per sample; diagnostics joined with ';'."""
    rows = []
    for sample in samples:
        row = sample.to_dict()
        row["diagnostics"] = ";".join(row["diagnostics"])
        rows.append(row)
    return pd.DataFrame(rows, columns=SAMPLE_COLUMNS)


def export_samples_csv(samples: Sequence[Sample]) -> str:
    return samples_to_frame(samples).to_csv(index=False)

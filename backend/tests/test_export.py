"""
Tests for sample export.
"""

import io

import pandas as pd

from fixanalytics.services.export import SAMPLE_COLUMNS, export_samples_csv, samples_to_frame
from fixanalytics.services.pipeline import analyze_records


def _records():
    return [
        {"Transmitted Time": "29/07/2025 06:00:00", "Latitude": "17.0", "Longitude": "78.0", "Satellites": "9"},
        {"Transmitted Time": "29/07/2025 06:00:00", "Latitude": "17.001", "Longitude": "78.0", "Satellites": "9"},
        {"Transmitted Time": "29/07/2025 06:00:03", "Latitude": "17.002", "Longitude": "78.0", "Satellites": "9"},
    ]


class TestSamplesToFrame:
    def test_columns_and_rows(self):
        samples = analyze_records(_records()).samples
        df = samples_to_frame(samples)

        assert list(df.columns) == SAMPLE_COLUMNS
        assert len(df) == 3
        assert df["signal_quality"].tolist() == ["Good"] * 3

    def test_diagnostics_joined(self):
        df = samples_to_frame(analyze_records(_records()).samples)

        assert df["diagnostics"].tolist() == ["", "non_monotonic_timestamp", ""]

    def test_empty(self):
        df = samples_to_frame([])
        assert list(df.columns) == SAMPLE_COLUMNS
        assert df.empty


class TestExportCsv:
    def test_csv_round_trip(self):
        samples = analyze_records(_records()).samples
        df = pd.read_csv(io.StringIO(export_samples_csv(samples)))

        assert len(df) == 3
        assert df["index"].tolist() == [0, 1, 2]
        assert df["speed_kmh"].iloc[1] == 0.0

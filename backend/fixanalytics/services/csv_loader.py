"""
CSV fix-log loader.

Reads a fix log into raw string records for the record parser. Values are
kept as text so the parser applies its own decoding contract.
"""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.telemetry import AnalysisResult
from fixanalytics.services.pipeline import analyze_records


logger = logging.getLogger(__name__)


def read_records(filepath: Path) -> list[dict[str, str]]:
    """
    Read a CSV fix log as a list of field -> string records.

    Header names and values are stripped; empty cells become empty strings.
    """
    try:
        df = pd.read_csv(
            filepath,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8-sig",
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Empty CSV file: {filepath}")
        return []

    df.columns = df.columns.str.strip()
    for col in df.columns:
        df[col] = df[col].str.strip()
    return df.to_dict(orient="records")


def analyze_csv(filepath: Path, config: Optional[AnalysisConfig] = None) -> AnalysisResult:
    """Load a CSV fix log and run the analysis pipeline on it."""
    records = read_records(filepath)
    logger.debug(f"Read {len(records)} records from {filepath.name}")
    return analyze_records(records, config, name=filepath.stem)

"""
Record parser.

Turns raw tabular records (field name -> string) into Fix values.

Decoding contract:
- latitude, longitude, altitude, heading and satellites fall back to 0 when
  the column is missing or not numeric. This is lossy: a missing position is
  indistinguishable from a point at (0, 0).
- the timestamp is strict. It is parsed with the configured strptime format
  and a record that does not parse is rejected and reported, never given a
  substitute time.
- records with no timestamp value at all are treated as empty rows and
  skipped without an error.
"""

import logging
import math
import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Optional

from fixanalytics.config import AnalysisConfig, FieldSchema
from fixanalytics.models.raw import ErrorKind, Fix, RecordError


logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class MalformedTimestampError(ValueError):
    """Raised when a timestamp does not match the configured format."""

    def __init__(self, value: Optional[str], timestamp_format: str):
        self.value = value
        self.timestamp_format = timestamp_format
        super().__init__(f"Cannot parse timestamp {value!r} with format {timestamp_format!r}")


def parse_float_or_default(value: Optional[str], default: float = 0.0) -> float:
    """Parse a float, returning default for missing, blank, non-numeric or non-finite input."""
    if value is None:
        return default
    text = str(value).strip()
    if not text:
        return default
    try:
        number = float(text)
    except ValueError:
        return default
    if not math.isfinite(number):
        return default
    return number


def parse_int_or_default(value: Optional[str], default: int = 0) -> int:
    """
    Parse the leading integer of a value ("9", "9.0", "9 sats" -> 9).

    Negative counts are clamped to 0.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if match is None:
        return default
    return max(int(match.group(1)), 0)


def parse_timestamp(value: Optional[str], timestamp_format: str) -> datetime:
    """
    Parse a timestamp strictly with the given strptime format.

    Raises:
        MalformedTimestampError: the value is missing, does not match the
            format, or names an invalid calendar date
    """
    if value is None or not str(value).strip():
        raise MalformedTimestampError(value, timestamp_format)
    try:
        return datetime.strptime(str(value).strip(), timestamp_format)
    except ValueError as e:
        raise MalformedTimestampError(value, timestamp_format) from e


def normalize_record(record: Mapping[str, Optional[str]]) -> dict[str, Optional[str]]:
    """Strip whitespace from header names and string values."""
    normalized: dict[str, Optional[str]] = {}
    for key, value in record.items():
        if key is None:
            continue
        if isinstance(value, str):
            value = value.strip()
        normalized[str(key).strip()] = value
    return normalized


def has_timestamp(record: Mapping[str, Optional[str]], fields: FieldSchema) -> bool:
    value = record.get(fields.timestamp)
    return value is not None and str(value).strip() != ""


def parse_record(
    record: Mapping[str, Optional[str]],
    config: AnalysisConfig,
    row: int = 0,
) -> Fix:
    """
    Parse one raw record into a Fix.

    Raises:
        MalformedTimestampError: if the timestamp cannot be parsed
    """
    return _build_fix(normalize_record(record), config, row)


def _build_fix(record: Mapping[str, Optional[str]], config: AnalysisConfig, row: int) -> Fix:
    """Decode an already-normalized record."""
    fields = config.fields
    timestamp = parse_timestamp(record.get(fields.timestamp), config.timestamp_format)

    return Fix(
        timestamp=timestamp,
        latitude=parse_float_or_default(record.get(fields.latitude)),
        longitude=parse_float_or_default(record.get(fields.longitude)),
        altitude=parse_float_or_default(record.get(fields.altitude)),
        heading=parse_float_or_default(record.get(fields.heading)),
        satellites=parse_int_or_default(record.get(fields.satellites)),
        row=row,
    )


def parse_records(
    records: Iterable[Mapping[str, Optional[str]]],
    config: AnalysisConfig,
) -> tuple[list[Fix], list[RecordError]]:
    """
    Parse a batch of raw records, keeping input order.

    Empty rows are skipped. Records with a malformed timestamp are excluded
    from the returned fixes and reported in the error list.

    Returns:
        Tuple of (fixes, errors)
    """
    fixes: list[Fix] = []
    errors: list[RecordError] = []
    skipped = 0

    for row, record in enumerate(records):
        record = normalize_record(record)
        if not has_timestamp(record, config.fields):
            skipped += 1
            continue
        try:
            fixes.append(_build_fix(record, config, row))
        except MalformedTimestampError as e:
            logger.warning(f"Rejected record {row}: {e}")
            errors.append(RecordError(
                row=row,
                kind=ErrorKind.MALFORMED_TIMESTAMP,
                message=str(e),
                value=None if e.value is None else str(e.value),
            ))

    if skipped:
        logger.debug(f"Skipped {skipped} empty rows")
    logger.info(f"Parsed {len(fixes)} fixes ({len(errors)} rejected)")
    return fixes, errors

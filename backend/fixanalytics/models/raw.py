"""
Raw fix model (source-format, before enrichment).

The record parser turns each tabular row into a Fix. Rows that cannot be
parsed are reported as RecordError values instead of being dropped silently.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of problems reported alongside a pipeline result."""

    MALFORMED_TIMESTAMP = "malformed_timestamp"
    EMPTY_INPUT = "empty_input"
    NON_MONOTONIC_TIMESTAMP = "non_monotonic_timestamp"


@dataclass(frozen=True)
class Fix:
    """One positional observation."""

    timestamp: datetime
    latitude: float
    longitude: float
    altitude: float = 0.0     # meters
    heading: float = 0.0      # degrees, 0=N, 90=E
    satellites: int = 0
    row: int = 0              # index of the source record


@dataclass(frozen=True)
class RecordError:
    """A raw record rejected by the parser."""

    row: int
    kind: ErrorKind
    message: str
    value: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "row": self.row,
            "kind": self.kind.value,
            "message": self.message,
            "value": self.value,
        }


@dataclass(frozen=True)
class Diagnostic:
    """A condition found while deriving samples (index None = whole sequence)."""

    index: Optional[int]
    kind: ErrorKind
    message: str

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "kind": self.kind.value,
            "message": self.message,
        }

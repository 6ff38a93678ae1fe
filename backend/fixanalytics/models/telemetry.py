"""
Enriched fix data model.

Every Fix is turned into a Sample carrying:
- kinematics relative to the previous fix (distance, speed, acceleration)
- motion flags (moving, sharp turn, high speed)
- signal quality estimated from the satellite count
- temporal integrity of the transmission interval
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from fixanalytics.models.raw import Diagnostic, ErrorKind, Fix, RecordError

if TYPE_CHECKING:
    from fixanalytics.config import AnalysisConfig
    from fixanalytics.models.summary import AnalysisSummary


class SignalQuality(Enum):
    """Signal quality class derived from the satellite count."""

    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"


class GapClass(Enum):
    """Classification of the interval since the previous fix."""

    NORMAL = "Normal"
    DRIFT = "Drift"
    GAP = "Gap"


class GapSeverity(Enum):
    """Severity of an interval relative to the expected period."""

    NONE = "None"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


@dataclass(frozen=True)
class Sample:
    """A Fix enriched with metrics relative to its predecessor."""

    fix: Fix
    index: int

    # Kinematics (all 0 for the first sample)
    distance_m: float = 0.0
    speed_kmh: float = 0.0
    acceleration_kmh_per_s: float = 0.0
    heading_delta_deg: float = 0.0
    time_gap_s: float = 0.0

    # Motion
    is_moving: bool = False
    is_sharp_turn: bool = False
    is_high_speed: bool = False

    # Signal
    signal_quality: SignalQuality = SignalQuality.POOR
    estimated_accuracy_m: float = 25.0

    # Temporal integrity
    gap_class: GapClass = GapClass.NORMAL
    gap_severity: GapSeverity = GapSeverity.NONE
    reliability_score: float = 100.0

    diagnostics: tuple[ErrorKind, ...] = ()

    @property
    def timestamp(self) -> datetime:
        return self.fix.timestamp

    @property
    def latitude(self) -> float:
        return self.fix.latitude

    @property
    def longitude(self) -> float:
        return self.fix.longitude

    @property
    def altitude(self) -> float:
        return self.fix.altitude

    @property
    def heading(self) -> float:
        return self.fix.heading

    @property
    def satellites(self) -> int:
        return self.fix.satellites

    @property
    def is_gap(self) -> bool:
        return self.gap_class is GapClass.GAP

    @property
    def is_drift(self) -> bool:
        return self.gap_class is GapClass.DRIFT

    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "row": self.fix.row,
            "timestamp": self.fix.timestamp.isoformat(),
            "latitude": self.fix.latitude,
            "longitude": self.fix.longitude,
            "altitude": self.fix.altitude,
            "heading": self.fix.heading,
            "satellites": self.fix.satellites,
            "distance_m": self.distance_m,
            "speed_kmh": self.speed_kmh,
            "acceleration_kmh_per_s": self.acceleration_kmh_per_s,
            "heading_delta_deg": self.heading_delta_deg,
            "time_gap_s": self.time_gap_s,
            "is_moving": self.is_moving,
            "is_sharp_turn": self.is_sharp_turn,
            "is_high_speed": self.is_high_speed,
            "signal_quality": self.signal_quality.value,
            "estimated_accuracy_m": self.estimated_accuracy_m,
            "gap_class": self.gap_class.value,
            "gap_severity": self.gap_severity.value,
            "reliability_score": self.reliability_score,
            "diagnostics": [kind.value for kind in self.diagnostics],
        }


@dataclass(frozen=True)
class StopPeriod:
    """A maximal run of consecutive non-moving samples."""

    start_index: int
    end_index: int      # inclusive
    length: int
    duration_s: float   # length * expected interval
    elapsed_s: float    # measured from timestamps

    def to_dict(self) -> dict:
        return {
            "start_index": self.start_index,
            "end_index": self.end_index,
            "length": self.length,
            "duration_s": self.duration_s,
            "elapsed_s": self.elapsed_s,
        }


@dataclass
class AnalysisResult:
    """Output of one pipeline run."""

    samples: list[Sample]
    summary: "AnalysisSummary"
    config: "AnalysisConfig"
    errors: list[RecordError] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    name: Optional[str] = None

    @property
    def sample_count(self) -> int:
        return len(self.samples)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "sample_count": self.sample_count,
            "samples": [s.to_dict() for s in self.samples],
            "summary": self.summary.to_dict(),
            "errors": [e.to_dict() for e in self.errors],
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "config": self.config.to_dict(),
        }

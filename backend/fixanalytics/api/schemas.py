"""
API schemas (Pydantic models) for request/response validation.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# ============================================================================
# Configuration Schemas
# ============================================================================

class FieldSchemaRequest(BaseModel):
    """Column names of the raw records."""
    timestamp: str = "Transmitted Time"
    latitude: str = "Latitude"
    longitude: str = "Longitude"
    altitude: str = "Altitude"
    heading: str = "Direction"
    satellites: str = "Satellites"


class AnalysisConfigRequest(BaseModel):
    """Per-request overrides of the analysis thresholds (unset = server default)."""
    timestamp_format: Optional[str] = None
    expected_interval_s: Optional[float] = Field(default=None, gt=0)
    gap_multiplier: Optional[float] = Field(default=None, gt=1.0)
    drift_tolerance_s: Optional[float] = Field(default=None, ge=0)
    speed_threshold_kmh: Optional[float] = Field(default=None, ge=0)
    sharp_turn_deg: Optional[float] = Field(default=None, ge=0, le=180)
    high_speed_kmh: Optional[float] = Field(default=None, ge=0)
    min_stop_run_length: Optional[int] = Field(default=None, ge=0)
    jitter_sanity_ceiling_s: Optional[float] = Field(default=None, gt=0)
    severity_thresholds: Optional[tuple[float, float, float]] = None
    fields: Optional[FieldSchemaRequest] = None


# ============================================================================
# Sample Schemas
# ============================================================================

class SampleResponse(BaseModel):
    """A fix enriched with derived metrics."""
    index: int
    row: int
    timestamp: str
    latitude: float
    longitude: float
    altitude: float
    heading: float
    satellites: int
    distance_m: float
    speed_kmh: float
    acceleration_kmh_per_s: float
    heading_delta_deg: float
    time_gap_s: float
    is_moving: bool
    is_sharp_turn: bool
    is_high_speed: bool
    signal_quality: str
    estimated_accuracy_m: float
    gap_class: str
    gap_severity: str
    reliability_score: float
    diagnostics: list[str]


class RecordErrorResponse(BaseModel):
    """A raw record rejected by the parser."""
    row: int
    kind: str
    message: str
    value: Optional[str] = None


class DiagnosticResponse(BaseModel):
    """A condition found while deriving samples."""
    index: Optional[int] = None
    kind: str
    message: str


# ============================================================================
# Summary Schemas
# ============================================================================

class StopPeriodResponse(BaseModel):
    start_index: int
    end_index: int
    length: int
    duration_s: float
    elapsed_s: float


class MotionSummaryResponse(BaseModel):
    total_points: int
    moving_points: int
    stationary_points: int
    moving_percentage: float
    stationary_percentage: float
    sharp_turns: int
    high_speed_points: int
    stop_periods_count: int
    stop_periods: list[StopPeriodResponse]
    speed_distribution: dict[str, int]
    avg_speed_kmh: float
    max_speed_kmh: float
    avg_heading_delta_deg: float
    max_heading_delta_deg: float
    avg_acceleration_kmh_per_s: float
    max_acceleration_kmh_per_s: float
    total_distance_m: float


class SignalSummaryResponse(BaseModel):
    total_points: int
    avg_satellites: float
    min_satellites: int
    max_satellites: int
    weak_signals: int
    strong_signals: int
    quality_distribution: dict[str, int]
    avg_accuracy_m: float
    drift_points: int
    avg_drift_m: float
    max_drift_m: float


class TemporalSummaryResponse(BaseModel):
    total_packets: int
    total_time_s: float
    avg_interval_s: float
    max_gap_s: float
    min_gap_s: float
    gaps: int
    drifts: int
    normal_intervals: int
    packet_loss_rate: float
    drift_rate: float
    severity_counts: dict[str, int]
    jitter_s: float
    jitter_cv_percent: float
    reliability: float


class DailySummaryResponse(BaseModel):
    date: str
    point_count: int
    total_distance_m: float
    avg_speed_kmh: float
    max_speed_kmh: float


class SpatioTemporalSummaryResponse(BaseModel):
    total_points: int
    duration_min: float
    total_distance_m: float
    total_distance_km: float
    avg_speed_kmh: float
    max_speed_kmh: float
    min_altitude_m: float
    max_altitude_m: float
    altitude_range_m: float
    movement_types: dict[str, int]
    direction_counts: dict[str, int]
    avg_satellites: float
    signal_quality: str
    daily: list[DailySummaryResponse]


class AnalysisSummaryResponse(BaseModel):
    """One summary per analysis domain."""
    motion: MotionSummaryResponse
    signal: SignalSummaryResponse
    temporal: TemporalSummaryResponse
    spatio_temporal: SpatioTemporalSummaryResponse


# ============================================================================
# Analysis Schemas
# ============================================================================

class AnalyzeRequest(BaseModel):
    """Raw records to analyze, in chronological order."""
    records: list[dict[str, Any]]
    config: Optional[AnalysisConfigRequest] = None


class AnalysisResponse(BaseModel):
    """Full pipeline output."""
    name: Optional[str] = None
    sample_count: int
    samples: list[SampleResponse]
    summary: AnalysisSummaryResponse
    errors: list[RecordErrorResponse]
    diagnostics: list[DiagnosticResponse]
    config: dict[str, Any]


# ============================================================================
# Log Schemas
# ============================================================================

class LogSummaryResponse(BaseModel):
    """Summary of an indexed log for listing."""
    id: str
    name: str
    source_file: str
    sample_count: int
    error_count: int
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class LogDetailResponse(BaseModel):
    """Summaries and issue counts for one log."""
    id: str
    name: str
    sample_count: int
    summary: AnalysisSummaryResponse
    errors: list[RecordErrorResponse]
    diagnostics: list[DiagnosticResponse]


class LogSamplesResponse(BaseModel):
    """Enriched samples of one log."""
    id: str
    sample_count: int
    samples: list[SampleResponse]


# ============================================================================
# Folder Management Schemas
# ============================================================================

class SetFolderRequest(BaseModel):
    """Request to set the data folder."""
    path: str


class FolderInfoResponse(BaseModel):
    """Information about the current data folder."""
    path: Optional[str]
    log_count: int


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
    code: Optional[str] = None

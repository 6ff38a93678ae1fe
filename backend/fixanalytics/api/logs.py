"""
API routes for fix-log analysis.
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

from fixanalytics.api.schemas import (
    AnalysisConfigRequest,
    AnalysisResponse,
    AnalyzeRequest,
    ErrorResponse,
    FolderInfoResponse,
    LogDetailResponse,
    LogSamplesResponse,
    LogSummaryResponse,
    SetFolderRequest,
)
from fixanalytics.config import AnalysisConfig, FieldSchema
from fixanalytics.models.telemetry import AnalysisResult
from fixanalytics.services.export import export_samples_csv
from fixanalytics.services.pipeline import analyze_records
from fixanalytics.services.repository import get_repository


NOT_FOUND = {404: {"model": ErrorResponse}}


def _build_config(base: AnalysisConfig, request: Optional[AnalysisConfigRequest]) -> AnalysisConfig:
    """Apply request overrides on top of the server configuration."""
    if request is None:
        return base

    overrides = request.model_dump(exclude_none=True, exclude={"fields"})
    if request.fields is not None:
        overrides["fields"] = FieldSchema(**request.fields.model_dump())
    if "severity_thresholds" in overrides:
        overrides["severity_thresholds"] = tuple(overrides["severity_thresholds"])

    try:
        return base.with_overrides(**overrides)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _get_result(log_id: str, config: Optional[AnalysisConfigRequest] = None) -> AnalysisResult:
    repo = get_repository()
    if not repo.has_log(log_id):
        raise HTTPException(status_code=404, detail=f"Log not found: {log_id}")

    result = repo.get_result(log_id, _build_config(repo.config, config))
    if result is None:
        raise HTTPException(status_code=404, detail=f"Log could not be read: {log_id}")
    return result


def _query_config(
    expected_interval_s: Optional[float],
    speed_threshold_kmh: Optional[float],
) -> Optional[AnalysisConfigRequest]:
    if expected_interval_s is None and speed_threshold_kmh is None:
        return None
    return AnalysisConfigRequest(
        expected_interval_s=expected_interval_s,
        speed_threshold_kmh=speed_threshold_kmh,
    )


# ============================================================================
# Analysis Routes
# ============================================================================

analyze_router = APIRouter(prefix="/analyze", tags=["analyze"])


@analyze_router.post("", response_model=AnalysisResponse)
async def analyze(request: AnalyzeRequest):
    """
    Run the pipeline over raw records supplied in the request body.

    Records with malformed timestamps are reported in `errors`; the rest
    are analyzed.
    """
    repo = get_repository()
    config = _build_config(repo.config, request.config)
    result = analyze_records(request.records, config)
    return AnalysisResponse(**result.to_dict())


# ============================================================================
# Log Routes
# ============================================================================

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=list[LogSummaryResponse])
async def list_logs():
    """
    List all indexed fix logs.

    Returns summaries sorted by start time (newest first).
    """
    repo = get_repository()
    return [
        LogSummaryResponse(
            id=s.id,
            name=s.name,
            source_file=s.source_file,
            sample_count=s.sample_count,
            error_count=s.error_count,
            start_time=s.start_time,
            end_time=s.end_time,
        )
        for s in repo.list_logs()
    ]


@router.get("/{log_id}", response_model=LogDetailResponse, responses=NOT_FOUND)
async def get_log(
    log_id: str,
    expected_interval_s: Optional[float] = Query(None, gt=0, description="Expected transmission interval"),
    speed_threshold_kmh: Optional[float] = Query(None, ge=0, description="Moving threshold in km/h"),
):
    """Get per-domain summaries and issues for a log."""
    result = _get_result(log_id, _query_config(expected_interval_s, speed_threshold_kmh))
    data = result.to_dict()

    return LogDetailResponse(
        id=log_id,
        name=result.name or log_id,
        sample_count=result.sample_count,
        summary=data["summary"],
        errors=data["errors"],
        diagnostics=data["diagnostics"],
    )


@router.get("/{log_id}/samples", response_model=LogSamplesResponse, responses=NOT_FOUND)
async def get_log_samples(
    log_id: str,
    expected_interval_s: Optional[float] = Query(None, gt=0, description="Expected transmission interval"),
    speed_threshold_kmh: Optional[float] = Query(None, ge=0, description="Moving threshold in km/h"),
):
    """
    Get the enriched samples of a log.

    Warning: This can be a large response for long logs.
    """
    result = _get_result(log_id, _query_config(expected_interval_s, speed_threshold_kmh))

    return LogSamplesResponse(
        id=log_id,
        sample_count=result.sample_count,
        samples=[s.to_dict() for s in result.samples],
    )


@router.get("/{log_id}/samples.csv", response_class=PlainTextResponse, responses=NOT_FOUND)
async def export_log_samples(log_id: str):
    """Download the enriched samples of a log as CSV."""
    result = _get_result(log_id)
    return PlainTextResponse(export_samples_csv(result.samples), media_type="text/csv")


# ============================================================================
# Folder Management Routes
# ============================================================================

folder_router = APIRouter(prefix="/folder", tags=["folder"])


@folder_router.get("", response_model=FolderInfoResponse)
async def get_folder_info():
    """Get information about the current data folder."""
    repo = get_repository()

    return FolderInfoResponse(
        path=str(repo.data_folder) if repo.data_folder else None,
        log_count=repo.log_count,
    )


@folder_router.post("", response_model=FolderInfoResponse)
async def set_folder(request: SetFolderRequest):
    """
    Set the data folder to scan for CSV logs.

    This will clear the current cache and re-scan.
    """
    repo = get_repository()

    path = Path(request.path)
    if not path.exists():
        raise HTTPException(status_code=400, detail=f"Folder does not exist: {request.path}")
    if not path.is_dir():
        raise HTTPException(status_code=400, detail=f"Path is not a directory: {request.path}")

    count = repo.set_data_folder(path)

    return FolderInfoResponse(
        path=str(path),
        log_count=count,
    )


@folder_router.post("/rescan", response_model=FolderInfoResponse)
async def rescan_folder():
    """Rescan the current data folder for new CSV logs."""
    repo = get_repository()

    if repo.data_folder is None:
        raise HTTPException(status_code=400, detail="No data folder set")

    repo.clear_cache()
    count = repo.scan_folder(repo.data_folder)

    return FolderInfoResponse(
        path=str(repo.data_folder),
        log_count=count,
    )

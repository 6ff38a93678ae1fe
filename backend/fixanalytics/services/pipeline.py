"""
Analysis pipeline.

raw records -> Fix list (+ parse errors) -> Sample list (+ diagnostics)
-> per-domain summaries.

The pipeline is a pure batch transformation: the same records and
configuration always give the same result.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Optional

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.raw import Diagnostic, ErrorKind, Fix
from fixanalytics.models.telemetry import AnalysisResult, Sample
from fixanalytics.services.aggregator import summarize
from fixanalytics.services.deriver import derive_samples
from fixanalytics.services.record_parser import parse_records


logger = logging.getLogger(__name__)


def collect_diagnostics(samples: Iterable[Sample]) -> list[Diagnostic]:
    """Lift per-sample diagnostic kinds into result-level diagnostics."""
    diagnostics = []
    for sample in samples:
        for kind in sample.diagnostics:
            if kind is ErrorKind.NON_MONOTONIC_TIMESTAMP:
                message = (
                    f"Timestamp {sample.timestamp.isoformat()} does not advance "
                    f"({sample.time_gap_s:+.1f}s); speed forced to 0"
                )
            else:
                message = kind.value
            diagnostics.append(Diagnostic(index=sample.index, kind=kind, message=message))
    return diagnostics


def analyze_fixes(
    fixes: list[Fix],
    config: Optional[AnalysisConfig] = None,
    name: Optional[str] = None,
) -> AnalysisResult:
    """Derive samples and summaries from already-parsed fixes."""
    config = config or AnalysisConfig()

    samples = derive_samples(fixes, config)
    diagnostics = collect_diagnostics(samples)

    if not samples:
        logger.warning(f"No valid fixes to analyze{f' in {name}' if name else ''}")
        diagnostics.append(Diagnostic(
            index=None,
            kind=ErrorKind.EMPTY_INPUT,
            message="No valid records after filtering",
        ))
    elif diagnostics:
        logger.warning(f"{len(diagnostics)} non-monotonic timestamps in {name or 'input'}")

    return AnalysisResult(
        samples=samples,
        summary=summarize(samples, config),
        config=config,
        diagnostics=diagnostics,
        name=name,
    )


def analyze_records(
    records: Iterable[Mapping[str, Optional[str]]],
    config: Optional[AnalysisConfig] = None,
    name: Optional[str] = None,
) -> AnalysisResult:
    """
    Run the full pipeline over raw records.

    Parser errors are collected in result.errors rather than raised, so the
    caller always gets the best-effort enriched sequence.
    """
    config = config or AnalysisConfig()

    fixes, errors = parse_records(records, config)
    result = analyze_fixes(fixes, config, name=name)
    result.errors = errors

    logger.info(
        f"Analyzed {result.sample_count} samples"
        f" ({len(errors)} errors, {len(result.diagnostics)} diagnostics)"
    )
    return result

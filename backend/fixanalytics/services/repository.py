"""
Log Repository - indexes a folder of CSV fix logs and caches analyses.

Results are kept in memory only. Analyses with the repository configuration
are cached per log; analyses with overridden thresholds go into a small LRU
cache so arbitrary query overrides cannot grow memory without bound.
"""

import hashlib
import logging
from collections import OrderedDict
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fixanalytics.config import AnalysisConfig
from fixanalytics.models.telemetry import AnalysisResult
from fixanalytics.services.csv_loader import analyze_csv


logger = logging.getLogger(__name__)

# Maximum number of cached analyses with non-default configurations
OVERRIDE_CACHE_SIZE = 32


@dataclass
class LogSummary:
    """Lightweight description of an indexed log for listing."""

    id: str
    name: str
    source_file: str
    sample_count: int
    error_count: int
    start_time: Optional[str]
    end_time: Optional[str]

    @classmethod
    def from_result(cls, log_id: str, filepath: Path, result: AnalysisResult) -> "LogSummary":
        samples = result.samples
        return cls(
            id=log_id,
            name=filepath.stem,
            source_file=str(filepath),
            sample_count=len(samples),
            error_count=len(result.errors),
            start_time=samples[0].timestamp.isoformat() if samples else None,
            end_time=samples[-1].timestamp.isoformat() if samples else None,
        )


class LogRepository:
    """
    Repository for fix logs stored as CSV files in a folder.

    Caches analysis results in memory for performance.
    """

    def __init__(
        self,
        data_folder: Optional[Path] = None,
        config: Optional[AnalysisConfig] = None,
        override_cache_size: int = OVERRIDE_CACHE_SIZE,
    ):
        """
        Initialize the repository.

        Args:
            data_folder: Folder containing CSV files. If None, must be set later.
            config: Default analysis configuration
            override_cache_size: Bound on cached analyses with other configurations
        """
        self._data_folder: Optional[Path] = data_folder
        self._config = config or AnalysisConfig.from_env()
        self._cache: dict[str, AnalysisResult] = {}  # id -> result with self._config
        self._override_cache: OrderedDict[tuple[str, AnalysisConfig], AnalysisResult] = OrderedDict()
        self._override_cache_size = override_cache_size
        self._index: dict[str, Path] = {}  # id -> filepath mapping

        if data_folder is not None:
            self.scan_folder(data_folder)

    @property
    def data_folder(self) -> Optional[Path]:
        return self._data_folder

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    @property
    def log_count(self) -> int:
        return len(self._index)

    def has_log(self, log_id: str) -> bool:
        return log_id in self._index

    def set_data_folder(self, folder: Path) -> int:
        """
        Set the data folder and scan for CSV files.

        Returns:
            Number of CSV files found
        """
        self._data_folder = folder
        self.clear_cache()
        self._index.clear()
        return self.scan_folder(folder)

    def scan_folder(self, folder: Path) -> int:
        """
        Scan a folder for CSV files and build the index.

        Returns:
            Number of CSV files found
        """
        if not folder.exists():
            logger.warning(f"Data folder does not exist: {folder}")
            return 0

        count = 0
        for csv_file in sorted(folder.glob("*.csv")):
            if csv_file.is_file():
                log_id = self._filepath_to_id(csv_file)
                self._index[log_id] = csv_file
                count += 1
                logger.debug(f"Indexed log: {log_id} -> {csv_file.name}")

        logger.info(f"Scanned {count} CSV files in {folder}")
        return count

    def list_logs(self) -> list[LogSummary]:
        """List all indexed logs, sorted by start time (newest first), then name."""
        summaries = []
        for log_id, filepath in self._index.items():
            result = self.get_result(log_id)
            if result is not None:
                summaries.append(LogSummary.from_result(log_id, filepath, result))

        summaries.sort(key=lambda s: (s.start_time or "", s.name), reverse=True)
        return summaries

    def get_result(self, log_id: str, config: Optional[AnalysisConfig] = None) -> Optional[AnalysisResult]:
        """
        Get the analysis of a log.

        Returns:
            AnalysisResult if the log is indexed and readable, None otherwise
        """
        config = config or self._config
        default = config == self._config
        key = (log_id, config)

        if default and log_id in self._cache:
            return self._cache[log_id]
        if not default and key in self._override_cache:
            self._override_cache.move_to_end(key)
            return self._override_cache[key]

        if log_id not in self._index:
            return None

        filepath = self._index[log_id]
        try:
            result = analyze_csv(filepath, config)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load log {log_id}: {e}")
            return None

        if default:
            self._cache[log_id] = result
        else:
            self._override_cache[key] = result
            while len(self._override_cache) > self._override_cache_size:
                self._override_cache.popitem(last=False)
        logger.debug(f"Analyzed and cached log: {log_id}")
        return result

    @property
    def cached_count(self) -> int:
        """Number of cached analyses across both caches."""
        return len(self._cache) + len(self._override_cache)

    def clear_cache(self) -> None:
        """Clear the in-memory cache."""
        self._cache.clear()
        self._override_cache.clear()
        logger.info("Analysis cache cleared")

    def _filepath_to_id(self, filepath: Path) -> str:
        """Generate a consistent ID from filename, size and mtime."""
        stat = filepath.stat()
        id_string = f"{filepath.name}_{stat.st_size}_{stat.st_mtime}"
        return hashlib.sha256(id_string.encode()).hexdigest()[:16]


# Global repository instance (set up by app initialization)
_repository: Optional[LogRepository] = None


def get_repository() -> LogRepository:
    """Get the global repository instance."""
    global _repository
    if _repository is None:
        _repository = LogRepository()
    return _repository


def init_repository(data_folder: Path, config: Optional[AnalysisConfig] = None) -> LogRepository:
    """Initialize the global repository with a data folder."""
    global _repository
    _repository = LogRepository(data_folder, config)
    return _repository

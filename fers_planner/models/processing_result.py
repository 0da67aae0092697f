from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models for batch workbook imports.

Aggregates per-file outcomes of ``fers_planner.services.orchestrator.import_all``
into the figures reported on the SUMMARY line.
"""


class FileStatus(Enum):
    """Outcome of one workbook in a batch.

    - SUCCESS: workbook decoded and fields assembled (possibly zero of them)
    - FAILED: file missing or not a readable workbook
    """
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    """Per-file import statistics (internal helper for ProcessingResult)."""
    file_name: str
    status: FileStatus
    field_count: int  # imported (non-empty) fields
    elapsed_seconds: float
    error: str | None = None  # failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results of a batch import run."""
    success_files: int
    failed_files: int
    total_fields: int  # sum of imported fields over successful files
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

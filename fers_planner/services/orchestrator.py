from __future__ import annotations

import logging
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import DEFAULT_CONFIG, PlannerConfig
from ..models.error_record import ErrorRecord
from ..models.import_outcome import ImportFailed, ImportSucceeded
from ..models.processing_result import FileStat, FileStatus, ProcessingResult
from ..models.scenario_inputs import ScenarioInputs
from .importer import import_scenario_file
from .progress import ProgressTracker

"""Batch import orchestration.

Imports a list of intake workbooks one after another. Each workbook is decoded
and resolved in isolation (fresh resolver, fresh section context); successful
imports are merged, in order, over the base record so later workbooks win for
the fields they carry. Failed workbooks are recorded as JSON-Lines error
records and never stop the batch.
"""

__all__ = [
    "BatchImport",
    "FILE_LEVEL_SHEET",
    "ProcessingError",
    "WORKBOOK_SUFFIXES",
    "collect_workbooks",
    "import_all",
]

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIXES = (".xlsx", ".xls")
FILE_LEVEL_SHEET = "<FILE_LEVEL>"


class ProcessingError(Exception):
    """Fatal batch error (nothing could be imported)."""


@dataclass(frozen=True)
class BatchImport:
    result: ProcessingResult
    record: ScenarioInputs


def collect_workbooks(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into their workbooks (non-recursive, sorted by name).

    Plain paths are kept as given, even when missing, so that the import can
    report them as FILE_NOT_FOUND.

    Raises:
        ProcessingError: a directory cannot be listed
    """
    files: list[Path] = []
    for path in paths:
        if not path.is_dir():
            files.append(path)
            continue
        try:
            found = [p for p in path.iterdir() if p.is_file() and p.suffix.lower() in WORKBOOK_SUFFIXES]
        except OSError as e:
            raise ProcessingError(f"Error reading directory {path}: {e}") from e
        files.extend(sorted(found, key=lambda p: p.name))
    return files


def import_all(
    paths: Iterable[Path],
    base: ScenarioInputs | Mapping[str, Any] | None = None,
    config: PlannerConfig = DEFAULT_CONFIG,
    error_log: ErrorLogBuffer | None = None,
) -> BatchImport:
    """Import every workbook in ``paths`` and merge the results over ``base``.

    Returns the aggregated ProcessingResult together with the merged record.
    The error log is flushed once at the end when any workbook failed.
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    record = base if isinstance(base, ScenarioInputs) else ScenarioInputs.from_mapping(base)
    files = collect_workbooks(paths)

    file_stats: list[FileStat] = []
    with ProgressTracker(len(files)) as progress:
        for path in files:
            progress.start_file(path)
            t0 = time.perf_counter()
            outcome = import_scenario_file(path, config)
            elapsed = time.perf_counter() - t0

            match outcome:
                case ImportSucceeded(fields=fields):
                    record = record.merge(fields)
                    logger.info("%s: Imported %d fields — review and save.", path.name, len(fields))
                    file_stats.append(FileStat(path.name, FileStatus.SUCCESS, len(fields), elapsed))
                    progress.finish_file(success=True)
                case ImportFailed(kind=kind, message=message):
                    logger.error("%s: %s", path.name, message)
                    error_log.append(
                        ErrorRecord.create(
                            file=path.name,
                            sheet=FILE_LEVEL_SHEET,
                            row=-1,
                            error_type=kind.value,
                            message=message,
                        )
                    )
                    file_stats.append(FileStat(path.name, FileStatus.FAILED, 0, elapsed, error=message))
                    progress.finish_file(success=False)

    log_path = error_log.flush()
    if log_path is not None:
        logger.warning("error details written to %s", log_path)

    end_time = datetime.now(UTC)
    succeeded = [s for s in file_stats if s.status is FileStatus.SUCCESS]
    result = ProcessingResult(
        success_files=len(succeeded),
        failed_files=len(file_stats) - len(succeeded),
        total_fields=sum(s.field_count for s in succeeded),
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
    return BatchImport(result=result, record=record)

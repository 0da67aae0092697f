from __future__ import annotations

from ..models.processing_result import ProcessingResult

"""SUMMARY line rendering for batch imports.

Format::

    SUMMARY files={total}/{total} success={success} failed={failed} fields={fields} elapsed_sec={elapsed}
"""

__all__ = [
    "format_seconds",
    "render_summary_body",
    "render_summary_line",
]


def format_seconds(seconds: float) -> str:
    """Integral values without a decimal point, tiny values without exponent notation."""
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_body(result: ProcessingResult) -> str:
    """SUMMARY line without its label, for ``log_summary`` which adds the label."""
    total = result.total_files
    return (
        f"files={total}/{total} "
        f"success={result.success_files} "
        f"failed={result.failed_files} "
        f"fields={result.total_fields} "
        f"elapsed_sec={format_seconds(result.elapsed_seconds)}"
    )


def render_summary_line(result: ProcessingResult) -> str:
    """Render the SUMMARY line for a finished batch.

    >>> from datetime import datetime, timezone
    >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
    >>> render_summary_line(ProcessingResult(2, 1, 40, t, t, 1.5))
    'SUMMARY files=3/3 success=2 failed=1 fields=40 elapsed_sec=1.5'
    """
    return f"SUMMARY {render_summary_body(result)}"

from __future__ import annotations

import re
from datetime import UTC, datetime

from fers_planner.models.processing_result import ProcessingResult
from fers_planner.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY\s+files=([0-9]+)/(\1)\s+success=([0-9]+)\s+failed=([0-9]+)\s+"
    r"fields=([0-9]+)\s+elapsed_sec=([0-9]+\.?[0-9]*)$"
)


def test_example_line_matches():
    assert SUMMARY_PATTERN.match("SUMMARY files=2/2 success=1 failed=1 fields=31 elapsed_sec=0.84")


def test_rendered_lines_match():
    t = datetime(2026, 1, 1, tzinfo=UTC)
    for elapsed in (0, 0.000042, 0.5, 3.0, 12.3456):
        line = render_summary_line(ProcessingResult(3, 1, 90, t, t, elapsed))
        m = SUMMARY_PATTERN.match(line)
        assert m, line
        assert int(m.group(3)) + int(m.group(4)) == int(m.group(1))

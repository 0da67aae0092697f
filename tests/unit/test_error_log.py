from __future__ import annotations

import json
from pathlib import Path

from fers_planner.logging.error_log import ErrorLogBuffer
from fers_planner.models.error_record import ErrorRecord

KEYS = {"timestamp", "file", "sheet", "row", "error_type", "message"}


def test_error_record_json_line():
    rec = ErrorRecord.create("intake.xlsx", "<FILE_LEVEL>", -1, "UNREADABLE_WORKBOOK", "bad zip")
    data = json.loads(rec.to_json_line())
    assert set(data) == KEYS
    assert data["row"] == -1
    assert data["timestamp"].endswith("Z")


def test_flush_writes_json_lines(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "<FILE_LEVEL>", -1, "FILE_NOT_FOUND", "missing"))
    buf.append(ErrorRecord.create("b.xlsx", "<FILE_LEVEL>", -1, "UNREADABLE_WORKBOOK", "garbage"))
    path = buf.flush()
    assert path is not None
    assert path.parent == Path("logs")
    assert path.name.startswith("errors-") and path.suffix == ".log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["file"] for line in lines] == ["a.xlsx", "b.xlsx"]
    assert len(buf) == 0


def test_flush_appends_to_the_same_file(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "<FILE_LEVEL>", -1, "FILE_NOT_FOUND", "missing"))
    first = buf.flush()
    buf.append(ErrorRecord.create("b.xlsx", "<FILE_LEVEL>", -1, "FILE_NOT_FOUND", "missing"))
    second = buf.flush()
    assert first == second
    assert len(second.read_text(encoding="utf-8").splitlines()) == 2


def test_empty_flush_writes_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Workbook reader for the scenario importer.

Decodes an uploaded workbook (.xlsx via openpyxl, .xls via xlrd; pandas picks
the engine from the file content) and returns its first worksheet as a grid of
raw cell values. Blank cells come back as None rather than NaN; pandas' default
NA strings ("NA", "N/A", "None", "null", ...) are not applied, so such text
reaches the normalizers unchanged.
"""

__all__ = [
    "LABEL_COLUMNS",
    "VALUE_COLUMN",
    "ScenarioImportError",
    "SheetGrid",
    "WorkbookReadError",
    "read_first_sheet",
    "read_workbook_file",
]

# Labels sit in column A or B, values in column C.
LABEL_COLUMNS = (0, 1)
VALUE_COLUMN = 2

# pandas reads empty cells as ""; nothing else counts as missing
BLANK_NA_VALUES = [""]


class ScenarioImportError(Exception):
    """Base class for import failures."""


class WorkbookReadError(ScenarioImportError):
    """Raised when the bytes cannot be decoded as a tabular workbook."""


@dataclass(frozen=True)
class SheetGrid:
    sheet_name: str
    rows: list[list[Any]]  # row-major cell values, None for blanks

    def cell(self, row: int, column: int) -> Any:
        cells = self.rows[row]
        return cells[column] if column < len(cells) else None


def _clean(value: Any) -> Any:
    if isinstance(value, str):
        return value if value != "" else None
    try:
        return None if pd.isna(value) else value
    except (TypeError, ValueError):
        return value


def read_first_sheet(data: bytes) -> SheetGrid:
    """Decode workbook bytes and return the first worksheet as a grid.

    Raises:
        WorkbookReadError: the data is empty, not a workbook, or corrupt
    """
    if not data:
        raise WorkbookReadError("workbook is empty")
    try:
        xls = pd.ExcelFile(io.BytesIO(data))
        if not xls.sheet_names:
            raise WorkbookReadError("workbook has no worksheets")
        name = xls.sheet_names[0]
        # header=None: every row is data; labels are located by text, not position.
        # Only empty cells are NA; text such as "NA" or "None" is kept as written.
        df = xls.parse(name, header=None, keep_default_na=False, na_values=BLANK_NA_VALUES)
    except WorkbookReadError:
        raise
    except Exception as e:
        # pandas/openpyxl/xlrd raise a wide range of types for bad input
        raise WorkbookReadError(f"failed to read workbook: {e}") from e

    rows = [[_clean(v) for v in raw] for raw in df.itertuples(index=False, name=None)]
    return SheetGrid(sheet_name=str(name), rows=rows)


def read_workbook_file(path: Path) -> SheetGrid:
    """Convenience wrapper reading a workbook from disk."""
    return read_first_sheet(path.read_bytes())

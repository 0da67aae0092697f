from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""RowEntry model for the spreadsheet import resolver.

A RowEntry represents one non-empty labeled row of the first worksheet, captured
together with the section context that was active when the row was read.
"""

__all__ = [
    "RowEntry",
    "SectionContext",
]


class SectionContext(Enum):
    """Which part of the intake sheet a row belongs to.

    Fund letters (G/F/C/S/I/L) appear once under the balance section and once
    under the allocation section, so the context is what tells them apart.
    """
    BALANCE = "balance"
    ALLOCATION = "alloc"
    NONE = "none"

    @classmethod
    def parse(cls, value: SectionContext | str) -> SectionContext:
        """Accept an enum member or one of 'balance' / 'alloc' / 'allocation' / 'none'."""
        if isinstance(value, SectionContext):
            return value
        key = str(value).strip().lower()
        if key == "allocation":
            return cls.ALLOCATION
        return cls(key)


@dataclass(frozen=True)
class RowEntry:
    """Logical representation of a single labeled sheet row.

    row_index is the 0-based position in the sheet grid (Excel row - 1).
    """
    row_index: int
    label: str  # trimmed, lower-cased comparison key
    raw_label: str  # original text for diagnostics
    value: Any  # raw cell value from the value column (None when blank)
    context: SectionContext = SectionContext.NONE

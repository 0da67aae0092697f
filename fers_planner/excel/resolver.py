from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from functools import reduce
from typing import Any

from ..models.config_models import SectionKeywords
from ..models.row_entry import RowEntry, SectionContext
from .normalizers import normalize_label
from .reader import LABEL_COLUMNS, VALUE_COLUMN

"""Label-based lookup over a flattened intake sheet.

Row positions drift between versions of the intake workbook, so values are
located by their label text. Labels are not unique: the single-letter fund rows
repeat under the balance and the allocation sections. The resolver therefore
records, for each row, which section header was seen most recently.
"""

__all__ = [
    "LabelResolver",
    "build_entries",
    "section_context_of",
]

logger = logging.getLogger(__name__)

_Accumulator = tuple[tuple[RowEntry, ...], SectionContext]


def section_context_of(label: str, keywords: SectionKeywords) -> SectionContext | None:
    """Context switched on by a label, or None if the label is not a section header."""
    if any(k in label for k in keywords.balance):
        return SectionContext.BALANCE
    if any(k in label for k in keywords.allocation):
        return SectionContext.ALLOCATION
    return None


def _row_label(cells: Sequence[Any]) -> tuple[str, str]:
    for column in LABEL_COLUMNS:
        if column >= len(cells):
            break
        label = normalize_label(cells[column])
        if label:
            return label, str(cells[column]).strip()
    return "", ""


def build_entries(
    rows: Iterable[Sequence[Any]],
    keywords: SectionKeywords | None = None,
) -> tuple[RowEntry, ...]:
    """Fold sheet rows into RowEntry objects, carrying the section context forward."""
    keywords = keywords or SectionKeywords()

    def step(acc: _Accumulator, indexed: tuple[int, Sequence[Any]]) -> _Accumulator:
        entries, context = acc
        index, cells = indexed
        label, raw_label = _row_label(cells)
        if not label:
            return acc
        context = section_context_of(label, keywords) or context
        value = cells[VALUE_COLUMN] if VALUE_COLUMN < len(cells) else None
        entry = RowEntry(
            row_index=index,
            label=label,
            raw_label=raw_label,
            value=value,
            context=context,
        )
        return entries + (entry,), context

    entries, _ = reduce(step, enumerate(rows), ((), SectionContext.NONE))
    return entries


class LabelResolver:
    """Lookups over the RowEntry sequence of one import.

    One resolver per import; entries (and their captured contexts) are never
    shared between imports.
    """

    def __init__(self, entries: Sequence[RowEntry]) -> None:
        self.entries = tuple(entries)

    @classmethod
    def from_rows(
        cls, rows: Iterable[Sequence[Any]], keywords: SectionKeywords | None = None
    ) -> LabelResolver:
        return cls(build_entries(rows, keywords))

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, label: str) -> Any:
        """Value of the first row whose label equals ``label`` (case-insensitive)."""
        wanted = label.strip().lower()
        for entry in self.entries:
            if entry.label == wanted:
                return entry.value
        return None

    def find_partial(self, label: str) -> Any:
        """Value of the first row whose label contains ``label``."""
        wanted = label.strip().lower()
        for entry in self.entries:
            if wanted in entry.label:
                return entry.value
        return None

    def find_fund(self, fund: str, context: SectionContext | str) -> Any:
        """Fund row value, preferring rows recorded under ``context``.

        Resolution order:
        1. exact label in the requested context
        2. label starting with ``fund`` in the requested context
        3. exact label occurring exactly once in the sheet
        4. label starting with ``fund`` occurring exactly once in the sheet
        """
        wanted = fund.strip().lower()
        ctx = SectionContext.parse(context)

        for entry in self.entries:
            if entry.label == wanted and entry.context is ctx:
                return entry.value
        for entry in self.entries:
            if entry.label.startswith(wanted) and entry.context is ctx:
                return entry.value

        exact = [e for e in self.entries if e.label == wanted]
        if len(exact) == 1:
            return exact[0].value
        prefixed = [e for e in self.entries if e.label.startswith(wanted)]
        if len(prefixed) == 1:
            return prefixed[0].value

        logger.debug("fund %r not resolved for context %s", fund, ctx.value)
        return None

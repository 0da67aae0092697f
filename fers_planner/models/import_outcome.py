from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

"""Import outcome types.

Import callers receive either ``ImportSucceeded`` with the partial field record
or ``ImportFailed`` with an error kind and message, and branch with ``match``.
"""

__all__ = [
    "ImportErrorKind",
    "ImportFailed",
    "ImportOutcome",
    "ImportSucceeded",
]


class ImportErrorKind(Enum):
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    UNREADABLE_WORKBOOK = "UNREADABLE_WORKBOOK"


@dataclass(frozen=True)
class ImportSucceeded:
    fields: dict[str, str] = field(default_factory=dict)

    @property
    def field_count(self) -> int:
        return len(self.fields)


@dataclass(frozen=True)
class ImportFailed:
    kind: ImportErrorKind
    message: str


ImportOutcome = ImportSucceeded | ImportFailed

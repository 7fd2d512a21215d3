"""
Difference record types produced by the comparators.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..document import DocumentNode


class DiffKind(str, Enum):
    CHANGED = "Changed"
    ARRAY_LENGTH_MISMATCH = "ArrayLengthMismatch"


@dataclass(frozen=True)
class DiffEntry:
    """
    A single structural difference.

    For ARRAY_LENGTH_MISMATCH entries ``before`` and ``after`` hold the two
    sequence lengths as number scalars.
    """

    path: str
    kind: DiffKind
    before: DocumentNode
    after: DocumentNode


class _EndOfFile:
    """Marker for a line index past the end of a file. Never equal to any text."""

    _instance = None

    def __new__(cls) -> "_EndOfFile":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "<EOF>"

    def __str__(self) -> str:
        return "<EOF>"


EOF = _EndOfFile()

LineValue = Union[str, _EndOfFile]


@dataclass(frozen=True)
class LineDiffEntry:
    line_number: int
    before: LineValue
    after: LineValue

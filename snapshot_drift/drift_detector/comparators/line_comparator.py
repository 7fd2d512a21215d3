"""
Line Comparator Module.

Positional comparison of two documents' text lines. Line ``i`` of one file
is compared with line ``i`` of the other; there is no realignment after an
inserted or deleted line, so one insertion shows up as differences on every
following line. Existing report consumers rely on this behaviour.
"""

from typing import List, Sequence

from .diff_types import EOF, LineDiffEntry, LineValue


def _line_at(lines: Sequence[str], index: int) -> LineValue:
    return lines[index] if index < len(lines) else EOF


def line_diff(before: Sequence[str], after: Sequence[str]) -> List[LineDiffEntry]:
    """
    Compare two line sequences index by index.

    Args:
        before: Lines of the baseline document
        after: Lines of the current document

    Returns:
        One LineDiffEntry (1-based line number) per differing index. A
        missing line is the EOF marker, which differs even from an empty line.
    """
    entries: List[LineDiffEntry] = []
    for index in range(max(len(before), len(after))):
        old = _line_at(before, index)
        new = _line_at(after, index)
        if old is EOF or new is EOF:
            differs = old is not new
        else:
            differs = old != new
        if differs:
            entries.append(LineDiffEntry(index + 1, old, new))
    return entries


def split_lines(text: str) -> List[str]:
    """Split document text into lines the way they are compared."""
    return text.lstrip("\ufeff").splitlines()

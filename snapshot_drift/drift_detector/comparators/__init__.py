"""
Document Comparators Package.

This package contains the structural (field-path) and line (positional)
comparators used to describe how two matched resource documents differ.
"""

from .base import compare_entries, documents_equal
from .diff_types import EOF, DiffEntry, DiffKind, LineDiffEntry
from .line_comparator import line_diff
from .structural_comparator import structural_diff

__all__ = [
    "compare_entries",
    "documents_equal",
    "structural_diff",
    "line_diff",
    "DiffEntry",
    "DiffKind",
    "LineDiffEntry",
    "EOF",
]

"""
Structural Comparator Module.

This module compares two DocumentNode trees field by field and reports
path-qualified differences.

Key points:
- A field missing on one side is treated as null on that side.
- Sequences of different length produce a single ArrayLengthMismatch entry
  and their elements are not compared.
- Scalars are compared within their own type only: the number 1 and the
  string "1" differ, as do true and 1.
- Traversal uses an explicit work stack, so deeply nested documents cannot
  exhaust the interpreter's call stack.
"""

from typing import List, Tuple

from ..document import DocumentNode, NodeKind, ScalarNode, ScalarType
from .diff_types import DiffEntry, DiffKind


def _field_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _scalars_equal(before: ScalarNode, after: ScalarNode) -> bool:
    if before.scalar_type is not after.scalar_type:
        return False
    # Same scalar type from here on; int and float compare numerically (4 == 4.0)
    return before.value == after.value


def structural_diff(
    before: DocumentNode, after: DocumentNode, path: str = ""
) -> List[DiffEntry]:
    """
    Compute the structural differences between two document trees.

    Entries come out in depth-first traversal order. Mapping fields are
    visited in sorted name order so the output is identical for identical
    inputs and mirrors exactly when the two sides are swapped.

    Args:
        before: Baseline document node
        after: Current document node
        path: Path prefix of the two nodes ("" for document roots)

    Returns:
        List of DiffEntry records; empty when the trees are equal
    """
    entries: List[DiffEntry] = []
    stack: List[Tuple[DocumentNode, DocumentNode, str]] = [(before, after, path)]

    while stack:
        old, new, current_path = stack.pop()

        if old.kind is NodeKind.NULL and new.kind is NodeKind.NULL:
            continue

        if old.kind is not new.kind:
            # Different variants (or null vs value) are a leaf disagreement
            entries.append(DiffEntry(current_path, DiffKind.CHANGED, old, new))
            continue

        if old.kind is NodeKind.SCALAR:
            if not _scalars_equal(old, new):  # type: ignore[arg-type]
                entries.append(DiffEntry(current_path, DiffKind.CHANGED, old, new))
            continue

        if old.kind is NodeKind.SEQUENCE:
            old_len, new_len = len(old), len(new)  # type: ignore[arg-type]
            if old_len != new_len:
                entries.append(
                    DiffEntry(
                        current_path,
                        DiffKind.ARRAY_LENGTH_MISMATCH,
                        ScalarNode(old_len, ScalarType.NUMBER),
                        ScalarNode(new_len, ScalarType.NUMBER),
                    )
                )
                continue
            # Pushed in reverse so index 0 is compared first
            for index in reversed(range(old_len)):
                stack.append(
                    (
                        old.items[index],  # type: ignore[union-attr]
                        new.items[index],  # type: ignore[union-attr]
                        f"{current_path}[{index}]",
                    )
                )
            continue

        names = sorted(set(old.names()) | set(new.names()))  # type: ignore[union-attr]
        for name in reversed(names):
            stack.append(
                (
                    old.get(name),  # type: ignore[union-attr]
                    new.get(name),  # type: ignore[union-attr]
                    _field_path(current_path, name),
                )
            )

    return entries

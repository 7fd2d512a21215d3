"""
Base Document Comparators Module.

This module routes a pair of matched resource documents to the configured
comparator and decides whether the pair counts as changed.
"""

from typing import List, Union

from ...utils import setup_logging
from ..document import serialize
from ..loaders.base import ResourceEntry
from ..types import DiffMode, EqualityMode
from .diff_types import DiffEntry, LineDiffEntry
from .line_comparator import line_diff, split_lines
from .structural_comparator import structural_diff

logger = setup_logging()

Difference = Union[DiffEntry, LineDiffEntry]


def documents_equal(
    baseline: ResourceEntry, current: ResourceEntry, equality_mode: EqualityMode
) -> bool:
    """
    Decide whether two matched documents are equal.

    Structural mode is insensitive to key order and number formatting.
    Bytes mode compares the canonical re-serialisation of both documents and
    is kept for callers that explicitly want byte-for-byte drift detection.
    """
    if equality_mode is EqualityMode.BYTES:
        return serialize(baseline.document) == serialize(current.document)
    return not structural_diff(baseline.document, current.document)


def compare_entries(
    baseline: ResourceEntry, current: ResourceEntry, diff_mode: DiffMode
) -> List[Difference]:
    """
    Compare two matched documents with the configured comparator.

    Args:
        baseline: Document loaded from the baseline snapshot
        current: Document loaded from the current snapshot
        diff_mode: STRUCTURAL for field-path differences, LINE for
            positional line differences of the raw file text

    Returns:
        List of difference records; empty when nothing differs
    """
    differences: List[Difference] = []
    if diff_mode is DiffMode.LINE:
        differences.extend(
            line_diff(split_lines(baseline.text), split_lines(current.text))
        )
    else:
        differences.extend(structural_diff(baseline.document, current.document))
    logger.debug(
        f"Compared {baseline.path} with {current.path}: "
        f"{len(differences)} difference(s)"
    )
    return differences

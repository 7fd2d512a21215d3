"""
Core drift detection orchestration logic.

This module contains the main entry point for drift detection and coordinates
the comparison of every resource category between two snapshots.
"""

import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from contextlib import ExitStack
from dataclasses import replace
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional, Tuple

from ..exceptions import FatalInputError
from ..utils import download_s3_snapshot, setup_logging
from .categories import FLAT_CATEGORY, Category, detect_categories
from .comparators import compare_entries, documents_equal
from .loaders import LoaderOptions, ResourceEntry, build_resource_set
from .loaders.base import load_document
from .reconcile import reconcile
from .report import (
    CategorySection,
    FilenameMismatch,
    Report,
    ResourceDiff,
    SummaryCheck,
)
from .types import (
    MISSING_SUMMARY_DOCUMENT,
    DiffMode,
    EqualityMode,
    MatchMode,
    Side,
    WarningRecord,
)

if TYPE_CHECKING:
    from ..config import Config

logger = setup_logging()

CategoryOutcome = Tuple[
    CategorySection, Tuple[WarningRecord, ...], Tuple[FilenameMismatch, ...]
]


def resolve_snapshot_root(
    path: str, label: str, stack: ExitStack, region_name: Optional[str] = None
) -> str:
    """
    Turn a configured snapshot path into a readable local directory.

    S3 snapshots are downloaded into a temporary directory that lives as long
    as ``stack``.

    Raises:
        FatalInputError: If the snapshot does not exist or cannot be read
    """
    if path.startswith("s3://"):
        destination = stack.enter_context(
            tempfile.TemporaryDirectory(prefix=f"{label}-snapshot-")
        )
        try:
            return download_s3_snapshot(path, destination, region_name=region_name)
        except ValueError as e:
            raise FatalInputError(f"{label} snapshot location is invalid: {e}")

    if path.startswith("local://"):
        path = path[len("local://"):]
    if not os.path.isdir(path):
        raise FatalInputError(f"{label} snapshot directory does not exist: {path}")
    if not os.access(path, os.R_OK | os.X_OK):
        raise FatalInputError(f"{label} snapshot directory is not readable: {path}")
    return path


def _filename_mismatches(
    category: str, baseline_files: Tuple[str, ...], current_files: Tuple[str, ...]
) -> Tuple[FilenameMismatch, ...]:
    baseline_only = sorted(set(baseline_files) - set(current_files))
    current_only = sorted(set(current_files) - set(baseline_files))
    return tuple(
        [FilenameMismatch(category, name, Side.BASELINE.value) for name in baseline_only]
        + [FilenameMismatch(category, name, Side.CURRENT.value) for name in current_only]
    )


def compare_category(
    baseline_root: str,
    current_root: str,
    category: Category,
    options: LoaderOptions,
    diff_mode: DiffMode,
    equality_mode: EqualityMode,
) -> CategoryOutcome:
    """
    Load, reconcile and diff one category.

    This is a pure function of the two snapshot directories, so categories
    can be evaluated concurrently.

    Returns:
        The category section, the loader warnings of both sides, and the
        filename-level mismatches (filename matching modes only)
    """
    base_set = build_resource_set(baseline_root, category, Side.BASELINE, options)
    current_set = build_resource_set(current_root, category, Side.CURRENT, options)

    result = reconcile(base_set, current_set, equality_mode)
    diffs = tuple(
        ResourceDiff(
            key=key,
            baseline_path=base_set[key].path,
            current_path=current_set[key].path,
            differences=tuple(compare_entries(base_set[key], current_set[key], diff_mode)),
        )
        for key in result.changed
    )
    logger.info(
        f"Category {category.name}: {len(result.added)} added, "
        f"{len(result.removed)} removed, {len(result.changed)} changed"
    )

    mismatches: Tuple[FilenameMismatch, ...] = ()
    if options.match_mode is not MatchMode.IDENTIFIER:
        mismatches = _filename_mismatches(
            category.name, base_set.filenames, current_set.filenames
        )

    return (
        CategorySection(category.name, result, diffs),
        base_set.warnings + current_set.warnings,
        mismatches,
    )


def check_summary_document(
    baseline_root: str,
    current_root: str,
    document: str,
    diff_mode: DiffMode,
    equality_mode: EqualityMode,
) -> Tuple[SummaryCheck, Tuple[WarningRecord, ...]]:
    """
    Compare the designated whole-snapshot summary document of both roots.

    A summary document missing (or unparsable) on either side is reported
    as not compared rather than as drift.
    """
    warnings: List[WarningRecord] = []
    loaded: List[ResourceEntry] = []
    for side, root in ((Side.BASELINE, baseline_root), (Side.CURRENT, current_root)):
        if not os.path.isfile(os.path.join(root, document)):
            message = f"Summary document {document} not found in {side.value} snapshot"
            logger.warning(message)
            warnings.append(WarningRecord(MISSING_SUMMARY_DOCUMENT, message, document))
            continue
        parsed = load_document(root, document, warnings)
        if parsed is not None:
            loaded.append(ResourceEntry(document, document, parsed[0], parsed[1]))

    if len(loaded) != 2:
        return SummaryCheck(document, None), tuple(warnings)

    baseline, current = loaded
    if documents_equal(baseline, current, equality_mode):
        return SummaryCheck(document, True), tuple(warnings)
    differences = tuple(compare_entries(baseline, current, diff_mode))
    return SummaryCheck(document, False, differences), tuple(warnings)


def detect_drift(config: "Config") -> Report:
    """
    Main entry point for drift detection. Orchestrates the entire comparison.

    This function:
    - Resolves both snapshot roots (local directories or S3 prefixes)
    - Picks the category layout (category subfolders or one flat folder)
    - Loads, reconciles and diffs every category, in parallel
    - Optionally compares the designated summary document
    - Returns one immutable Report with sections in category order

    Args:
        config: Validated drift detector configuration

    Returns:
        The drift report

    Raises:
        FatalInputError: If either snapshot root is missing or inaccessible
    """
    options = LoaderOptions(
        match_mode=config.match_mode,
        file_pattern=config.file_pattern,
        identifier_field=config.identifier_field,
        prefix_separator=config.prefix_separator,
        ambiguity_policy=config.ambiguity_policy,
    )

    with ExitStack() as stack:
        # Step 1: Resolve both roots before any comparison work
        baseline_root = resolve_snapshot_root(
            config.baseline_path, "baseline", stack, config.aws_region
        )
        current_root = resolve_snapshot_root(
            config.current_path, "current", stack, config.aws_region
        )
        logger.info(f"Comparing {config.baseline_path} with {config.current_path}")

        # Step 2: Compare categories; map() yields results in category order
        categories = detect_categories(baseline_root, current_root)
        if config.summary_document and categories == (FLAT_CATEGORY,):
            # The summary document sits in the flat root; compare it only once
            categories = (
                replace(FLAT_CATEGORY, excluded_names=(config.summary_document,)),
            )
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            outcomes = list(
                executor.map(
                    lambda category: compare_category(
                        baseline_root,
                        current_root,
                        category,
                        options,
                        config.diff_mode,
                        config.equality_mode,
                    ),
                    categories,
                )
            )

        sections = tuple(outcome[0] for outcome in outcomes)
        warnings: List[WarningRecord] = [w for outcome in outcomes for w in outcome[1]]
        mismatches = tuple(m for outcome in outcomes for m in outcome[2])

        # Step 3: Whole-snapshot summary document
        summary = None
        if config.summary_document:
            summary, summary_warnings = check_summary_document(
                baseline_root,
                current_root,
                config.summary_document,
                config.diff_mode,
                config.equality_mode,
            )
            warnings.extend(summary_warnings)

    report = Report(
        sections=sections,
        filename_mismatches=mismatches,
        summary=summary,
        warnings=tuple(warnings),
        generated_at=datetime.now().isoformat(),
    )
    logger.info(f"Drift detection completed. Drift detected: {report.drift_detected}")
    return report

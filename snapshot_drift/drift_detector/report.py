"""
Drift Report Module.

The report is an immutable value assembled once per run from the category
sections and then handed to a single output stage, either as a JSON-safe
dict (report_to_dict) or as human-readable text (format_report).
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

from .comparators import EOF, DiffEntry, DiffKind, LineDiffEntry
from .document import serialize, to_value
from .reconcile import ReconciliationResult
from .types import ReportDict, WarningRecord

Difference = Union[DiffEntry, LineDiffEntry]


@dataclass(frozen=True)
class ResourceDiff:
    key: str
    baseline_path: str
    current_path: str
    differences: Tuple[Difference, ...]


@dataclass(frozen=True)
class CategorySection:
    category: str
    result: ReconciliationResult
    diffs: Tuple[ResourceDiff, ...] = ()

    @property
    def has_differences(self) -> bool:
        return self.result.has_differences


@dataclass(frozen=True)
class FilenameMismatch:
    """A file present in only one snapshot (filename matching modes only)."""

    category: str
    filename: str
    side: str


@dataclass(frozen=True)
class SummaryCheck:
    """
    Whole-document equality check of the designated summary document.

    ``equal`` is None when the document is missing from either snapshot.
    """

    document: str
    equal: Optional[bool]
    differences: Tuple[Difference, ...] = ()


@dataclass(frozen=True)
class Report:
    sections: Tuple[CategorySection, ...]
    filename_mismatches: Tuple[FilenameMismatch, ...] = ()
    summary: Optional[SummaryCheck] = None
    warnings: Tuple[WarningRecord, ...] = ()
    generated_at: str = ""

    @property
    def drift_detected(self) -> bool:
        if any(section.has_differences for section in self.sections):
            return True
        if self.filename_mismatches:
            return True
        return self.summary is not None and self.summary.equal is False


def _difference_to_dict(difference: Difference) -> Dict[str, Any]:
    if isinstance(difference, LineDiffEntry):
        # End of file is null so it stays distinct from an empty line ("")
        return {
            "line_number": difference.line_number,
            "before": None if difference.before is EOF else difference.before,
            "after": None if difference.after is EOF else difference.after,
        }
    return {
        "path": difference.path,
        "kind": difference.kind.value,
        "before": to_value(difference.before),
        "after": to_value(difference.after),
    }


def report_to_dict(report: Report, include_timestamp: bool = True) -> ReportDict:
    """
    Convert a Report into JSON-serialisable data.

    With ``include_timestamp=False`` the output depends only on the compared
    snapshots, so two runs over the same inputs serialise identically.
    """
    sections: List[Dict[str, Any]] = []
    for section in report.sections:
        sections.append(
            {
                "category": section.category,
                "no_differences": not section.has_differences,
                "added": list(section.result.added),
                "removed": list(section.result.removed),
                "changed": list(section.result.changed),
                "diffs": [
                    {
                        "key": diff.key,
                        "baseline_path": diff.baseline_path,
                        "current_path": diff.current_path,
                        "differences": [
                            _difference_to_dict(d) for d in diff.differences
                        ],
                    }
                    for diff in section.diffs
                ],
            }
        )

    summary = None
    if report.summary is not None:
        summary = {
            "document": report.summary.document,
            "equal": report.summary.equal,
            "differences": [
                _difference_to_dict(d) for d in report.summary.differences
            ],
        }

    data: ReportDict = {
        "drift_detected": report.drift_detected,
        "sections": sections,
        "filename_mismatches": [
            {"category": m.category, "filename": m.filename, "side": m.side}
            for m in report.filename_mismatches
        ],
        "summary": summary,
        "warnings": [
            {"kind": w.kind, "message": w.message, "path": w.path}
            for w in report.warnings
        ],
    }
    if include_timestamp:
        data["generated_at"] = report.generated_at
    return data


def format_difference(difference: Difference) -> str:
    """Render one difference as a single report line."""
    if isinstance(difference, LineDiffEntry):
        before = str(EOF) if difference.before is EOF else f"'{difference.before}'"
        after = str(EOF) if difference.after is EOF else f"'{difference.after}'"
        return f"Line {difference.line_number}: Baseline={before} Current={after}"
    path = difference.path or "(document)"
    if difference.kind is DiffKind.ARRAY_LENGTH_MISMATCH:
        return (
            f"{path}: array length {serialize(difference.before)} -> "
            f"{serialize(difference.after)}"
        )
    return (
        f"{path}: Baseline={serialize(difference.before)} "
        f"Current={serialize(difference.after)}"
    )


def format_report(report: Report) -> str:
    """Render the human-readable drift report."""
    lines: List[str] = ["=" * 60, "SNAPSHOT DRIFT DETECTION REPORT", "=" * 60]
    if report.generated_at:
        lines.append(f"Generated: {report.generated_at}")

    for section in report.sections:
        lines.append("")
        lines.append(f"=== {section.category} ===")
        if not section.has_differences:
            lines.append("✅ No differences")
            continue
        result = section.result
        lines.append(f"Added ({len(result.added)}):")
        lines.extend(f"  + {key}" for key in result.added)
        lines.append(f"Removed ({len(result.removed)}):")
        lines.extend(f"  - {key}" for key in result.removed)
        lines.append(f"Changed ({len(result.changed)}):")
        for diff in section.diffs:
            lines.append(f"  ~ {diff.key}")
            lines.append(f"    Baseline: {diff.baseline_path}")
            lines.append(f"    Current:  {diff.current_path}")
            if not diff.differences:
                # Byte equality can fail where every field still matches
                lines.append("      - serialisation differs (no field-level differences)")
            lines.extend(
                f"      - {format_difference(d)}" for d in diff.differences
            )

    if report.filename_mismatches:
        lines.append("")
        lines.append(f"=== Filename Mismatches ({len(report.filename_mismatches)}) ===")
        for mismatch in report.filename_mismatches:
            lines.append(
                f"  {mismatch.category}: {mismatch.filename} "
                f"(only in {mismatch.side} snapshot)"
            )

    if report.summary is not None:
        lines.append("")
        lines.append(f"=== Summary Document: {report.summary.document} ===")
        if report.summary.equal is None:
            lines.append("Not compared: missing from one or both snapshots")
        elif report.summary.equal:
            lines.append("✅ Identical")
        else:
            lines.append("Differs:")
            if not report.summary.differences:
                lines.append("  - serialisation differs (no field-level differences)")
            lines.extend(
                f"  - {format_difference(d)}" for d in report.summary.differences
            )

    if report.warnings:
        lines.append("")
        lines.append(f"=== Warnings ({len(report.warnings)}) ===")
        lines.extend(f"⚠️  [{w.kind}] {w.message}" for w in report.warnings)

    lines.append("")
    lines.append("Drift detected" if report.drift_detected else "No drift detected")
    lines.append("=" * 60)
    return "\n".join(lines)

"""
Type definitions for the Snapshot Drift Detector.

This module contains the type aliases and small enumerations shared across
the loaders, comparators and report modules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Union

# Raw JSON values as produced by json.loads
JsonValue = Union[str, int, float, bool, List, Dict, None]
JsonObject = Dict[str, JsonValue]

# Report types - JSON-safe output of report_to_dict
ReportDict = Dict[str, Union[bool, str, List, Dict, None]]


class MatchMode(str, Enum):
    """How a document's identity key is derived."""

    IDENTIFIER = "identifier"
    EXACT = "exact"
    PREFIX = "prefix"


class DiffMode(str, Enum):
    """Which comparator produces the per-resource differences."""

    STRUCTURAL = "structural"
    LINE = "line"


class EqualityMode(str, Enum):
    """How two paired documents are judged equal during reconciliation."""

    STRUCTURAL = "structural"
    BYTES = "bytes"


class AmbiguityPolicy(str, Enum):
    """What to do when two documents on one side resolve to the same key."""

    FIRST = "first"
    EXCLUDE = "exclude"


class Side(str, Enum):
    """Which snapshot a document was loaded from."""

    BASELINE = "baseline"
    CURRENT = "current"


@dataclass(frozen=True)
class WarningRecord:
    """A recoverable problem met while loading a snapshot."""

    kind: str
    message: str
    path: str = ""


# WarningRecord kinds
PARSE_ERROR = "parse_error"
IDENTITY_AMBIGUITY = "identity_ambiguity"
MISSING_BASE_DOCUMENT = "missing_base_document"
MISSING_SUMMARY_DOCUMENT = "missing_summary_document"

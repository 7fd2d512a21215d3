"""
Configuration loader for the Snapshot Drift Detector.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Type, TypeVar

from .drift_detector.types import AmbiguityPolicy, DiffMode, EqualityMode, MatchMode
from .utils import parse_s3_uri

E = TypeVar("E", bound=Enum)


@dataclass
class Config:
    """Configuration class for the drift detector."""

    baseline_path: str
    current_path: str
    match_mode: MatchMode = MatchMode.IDENTIFIER
    diff_mode: DiffMode = DiffMode.STRUCTURAL
    equality_mode: EqualityMode = EqualityMode.STRUCTURAL
    file_pattern: str = "*.json"
    identifier_field: str = "id"
    prefix_separator: str = "-"
    ambiguity_policy: AmbiguityPolicy = AmbiguityPolicy.FIRST
    summary_document: Optional[str] = None
    report_file: Optional[str] = None
    log_level: str = "INFO"
    max_workers: int = 4
    aws_region: Optional[str] = None


# Config field -> environment variable
ENVIRONMENT_VARIABLES = {
    "baseline_path": "BASELINE_SNAPSHOT_PATH",
    "current_path": "CURRENT_SNAPSHOT_PATH",
    "match_mode": "MATCH_MODE",
    "diff_mode": "DIFF_MODE",
    "equality_mode": "EQUALITY_MODE",
    "file_pattern": "FILE_PATTERN",
    "identifier_field": "IDENTIFIER_FIELD",
    "prefix_separator": "PREFIX_SEPARATOR",
    "ambiguity_policy": "AMBIGUITY_POLICY",
    "summary_document": "SUMMARY_DOCUMENT",
    "report_file": "REPORT_FILE",
    "log_level": "LOG_LEVEL",
    "max_workers": "MAX_WORKERS",
    "aws_region": "AWS_REGION",
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_choice(enum_type: Type[E], name: str, value: str) -> E:
    try:
        return enum_type(value.lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise ValueError(f"{name} must be one of: {choices} (got '{value}')")


def _validate_snapshot_path(name: str, value: str) -> None:
    if not value.startswith("s3://"):
        return
    try:
        parse_s3_uri(value)
    except ValueError:
        raise ValueError(f"{name} must name an S3 bucket after s3:// (got '{value}')")


def load_config(overrides: Optional[Dict[str, Optional[str]]] = None) -> Config:
    """
    Loads and validates configuration for the drift detector.

    Values come from the environment; entries in ``overrides`` (for example
    command-line flags) take precedence when they are not None.

    Args:
        overrides: Config field name -> raw string value

    Returns:
        Config object with validated settings

    Raises:
        ValueError: If required configuration is missing or invalid
    """
    overrides = overrides or {}

    def raw(field_name: str, default: Optional[str] = None) -> Optional[str]:
        value = overrides.get(field_name)
        if value is None:
            value = os.environ.get(ENVIRONMENT_VARIABLES[field_name], default)
        return value

    # Required configuration
    baseline_path = raw("baseline_path")
    if not baseline_path:
        raise ValueError("BASELINE_SNAPSHOT_PATH environment variable is required")
    current_path = raw("current_path")
    if not current_path:
        raise ValueError("CURRENT_SNAPSHOT_PATH environment variable is required")
    _validate_snapshot_path("BASELINE_SNAPSHOT_PATH", baseline_path)
    _validate_snapshot_path("CURRENT_SNAPSHOT_PATH", current_path)

    # Optional configuration with defaults
    match_mode = _parse_choice(MatchMode, "MATCH_MODE", raw("match_mode", "identifier"))
    diff_mode = _parse_choice(DiffMode, "DIFF_MODE", raw("diff_mode", "structural"))
    equality_mode = _parse_choice(
        EqualityMode, "EQUALITY_MODE", raw("equality_mode", "structural")
    )
    ambiguity_policy = _parse_choice(
        AmbiguityPolicy, "AMBIGUITY_POLICY", raw("ambiguity_policy", "first")
    )

    prefix_separator = raw("prefix_separator", "-") or ""
    if not prefix_separator:
        raise ValueError("PREFIX_SEPARATOR must not be empty")

    log_level = (raw("log_level", "INFO") or "INFO").upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")

    try:
        max_workers = int(raw("max_workers", "4") or "4")
    except ValueError:
        raise ValueError("MAX_WORKERS must be an integer")
    if max_workers < 1:
        raise ValueError("MAX_WORKERS must be at least 1")

    return Config(
        baseline_path=baseline_path,
        current_path=current_path,
        match_mode=match_mode,
        diff_mode=diff_mode,
        equality_mode=equality_mode,
        file_pattern=raw("file_pattern", "*.json") or "*.json",
        identifier_field=raw("identifier_field", "id") or "id",
        prefix_separator=prefix_separator,
        ambiguity_policy=ambiguity_policy,
        summary_document=raw("summary_document") or None,
        report_file=raw("report_file") or None,
        log_level=log_level,
        max_workers=max_workers,
        aws_region=raw("aws_region") or None,
    )
